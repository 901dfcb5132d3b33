"""
Key codec — map 1, 2 or 3-part model keys onto the store's single string id.

A model declares its key arity through its field names:

    key                     -> arity 1
    key1, key2              -> arity 2
    key1, key2, key3        -> arity 3

Ids are the str() of each part joined with '|'. No escaping is done, so a
key part whose text contains '|' produces an ambiguous id: ("a|b", "c")
and ("a", "b|c") both encode to "a|b|c". Choose key types accordingly.
"""

from __future__ import annotations

import random
import types
import typing
import uuid
from typing import Any

KEY_SEPARATOR = "|"

KEY_FIELD_SETS: tuple[tuple[str, ...], ...] = (
    ("key1", "key2", "key3"),
    ("key1", "key2"),
    ("key",),
)

_MAX_RANDOM_INT = 2**63 - 1


def encode_key(*parts: Any) -> str:
    """Join the string form of each key part with the separator."""
    return KEY_SEPARATOR.join(str(part) for part in parts)


def is_key_missing(value: Any) -> bool:
    """True when *value* is None or the zero value of its own type."""
    if value is None:
        return True
    if isinstance(value, uuid.UUID):
        return value.int == 0
    try:
        return value == type(value)()
    except TypeError:
        return False


def _unwrap_optional(key_type: Any) -> Any:
    origin = typing.get_origin(key_type)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(key_type) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return key_type


def generate_random_key(key_type: Any) -> Any:
    """Produce a fresh random value for a key declared as *key_type*.

    Raises:
        TypeError: If no generator exists for the type.
    """
    key_type = _unwrap_optional(key_type)
    if key_type is str:
        return str(uuid.uuid4())
    if key_type is uuid.UUID:
        return uuid.uuid4()
    if key_type is int:
        return random.randint(1, _MAX_RANDOM_INT)
    raise TypeError(f"Cannot generate a random key of type {key_type!r}")


# ---------------------------------------------------------------------------
# Model introspection
# ---------------------------------------------------------------------------


def key_fields_for(model_type: type) -> tuple[str, ...]:
    """Return the key field names a model type declares, or () for keyless models."""
    fields = getattr(model_type, "model_fields", None) or {}
    for candidate in KEY_FIELD_SETS:
        if all(name in fields for name in candidate):
            return candidate
    return ()


def key_type_for(model_type: type, field_name: str) -> Any:
    """Declared annotation of a key field."""
    return model_type.model_fields[field_name].annotation


def key_values(model: Any, fields: tuple[str, ...]) -> tuple[Any, ...]:
    return tuple(getattr(model, name) for name in fields)


def document_id(model: Any, fields: tuple[str, ...]) -> str:
    """The one place a model's store id is built."""
    return encode_key(*key_values(model, fields))
