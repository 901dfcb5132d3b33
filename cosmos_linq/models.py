"""
Pydantic models used at the storage boundary.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


class DocumentWrapper(BaseModel, Generic[ModelT]):
    """Envelope pairing the store-mandated string id with an application model.

    Built fresh for every write and never handed back to callers. Store
    metadata (_rid, _etag, _ts, ...) is dropped when a stored document is
    parsed back into a wrapper.
    """

    id: str
    model: ModelT

    def to_document(self) -> dict[str, Any]:
        """JSON-ready dict for the store."""
        return self.model_dump(mode="json")

    @classmethod
    def wrap(cls, document_id: str, model: ModelT) -> "DocumentWrapper[ModelT]":
        return cls(id=document_id, model=model)


def wrapper_type(model_type: type[ModelT]) -> type[DocumentWrapper[ModelT]]:
    """Concrete wrapper class for a model type."""
    return DocumentWrapper[model_type]


class _NoPartitionKey:
    def __repr__(self) -> str:
        return "NO_PARTITION_KEY"


# Nothing at the partition key path. Distinct from an explicit null value.
NO_PARTITION_KEY = _NoPartitionKey()


def partition_key_value(document: dict[str, Any], path: str) -> Any:
    """Value at a partition key path such as '/id' or '/model/tenant'.

    Returns NO_PARTITION_KEY when the path does not resolve.
    """
    value: Any = document
    for segment in path.strip("/").split("/"):
        if not isinstance(value, dict) or segment not in value:
            return NO_PARTITION_KEY
        value = value[segment]
    return value
