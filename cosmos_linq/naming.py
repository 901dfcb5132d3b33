"""
Container naming — English plural of a model's type name.

"Invoice" -> "Invoices", "Category" -> "Categories", "Person" -> "People".
Rules are fixed to English and never consult the host locale.
"""

from __future__ import annotations

import re

_IRREGULAR = {
    "person": "people",
    "man": "men",
    "woman": "women",
    "child": "children",
    "tooth": "teeth",
    "foot": "feet",
    "mouse": "mice",
    "goose": "geese",
    "ox": "oxen",
    "datum": "data",
    "criterion": "criteria",
    "index": "indices",
    "matrix": "matrices",
    "vertex": "vertices",
    "analysis": "analyses",
    "quiz": "quizzes",
}

_UNCOUNTABLE = {
    "equipment",
    "information",
    "rice",
    "money",
    "species",
    "series",
    "fish",
    "sheep",
    "deer",
    "news",
    "metadata",
    "feedback",
    "software",
}

_F_TO_VES = {
    "leaf", "loaf", "half", "self", "shelf", "wolf", "calf", "thief",
    "knife", "life", "wife",
}

# Split "SalesOrderLine" into its last word so only that word is pluralized
_LAST_WORD = re.compile(r"(.*?)([A-Z]?[a-z0-9]*)$")


def _match_case(source: str, target: str) -> str:
    if source.isupper() and len(source) > 1:
        return target.upper()
    if source[:1].isupper():
        return target[:1].upper() + target[1:]
    return target


def pluralize(word: str) -> str:
    """English plural of a single word, preserving its leading capital."""
    if not word:
        return word
    lower = word.lower()

    if lower in _UNCOUNTABLE:
        return word
    if lower in _IRREGULAR:
        return _match_case(word, _IRREGULAR[lower])
    if lower in _F_TO_VES:
        stem = word[:-2] if lower.endswith("fe") else word[:-1]
        return stem + "ves"
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        return word[:-1] + "ies"
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    return word + "s"


def derive_container_name(model: type | str) -> str:
    """Container name for a model type (or a bare type name)."""
    name = model if isinstance(model, str) else model.__name__
    # Drop generic parametrisation, e.g. "Wrapper[Order]"
    name = name.split("[", 1)[0]
    prefix, last = _LAST_WORD.match(name).groups()
    if not last:
        return pluralize(name)
    return prefix + pluralize(last)
