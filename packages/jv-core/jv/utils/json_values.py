"""JSON value helpers — type names, structural equality, hashable keys."""

from __future__ import annotations

import math
from typing import Any

JSON_TYPES = ("array", "boolean", "integer", "null", "number", "object", "string")


def json_type_of(value: Any) -> str:
    """Return the JSON type name of a decoded value.

    Integral floats report ``integer`` so that ``1.0`` satisfies ``"type": "integer"``.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "integer" if value.is_integer() else "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def matches_type(value: Any, type_name: str) -> bool:
    if type_name == "number":
        return is_number(value)
    if type_name == "integer":
        return is_integer(value)
    try:
        return json_type_of(value) == type_name
    except TypeError:
        return False


def json_equal(left: Any, right: Any) -> bool:
    """Structural JSON equality: ``1 == 1.0`` holds, ``True == 1`` does not."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if is_number(left) and is_number(right):
        return left == right
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(json_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, dict) and isinstance(right, dict):
        if left.keys() != right.keys():
            return False
        return all(json_equal(left[k], right[k]) for k in left)
    if type(left) is not type(right):
        return False
    return left == right


def hashable_key(value: Any) -> Any:
    """Return a hashable form of *value* such that equal JSON values get equal keys."""
    if isinstance(value, bool):
        return ("b", value)
    if is_number(value):
        if isinstance(value, float) and value.is_integer() and math.isfinite(value):
            return ("n", int(value))
        return ("n", value)
    if isinstance(value, list):
        return ("a", tuple(hashable_key(v) for v in value))
    if isinstance(value, dict):
        return ("o", tuple(sorted((k, hashable_key(v)) for k, v in value.items())))
    return ("s" if isinstance(value, str) else "z", value)


def merge_json(existing: Any, new: Any) -> Any:
    """Merge two raw annotation values: arrays concatenate, objects merge, else *new* wins."""
    if isinstance(existing, list) and isinstance(new, list):
        return existing + new
    if isinstance(existing, dict) and isinstance(new, dict):
        merged = dict(existing)
        merged.update(new)
        return merged
    return new
