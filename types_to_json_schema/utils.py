"""
Utility functions for schema nodes and names.
"""

import re
from enum import Enum
from typing import Any

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")

JSON_SCALARS = (str, int, float, bool, type(None))


def to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, dotted or space-separated text to PascalCase.

    Examples:
        "first_name" -> "FirstName"
        "HTTPServer" -> "HttpServer"
        "list" -> "List"
        "app.models" -> "AppModels"

    Args:
        text: The text to convert

    Returns:
        PascalCase string
    """
    return "".join(word.capitalize() for word in _WORD_PATTERN.findall(str(text)))


def to_json_value(value):
    """Convert a Python value to a JSON-compatible one.

    Enum members are replaced by their value; tuples and sets become lists.
    Returns `NotImplemented` if the value has no JSON representation.
    """
    if isinstance(value, Enum):
        return to_json_value(value.value)
    if isinstance(value, JSON_SCALARS):
        return value
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [to_json_value(item) for item in value]
        if any(item is NotImplemented for item in items):
            return NotImplemented
        return items
    if isinstance(value, dict) and all(isinstance(key, str) for key in value):
        converted = {key: to_json_value(item) for key, item in value.items()}
        if any(item is NotImplemented for item in converted.values()):
            return NotImplemented
        return converted
    return NotImplemented


def json_equal(left: Any, right: Any) -> bool:
    """Compare two JSON values the way JSON does.

    Unlike `==`, booleans never equal numbers (`True` vs `1`, `False` vs `0`).
    Numbers compare by value, so `1` equals `1.0`. Lists and objects are
    compared recursively.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(json_equal(left[key], right[key]) for key in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(json_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, (dict, list, tuple)) or isinstance(right, (dict, list, tuple)):
        return False
    return left == right


def unique_in_order(values) -> list:
    """Drop repeated values, keeping the first occurrence (works for unhashable values)."""
    result = []
    for value in values:
        if not any(json_equal(value, seen) for seen in result):
            result.append(value)
    return result


def merge_missing_attributes(target: dict, source: dict | None) -> dict:
    """Copy the entries of `source` whose keys are absent in `target`."""
    if source:
        for key, value in source.items():
            if key not in target:
                target[key] = value
    return target


def infer_json_types(values) -> list[str]:
    """Return the JSON `type` values covering the given values, in order of appearance."""
    types: list[str] = []
    for value in values:
        value = to_json_value(value)
        if value is None:
            name = "null"
        elif isinstance(value, bool):
            name = "boolean"
        elif isinstance(value, int):
            name = "integer"
        elif isinstance(value, float):
            name = "number"
        elif isinstance(value, str):
            name = "string"
        elif isinstance(value, list):
            name = "array"
        elif isinstance(value, dict):
            name = "object"
        else:
            continue
        if name not in types:
            types.append(name)
    if "integer" in types and "number" in types:
        types.remove("integer")
    return types
