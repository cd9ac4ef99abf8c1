"""Mapping from component type tags to Go types, defaults and literals."""

from __future__ import annotations

import json
import re
from typing import Any

from . import constants

INTERFACE = "interface{}"
GENERIC_SLICE = "[]interface{}"
GENERIC_MAP = "map[string]interface{}"

_ARRAY_GENERIC = re.compile(r"^Array<(.+)>$")
_ARRAY_SUFFIX = re.compile(r"^(.+)\[\]$")

_SCALAR_TYPES: dict[str, str] = {
    "string": "string",
    "boolean": "bool",
    "bool": "bool",
    "int": "int",
    "integer": "int",
    "float": "float64",
    "array": GENERIC_SLICE,
    "object": GENERIC_MAP,
}


def _is_fractional(value: Any) -> bool:
    return isinstance(value, float) and not value.is_integer()


def go_type(type_tag: str, initial_value: Any = None) -> str:
    """Go type for a type tag; the initial value refines ``number``."""
    tag = (type_tag or "").strip()
    if not tag:
        return INTERFACE
    if tag == constants.TYPE_NUMBER:
        return "float64" if _is_fractional(initial_value) else "int"
    if tag in _SCALAR_TYPES:
        return _SCALAR_TYPES[tag]
    match = _ARRAY_GENERIC.match(tag) or _ARRAY_SUFFIX.match(tag)
    if match:
        return "[]" + go_type(match.group(1))
    if tag.startswith("Record<"):
        return GENERIC_MAP
    return INTERFACE


def zero_value(go_type_name: str) -> str:
    """Type-driven Go default used when no initial value is given."""
    if go_type_name == "string":
        return '""'
    if go_type_name in ("int", "float64"):
        return "0"
    if go_type_name == "bool":
        return "false"
    if go_type_name.startswith("[]") or go_type_name.startswith("map["):
        return go_type_name + "{}"
    return "nil"


def infer_type_tag(value: Any) -> str:
    """Type tag from the shape of an initial value."""
    if isinstance(value, bool):
        return constants.TYPE_BOOLEAN
    if isinstance(value, str):
        return constants.TYPE_STRING
    if isinstance(value, (int, float)):
        return constants.TYPE_NUMBER
    if isinstance(value, list):
        return constants.TYPE_ARRAY
    if isinstance(value, dict):
        return constants.TYPE_OBJECT
    return constants.TYPE_ANY


def default_for_tag(type_tag: str) -> Any:
    """Python-side default value for a type tag."""
    return {
        constants.TYPE_STRING: "",
        constants.TYPE_NUMBER: 0,
        constants.TYPE_BOOLEAN: False,
        constants.TYPE_ARRAY: [],
        constants.TYPE_OBJECT: {},
    }.get(type_tag)


def go_string(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def format_literal(value: Any, go_type_name: str = INTERFACE) -> str:
    """Render a JSON-shaped value as a Go literal of the given type.

    Strings destined for non-string fields are taken to be source
    expressions and returned unquoted; callers translate them.
    """
    if value is None:
        return zero_value(go_type_name)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        if go_type_name == "int" and isinstance(value, float) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        if go_type_name in ("string", INTERFACE):
            return go_string(value)
        return value
    if isinstance(value, list):
        slice_type = go_type_name if go_type_name.startswith("[]") else GENERIC_SLICE
        element_type = slice_type[2:]
        items = ", ".join(format_literal(item, element_type) for item in value)
        return f"{slice_type}{{{items}}}"
    if isinstance(value, dict):
        entries = ", ".join(
            f"{go_string(str(key))}: {format_literal(item)}" for key, item in value.items()
        )
        return f"{GENERIC_MAP}{{{entries}}}"
    return go_string(str(value))
