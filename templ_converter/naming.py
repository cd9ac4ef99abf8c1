"""Identifier case helpers shared by the generators."""

from __future__ import annotations

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def lower_first(name: str) -> str:
    return name[:1].lower() + name[1:]


def kebab_case(name: str) -> str:
    """``backgroundColor`` -> ``background-color``."""
    return "".join("-" + ch.lower() if ch.isupper() and i > 0 else ch.lower() for i, ch in enumerate(name))


def snake_case(name: str) -> str:
    """``CounterButton`` -> ``counter_button``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()
