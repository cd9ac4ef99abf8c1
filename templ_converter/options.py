"""Conversion options (pure data, no business logic)."""

from __future__ import annotations

import copy
import dataclasses
from dataclasses import dataclass
from enum import Enum

from . import constants


class PersistenceMode(str, Enum):
    """Where generated handlers keep per-instance state."""

    MEMORY = "memory"
    EXTERNAL_KV = "external-kv"
    EXTERNAL_DB = "external-db"


class IndentStyle(str, Enum):
    SPACES = "spaces"
    TABS = "tabs"


@dataclass(frozen=True)
class ConversionOptions:
    """Groups per-request conversion configuration."""

    partial_updates: bool = True
    component_name: str = ""
    namespace: str = constants.DEFAULT_NAMESPACE
    include_comments: bool = True
    custom_imports: tuple[str, ...] = ()
    persistence: PersistenceMode = PersistenceMode.MEMORY
    debug: bool = False
    indent_style: IndentStyle = IndentStyle.SPACES
    indent_width: int = constants.DEFAULT_INDENT_WIDTH

    def __post_init__(self):
        # Accept lists and raw strings from callers; store canonical types.
        object.__setattr__(self, "custom_imports", tuple(self.custom_imports))
        object.__setattr__(self, "persistence", PersistenceMode(self.persistence))
        object.__setattr__(self, "indent_style", IndentStyle(self.indent_style))
        if self.indent_width < 0:
            raise ValueError(f"indent_width must be >= 0, got {self.indent_width}")

    def clone(self) -> ConversionOptions:
        return copy.deepcopy(self)

    def with_overrides(self, **changes) -> ConversionOptions:
        return dataclasses.replace(self, **changes)

    def indent(self, level: int) -> str:
        """Whitespace for the given nesting level."""
        if self.indent_style == IndentStyle.TABS:
            return "\t" * level
        return " " * (self.indent_width * level)

    def settings(self) -> dict[str, object]:
        """Snapshot of the settings reported alongside a conversion."""
        return {
            "partial_updates": self.partial_updates,
            "namespace": self.namespace,
            "persistence": self.persistence.value,
        }
