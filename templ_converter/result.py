"""Conversion result (pure data)."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .naming import snake_case
from .options import ConversionOptions


@dataclass(frozen=True)
class ConversionResult:
    """The generated artifacts of one conversion.

    ``controller`` and ``script`` are empty strings when the component needs
    no server handlers or client wiring.
    """

    component_name: str
    template: str
    controller: str
    script: str
    options: ConversionOptions
    converted_at: str
    settings: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "settings", MappingProxyType(dict(self.settings)))

    @property
    def base_filename(self) -> str:
        return snake_case(self.component_name)

    @property
    def template_filename(self) -> str:
        return f"{self.base_filename}.templ"

    @property
    def controller_filename(self) -> str:
        return f"{self.base_filename}_controller.go"

    @property
    def script_filename(self) -> str:
        return f"{self.base_filename}.js"

    def artifacts(self) -> dict[str, str]:
        """File name -> content for every non-empty artifact."""
        candidates = [
            (self.template_filename, self.template),
            (self.controller_filename, self.controller),
            (self.script_filename, self.script),
        ]
        return {name: content for name, content in candidates if content}

    def summary(self) -> str:
        lines = [
            f"Component: {self.component_name}",
            f"Converted at: {self.converted_at}",
            f"Partial updates: {self.settings.get('partial_updates')}",
            f"Namespace: {self.settings.get('namespace')}",
            f"Persistence: {self.settings.get('persistence')}",
            "Artifacts:",
        ]
        for name, content in self.artifacts().items():
            lines.append(f"  {name} ({len(content.splitlines())} lines)")
        return "\n".join(lines)
