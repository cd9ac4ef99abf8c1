"""Component Model: the passive record describing one parsed component."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ComponentLoadError
from .jsx import JSXNode, parse_jsx

logger = logging.getLogger(__name__)


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PropDefinition(_Record):
    name: str = ""
    type: str = ""
    required: bool = False
    default_value: Any = Field(default=None, alias="defaultValue")


class StateDefinition(_Record):
    name: str = ""
    setter: str = ""
    type: str = ""
    initial_value: Any = Field(default=None, alias="initialValue")


class EffectDefinition(_Record):
    body: str = ""
    dependencies: list[str] = []

    @property
    def has_dependencies(self) -> bool:
        return bool(self.dependencies)


class CallbackDefinition(_Record):
    name: str = ""
    body: str = ""
    dependencies: list[str] = []


class RefDefinition(_Record):
    name: str = ""
    initial_value: Any = Field(default=None, alias="initialValue")


class ImportDefinition(_Record):
    source: str = ""
    default: str = ""
    named: list[str] = []


class Component(_Record):
    """A React-style component as delivered by the extraction collaborator."""

    name: str = ""
    props: list[PropDefinition] = []
    state: list[StateDefinition] = []
    effects: list[EffectDefinition] = []
    callbacks: list[CallbackDefinition] = []
    refs: list[RefDefinition] = []
    jsx: Optional[JSXNode] = None
    imports: list[ImportDefinition] = []
    exports: dict[str, Any] = {}

    @field_validator("jsx", mode="before")
    @classmethod
    def _parse_jsx(cls, value: Any) -> Any:
        if value is None or isinstance(value, BaseModel):
            return value
        if isinstance(value, dict) and "kind" in value:
            return value
        return parse_jsx(value)

    @field_validator("props", "state", "effects", "callbacks", "refs", "imports", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("exports", mode="before")
    @classmethod
    def _none_is_empty_mapping(cls, value: Any) -> Any:
        return {} if value is None else value

    def state_setters(self) -> dict[str, StateDefinition]:
        """Map each setter identifier to its State entry."""
        return {entry.setter: entry for entry in self.state if entry.setter}

    @property
    def is_interactive(self) -> bool:
        return bool(self.state or self.effects or self.callbacks)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Component:
        """Load a Component from wire-format data.

        Raises:
            ComponentLoadError: If the data does not describe a component.
        """
        if not isinstance(data, dict):
            raise ComponentLoadError(
                f"Component model must be an object, got {type(data).__name__}"
            )
        try:
            return cls.model_validate(data)
        except PydanticValidationError as exc:
            raise ComponentLoadError(f"Invalid component model: {exc}") from exc

    @classmethod
    def from_json(cls, text: str) -> Component:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ComponentLoadError(f"Component model is not valid JSON: {exc}") from exc
        logger.debug("Loaded component JSON with keys %s", sorted(data) if isinstance(data, dict) else "-")
        return cls.from_dict(data)
