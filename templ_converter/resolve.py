"""Component Model resolution: naming, type back-fill and validation."""

from __future__ import annotations

import logging

from . import constants
from .component import Component
from .errors import ValidationError
from .go_types import default_for_tag, infer_type_tag
from .options import ConversionOptions

logger = logging.getLogger(__name__)


def resolve_name(component: Component, options: ConversionOptions) -> str:
    """Pick the component name by precedence.

    Explicit name, then the options override, then the default export,
    then the first named export, then a fixed fallback.
    """
    if component.name:
        return component.name
    if options.component_name:
        return options.component_name
    default_export = component.exports.get(constants.DEFAULT_EXPORT_KEY)
    if isinstance(default_export, str) and default_export:
        return default_export
    for key in component.exports:
        if key != constants.DEFAULT_EXPORT_KEY and key:
            return key
    logger.debug("No name or exports found, using %s", constants.FALLBACK_COMPONENT_NAME)
    return constants.FALLBACK_COMPONENT_NAME


def backfill_types(component: Component) -> None:
    """Fill missing State type tags from the initial value shape."""
    for entry in component.state:
        if not entry.type:
            entry.type = infer_type_tag(entry.initial_value)
            logger.debug("Inferred type %s for state %s", entry.type, entry.name)


def backfill_prop_defaults(component: Component) -> None:
    """Give optional props without a default the type-driven default."""
    for prop in component.props:
        if not prop.required and prop.default_value is None:
            prop.default_value = default_for_tag(prop.type)


def validate(component: Component) -> None:
    """Raise ``ValidationError`` listing every structural problem."""
    problems: list[str] = []
    if not component.name:
        problems.append("component name is empty")
    if component.jsx is None:
        problems.append("component has no JSX root")
    problems.extend(
        f"prop #{index} has an empty name"
        for index, prop in enumerate(component.props)
        if not prop.name
    )
    for index, entry in enumerate(component.state):
        if not entry.name:
            problems.append(f"state entry #{index} has an empty name")
        if not entry.setter:
            problems.append(f"state entry {entry.name or '#' + str(index)} has no setter")
    if problems:
        raise ValidationError(problems)


def resolve(component: Component, options: ConversionOptions) -> Component:
    """Return a resolved, validated deep copy of ``component``."""
    resolved = component.model_copy(deep=True)
    resolved.name = resolve_name(resolved, options)
    backfill_types(resolved)
    backfill_prop_defaults(resolved)
    validate(resolved)
    return resolved
