"""Composable API functions for the conversion pipeline.

Each function is callable programmatically; the CLI is a thin layer over
them.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from .assembler import Converter
from .component import Component
from .options import ConversionOptions
from .result import ConversionResult

logger = logging.getLogger(__name__)


def load_component(data: Union[Component, dict[str, Any], str]) -> Component:
    """Load a Component Model from a model, a dict or a JSON string.

    Raises:
        ComponentLoadError: If the input does not describe a component.
    """
    if isinstance(data, Component):
        return data
    if isinstance(data, str):
        return Component.from_json(data)
    return Component.from_dict(data)


def convert(
    component: Union[Component, dict[str, Any]],
    options: Optional[ConversionOptions] = None,
) -> ConversionResult:
    """Convert a Component Model into templ, Go controller and script artifacts.

    Args:
        component: The Component Model, or its wire-format dict.
        options: Conversion options; defaults apply when omitted.

    Returns:
        The ConversionResult.

    Raises:
        ConversionError: If the model cannot be loaded or is invalid.
    """
    return Converter().convert(load_component(component), options)


def convert_json(text: str, options: Optional[ConversionOptions] = None) -> ConversionResult:
    """Convert a Component Model given as JSON text."""
    logger.info("Converting component from JSON (%d bytes)", len(text))
    return Converter().convert(Component.from_json(text), options)


def convert_source(
    source: str,
    options: Optional[ConversionOptions] = None,
    language: str = "tsx",
) -> ConversionResult:
    """Extract a component from JSX/TSX source, then convert it.

    Args:
        source: The component source code.
        options: Conversion options; defaults apply when omitted.
        language: tree-sitter grammar used for parsing ("tsx" or "javascript").

    Returns:
        The ConversionResult.

    Raises:
        ExtractionError: If no component can be found in the source.
        ValidationError: If the extracted model is invalid.
    """
    from .extractor import TreeSitterExtractor

    logger.info("Extracting component from %s source (%d bytes)", language, len(source))
    component = TreeSitterExtractor(language=language).extract(source)
    return Converter().convert(component, options)
