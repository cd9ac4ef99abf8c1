"""JSX tree model: a closed variant of node kinds.

Nodes arrive from the extraction collaborator as nested dicts of the form
``{"type": ..., "props": {...}, "children": [...]}``; ``parse_jsx`` turns
them into the typed records below.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from . import constants
from .errors import ComponentLoadError

logger = logging.getLogger(__name__)


class JSXKind(str, Enum):
    FRAGMENT = "fragment"
    HTML_ELEMENT = "html_element"
    CUSTOM_COMPONENT = "custom_component"
    TEXT = "text"
    EXPRESSION = "expression"


class ExpressionValue(BaseModel):
    """An attribute value written as ``{expr}`` in the source."""

    code: str


AttributeValue = Union[bool, str, ExpressionValue, None]


class FragmentNode(BaseModel):
    kind: Literal[JSXKind.FRAGMENT] = JSXKind.FRAGMENT
    children: list[JSXNode] = []


class HTMLElementNode(BaseModel):
    kind: Literal[JSXKind.HTML_ELEMENT] = JSXKind.HTML_ELEMENT
    tag: str
    attributes: dict[str, AttributeValue] = {}
    children: list[JSXNode] = []


class CustomComponentNode(BaseModel):
    kind: Literal[JSXKind.CUSTOM_COMPONENT] = JSXKind.CUSTOM_COMPONENT
    name: str
    attributes: dict[str, AttributeValue] = {}


class TextNode(BaseModel):
    kind: Literal[JSXKind.TEXT] = JSXKind.TEXT
    content: str


class ExpressionNode(BaseModel):
    kind: Literal[JSXKind.EXPRESSION] = JSXKind.EXPRESSION
    code: str


JSXNode = Annotated[
    Union[FragmentNode, HTMLElementNode, CustomComponentNode, TextNode, ExpressionNode],
    Field(discriminator="kind"),
]

FragmentNode.model_rebuild()
HTMLElementNode.model_rebuild()


def _parse_attribute(name: str, value: Any) -> tuple[bool, AttributeValue]:
    """Return (keep, value) for one raw attribute."""
    if value is None or isinstance(value, (bool, str)):
        return True, value
    if isinstance(value, (int, float)):
        return True, ExpressionValue(code=str(value))
    if isinstance(value, dict):
        value_type = value.get("type")
        if value_type == constants.JSX_EXPRESSION_TYPE:
            return True, ExpressionValue(code=str(value.get("code", "")))
        logger.debug("Skipping attribute %s with %s value", name, value_type)
        return False, None
    logger.debug("Skipping attribute %s with unsupported value %r", name, value)
    return False, None


def _parse_attributes(props: dict[str, Any]) -> dict[str, AttributeValue]:
    attributes: dict[str, AttributeValue] = {}
    for name, raw in props.items():
        keep, value = _parse_attribute(name, raw)
        if keep:
            attributes[name] = value
    return attributes


def _content(props: dict[str, Any]) -> str:
    return str(props.get("content", props.get("code", "")))


def parse_jsx(data: Any) -> JSXNode:
    """Convert a wire-format JSX dict into a typed node."""
    if isinstance(data, BaseModel):
        return data
    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        raise ComponentLoadError(f"Malformed JSX node: {data!r}")

    node_type: str = data["type"]
    props: dict[str, Any] = data.get("props") or {}
    raw_children: list[Any] = data.get("children") or []

    if node_type == constants.JSX_TEXT_TYPE:
        return TextNode(content=_content(props))
    if node_type in (constants.JSX_EXPRESSION_TYPE, constants.JSX_SPREAD_TYPE):
        return ExpressionNode(code=_content(props))
    if node_type == constants.JSX_FRAGMENT_TYPE:
        return FragmentNode(children=[parse_jsx(child) for child in raw_children])
    if not node_type:
        raise ComponentLoadError("JSX node with empty type")
    if node_type[0].isupper():
        return CustomComponentNode(name=node_type, attributes=_parse_attributes(props))
    return HTMLElementNode(
        tag=node_type,
        attributes=_parse_attributes(props),
        children=[parse_jsx(child) for child in raw_children],
    )


def walk(node: Optional[JSXNode]):
    """Yield every node of a tree in depth-first order."""
    if node is None:
        return
    yield node
    for child in getattr(node, "children", []):
        yield from walk(child)


def expression_sources(node: Optional[JSXNode]) -> list[str]:
    """Collect the code of every expression slot and expression attribute."""
    sources: list[str] = []
    for current in walk(node):
        if isinstance(current, ExpressionNode):
            sources.append(current.code)
        for value in getattr(current, "attributes", {}).values():
            if isinstance(value, ExpressionValue):
                sources.append(value.code)
    return sources
