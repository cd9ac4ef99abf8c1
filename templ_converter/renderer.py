"""Element Tree Renderer: JSX tree to templ markup lines."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from . import constants
from .expressions import ExpressionTranslator
from .go_types import go_string
from .interactions import InteractionMapper, event_name, is_event_attribute
from .jsx import (
    AttributeValue,
    CustomComponentNode,
    ExpressionNode,
    ExpressionValue,
    FragmentNode,
    HTMLElementNode,
    JSXKind,
    JSXNode,
    TextNode,
)
from .naming import capitalize, kebab_case, lower_first
from .options import ConversionOptions

logger = logging.getLogger(__name__)


def html_attribute_name(name: str) -> str:
    return constants.ATTRIBUTE_RENAMES.get(name) or kebab_case(name)


def props_field_name(name: str) -> str:
    """Go struct field for a component attribute (``aria-label`` -> ``AriaLabel``)."""
    return "".join(capitalize(part) for part in name.split("-") if part)


def _quoted(name: str, value: str) -> str:
    if '"' in value:
        return f"{name}='{value}'"
    return f'{name}="{value}"'


def _escape_attribute(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


class ElementTreeRenderer:
    """Depth-first renderer producing one templ line per markup line.

    Every ``JSXKind`` must have an entry in the dispatch table; a missing
    kind is reported when the renderer is built, not when a tree is drawn.
    """

    def __init__(
        self,
        component_name: str,
        options: ConversionOptions,
        translator: Optional[ExpressionTranslator] = None,
        mapper: Optional[InteractionMapper] = None,
    ):
        self.component_name = component_name
        self.options = options
        self.translator = translator or ExpressionTranslator()
        self.mapper = mapper or InteractionMapper(component_name)
        self._dispatch: dict[JSXKind, Callable] = {
            JSXKind.FRAGMENT: self._render_fragment,
            JSXKind.HTML_ELEMENT: self._render_element,
            JSXKind.CUSTOM_COMPONENT: self._render_component,
            JSXKind.TEXT: self._render_text,
            JSXKind.EXPRESSION: self._render_expression,
        }
        missing = set(JSXKind) - set(self._dispatch)
        if missing:
            raise ValueError(f"No renderer for JSX kinds: {sorted(k.value for k in missing)}")

    def render(self, root: JSXNode, level: int = 1) -> list[str]:
        lines: list[str] = []
        self._render(root, level, lines, is_root=True)
        return lines

    def render_text(self, root: JSXNode, level: int = 1) -> str:
        return "\n".join(self.render(root, level))

    def _render(self, node: JSXNode, level: int, lines: list[str], is_root: bool = False) -> None:
        self._dispatch[node.kind](node, level, lines, is_root)

    def _ind(self, level: int) -> str:
        return self.options.indent(level)

    # ── node kinds ───────────────────────────────────────────────

    def _render_fragment(self, node: FragmentNode, level: int, lines: list[str], is_root: bool) -> None:
        if is_root and self.options.partial_updates:
            logger.warning(
                "%s has a fragment root: no element carries the instance id, so htmx targets will not resolve",
                self.component_name,
            )
        lines.append(self._ind(level) + constants.FRAGMENT_OPEN)
        for child in node.children:
            self._render(child, level + 1, lines)
        lines.append(self._ind(level) + constants.FRAGMENT_CLOSE)

    def _render_element(self, node: HTMLElementNode, level: int, lines: list[str], is_root: bool) -> None:
        attributes = self._render_attributes(node, is_root)
        opening = "<" + node.tag + "".join(" " + attribute for attribute in attributes)
        if node.tag.lower() in constants.VOID_TAGS:
            if node.children:
                logger.debug("Dropping %d children of void tag <%s>", len(node.children), node.tag)
            lines.append(f"{self._ind(level)}{opening} />")
            return
        lines.append(f"{self._ind(level)}{opening}>")
        for child in node.children:
            self._render(child, level + 1, lines)
        lines.append(f"{self._ind(level)}</{node.tag}>")

    def _render_component(self, node: CustomComponentNode, level: int, lines: list[str], is_root: bool) -> None:
        function = lower_first(node.name)
        fields = self._component_fields(node)
        instance_arg = constants.INSTANCE_ID_PARAM if self.options.partial_updates else ""
        if not fields and not node.attributes:
            lines.append(f"{self._ind(level)}@{function}({instance_arg})")
            return
        if not fields:
            arguments = [f"{node.name}Props{{}}"] + ([instance_arg] if instance_arg else [])
            lines.append(f"{self._ind(level)}@{function}({', '.join(arguments)})")
            return
        lines.append(f"{self._ind(level)}@{function}({node.name}Props{{")
        for field, literal in fields:
            lines.append(f"{self._ind(level + 1)}{field}: {literal},")
        closing = "}, " + instance_arg + ")" if instance_arg else "})"
        lines.append(self._ind(level) + closing)

    def _render_text(self, node: TextNode, level: int, lines: list[str], is_root: bool) -> None:
        lines.append(self._ind(level) + node.content)

    def _render_expression(self, node: ExpressionNode, level: int, lines: list[str], is_root: bool) -> None:
        lines.append(f"{self._ind(level)}{{ {self.translator.translate(node.code)} }}")

    # ── attributes ───────────────────────────────────────────────

    def _component_fields(self, node: CustomComponentNode) -> list[tuple[str, str]]:
        fields: list[tuple[str, str]] = []
        for name, value in node.attributes.items():
            if is_event_attribute(name):
                logger.debug("Dropping %s on <%s>: handlers cannot cross to the server", name, node.name)
                continue
            if value is None:
                continue
            if isinstance(value, bool):
                literal = "true" if value else "false"
            elif isinstance(value, ExpressionValue):
                literal = self.translator.translate(value.code)
            else:
                literal = go_string(value)
            fields.append((props_field_name(name), literal))
        return fields

    def _handler_body(self, value: AttributeValue) -> str:
        if isinstance(value, ExpressionValue):
            return value.code
        return value if isinstance(value, str) else ""

    def _render_attributes(self, node: HTMLElementNode, is_root: bool) -> list[str]:
        partial = self.options.partial_updates
        rendered: dict[str, str] = {}
        if is_root and partial:
            instance_id = constants.INSTANCE_ID_TEMPLATE.format(name=self.component_name)
            rendered["id"] = _quoted("id", instance_id)

        for name, value in node.attributes.items():
            if is_event_attribute(name):
                if not partial:
                    logger.debug("Dropping %s on <%s>: partial updates disabled", name, node.tag)
                    continue
                protocol = self.mapper.attributes(event_name(name), self._handler_body(value))
                for attribute, attribute_value in protocol.items():
                    rendered[attribute] = _quoted(attribute, attribute_value)
                continue
            if value is None or value is False:
                continue
            html_name = html_attribute_name(name)
            if html_name == "id" and is_root and partial:
                logger.debug("Root id %r replaced by the instance identifier", value)
                continue
            if value is True:
                rendered[html_name] = html_name
            elif isinstance(value, ExpressionValue):
                rendered[html_name] = f"{html_name}={{ {self.translator.translate(value.code)} }}"
            else:
                rendered[html_name] = f'{html_name}="{_escape_attribute(value)}"'
        return list(rendered.values())
