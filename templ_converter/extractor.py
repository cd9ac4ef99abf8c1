"""In-process extraction of a Component Model from JSX/TSX source.

Walks the tree-sitter syntax tree of one module and collects what the
converter needs: the component function, its props, its hooks, the JSX
it returns, and the module's imports and exports. The result goes through
the same loading path as externally supplied models.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterator, Optional

from . import constants
from .component import Component
from .errors import ExtractionError
from .parser import GrammarProvider, parse_source

logger = logging.getLogger(__name__)

_FUNCTION_TYPES: frozenset[str] = frozenset(
    {"function_declaration", "function_expression", "arrow_function", "function"}
)
_JSX_TYPES: frozenset[str] = frozenset(
    {"jsx_element", "jsx_self_closing_element", "jsx_fragment"}
)
_DECLARATION_TYPES: frozenset[str] = frozenset({"lexical_declaration", "variable_declaration"})
_TYPE_TAGS: dict[str, str] = {
    "string": constants.TYPE_STRING,
    "number": constants.TYPE_NUMBER,
    "boolean": constants.TYPE_BOOLEAN,
    "any": constants.TYPE_ANY,
    "object": constants.TYPE_OBJECT,
}
_LITERAL_TYPES: frozenset[str] = frozenset(
    {"number", "string", "true", "false", "null", "array", "object", "unary_expression"}
)
_STATE_HOOKS = ("useState",)
_EFFECT_HOOKS = ("useEffect", "useLayoutEffect")


class ComponentExtractor(ABC):
    """Builds a Component Model from component source."""

    @abstractmethod
    def extract(self, source: str) -> Component: ...


def _walk(node) -> Iterator:
    yield node
    for child in node.named_children:
        yield from _walk(child)


def _named(node) -> list:
    return [child for child in node.named_children if child.type != "comment"]


class TreeSitterExtractor(ComponentExtractor):
    def __init__(self, language: str = "tsx", provider: Optional[GrammarProvider] = None):
        self.language = language
        self.provider = provider
        self._source: bytes = b""

    def _text(self, node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")

    # ── entry point ──────────────────────────────────────────────

    def extract(self, source: str) -> Component:
        """Parse ``source`` and build its Component Model.

        Raises:
            ExtractionError: If no component function returning JSX is found.
        """
        self._source = source.encode("utf-8")
        root = parse_source(source, self.language, self.provider).root_node

        found = self._find_component(root)
        if found is None:
            raise ExtractionError("No component function returning JSX found")
        name, function = found
        logger.info("Extracting component %s", name or "<anonymous>")

        body = function.child_by_field_name("body")
        data: dict[str, Any] = {
            "name": name,
            "props": self._props(function, self._type_declarations(root)),
            "state": [],
            "effects": [],
            "callbacks": [],
            "refs": [],
            "jsx": self._returned_jsx(body),
            "imports": self._imports(root),
            "exports": self._exports(root),
        }
        if body is not None:
            self._collect_hooks(body, data)
        if data["jsx"] is None:
            raise ExtractionError(f"Component {name or '<anonymous>'} returns no JSX")
        return Component.from_dict(data)

    # ── component discovery ──────────────────────────────────────

    def _top_level_functions(self, root) -> Iterator[tuple[str, Any]]:
        for statement in root.named_children:
            node = statement
            if statement.type == "export_statement":
                node = statement.child_by_field_name("declaration") or statement.child_by_field_name("value")
                if node is None:
                    continue
            if node.type in ("function_declaration", "function_expression"):
                name_node = node.child_by_field_name("name")
                yield (self._text(name_node) if name_node else ""), node
            elif node.type in _DECLARATION_TYPES:
                for declarator in node.named_children:
                    if declarator.type != "variable_declarator":
                        continue
                    value = declarator.child_by_field_name("value")
                    if value is not None and value.type in _FUNCTION_TYPES:
                        yield self._text(declarator.child_by_field_name("name")), value
            elif node.type == "arrow_function":
                yield "", node

    def _find_component(self, root) -> Optional[tuple[str, Any]]:
        candidates = [
            (name, function)
            for name, function in self._top_level_functions(root)
            if self._returned_jsx_node(function.child_by_field_name("body")) is not None
        ]
        for name, function in candidates:
            if name[:1].isupper():
                return name, function
        return candidates[0] if candidates else None

    # ── props ────────────────────────────────────────────────────

    def _type_tag(self, annotation) -> str:
        if annotation is None:
            return ""
        inner = _named(annotation)
        text = self._text(inner[0] if inner else annotation).strip()
        if inner and inner[0].type == "function_type":
            return "function"
        return _TYPE_TAGS.get(text, text)

    def _members(self, object_type) -> list[dict[str, Any]]:
        members = []
        for signature in object_type.named_children:
            if signature.type != "property_signature":
                continue
            name_node = signature.child_by_field_name("name")
            members.append(
                {
                    "name": self._text(name_node),
                    "type": self._type_tag(signature.child_by_field_name("type")),
                    "required": not any(child.type == "?" for child in signature.children),
                }
            )
        return members

    def _type_declarations(self, root) -> dict[str, list[dict[str, Any]]]:
        declarations: dict[str, list[dict[str, Any]]] = {}
        for node in _walk(root):
            if node.type == "interface_declaration":
                body = node.child_by_field_name("body")
            elif node.type == "type_alias_declaration":
                body = node.child_by_field_name("value")
            else:
                continue
            name_node = node.child_by_field_name("name")
            if name_node is not None and body is not None:
                declarations[self._text(name_node)] = self._members(body)
        return declarations

    def _props(self, function, declarations: dict[str, list[dict[str, Any]]]) -> list[dict[str, Any]]:
        parameters = function.child_by_field_name("parameters")
        if parameters is not None:
            params = _named(parameters)
            first = params[0] if params else None
        else:
            first = function.child_by_field_name("parameter")
        if first is None:
            return []

        pattern, annotation = first, None
        if first.type in ("required_parameter", "optional_parameter"):
            pattern = first.child_by_field_name("pattern")
            annotation = first.child_by_field_name("type")
        if pattern is not None and pattern.type == "assignment_pattern":
            pattern = pattern.child_by_field_name("left")

        declared: list[dict[str, Any]] = []
        if annotation is not None:
            inner = _named(annotation)
            if inner and inner[0].type == "object_type":
                declared = self._members(inner[0])
            elif inner:
                declared = declarations.get(self._text(inner[0]), [])

        defaults: dict[str, Any] = {}
        order: list[str] = []
        if pattern is not None and pattern.type == "object_pattern":
            for element in pattern.named_children:
                if element.type == "shorthand_property_identifier_pattern":
                    order.append(self._text(element))
                elif element.type == "object_assignment_pattern":
                    key = self._text(element.child_by_field_name("left"))
                    order.append(key)
                    defaults[key] = self._literal(element.child_by_field_name("right"))
                elif element.type == "pair_pattern":
                    order.append(self._text(element.child_by_field_name("key")))

        props = [dict(member) for member in declared]
        known = {member["name"] for member in props}
        props.extend({"name": name, "type": "", "required": True} for name in order if name not in known)
        for prop in props:
            if prop["name"] in defaults:
                prop["required"] = False
                prop["defaultValue"] = defaults[prop["name"]]
        return props

    # ── hooks ────────────────────────────────────────────────────

    def _hook_name(self, call) -> str:
        function = call.child_by_field_name("function")
        if function is None:
            return ""
        text = self._text(function)
        return text.split(".", 1)[1] if text.startswith("React.") else text

    def _arguments(self, call) -> list:
        arguments = call.child_by_field_name("arguments")
        return _named(arguments) if arguments is not None else []

    def _dependencies(self, arguments: list) -> list[str]:
        if len(arguments) < 2 or arguments[1].type != "array":
            return []
        return [self._text(item) for item in _named(arguments[1])]

    def _function_body(self, node) -> str:
        if node is None:
            return ""
        body = node.child_by_field_name("body") if node.type in _FUNCTION_TYPES else None
        return self._text(body if body is not None else node)

    def _declarator_name(self, call) -> Optional[Any]:
        parent = call.parent
        if parent is None or parent.type != "variable_declarator":
            return None
        return parent.child_by_field_name("name")

    def _collect_hooks(self, body, data: dict[str, Any]) -> None:
        for node in _walk(body):
            if node.type != "call_expression":
                continue
            hook = self._hook_name(node)
            arguments = self._arguments(node)
            target = self._declarator_name(node)

            if hook in _STATE_HOOKS and target is not None and target.type == "array_pattern":
                names = [self._text(item) for item in _named(target) if item.type == "identifier"]
                if len(names) < 2:
                    continue
                data["state"].append(
                    {
                        "name": names[0],
                        "setter": names[1],
                        "type": self._state_type(node),
                        "initialValue": self._literal(arguments[0]) if arguments else None,
                    }
                )
            elif hook in _EFFECT_HOOKS and arguments:
                data["effects"].append(
                    {
                        "body": self._function_body(arguments[0]),
                        "dependencies": self._dependencies(arguments),
                    }
                )
            elif hook == "useCallback" and arguments and target is not None:
                data["callbacks"].append(
                    {
                        "name": self._text(target),
                        "body": self._function_body(arguments[0]),
                        "dependencies": self._dependencies(arguments),
                    }
                )
            elif hook == "useRef" and target is not None:
                data["refs"].append(
                    {
                        "name": self._text(target),
                        "initialValue": self._literal(arguments[0]) if arguments else None,
                    }
                )

    def _state_type(self, call) -> str:
        type_arguments = call.child_by_field_name("type_arguments")
        if type_arguments is None:
            return ""
        inner = _named(type_arguments)
        if not inner:
            return ""
        text = self._text(inner[0]).strip()
        return _TYPE_TAGS.get(text, text)

    # ── literals ─────────────────────────────────────────────────

    def _literal(self, node) -> Any:
        if node is None:
            return None
        text = self._text(node)
        kind = node.type
        if kind == "number" or (kind == "unary_expression" and text.lstrip("-+").replace(".", "", 1).isdigit()):
            try:
                return int(text, 0)
            except ValueError:
                try:
                    return float(text)
                except ValueError:
                    return text
        if kind == "string":
            return text[1:-1]
        if kind == "template_string" and "${" not in text:
            return text[1:-1]
        if kind in ("true", "false"):
            return kind == "true"
        if kind in ("null", "undefined"):
            return None
        if kind == "array":
            items = _named(node)
            if all(item.type in _LITERAL_TYPES for item in items):
                return [self._literal(item) for item in items]
            return text
        if kind == "object" and not _named(node):
            return {}
        return text

    # ── JSX ──────────────────────────────────────────────────────

    def _unwrap(self, node):
        while node is not None and node.type == "parenthesized_expression":
            inner = _named(node)
            node = inner[0] if inner else None
        return node

    def _contains_jsx(self, node) -> bool:
        return any(descendant.type in _JSX_TYPES for descendant in _walk(node))

    def _returned_jsx_node(self, body):
        if body is None:
            return None
        if body.type != "statement_block":
            node = self._unwrap(body)
            return node if node is not None and self._contains_jsx(node) else None
        return self._find_return(body)

    def _find_return(self, node):
        for child in node.named_children:
            if child.type in _FUNCTION_TYPES:
                continue
            if child.type == "return_statement":
                returned = _named(child)
                value = self._unwrap(returned[0]) if returned else None
                if value is not None and self._contains_jsx(value):
                    return value
                continue
            found = self._find_return(child)
            if found is not None:
                return found
        return None

    def _returned_jsx(self, body) -> Optional[dict[str, Any]]:
        node = self._returned_jsx_node(body)
        if node is None:
            return None
        if node.type in _JSX_TYPES:
            return self._jsx(node)
        return {"type": constants.JSX_EXPRESSION_TYPE, "props": {"content": self._text(node)}}

    def _jsx_children(self, nodes) -> list[dict[str, Any]]:
        children = []
        for child in nodes:
            converted = self._jsx(child)
            if converted is not None:
                children.append(converted)
        return children

    def _jsx(self, node) -> Optional[dict[str, Any]]:
        kind = node.type
        if kind == "jsx_element":
            opening = node.child_by_field_name("open_tag")
            name_node = opening.child_by_field_name("name") if opening is not None else None
            inner = [
                child for child in node.named_children
                if child.type not in ("jsx_opening_element", "jsx_closing_element")
            ]
            if name_node is None:
                return {"type": constants.JSX_FRAGMENT_TYPE, "props": {}, "children": self._jsx_children(inner)}
            return {
                "type": self._text(name_node),
                "props": self._attributes(opening),
                "children": self._jsx_children(inner),
            }
        if kind == "jsx_fragment":
            return {"type": constants.JSX_FRAGMENT_TYPE, "props": {}, "children": self._jsx_children(node.named_children)}
        if kind == "jsx_self_closing_element":
            return {
                "type": self._text(node.child_by_field_name("name")),
                "props": self._attributes(node),
                "children": [],
            }
        if kind in ("jsx_text", "html_character_reference"):
            content = " ".join(self._text(node).split())
            if not content:
                return None
            return {"type": constants.JSX_TEXT_TYPE, "props": {"content": content}}
        if kind == "jsx_expression":
            inner = _named(node)
            if not inner:
                return None
            if inner[0].type == "spread_element":
                return {"type": constants.JSX_SPREAD_TYPE, "props": {"content": self._text(inner[0])[3:]}}
            return {"type": constants.JSX_EXPRESSION_TYPE, "props": {"content": self._text(inner[0])}}
        logger.debug("Skipping JSX child of type %s", kind)
        return None

    def _attributes(self, element) -> dict[str, Any]:
        attributes: dict[str, Any] = {}
        for child in element.named_children:
            if child.type == "jsx_expression":
                inner = _named(child)
                if inner and inner[0].type == "spread_element":
                    attributes[f"...{len(attributes)}"] = {
                        "type": constants.JSX_SPREAD_TYPE,
                        "code": self._text(inner[0])[3:],
                    }
                continue
            if child.type != "jsx_attribute":
                continue
            parts = _named(child)
            if not parts:
                continue
            name = self._text(parts[0])
            value = parts[1] if len(parts) > 1 else None
            if value is None:
                attributes[name] = True
            elif value.type == "string":
                attributes[name] = self._text(value)[1:-1]
            elif value.type == "jsx_expression":
                inner = _named(value)
                if inner:
                    attributes[name] = {"type": constants.JSX_EXPRESSION_TYPE, "code": self._text(inner[0])}
            else:
                attributes[name] = {"type": "element", "code": self._text(value)}
        return attributes

    # ── module surface ───────────────────────────────────────────

    def _imports(self, root) -> list[dict[str, Any]]:
        imports = []
        for statement in root.named_children:
            if statement.type != "import_statement":
                continue
            source = statement.child_by_field_name("source")
            entry: dict[str, Any] = {
                "source": self._text(source)[1:-1] if source is not None else "",
                "default": "",
                "named": [],
            }
            for clause in statement.named_children:
                if clause.type != "import_clause":
                    continue
                for part in clause.named_children:
                    if part.type == "identifier":
                        entry["default"] = self._text(part)
                    elif part.type == "namespace_import":
                        entry["default"] = self._text(part)
                    elif part.type == "named_imports":
                        entry["named"].extend(
                            self._text(spec.child_by_field_name("name"))
                            for spec in part.named_children
                            if spec.type == "import_specifier"
                        )
            imports.append(entry)
        return imports

    def _declared_names(self, declaration) -> list[str]:
        if declaration.type in _DECLARATION_TYPES:
            return [
                self._text(declarator.child_by_field_name("name"))
                for declarator in declaration.named_children
                if declarator.type == "variable_declarator"
            ]
        name_node = declaration.child_by_field_name("name")
        return [self._text(name_node)] if name_node is not None else []

    def _exports(self, root) -> dict[str, Any]:
        exports: dict[str, Any] = {}
        for statement in root.named_children:
            if statement.type != "export_statement":
                continue
            declaration = statement.child_by_field_name("declaration")
            value = statement.child_by_field_name("value")
            if any(child.type == "default" for child in statement.children):
                target = declaration if declaration is not None else value
                names = self._declared_names(target) if target is not None else []
                if not names and value is not None and value.type == "identifier":
                    names = [self._text(value)]
                exports[constants.DEFAULT_EXPORT_KEY] = names[0] if names else True
            elif declaration is not None:
                for name in self._declared_names(declaration):
                    exports[name] = True
            else:
                for spec in _walk(statement):
                    if spec.type == "export_specifier":
                        alias = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
                        exports[self._text(alias)] = True
        return exports
