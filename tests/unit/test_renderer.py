"""Tests for ElementTreeRenderer: JSX trees to templ markup."""

from __future__ import annotations

import logging

import pytest

from templ_converter.interactions import InteractionMapper
from templ_converter.jsx import parse_jsx
from templ_converter.options import ConversionOptions, IndentStyle
from templ_converter.renderer import ElementTreeRenderer, html_attribute_name


def _render(tree: dict, partial: bool = True, **setters: str) -> list[str]:
    options = ConversionOptions(partial_updates=partial)
    renderer = ElementTreeRenderer("Counter", options, mapper=InteractionMapper("Counter", setters))
    return renderer.render(parse_jsx(tree))


def _el(tag: str, props: dict | None = None, *children: dict) -> dict:
    return {"type": tag, "props": props or {}, "children": list(children)}


def _text(content: str) -> dict:
    return {"type": "text", "props": {"content": content}}


def _expr(code: str) -> dict:
    return {"type": "expression", "props": {"content": code}}


class TestAttributeNames:
    def test_renames(self):
        assert html_attribute_name("className") == "class"
        assert html_attribute_name("htmlFor") == "for"

    def test_kebab_case(self):
        assert html_attribute_name("backgroundColor") == "background-color"
        assert html_attribute_name("tabIndex") == "tab-index"

    def test_plain_names_unchanged(self):
        assert html_attribute_name("href") == "href"
        assert html_attribute_name("aria-label") == "aria-label"


class TestElements:
    def test_void_tag_self_closes(self):
        lines = _render(_el("img", {"src": "a.png"}), partial=False)
        assert lines == ['    <img src="a.png" />']

    def test_empty_div_renders_open_and_close(self):
        assert _render(_el("div"), partial=False) == ["    <div>", "    </div>"]

    def test_children_are_indented(self):
        lines = _render(_el("ul", {}, _el("li", {}, _text("one"))), partial=False)
        assert lines == [
            "    <ul>",
            "        <li>",
            "            one",
            "        </li>",
            "    </ul>",
        ]

    def test_class_name_renamed(self):
        lines = _render(_el("div", {"className": "box"}), partial=False)
        assert lines[0] == '    <div class="box">'

    def test_boolean_attributes(self):
        lines = _render(_el("input", {"disabled": True, "checked": False}), partial=False)
        assert lines == ["    <input disabled />"]

    def test_expression_attribute_is_translated(self):
        tree = _el("div", {"title": {"type": "expression", "code": "a === b"}})
        lines = _render(tree, partial=False)
        assert lines[0] == "    <div title={ a == b }>"

    def test_string_attribute_is_escaped(self):
        lines = _render(_el("div", {"title": 'say "hi"'}), partial=False)
        assert lines[0] == '    <div title="say &quot;hi&quot;">'

    def test_tabs_indentation(self):
        options = ConversionOptions(partial_updates=False, indent_style=IndentStyle.TABS)
        lines = ElementTreeRenderer("Counter", options).render(parse_jsx(_el("p", {}, _text("x"))))
        assert lines == ["\t<p>", "\t\tx", "\t</p>"]


class TestTextAndExpressions:
    def test_text_is_verbatim(self):
        lines = _render(_el("p", {}, _text("Count: ")), partial=False)
        assert lines[1] == "        Count: "

    def test_expression_slot(self):
        lines = _render(_el("p", {}, _expr('a > b ? "yes" : "no"')), partial=False)
        assert lines[1] == '        { templ.KV((a > b), "yes", "no") }'


class TestFragments:
    def test_fragment_markers_wrap_children(self):
        tree = {"type": "Fragment", "children": [_el("br")]}
        assert _render(tree, partial=False) == ["    <>", "        <br />", "    </>"]

    def test_fragment_root_gets_no_identifier(self):
        tree = {"type": "Fragment", "children": [_el("div")]}
        assert all("Counter-{id}" not in line for line in _render(tree))

    def test_fragment_root_warns_under_partial_updates(self, caplog):
        tree = {"type": "Fragment", "children": [_el("div")]}
        with caplog.at_level(logging.WARNING, logger="templ_converter.renderer"):
            _render(tree)
        assert "fragment root" in caplog.text

    def test_fragment_root_is_quiet_without_partial_updates(self, caplog):
        tree = {"type": "Fragment", "children": [_el("div")]}
        with caplog.at_level(logging.WARNING, logger="templ_converter.renderer"):
            _render(tree, partial=False)
        assert "fragment root" not in caplog.text


class TestPartialUpdates:
    def test_root_gets_instance_identifier_first(self):
        lines = _render(_el("div", {"className": "c"}))
        assert lines[0] == '    <div id="Counter-{id}" class="c">'

    def test_only_root_gets_identifier(self):
        lines = _render(_el("div", {}, _el("span")))
        assert sum("Counter-{id}" in line and "id=" in line for line in lines) == 1

    def test_user_root_id_is_replaced(self):
        lines = _render(_el("div", {"id": "mine"}))
        assert 'id="mine"' not in lines[0]

    def test_no_identifier_when_disabled(self):
        assert "id=" not in _render(_el("div"), partial=False)[0]

    def test_click_handler_becomes_protocol_attributes(self):
        button = _el("button", {"onClick": {"type": "expression", "code": "() => setCount(count + 1)"}})
        lines = _render(_el("div", {}, button), setCount="count")
        assert lines[1] == (
            '        <button hx-post="/api/counter/count?id={id}" hx-target="#Counter-{id}" '
            "hx-swap=\"outerHTML\" hx-vals='{\"value\": count + 1}'>"
        )

    def test_change_handler(self):
        field = _el("input", {"onChange": {"type": "expression", "code": "(e) => setName(e.target.value)"}})
        lines = _render(_el("div", {}, field), setName="name")
        assert 'hx-trigger="keyup changed delay:500ms"' in lines[1]
        assert 'hx-post="/api/counter/name?id={id}"' in lines[1]

    def test_event_attributes_never_emitted_literally(self):
        tree = _el("form", {"onSave": {"type": "expression", "code": "save"}, "onClick": {"type": "expression", "code": "go()"}})
        rendered = "\n".join(_render(tree) + _render(tree, partial=False))
        assert "onSave" not in rendered
        assert "on-save" not in rendered
        assert "onClick" not in rendered


class TestCustomComponents:
    def test_call_with_props_literal(self):
        tree = _el("div", {}, _el("Child", {"label": "Hi", "active": True, "count": {"type": "expression", "code": "n === 1"}}))
        lines = _render(tree)
        assert lines[1:6] == [
            "        @child(ChildProps{",
            '            Label: "Hi",',
            "            Active: true,",
            "            Count: n == 1,",
            "        }, id)",
        ]

    def test_call_without_props(self):
        lines = _render(_el("div", {}, _el("Child")))
        assert lines[1] == "        @child(id)"

    def test_call_without_partial_updates(self):
        lines = _render(_el("div", {}, _el("Child", {"label": "x"})), partial=False)
        assert lines[-2] == "        })"
        assert _render(_el("div", {}, _el("Child")), partial=False)[1] == "        @child()"

    def test_event_props_are_dropped(self):
        tree = _el("div", {}, _el("Child", {"onSave": {"type": "expression", "code": "save"}}))
        lines = _render(tree)
        assert lines[1] == "        @child(ChildProps{}, id)"

    def test_event_only_attributes_still_pass_empty_props(self):
        tree = _el("div", {}, _el("Child", {"onSave": {"type": "expression", "code": "save"}}))
        assert _render(tree, partial=False)[1] == "        @child(ChildProps{})"


class TestDispatch:
    def test_dispatch_covers_every_kind(self):
        renderer = ElementTreeRenderer("X", ConversionOptions())
        from templ_converter.jsx import JSXKind

        assert set(renderer._dispatch) == set(JSXKind)

    def test_unknown_node_type_is_rejected(self):
        from templ_converter.errors import ComponentLoadError

        with pytest.raises(ComponentLoadError):
            parse_jsx({"props": {}})
