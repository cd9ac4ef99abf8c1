"""Tests for ImportResolver."""

from __future__ import annotations

from templ_converter.component import Component
from templ_converter.imports import ImportResolver, format_imports
from templ_converter.options import ConversionOptions


def _component(jsx_code: str = "", **fields) -> Component:
    children = [{"type": "expression", "props": {"content": jsx_code}}] if jsx_code else []
    data = {"name": "Widget", "jsx": {"type": "div", "props": {}, "children": children}}
    data.update(fields)
    return Component.from_dict(data)


def _template_imports(component: Component, **options) -> set[str]:
    return ImportResolver().template_imports(component, ConversionOptions(**options))


class TestTemplateImports:
    def test_plain_component_needs_nothing(self):
        assert _template_imports(_component()) == set()

    def test_numeric_state(self):
        component = _component(state=[{"name": "n", "setter": "setN", "type": "number", "initialValue": 1}])
        assert "strconv" in _template_imports(component)

    def test_template_literal(self):
        assert "fmt" in _template_imports(_component("`Hi ${name}`"))

    def test_date_and_regex(self):
        imports = _template_imports(_component("new Date(ts).getTime() + /a/.test(s)"))
        assert {"time", "regexp"} <= imports

    def test_number_formatting(self):
        assert "strconv" in _template_imports(_component("price.toFixed(2)"))

    def test_structured_encoding(self):
        assert "encoding/json" in _template_imports(_component(), persistence="external-kv")
        assert "encoding/json" in _template_imports(_component(props=[{"name": "a"}]))

    def test_custom_imports(self):
        assert "example.com/ui" in _template_imports(_component(), custom_imports=["example.com/ui"])


class TestControllerImports:
    def test_memory(self):
        component = _component(state=[{"name": "n", "setter": "setN", "type": "number", "initialValue": 1}])
        imports = ImportResolver().controller_imports(component, ConversionOptions())
        assert {"errors", "net/http", "sync", "strconv", "github.com/a-h/templ", "github.com/google/uuid"} <= imports
        assert "encoding/json" not in imports

    def test_key_value(self):
        component = _component(state=[{"name": "s", "setter": "setS", "type": "string"}])
        imports = ImportResolver().controller_imports(component, ConversionOptions(persistence="external-kv"))
        assert {"context", "time", "encoding/json", "github.com/redis/go-redis/v9"} <= imports
        assert "sync" not in imports


class TestFormatting:
    def test_empty(self):
        assert format_imports(set()) == ""

    def test_groups_and_order(self):
        block = format_imports({"github.com/google/uuid", "sync", "net/http", "github.com/a-h/templ"})
        assert block == (
            "import (\n"
            '\t"net/http"\n'
            '\t"sync"\n'
            "\n"
            '\t"github.com/a-h/templ"\n'
            '\t"github.com/google/uuid"\n'
            ")"
        )
