"""Tests for the Go type mapping."""

from __future__ import annotations

from templ_converter.go_types import format_literal, go_type, zero_value


class TestGoType:
    def test_scalars(self):
        assert go_type("string") == "string"
        assert go_type("boolean") == "bool"
        assert go_type("number", 3) == "int"
        assert go_type("number", 2.5) == "float64"
        assert go_type("number", 2.0) == "int"

    def test_collections(self):
        assert go_type("array") == "[]interface{}"
        assert go_type("object") == "map[string]interface{}"
        assert go_type("Array<string>") == "[]string"
        assert go_type("number[]") == "[]int"
        assert go_type("Record<string, number>") == "map[string]interface{}"

    def test_untyped(self):
        assert go_type("") == "interface{}"
        assert go_type("any") == "interface{}"
        assert go_type("UserProfile") == "interface{}"


class TestDefaults:
    def test_zero_values(self):
        assert zero_value("string") == '""'
        assert zero_value("int") == "0"
        assert zero_value("float64") == "0"
        assert zero_value("bool") == "false"
        assert zero_value("[]string") == "[]string{}"
        assert zero_value("map[string]interface{}") == "map[string]interface{}{}"
        assert zero_value("interface{}") == "nil"


class TestLiterals:
    def test_scalars(self):
        assert format_literal("hi", "string") == '"hi"'
        assert format_literal(True, "bool") == "true"
        assert format_literal(3, "int") == "3"
        assert format_literal(2.5, "float64") == "2.5"
        assert format_literal(None, "int") == "0"

    def test_collections(self):
        assert format_literal([1, "a"], "[]interface{}") == '[]interface{}{1, "a"}'
        assert format_literal([], "[]interface{}") == "[]interface{}{}"
        assert format_literal({"k": 1}) == 'map[string]interface{}{"k": 1}'

    def test_string_for_non_string_type_is_an_expression(self):
        assert format_literal("props.start", "int") == "props.start"
