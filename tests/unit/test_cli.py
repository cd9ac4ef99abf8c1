"""Tests for the templ-convert command line."""

from __future__ import annotations

import json

from templ_converter.cli import build_arg_parser, main, options_from_args
from templ_converter.options import IndentStyle, PersistenceMode

MODEL = {
    "name": "Toggle",
    "state": [{"name": "on", "setter": "setOn", "initialValue": False}],
    "jsx": {"type": "button", "props": {"onClick": {"type": "expression", "code": "() => setOn(!on)"}}},
}


class TestArguments:
    def test_defaults(self):
        options = options_from_args(build_arg_parser().parse_args([]))
        assert options.partial_updates
        assert options.persistence == PersistenceMode.MEMORY
        assert options.indent_style == IndentStyle.SPACES

    def test_flags(self):
        args = build_arg_parser().parse_args(
            ["--no-partial-updates", "--no-comments", "--tabs", "--persistence", "external-kv",
             "--import", "a/b", "--import", "c/d", "--name", "X"]
        )
        options = options_from_args(args)
        assert not options.partial_updates
        assert not options.include_comments
        assert options.indent_style == IndentStyle.TABS
        assert options.persistence == PersistenceMode.EXTERNAL_KV
        assert options.custom_imports == ("a/b", "c/d")
        assert options.component_name == "X"


class TestMain:
    def test_json_model(self, tmp_path, capsys):
        path = tmp_path / "toggle.json"
        path.write_text(json.dumps(MODEL), encoding="utf-8")
        assert main([str(path)]) == 0
        out = capsys.readouterr().out
        assert "═══ toggle.templ ═══" in out
        assert "═══ toggle_controller.go ═══" in out
        assert "func SetOn(" in out

    def test_summary_only(self, tmp_path, capsys):
        path = tmp_path / "toggle.json"
        path.write_text(json.dumps(MODEL), encoding="utf-8")
        assert main([str(path), "--summary"]) == 0
        out = capsys.readouterr().out
        assert "Component: Toggle" in out
        assert "═══" not in out

    def test_invalid_model_exits_non_zero(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({"name": "Broken"}), encoding="utf-8")
        assert main([str(path)]) == 1
