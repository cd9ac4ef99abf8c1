"""Tests for TreeSitterExtractor: TSX source to Component Model."""

from __future__ import annotations

import pytest

from templ_converter.api import convert_source
from templ_converter.errors import ExtractionError
from templ_converter.extractor import TreeSitterExtractor
from templ_converter.jsx import CustomComponentNode, ExpressionNode, HTMLElementNode, TextNode

COUNTER_SOURCE = """\
import React, { useState, useEffect } from 'react';
import Badge from './Badge';

interface CounterProps {
  label: string;
  step?: number;
}

export default function Counter({ label, step = 1 }: CounterProps) {
  const [count, setCount] = useState<number>(0);
  const [open, setOpen] = useState(false);

  useEffect(() => {
    document.title = `Count: ${count}`;
  }, [count]);

  useEffect(() => {
    fetch('/api/stats');
  }, []);

  return (
    <div className="counter">
      <span>{count}</span>
      <button onClick={() => setCount(count + step)}>Add</button>
      <Badge label={label} />
    </div>
  );
}
"""

ARROW_SOURCE = """\
export const Greeting = ({ name }) => <p>Hello {name}</p>;
"""

CALLBACK_SOURCE = """\
function Form() {
  const inputRef = useRef(null);
  const handleSubmit = useCallback((e) => {
    e.preventDefault();
  }, []);
  return <form onSubmit={handleSubmit}><input ref={inputRef} disabled /></form>;
}
"""


def _extract(source: str):
    return TreeSitterExtractor().extract(source)


class TestComponentDiscovery:
    def test_function_declaration(self):
        assert _extract(COUNTER_SOURCE).name == "Counter"

    def test_arrow_function(self):
        component = _extract(ARROW_SOURCE)
        assert component.name == "Greeting"
        assert isinstance(component.jsx, HTMLElementNode)
        assert component.jsx.tag == "p"

    def test_no_component(self):
        with pytest.raises(ExtractionError):
            _extract("const x = 1;")


class TestProps:
    def test_interface_props(self):
        props = _extract(COUNTER_SOURCE).props
        assert [(p.name, p.type, p.required) for p in props] == [
            ("label", "string", True),
            ("step", "number", False),
        ]
        assert props[1].default_value == 1

    def test_destructured_props_without_types(self):
        props = _extract(ARROW_SOURCE).props
        assert [p.name for p in props] == ["name"]


class TestHooks:
    def test_state(self):
        state = _extract(COUNTER_SOURCE).state
        assert [(s.name, s.setter, s.type, s.initial_value) for s in state] == [
            ("count", "setCount", "number", 0),
            ("open", "setOpen", "", False),
        ]

    def test_effects(self):
        effects = _extract(COUNTER_SOURCE).effects
        assert len(effects) == 2
        assert effects[0].dependencies == ["count"]
        assert "document.title" in effects[0].body
        assert effects[1].dependencies == []

    def test_callbacks_and_refs(self):
        component = _extract(CALLBACK_SOURCE)
        assert [c.name for c in component.callbacks] == ["handleSubmit"]
        assert "preventDefault" in component.callbacks[0].body
        assert [r.name for r in component.refs] == ["inputRef"]
        assert component.refs[0].initial_value is None


class TestJSX:
    def test_tree_shape(self):
        root = _extract(COUNTER_SOURCE).jsx
        assert isinstance(root, HTMLElementNode)
        assert root.attributes == {"className": "counter"}
        span, button, badge = root.children
        assert isinstance(span.children[0], ExpressionNode)
        assert span.children[0].code == "count"
        assert button.attributes["onClick"].code == "() => setCount(count + step)"
        assert isinstance(button.children[0], TextNode)
        assert button.children[0].content == "Add"
        assert isinstance(badge, CustomComponentNode)
        assert badge.attributes["label"].code == "label"

    def test_boolean_attribute(self):
        form = _extract(CALLBACK_SOURCE).jsx
        assert form.children[0].attributes["disabled"] is True


class TestModuleSurface:
    def test_imports(self):
        imports = _extract(COUNTER_SOURCE).imports
        assert imports[0].source == "react"
        assert imports[0].default == "React"
        assert imports[0].named == ["useState", "useEffect"]
        assert imports[1].default == "Badge"

    def test_exports(self):
        assert _extract(COUNTER_SOURCE).exports == {"default": "Counter"}
        assert _extract(ARROW_SOURCE).exports == {"Greeting": True}


class TestConvertSource:
    def test_end_to_end(self):
        result = convert_source(COUNTER_SOURCE)
        assert result.component_name == "Counter"
        assert "templ counter(props CounterProps, id string) {" in result.template
        assert 'hx-post="/api/counter/count?id={id}"' in result.template
        assert "func SetCount(" in result.controller
        assert "/api/counter/effect/1?id=" in result.script
