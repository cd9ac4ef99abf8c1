"""State & Effect Code Generator: the Go controller of a component.

The controller holds everything a host server needs to mount one
component: the state record, the ``<Name>Store`` capability with its
persistence-specific implementation, and the ``net/http`` handlers
for construction, state mutation, callbacks, effects and cleanup.
"""

from __future__ import annotations

import logging
from string import Template
from typing import Optional

from .codegen import finish, join_blocks
from .component import CallbackDefinition, Component, StateDefinition
from .effects import client_effects
from .expressions import ExpressionTranslator
from .go_types import INTERFACE, format_literal, go_type, zero_value
from .naming import capitalize, lower_first
from .options import ConversionOptions
from .persistence import StoreNames, get_persistence

logger = logging.getLogger(__name__)

_STORE_INTERFACE = Template(
    """\
// ${Store} persists ${State} records by instance id.
type ${Store} interface {
	Get(id string) (*${State}, error)
	Set(id string, state *${State}) error
	Update(id string, mutate func(state *${State})) error
	Delete(id string) error
}

// ${NotFound} reports that no state is stored for an instance id.
var ${NotFound} = errors.New("${lower} state not found")

// Use${Component}Store replaces the store used by the ${Component} handlers.
func Use${Component}Store(store ${Store}) {
	${store} = store
}"""
)

_INSTANCE_ID = Template(
    """\
func ${helper}(w http.ResponseWriter, r *http.Request) (string, bool) {
	id := r.URL.Query().Get("id")
	if id == "" {
		http.Error(w, "missing component id", http.StatusBadRequest)
		return "", false
	}
	return id, true
}"""
)

_CONSTRUCT = Template(
    """\
// New${Component} creates a ${Component} instance and renders it.
func New${Component}(w http.ResponseWriter, r *http.Request) {
	id := uuid.New().String()
${props}
	state := &${State}{${fields}}
	if err := ${store}.Set(id, state); err != nil {
		http.Error(w, "failed to store component state", http.StatusInternalServerError)
		return
	}

	templ.Handler(${call}).ServeHTTP(w, r)
}"""
)

_DECODE_PROPS = """\
	var props ${Component}Props
	if r.ContentLength > 0 {
		if err := json.NewDecoder(r.Body).Decode(&props); err != nil {
			http.Error(w, "invalid props payload", http.StatusBadRequest)
			return
		}
	}
"""

_MUTATE = Template(
    """\
// ${handler} updates ${field} of one ${Component} instance and re-renders it.
func ${handler}(w http.ResponseWriter, r *http.Request) {
	id, ok := ${helper}(w, r)
	if !ok {
		return
	}
	if _, err := ${store}.Get(id); err != nil {
		http.Error(w, "component state not found", http.StatusNotFound)
		return
	}

${parse}

	if err := ${store}.Update(id, func(state *${State}) {
		state.${field} = newValue
	}); err != nil {
		http.Error(w, "failed to update component state", http.StatusInternalServerError)
		return
	}
${render}
}"""
)

_CALLBACK = Template(
    """\
// ${handler} is the server-side entry point of the ${callback} callback.
${source}func ${handler}(w http.ResponseWriter, r *http.Request) {
	id, ok := ${helper}(w, r)
	if !ok {
		return
	}
	if _, err := ${store}.Get(id); err != nil {
		http.Error(w, "component state not found", http.StatusNotFound)
		return
	}
${render}
}"""
)

_EFFECT = Template(
    """\
// ${handler} is the server-side entry point of effect ${number} (${dependencies}).
${source}func ${handler}(w http.ResponseWriter, r *http.Request) {
	if _, ok := ${helper}(w, r); !ok {
		return
	}
	w.WriteHeader(http.StatusOK)
}"""
)

_CLEANUP = Template(
    """\
// Cleanup${Component} forgets the state of one ${Component} instance.
func Cleanup${Component}(w http.ResponseWriter, r *http.Request) {
	id, ok := ${helper}(w, r)
	if !ok {
		return
	}
	if err := ${store}.Delete(id); err != nil {
		http.Error(w, "failed to delete component state", http.StatusInternalServerError)
		return
	}
	w.WriteHeader(http.StatusOK)
}"""
)

_PARSERS: dict[str, str] = {
    "string": '\tnewValue := r.FormValue("value")',
    "bool": '\tnewValue := r.FormValue("value") == "true"',
    "int": """\
	newValue, err := strconv.Atoi(r.FormValue("value"))
	if err != nil {
		http.Error(w, "invalid value", http.StatusBadRequest)
		return
	}""",
    "float64": """\
	newValue, err := strconv.ParseFloat(r.FormValue("value"), 64)
	if err != nil {
		http.Error(w, "invalid value", http.StatusBadRequest)
		return
	}""",
}

_JSON_PARSER = Template(
    """\
	var newValue ${type}
	if err := json.Unmarshal([]byte(r.FormValue("value")), &newValue); err != nil {
		http.Error(w, "invalid value", http.StatusBadRequest)
		return
	}"""
)


def state_go_type(entry: StateDefinition) -> str:
    return go_type(entry.type, entry.initial_value)


def parse_uses_strconv(go_type_name: str) -> bool:
    return go_type_name in ("int", "float64")


def parse_uses_json(go_type_name: str) -> bool:
    return go_type_name not in _PARSERS


def _source_comment(body: str) -> str:
    lines = [line.rstrip() for line in body.strip().split("\n") if line.strip()]
    if not lines:
        return ""
    return "\n".join(["// Source:"] + ["//   " + line for line in lines]) + "\n"


class StateEffectGenerator:
    """Generates the controller source for one resolved component."""

    def __init__(self, translator: Optional[ExpressionTranslator] = None):
        self.translator = translator or ExpressionTranslator()

    def initial_value(self, entry: StateDefinition) -> str:
        """Go expression for a State entry's initial value.

        Explicit initial values win over type-driven defaults.
        """
        field_type = state_go_type(entry)
        if entry.initial_value is None:
            return zero_value(field_type)
        if isinstance(entry.initial_value, str) and field_type not in ("string", INTERFACE):
            return self.translator.translate(entry.initial_value)
        return format_literal(entry.initial_value, field_type)

    def template_call(self, component: Component) -> str:
        arguments = (["props"] if component.props else []) + ["id"]
        return f"{lower_first(component.name)}({', '.join(arguments)})"

    def _render_block(self, component: Component) -> str:
        lines = []
        if component.props:
            lines.append("\t// Props are not stored with the state; re-renders use zero-valued props.")
            lines.append(f"\tvar props {component.name}Props")
        lines.append(f"\ttempl.Handler({self.template_call(component)}).ServeHTTP(w, r)")
        return "\n".join(lines)

    def state_struct(self, component: Component) -> str:
        names = StoreNames(component.name)
        doc = f"// {names.state_type} is the server-held state of one {component.name} instance."
        if not component.state:
            return f"{doc}\ntype {names.state_type} struct{{}}"
        fields = [
            f'\t{capitalize(entry.name)} {state_go_type(entry)} `json:"{entry.name}"`'
            for entry in component.state
        ]
        return "\n".join([doc, f"type {names.state_type} struct {{"] + fields + ["}"])

    def construction_handler(self, component: Component, values: dict[str, str]) -> str:
        fields = "".join(
            f"\n\t\t{capitalize(entry.name)}: {self.initial_value(entry)},"
            for entry in component.state
        )
        if fields:
            fields += "\n\t"
        props = Template(_DECODE_PROPS).substitute(values) if component.props else ""
        return _CONSTRUCT.substitute(
            values, props=props, fields=fields, call=self.template_call(component)
        )

    def mutation_handler(self, component: Component, entry: StateDefinition, values: dict[str, str]) -> str:
        field_type = state_go_type(entry)
        parse = _PARSERS.get(field_type) or _JSON_PARSER.substitute(type=field_type)
        return _MUTATE.substitute(
            values,
            handler=capitalize(entry.setter),
            field=capitalize(entry.name),
            parse=parse,
            render=self._render_block(component),
        )

    def callback_handler(self, component: Component, callback: CallbackDefinition, values: dict[str, str]) -> str:
        return _CALLBACK.substitute(
            values,
            handler=capitalize(callback.name),
            callback=callback.name,
            source=_source_comment(callback.body),
            render=self._render_block(component),
        )

    def generate(self, component: Component, options: ConversionOptions) -> str:
        """Controller declarations (no package clause or imports).

        Returns an empty string when the component has nothing to serve or
        partial updates are disabled.
        """
        if not options.partial_updates or not component.is_interactive:
            return ""

        names = StoreNames(component.name)
        values = names.substitutions()
        values["helper"] = f"{lower_first(component.name)}InstanceID"
        persistence = get_persistence(options.persistence)

        blocks = [
            self.state_struct(component),
            _STORE_INTERFACE.substitute(values),
            persistence.declaration(names),
            _INSTANCE_ID.substitute(values),
            self.construction_handler(component, values),
        ]

        taken = {f"New{component.name}", f"Cleanup{component.name}"}
        for entry in component.state:
            handler = capitalize(entry.setter)
            if handler in taken:
                logger.warning("Skipping duplicate handler %s for state %s", handler, entry.name)
                continue
            taken.add(handler)
            blocks.append(self.mutation_handler(component, entry, values))

        for callback in component.callbacks:
            handler = capitalize(callback.name)
            if not callback.name or handler in taken:
                logger.warning("Skipping callback %r: handler name %s already used", callback.name, handler)
                continue
            taken.add(handler)
            blocks.append(self.callback_handler(component, callback, values))

        for number, effect in client_effects(component):
            blocks.append(
                _EFFECT.substitute(
                    values,
                    handler=f"{component.name}Effect{number}",
                    number=str(number),
                    dependencies=", ".join(effect.dependencies) or "no dependencies",
                    source=_source_comment(effect.body),
                )
            )

        blocks.append(_CLEANUP.substitute(values))
        return finish(join_blocks(blocks), options)


def props_struct(component: Component) -> str:
    """``<Name>Props`` declaration, tab indented; empty when there are no props."""
    if not component.props:
        return ""
    lines = [
        f"// {component.name}Props holds the props accepted by {component.name}.",
        f"type {component.name}Props struct {{",
    ]
    for prop in component.props:
        field_type = go_type(prop.type, prop.default_value)
        suffix = " // required" if prop.required else ""
        lines.append(f'\t{capitalize(prop.name)} {field_type} `json:"{prop.name}"`{suffix}')
    lines.append("}")
    return "\n".join(lines)
