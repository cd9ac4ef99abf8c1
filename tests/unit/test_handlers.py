"""Tests for StateEffectGenerator and the persistence strategies."""

from __future__ import annotations

import pytest

from templ_converter.component import Component
from templ_converter.effects import client_effects, is_data_fetching
from templ_converter.component import EffectDefinition
from templ_converter.handlers import StateEffectGenerator, props_struct
from templ_converter.options import ConversionOptions, PersistenceMode
from templ_converter.persistence import (
    KeyValuePersistence,
    MemoryPersistence,
    RepositoryPersistence,
    get_persistence,
)

DIV = {"type": "div", "props": {}, "children": []}


def _component(**fields) -> Component:
    data = {"name": "Counter", "jsx": DIV}
    data.update(fields)
    component = Component.from_dict(data)
    for entry in component.state:
        if not entry.type:
            entry.type = "any"
    return component


def _controller(component: Component, **options) -> str:
    return StateEffectGenerator().generate(component, ConversionOptions(**options))


COUNTER_STATE = [{"name": "count", "setter": "setCount", "type": "number", "initialValue": 0}]


class TestEffectClassification:
    def test_fetch_only_is_data_fetching(self):
        assert is_data_fetching(EffectDefinition(body="fetch('/api/items').then(r => r.json())"))

    def test_axios_is_data_fetching(self):
        assert is_data_fetching(EffectDefinition(body="axios.get('/x')"))

    def test_dom_access_is_never_data_fetching(self):
        assert not is_data_fetching(EffectDefinition(body="document.title = 'x'; fetch('/a')"))

    def test_storage_access_is_never_data_fetching(self):
        assert not is_data_fetching(EffectDefinition(body="fetch('/a'); localStorage.setItem('k', v)"))

    def test_plain_effect_is_not_data_fetching(self):
        assert not is_data_fetching(EffectDefinition(body="console.log(count)"))

    def test_client_effects_keep_one_based_numbers(self):
        component = _component(effects=[{"body": "fetch('/a')"}, {"body": "document.title = 'x'"}])
        assert [number for number, _ in client_effects(component)] == [2]


class TestController:
    def test_absent_without_state_effects_or_callbacks(self):
        assert _controller(_component()) == ""

    def test_absent_when_partial_updates_disabled(self):
        assert _controller(_component(state=COUNTER_STATE), partial_updates=False) == ""

    def test_state_struct(self):
        controller = _controller(_component(state=COUNTER_STATE))
        assert "type CounterState struct {" in controller
        assert '    Count int `json:"count"`' in controller

    def test_construction_handler(self):
        controller = _controller(_component(state=COUNTER_STATE))
        assert "func NewCounter(w http.ResponseWriter, r *http.Request) {" in controller
        assert "id := uuid.New().String()" in controller
        assert "Count: 0," in controller
        assert "templ.Handler(counter(id)).ServeHTTP(w, r)" in controller

    def test_explicit_initial_value_wins(self):
        state = [{"name": "label", "setter": "setLabel", "type": "string", "initialValue": "hi"}]
        assert 'Label: "hi",' in _controller(_component(state=state))

    def test_type_default_when_no_initial_value(self):
        state = [{"name": "items", "setter": "setItems", "type": "array"}]
        assert "Items: []interface{}{}," in _controller(_component(state=state))

    def test_mutation_handler(self):
        controller = _controller(_component(state=COUNTER_STATE))
        assert "func SetCount(w http.ResponseWriter, r *http.Request) {" in controller
        assert "http.StatusNotFound" in controller
        assert 'strconv.Atoi(r.FormValue("value"))' in controller
        assert "http.StatusBadRequest" in controller
        assert "state.Count = newValue" in controller

    @pytest.mark.parametrize(
        "type_tag,initial,expected",
        [
            ("string", "", 'newValue := r.FormValue("value")'),
            ("boolean", False, 'newValue := r.FormValue("value") == "true"'),
            ("number", 0.5, 'strconv.ParseFloat(r.FormValue("value"), 64)'),
            ("array", [], "json.Unmarshal([]byte(r.FormValue(\"value\")), &newValue)"),
        ],
    )
    def test_type_directed_parsing(self, type_tag, initial, expected):
        state = [{"name": "v", "setter": "setV", "type": type_tag, "initialValue": initial}]
        assert expected in _controller(_component(state=state))

    def test_props_are_decoded_and_passed(self):
        component = _component(state=COUNTER_STATE, props=[{"name": "step", "type": "number"}])
        controller = _controller(component)
        assert "json.NewDecoder(r.Body).Decode(&props)" in controller
        assert "templ.Handler(counter(props, id)).ServeHTTP(w, r)" in controller

    def test_rerenders_note_that_props_are_not_stored(self):
        component = _component(state=COUNTER_STATE, props=[{"name": "step", "type": "number"}])
        controller = _controller(component)
        assert "// Props are not stored with the state; re-renders use zero-valued props." in controller
        assert "var props CounterProps" in controller

    def test_callback_stub(self):
        component = _component(callbacks=[{"name": "handleSubmit", "body": "{ save(); }"}])
        controller = _controller(component)
        assert "func HandleSubmit(w http.ResponseWriter, r *http.Request) {" in controller
        assert "//   { save(); }" in controller

    def test_duplicate_callback_is_skipped(self):
        component = _component(state=COUNTER_STATE, callbacks=[{"name": "setCount", "body": "{}"}])
        assert _controller(component).count("func SetCount(") == 1

    def test_effect_stubs_skip_data_fetching(self):
        component = _component(
            effects=[
                {"body": "fetch('/api/items')", "dependencies": []},
                {"body": "document.title = count", "dependencies": ["count"]},
            ]
        )
        controller = _controller(component)
        assert "func CounterEffect1(" not in controller
        assert "func CounterEffect2(" in controller

    def test_cleanup_handler(self):
        controller = _controller(_component(state=COUNTER_STATE))
        assert "func CleanupCounter(w http.ResponseWriter, r *http.Request) {" in controller
        assert "counterStore.Delete(id)" in controller

    def test_comments_can_be_dropped(self):
        controller = _controller(_component(state=COUNTER_STATE), include_comments=False)
        assert "//" not in controller

    def test_tabs(self):
        controller = _controller(_component(state=COUNTER_STATE), indent_style="tabs")
        assert "\tid := uuid.New().String()" in controller


class TestPersistence:
    def test_factory(self):
        assert isinstance(get_persistence("memory"), MemoryPersistence)
        assert isinstance(get_persistence(PersistenceMode.EXTERNAL_KV), KeyValuePersistence)
        assert isinstance(get_persistence("external-db"), RepositoryPersistence)

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            get_persistence("files")

    def test_store_interface_is_always_emitted(self):
        for mode in PersistenceMode:
            controller = _controller(_component(state=COUNTER_STATE), persistence=mode)
            assert "type CounterStore interface {" in controller
            assert "func UseCounterStore(store CounterStore) {" in controller

    def test_memory_store_uses_one_lock(self):
        controller = _controller(_component(state=COUNTER_STATE))
        assert "mu     sync.RWMutex" in controller
        assert "var counterStore CounterStore = newMemoryCounterStore()" in controller

    def test_key_value_store(self):
        controller = _controller(_component(state=COUNTER_STATE), persistence="external-kv")
        assert 'counterKeyPrefix = "counter:"' in controller
        assert "24 * time.Hour" in controller
        assert "json.Marshal(state)" in controller
        assert "func UseCounterRedis(client *redis.Client) {" in controller

    def test_repository_store(self):
        controller = _controller(_component(state=COUNTER_STATE), persistence="external-db")
        assert "type CounterRepository interface {" in controller
        assert "GetState(id string) (*CounterState, error)" in controller
        assert "s.repo.SaveState(id, state)" in controller


class TestPropsStruct:
    def test_empty_without_props(self):
        assert props_struct(_component()) == ""

    def test_fields(self):
        component = _component(props=[{"name": "label", "type": "string", "required": True}, {"name": "size", "type": "number"}])
        struct = props_struct(component)
        assert "type CounterProps struct {" in struct
        assert '\tLabel string `json:"label"` // required' in struct
        assert '\tSize int `json:"size"`' in struct
