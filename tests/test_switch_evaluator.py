"""Unit tests for switch state evaluation and graph application."""

import pytest

from circuit_sim.engine.graph_builder import build_circuit_graph, get_edge
from circuit_sim.engine.switch_evaluator import (
    apply_switch_states_to_graph,
    create_empty_runtime_state,
    create_empty_switch_state_map,
    evaluate_switch,
    evaluate_switch_states,
    get_switch_conductance,
    is_normally_open_contact,
    is_switch_energized,
    set_button_state,
    set_manual_override,
    set_plc_output,
    sync_from_modbus,
)
from circuit_sim.schemas.runtime import RuntimeState, SwitchStateSource
from circuit_sim.schemas.schematic import Component, Port


# ─── Fixtures ───


def _plc_out(
    comp_id: str = "Q1",
    address: str | int | None = "Y:0",
    normally_open: bool = True,
    inverted: bool = False,
) -> Component:
    return Component(
        id=comp_id,
        type="plc_out",
        ports=[Port(id="in", type="input"), Port(id="out", type="output")],
        address=address,
        normally_open=normally_open,
        inverted=inverted,
    )


def _button(
    comp_id: str = "B1",
    contact_config: str = "1a",
    pressed: bool | None = None,
) -> Component:
    return Component(
        id=comp_id,
        type="button",
        ports=[Port(id="in", type="input"), Port(id="out", type="output")],
        contact_config=contact_config,
        pressed=pressed,
    )


def _runtime(**kwargs) -> RuntimeState:
    return RuntimeState(**kwargs)


# ═══════════════════════════════════════════════════════════
# PLC Output Contacts
# ═══════════════════════════════════════════════════════════


class TestPlcOutSwitch:
    def test_no_contact_closes_when_energized(self):
        state = evaluate_switch(_plc_out(), _runtime(plc_outputs={0: True}))
        assert state.is_open is False
        assert state.is_energized is True
        assert state.is_normally_open is True
        assert state.state_source == SwitchStateSource.PLC

    def test_no_contact_open_when_coil_off(self):
        state = evaluate_switch(_plc_out(), _runtime(plc_outputs={0: False}))
        assert state.is_open is True
        assert state.is_energized is False

    def test_nc_contact_opens_when_energized(self):
        state = evaluate_switch(
            _plc_out(normally_open=False), _runtime(plc_outputs={0: True})
        )
        assert state.is_open is True
        assert state.is_normally_open is False

    def test_nc_contact_closed_when_coil_off(self):
        state = evaluate_switch(_plc_out(normally_open=False), _runtime())
        assert state.is_open is False

    def test_missing_coil_defaults_to_off(self):
        state = evaluate_switch(_plc_out(address="Y:7"), _runtime(plc_outputs={0: True}))
        assert state.is_energized is False
        assert state.is_open is True

    def test_inverted_flips_coil_value(self):
        state = evaluate_switch(_plc_out(inverted=True), _runtime(plc_outputs={0: False}))
        assert state.is_energized is True
        assert state.is_open is False

        state = evaluate_switch(_plc_out(inverted=True), _runtime(plc_outputs={0: True}))
        assert state.is_energized is False
        assert state.is_open is True

    @pytest.mark.parametrize(
        "address, coil",
        [("Y:16", 16), ("C:0x0001", 1), ("M0042", 42), (5, 5), (None, 0), ("none", 0)],
    )
    def test_address_resolution(self, address, coil):
        state = evaluate_switch(_plc_out(address=address), _runtime(plc_outputs={coil: True}))
        assert state.is_energized is True


# ═══════════════════════════════════════════════════════════
# Buttons
# ═══════════════════════════════════════════════════════════


class TestButtonSwitch:
    @pytest.mark.parametrize(
        "config, expected",
        [("1a", True), ("2a", True), ("1b", False), ("2b", False), ("1a1b", True)],
    )
    def test_contact_config(self, config, expected):
        assert is_normally_open_contact(config) is expected

    def test_no_button_closes_when_pressed(self):
        state = evaluate_switch(_button(), _runtime(button_states={"B1": True}))
        assert state.is_open is False
        assert state.state_source == SwitchStateSource.BUTTON

    def test_nc_button_opens_when_pressed(self):
        state = evaluate_switch(_button(contact_config="1b", pressed=True), _runtime())
        assert state.is_open is True
        assert state.is_normally_open is False
        assert state.is_energized is True

    def test_nc_button_closed_at_rest(self):
        state = evaluate_switch(_button(contact_config="1b"), _runtime())
        assert state.is_open is False

    def test_runtime_state_beats_static_pressed_flag(self):
        state = evaluate_switch(
            _button(pressed=True), _runtime(button_states={"B1": False})
        )
        assert state.is_energized is False
        assert state.is_open is True

    def test_static_pressed_flag_used_without_runtime_state(self):
        state = evaluate_switch(_button(pressed=True), _runtime())
        assert state.is_energized is True
        assert state.is_open is False


# ═══════════════════════════════════════════════════════════
# Precedence
# ═══════════════════════════════════════════════════════════


class TestPrecedence:
    def test_manual_override_closes_regardless_of_plc(self):
        comp = _plc_out(normally_open=False)
        state = evaluate_switch(
            comp, _runtime(plc_outputs={0: True}, manual_overrides={"Q1": True})
        )
        assert state.is_open is False
        assert state.is_energized is True
        assert state.state_source == SwitchStateSource.MANUAL
        assert state.is_normally_open is False

    def test_manual_override_opens_regardless_of_plc(self):
        state = evaluate_switch(
            _plc_out(), _runtime(plc_outputs={0: True}, manual_overrides={"Q1": False})
        )
        assert state.is_open is True
        assert state.is_energized is False

    def test_manual_override_beats_button_press(self):
        state = evaluate_switch(
            _button(), _runtime(button_states={"B1": True}, manual_overrides={"B1": False})
        )
        assert state.is_open is True
        assert state.state_source == SwitchStateSource.MANUAL

    def test_unresolved_contact_type_defaults_to_de_energized(self):
        relay = Component(
            id="K1",
            type="relay",
            ports=[Port(id="in", type="input"), Port(id="out", type="output")],
        )
        state = evaluate_switch(relay, _runtime())
        assert state.is_energized is False
        assert state.is_open is True
        assert state.state_source == SwitchStateSource.RELAY


# ═══════════════════════════════════════════════════════════
# Evaluation Over Components
# ═══════════════════════════════════════════════════════════


class TestEvaluateSwitchStates:
    def test_only_switch_components_evaluated(self):
        led = Component(id="L1", type="led", ports=[Port(id="a", type="input")])
        states = evaluate_switch_states([_plc_out(), _button(), led], _runtime())
        assert set(states.states) == {"Q1", "B1"}

    def test_empty_defaults(self):
        assert create_empty_runtime_state() == RuntimeState()
        assert create_empty_switch_state_map().states == {}

    def test_conductance_and_energized_lookups(self):
        states = evaluate_switch_states([_plc_out()], _runtime(plc_outputs={0: True}))
        assert get_switch_conductance(states, "Q1") is True
        assert is_switch_energized(states, "Q1") is True
        assert get_switch_conductance(states, "missing") is False
        assert is_switch_energized(states, "missing") is False


# ═══════════════════════════════════════════════════════════
# Graph Application
# ═══════════════════════════════════════════════════════════


class TestApplySwitchStates:
    def test_closed_switch_conducts_both_ways(self):
        comp = _plc_out()
        graph = build_circuit_graph([comp], [])
        states = evaluate_switch_states([comp], _runtime(plc_outputs={0: True}))
        applied = apply_switch_states_to_graph(graph, states)

        assert get_edge(applied, "Q1:in", "Q1:out").conductance is True
        assert get_edge(applied, "Q1:out", "Q1:in").conductance is True

    def test_pressed_nc_button_edges_not_conductive(self):
        comp = _button(contact_config="1b", pressed=True)
        graph = build_circuit_graph([comp], [])
        applied = apply_switch_states_to_graph(
            graph, evaluate_switch_states([comp], _runtime())
        )

        assert get_edge(applied, "B1:in", "B1:out").conductance is False
        assert get_edge(applied, "B1:out", "B1:in").conductance is False

    def test_original_graph_not_mutated(self):
        comp = _plc_out()
        graph = build_circuit_graph([comp], [])
        before = graph.model_copy(deep=True)

        apply_switch_states_to_graph(
            graph, evaluate_switch_states([comp], _runtime(plc_outputs={0: True}))
        )

        assert graph == before
        assert get_edge(graph, "Q1:in", "Q1:out").conductance is False

    def test_switch_without_state_stays_open(self):
        graph = build_circuit_graph([_plc_out()], [])
        applied = apply_switch_states_to_graph(graph, create_empty_switch_state_map())
        assert get_edge(applied, "Q1:in", "Q1:out").conductance is False


# ═══════════════════════════════════════════════════════════
# Runtime State Updates
# ═══════════════════════════════════════════════════════════


class TestRuntimeStateUpdates:
    def test_set_button_state_returns_new_state(self):
        original = _runtime()
        updated = set_button_state(original, "B1", True)
        assert updated.button_states == {"B1": True}
        assert original.button_states == {}

    def test_set_plc_output(self):
        updated = set_plc_output(_runtime(plc_outputs={1: True}), 2, True)
        assert updated.plc_outputs == {1: True, 2: True}

    def test_set_and_clear_manual_override(self):
        forced = set_manual_override(_runtime(), "Q1", False)
        assert forced.manual_overrides == {"Q1": False}

        cleared = set_manual_override(forced, "Q1", None)
        assert cleared.manual_overrides == {}
        assert forced.manual_overrides == {"Q1": False}

    def test_sync_from_modbus_replaces_outputs(self):
        state = _runtime(plc_outputs={0: True}, button_states={"B1": True})
        coils = {3: True}
        synced = sync_from_modbus(state, coils)

        assert synced.plc_outputs == {3: True}
        assert synced.button_states == {"B1": True}
        coils[4] = True
        assert synced.plc_outputs == {3: True}
