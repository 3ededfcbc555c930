"""Switch State Evaluator — decides whether each contact is open or closed.

Precedence, checked in order until one resolver answers:
  1. Manual override (componentId in runtime.manual_overrides)
  2. Block source: PLC coil for plc_out, press state for button
  3. Not energized

NO contacts close while energized, NC contacts open while energized.
A manual override bypasses NO/NC: True forces the contact closed,
False forces it open.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from circuit_sim.engine.graph_builder import clone_graph
from circuit_sim.plc.address import parse_coil_address
from circuit_sim.schemas.graph import CircuitGraph
from circuit_sim.schemas.runtime import (
    RuntimeState,
    SwitchState,
    SwitchStateMap,
    SwitchStateSource,
)
from circuit_sim.schemas.schematic import Component

logger = logging.getLogger(__name__)


def create_empty_runtime_state() -> RuntimeState:
    return RuntimeState()


def create_empty_switch_state_map() -> SwitchStateMap:
    return SwitchStateMap()


def is_normally_open_contact(contact_config: str) -> bool:
    """'a' contacts are NO, 'b' contacts are NC. Mixed configs such as
    '1a1b' take their primary behaviour from the 'a' contact."""
    return "a" in contact_config


def _contact_is_open(is_normally_open: bool, energized: bool) -> bool:
    return not energized if is_normally_open else energized


# ─── Resolvers ───

Resolver = Callable[[Component, RuntimeState], SwitchState | None]


def _manual_override(component: Component, runtime: RuntimeState) -> SwitchState | None:
    if component.id not in runtime.manual_overrides:
        return None
    forced = runtime.manual_overrides[component.id]
    return SwitchState(
        component_id=component.id,
        is_open=not forced,
        state_source=SwitchStateSource.MANUAL,
        is_normally_open=_is_normally_open(component),
        is_energized=forced,
    )


def _plc_coil(component: Component, runtime: RuntimeState) -> SwitchState | None:
    if component.type != "plc_out":
        return None
    address = parse_coil_address(component.address)
    coil = runtime.plc_outputs.get(address, False)
    effective = coil != component.inverted
    return SwitchState(
        component_id=component.id,
        is_open=_contact_is_open(component.normally_open, effective),
        state_source=SwitchStateSource.PLC,
        is_normally_open=component.normally_open,
        is_energized=effective,
    )


def _button_press(component: Component, runtime: RuntimeState) -> SwitchState | None:
    if component.type != "button":
        return None
    is_no = is_normally_open_contact(component.contact_config)
    pressed = runtime.button_states.get(component.id)
    if pressed is None:
        pressed = bool(component.pressed)
    return SwitchState(
        component_id=component.id,
        is_open=_contact_is_open(is_no, pressed),
        state_source=SwitchStateSource.BUTTON,
        is_normally_open=is_no,
        is_energized=pressed,
    )


def _de_energized(component: Component) -> SwitchState:
    # Only reached by contact types without a dedicated resolver
    is_no = _is_normally_open(component)
    return SwitchState(
        component_id=component.id,
        is_open=_contact_is_open(is_no, False),
        state_source=SwitchStateSource.RELAY,
        is_normally_open=is_no,
        is_energized=False,
    )


def _is_normally_open(component: Component) -> bool:
    if component.type == "button":
        return is_normally_open_contact(component.contact_config)
    return component.normally_open


# Order is precedence
RESOLVERS: list[Resolver] = [
    _manual_override,
    _plc_coil,
    _button_press,
]

SWITCH_TYPES = frozenset({"plc_out", "button"})


def evaluate_switch(component: Component, runtime_state: RuntimeState) -> SwitchState:
    """Evaluate a single switch component through the precedence chain."""
    for resolve in RESOLVERS:
        state = resolve(component, runtime_state)
        if state is not None:
            return state
    return _de_energized(component)


def evaluate_switch_states(
    components: Iterable[Component],
    runtime_state: RuntimeState,
) -> SwitchStateMap:
    """Evaluate every switch-like component (plc_out, button)."""
    states: dict[str, SwitchState] = {}
    for component in components:
        if component.type not in SWITCH_TYPES:
            continue
        states[component.id] = evaluate_switch(component, runtime_state)

    logger.debug(
        "Evaluated %d switch(es), %d closed",
        len(states),
        sum(1 for s in states.values() if not s.is_open),
    )
    return SwitchStateMap(states=states)


# ═══════════════════════════════════════════════════════════
# Graph Application
# ═══════════════════════════════════════════════════════════


def apply_switch_states_to_graph(
    graph: CircuitGraph,
    switch_states: SwitchStateMap,
) -> CircuitGraph:
    """Return a copy of `graph` with switch edge conductance resolved.

    The input graph is left untouched.
    """
    applied = clone_graph(graph)
    states = switch_states.states

    for edge_list in applied.edges.values():
        for edge in edge_list:
            if not edge.is_switch or edge.switch_component_id is None:
                continue
            state = states.get(edge.switch_component_id)
            if state is not None:
                edge.conductance = not state.is_open

    return applied


def get_switch_conductance(switch_states: SwitchStateMap, component_id: str) -> bool:
    """True when the switch is closed. Unknown switches read as open."""
    state = switch_states.states.get(component_id)
    return not state.is_open if state is not None else False


def is_switch_energized(switch_states: SwitchStateMap, component_id: str) -> bool:
    state = switch_states.states.get(component_id)
    return state.is_energized if state is not None else False


# ─── Runtime State Updates ───
# Each helper returns a new RuntimeState and leaves the input as it was.


def set_button_state(
    runtime_state: RuntimeState, component_id: str, pressed: bool
) -> RuntimeState:
    button_states = {**runtime_state.button_states, component_id: pressed}
    return runtime_state.model_copy(update={"button_states": button_states})


def set_plc_output(runtime_state: RuntimeState, address: int, value: bool) -> RuntimeState:
    plc_outputs = {**runtime_state.plc_outputs, address: value}
    return runtime_state.model_copy(update={"plc_outputs": plc_outputs})


def set_manual_override(
    runtime_state: RuntimeState, component_id: str, value: bool | None
) -> RuntimeState:
    """Force a switch closed (True) or open (False). None clears it."""
    overrides = dict(runtime_state.manual_overrides)
    if value is None:
        overrides.pop(component_id, None)
    else:
        overrides[component_id] = value
    return runtime_state.model_copy(update={"manual_overrides": overrides})


def sync_from_modbus(
    runtime_state: RuntimeState, coil_values: dict[int, bool]
) -> RuntimeState:
    """Replace PLC outputs with a fresh coil snapshot from the Modbus link."""
    return runtime_state.model_copy(update={"plc_outputs": dict(coil_values)})
