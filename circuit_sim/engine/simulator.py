"""Circuit Simulator — one tick of the topological simulation.

Pipeline:
  1. Build the per-port circuit graph
  2. Evaluate switch states from the runtime snapshot
  3. Apply them to a copy of the graph
  4. Enumerate power → ground paths
  5. Propagate voltage
  6. Determine powered components
  7. Powered wires and their current direction
  8. Short circuits
  9. Nets (physical wiring groups) with their voltages

Pure and synchronous. Nothing is cached between calls, so identical
inputs always give identical results. `simulate_circuit` never raises:
any failure comes back as a result with success=False and the message
in `error`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel

from circuit_sim.config import get_settings
from circuit_sim.engine.graph_builder import build_circuit_graph, make_node_id
from circuit_sim.engine.net_builder import assign_net_voltages, build_nets
from circuit_sim.engine.path_finder import (
    find_all_circuit_paths,
    get_powered_wires,
    get_wire_directions,
)
from circuit_sim.engine.switch_evaluator import (
    apply_switch_states_to_graph,
    evaluate_switch_states,
)
from circuit_sim.engine.voltage import (
    detect_short_circuits,
    determine_powered_components,
    propagate_voltage,
)
from circuit_sim.schemas.runtime import RuntimeState
from circuit_sim.schemas.schematic import Component, Junction, Wire
from circuit_sim.schemas.simulation import (
    SimulationOptions,
    SimulationResult,
    WireDirection,
)

logger = logging.getLogger(__name__)


def _coerce(model: type[BaseModel], items: Iterable[Any]) -> list[Any]:
    """Accept model instances or plain dicts (e.g. decoded JSON)."""
    return [
        item if isinstance(item, model) else model.model_validate(item)
        for item in items
    ]


def _resolve_options(
    options: SimulationOptions | Mapping[str, Any] | None,
) -> SimulationOptions:
    settings = get_settings()
    if options is None:
        options = SimulationOptions()
    elif not isinstance(options, SimulationOptions):
        options = SimulationOptions.model_validate(options)

    return SimulationOptions(
        max_path_length=(
            options.max_path_length
            if options.max_path_length is not None
            else settings.max_path_length
        ),
        detect_short_circuits=(
            options.detect_short_circuits
            if options.detect_short_circuits is not None
            else settings.detect_short_circuits
        ),
        max_path_count=(
            options.max_path_count
            if options.max_path_count is not None
            else settings.max_path_count
        ),
    )


def simulate_circuit(
    components: Iterable[Component | Mapping[str, Any]],
    wires: Iterable[Wire | Mapping[str, Any]],
    junctions: Iterable[Junction | Mapping[str, Any]] = (),
    runtime_state: RuntimeState | Mapping[str, Any] | None = None,
    options: SimulationOptions | Mapping[str, Any] | None = None,
) -> SimulationResult:
    """Run one complete simulation tick. Never raises.

    Callers must check `success` before trusting any other field.
    """
    try:
        components = _coerce(Component, components)
        wires = _coerce(Wire, wires)
        junctions = _coerce(Junction, junctions)
        if runtime_state is None:
            runtime_state = RuntimeState()
        elif not isinstance(runtime_state, RuntimeState):
            runtime_state = RuntimeState.model_validate(runtime_state)
        opts = _resolve_options(options)

        base_graph = build_circuit_graph(components, wires, junctions)
        switch_states = evaluate_switch_states(components, runtime_state)
        graph = apply_switch_states_to_graph(base_graph, switch_states)

        current_paths = find_all_circuit_paths(
            graph,
            max_path_length=opts.max_path_length,
            detect_short_circuits=opts.detect_short_circuits,
            max_path_count=opts.max_path_count,
        )

        node_voltages = propagate_voltage(graph, current_paths)
        powered_components = determine_powered_components(
            node_voltages, current_paths, components
        )
        powered_wires = get_powered_wires(current_paths)
        wire_directions = get_wire_directions(current_paths, wires)
        short_circuits = detect_short_circuits(current_paths)

        nets = build_nets(
            wires,
            {c.id: c for c in components},
            {j.id: j for j in junctions},
        )
        assign_net_voltages(nets, node_voltages)

        if short_circuits:
            logger.warning("Detected %d short circuit path(s)", len(short_circuits))

        return SimulationResult(
            node_voltages=node_voltages,
            current_paths=current_paths,
            powered_components=powered_components,
            powered_wires=powered_wires,
            wire_directions=wire_directions,
            short_circuits=short_circuits,
            switch_states=switch_states,
            nets=nets,
            graph=graph,
            success=True,
        )
    except Exception as exc:
        logger.error("Simulation failed: %s", exc)
        return SimulationResult(
            success=False,
            error=str(exc) or type(exc).__name__,
        )


# ─── Result Queries ───


def get_port_voltage(result: SimulationResult, component_id: str, port_id: str) -> float:
    return result.node_voltages.get(make_node_id(component_id, port_id), 0.0)


def check_component_powered(result: SimulationResult, component_id: str) -> bool:
    return component_id in result.powered_components


def is_wire_powered(result: SimulationResult, wire_id: str) -> bool:
    return wire_id in result.powered_wires


def get_wire_direction(result: SimulationResult, wire_id: str) -> WireDirection | None:
    return result.wire_directions.get(wire_id)


def get_component_voltages(
    result: SimulationResult, component: Component
) -> dict[str, float]:
    """Port id → voltage for every port of `component`."""
    return {
        port.id: get_port_voltage(result, component.id, port.id)
        for port in component.ports
    }
