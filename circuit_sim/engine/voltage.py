"""Voltage propagation over discovered current paths.

Ideal-source approximation, not a resistive solve: every node on a
conducting path sits at that path's supply voltage, and where supplies
converge the highest one wins.
"""

from __future__ import annotations

from collections.abc import Iterable

from circuit_sim.engine.graph_builder import POWER_BLOCK_TYPES, make_node_id
from circuit_sim.engine.path_finder import find_short_circuits
from circuit_sim.schemas.graph import CircuitGraph
from circuit_sim.schemas.schematic import Component
from circuit_sim.schemas.simulation import CurrentPath, ShortCircuit


def propagate_voltage(
    graph: CircuitGraph,
    paths: list[CurrentPath],
) -> dict[str, float]:
    """Assign a voltage to every node of the graph (0 V when unreached)."""
    node_voltages = {node_id: 0.0 for node_id in graph.nodes}

    for power_node_id in graph.power_nodes:
        node = graph.nodes.get(power_node_id)
        if node is not None and node.source_voltage:
            node_voltages[power_node_id] = node.source_voltage

    for path in paths:
        if not path.is_complete or path.is_short_circuit:
            continue
        for node_id in path.nodes:
            if path.voltage > node_voltages.get(node_id, 0.0):
                node_voltages[node_id] = path.voltage

    return node_voltages


def determine_powered_components(
    node_voltages: dict[str, float],
    paths: list[CurrentPath],
    components: Iterable[Component],
) -> set[str]:
    """Components (other than supplies and grounds) that are both on a
    conducting path and carry voltage on at least one port."""
    on_paths = {
        node_id
        for p in paths
        if p.is_complete and not p.is_short_circuit
        for node_id in p.nodes
    }
    powered: set[str] = set()

    for component in components:
        if component.type in POWER_BLOCK_TYPES:
            continue
        port_nodes = [make_node_id(component.id, port.id) for port in component.ports]
        if not any(node_id in on_paths for node_id in port_nodes):
            continue
        if any(node_voltages.get(node_id, 0.0) > 0 for node_id in port_nodes):
            powered.add(component.id)

    return powered


def detect_short_circuits(paths: list[CurrentPath]) -> list[ShortCircuit]:
    return [
        ShortCircuit(path=p.nodes, power_source=p.power_source, voltage=p.voltage)
        for p in find_short_circuits(paths)
    ]
