"""Circuit Graph Builder — Schematic → traversable per-port graph.

Every component port becomes a node (`componentId:portId`). Internal
component connections and wires become edges, always stored as a
forward/reverse pair so the graph behaves as undirected while staying
an adjacency list.

Switch edges start non-conductive; their state is resolved later by
the switch evaluator. Wires that reference missing components or ports
are dropped, not reported.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from copy import deepcopy

from circuit_sim.schemas.graph import CircuitEdge, CircuitGraph, CircuitNode, NodeType
from circuit_sim.schemas.schematic import (
    Component,
    Junction,
    PortEndpoint,
    PortType,
    Wire,
)

logger = logging.getLogger(__name__)


SWITCH_BLOCK_TYPES = frozenset({"plc_out", "button"})
POWER_BLOCK_TYPES = frozenset({"power_24v", "power_12v", "gnd", "powersource"})

FIXED_NODE_TYPES: dict[str, NodeType] = {
    "power_24v": NodeType.POWER,
    "power_12v": NodeType.POWER,
    "gnd": NodeType.GROUND,
    "plc_out": NodeType.SWITCH,
    "button": NodeType.SWITCH,
    "led": NodeType.LOAD,
    "scope": NodeType.LOAD,
    "plc_in": NodeType.INPUT,
}

FIXED_SOURCE_VOLTAGES: dict[str, float] = {
    "power_24v": 24.0,
    "power_12v": 12.0,
}


# ─── Node IDs ───


def make_node_id(component_id: str, port_id: str) -> str:
    return f"{component_id}:{port_id}"


def parse_node_id(node_id: str) -> tuple[str, str]:
    """Split a node id back into (component_id, port_id)."""
    component_id, _, port_id = node_id.partition(":")
    return component_id, port_id


# ─── Classification ───


def is_switch_block(block_type: str) -> bool:
    return block_type in SWITCH_BLOCK_TYPES


def _node_type(component: Component, port_type: PortType) -> NodeType:
    if component.type == "powersource":
        if component.polarity in ("ground", "negative"):
            return NodeType.GROUND
        return NodeType.POWER

    fixed = FIXED_NODE_TYPES.get(component.type)
    if fixed is not None:
        return fixed

    return NodeType.LOAD if port_type == PortType.INPUT else NodeType.JUNCTION


def _source_voltage(component: Component) -> float | None:
    if component.type == "powersource":
        if component.polarity in ("ground", "negative"):
            return None
        return float(component.voltage or 0.0)
    return FIXED_SOURCE_VOLTAGES.get(component.type)


# ─── Edge Helpers ───


def _add_edge_pair(
    edges: dict[str, list[CircuitEdge]],
    from_id: str,
    to_id: str,
    *,
    conductance: bool,
    wire_id: str | None = None,
    switch_component_id: str | None = None,
) -> None:
    is_switch = switch_component_id is not None
    edges[from_id].append(
        CircuitEdge(
            from_=from_id,
            to=to_id,
            wire_id=wire_id,
            conductance=conductance,
            is_switch=is_switch,
            switch_component_id=switch_component_id,
        )
    )
    edges[to_id].append(
        CircuitEdge(
            from_=to_id,
            to=from_id,
            wire_id=wire_id,
            conductance=conductance,
            is_switch=is_switch,
            switch_component_id=switch_component_id,
        )
    )


def _add_internal_edges(
    component: Component, edges: dict[str, list[CircuitEdge]]
) -> None:
    if len(component.ports) < 2:
        return

    inputs = [p for p in component.ports if p.type == PortType.INPUT]
    outputs = [p for p in component.ports if p.type == PortType.OUTPUT]

    if is_switch_block(component.type):
        # One contact per switch, open until a switch state is applied
        if inputs and outputs:
            _add_edge_pair(
                edges,
                make_node_id(component.id, inputs[0].id),
                make_node_id(component.id, outputs[0].id),
                conductance=False,
                switch_component_id=component.id,
            )
        return

    for in_port in inputs:
        for out_port in outputs:
            _add_edge_pair(
                edges,
                make_node_id(component.id, in_port.id),
                make_node_id(component.id, out_port.id),
                conductance=True,
            )


# ═══════════════════════════════════════════════════════════
# Graph Building
# ═══════════════════════════════════════════════════════════


def build_circuit_graph(
    components: Iterable[Component],
    wires: Iterable[Wire],
    junctions: Iterable[Junction] = (),
) -> CircuitGraph:
    """Build the circuit graph for one simulation tick.

    Junctions are accepted for signature parity with the net builder;
    only port-to-port wires produce conductive edges.
    """
    graph = CircuitGraph()
    nodes = graph.nodes
    edges = graph.edges

    for component in components:
        for port in component.ports:
            node_id = make_node_id(component.id, port.id)
            node_type = _node_type(component, port.type)
            nodes[node_id] = CircuitNode(
                id=node_id,
                component_id=component.id,
                port_id=port.id,
                type=node_type,
                source_voltage=_source_voltage(component),
            )
            edges[node_id] = []

            if node_type == NodeType.POWER:
                graph.power_nodes.append(node_id)
            elif node_type == NodeType.GROUND:
                graph.ground_nodes.append(node_id)
            elif node_type == NodeType.SWITCH:
                graph.switch_nodes.append(node_id)
            elif node_type == NodeType.LOAD:
                graph.load_nodes.append(node_id)

        _add_internal_edges(component, edges)

    dropped = 0
    for wire in wires:
        if not isinstance(wire.from_, PortEndpoint) or not isinstance(
            wire.to, PortEndpoint
        ):
            continue

        from_id = make_node_id(wire.from_.component_id, wire.from_.port_id)
        to_id = make_node_id(wire.to.component_id, wire.to.port_id)

        if from_id not in nodes or to_id not in nodes:
            dropped += 1
            continue

        _add_edge_pair(edges, from_id, to_id, conductance=True, wire_id=wire.id)

    if dropped:
        logger.debug("Dropped %d wire(s) with unresolved endpoints", dropped)

    logger.debug(
        "Built circuit graph: %d nodes, %d power, %d ground",
        len(nodes),
        len(graph.power_nodes),
        len(graph.ground_nodes),
    )
    return graph


# ─── Queries ───


def get_adjacent_nodes(
    graph: CircuitGraph, node_id: str, conductive_only: bool = True
) -> list[str]:
    """Return ids of nodes reachable over one edge from `node_id`."""
    return [
        edge.to
        for edge in graph.edges.get(node_id, [])
        if not conductive_only or edge.conductance
    ]


def get_edge(graph: CircuitGraph, from_id: str, to_id: str) -> CircuitEdge | None:
    for edge in graph.edges.get(from_id, []):
        if edge.to == to_id:
            return edge
    return None


def clone_graph(graph: CircuitGraph) -> CircuitGraph:
    """Full value copy, safe to mutate without touching the original."""
    return deepcopy(graph)
