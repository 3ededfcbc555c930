"""Path Finder — enumerates every power → ground current path.

Breadth-first search from each power node over conductive edges only.
Each queued branch carries its own visited set so a path never repeats
a node, and a path is never longer than `max_path_length` nodes.

A branch that reaches ground is emitted as complete and not extended.
When it never crossed a load node it is flagged as a short circuit.

All paths are kept, including parallel ones through redundant wiring.
`max_path_count` is an opt-in ceiling on paths per power source for
densely meshed schematics; None (the default) means no ceiling.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable

from circuit_sim.engine.graph_builder import make_node_id, parse_node_id
from circuit_sim.schemas.graph import CircuitGraph, NodeType
from circuit_sim.schemas.schematic import PortEndpoint, Wire
from circuit_sim.schemas.simulation import CurrentPath, WireDirection

logger = logging.getLogger(__name__)

DEFAULT_MAX_PATH_LENGTH = 100


def find_current_paths(
    graph: CircuitGraph,
    power_node_id: str,
    max_path_length: int = DEFAULT_MAX_PATH_LENGTH,
    detect_short_circuits: bool = True,
    max_path_count: int | None = None,
) -> list[CurrentPath]:
    """Find all current paths from one power node to any ground node."""
    paths: list[CurrentPath] = []
    power_node = graph.nodes.get(power_node_id)
    if power_node is None:
        return paths

    voltage = power_node.source_voltage or 0.0
    ground_nodes = set(graph.ground_nodes)

    # (node, path nodes, path wire ids, visited, has_load)
    queue: deque[tuple[str, list[str], list[str], set[str], bool]] = deque(
        [(power_node_id, [power_node_id], [], {power_node_id}, False)]
    )

    while queue:
        current, path_nodes, path_wires, visited, has_load = queue.popleft()

        if current in ground_nodes:
            paths.append(
                CurrentPath(
                    nodes=path_nodes,
                    wire_ids=path_wires,
                    power_source=power_node_id,
                    voltage=voltage,
                    is_complete=True,
                    is_short_circuit=detect_short_circuits and not has_load,
                )
            )
            if max_path_count is not None and len(paths) >= max_path_count:
                logger.warning(
                    "Path ceiling of %d reached for %s; remaining branches skipped",
                    max_path_count,
                    power_node_id,
                )
                break
            continue

        if len(path_nodes) >= max_path_length:
            continue

        for edge in graph.edges.get(current, []):
            if not edge.conductance or edge.to in visited:
                continue

            target = graph.nodes.get(edge.to)
            reaches_load = target is not None and target.type == NodeType.LOAD
            queue.append(
                (
                    edge.to,
                    path_nodes + [edge.to],
                    path_wires + [edge.wire_id] if edge.wire_id else path_wires,
                    visited | {edge.to},
                    has_load or reaches_load,
                )
            )

    return paths


def find_all_circuit_paths(
    graph: CircuitGraph,
    max_path_length: int = DEFAULT_MAX_PATH_LENGTH,
    detect_short_circuits: bool = True,
    max_path_count: int | None = None,
) -> list[CurrentPath]:
    """Run `find_current_paths` for every power node and concatenate."""
    all_paths: list[CurrentPath] = []
    for power_node_id in graph.power_nodes:
        all_paths.extend(
            find_current_paths(
                graph,
                power_node_id,
                max_path_length=max_path_length,
                detect_short_circuits=detect_short_circuits,
                max_path_count=max_path_count,
            )
        )

    logger.debug(
        "Found %d path(s) from %d power node(s)",
        len(all_paths),
        len(graph.power_nodes),
    )
    return all_paths


# ═══════════════════════════════════════════════════════════
# Path Queries
# ═══════════════════════════════════════════════════════════


def _conducting(paths: Iterable[CurrentPath]) -> Iterable[CurrentPath]:
    """Complete paths that actually carry load current."""
    return (p for p in paths if p.is_complete and not p.is_short_circuit)


def get_powered_wires(paths: list[CurrentPath]) -> set[str]:
    powered: set[str] = set()
    for path in _conducting(paths):
        powered.update(path.wire_ids)
    return powered


def get_powered_nodes(paths: list[CurrentPath]) -> dict[str, float]:
    """Node id → highest voltage of any conducting path through it."""
    powered: dict[str, float] = {}
    for path in _conducting(paths):
        for node_id in path.nodes:
            if path.voltage > powered.get(node_id, 0.0):
                powered[node_id] = path.voltage
    return powered


def get_wire_current_direction(
    paths: list[CurrentPath],
    wire: Wire,
) -> WireDirection | None:
    """Direction of current in `wire` relative to its from → to endpoints.

    Decided by the first conducting path that uses the wire. None when
    no conducting path crosses it.
    """
    if not isinstance(wire.from_, PortEndpoint) or not isinstance(
        wire.to, PortEndpoint
    ):
        return None

    from_id = make_node_id(wire.from_.component_id, wire.from_.port_id)
    to_id = make_node_id(wire.to.component_id, wire.to.port_id)

    for path in _conducting(paths):
        if wire.id not in path.wire_ids:
            continue
        for a, b in zip(path.nodes, path.nodes[1:]):
            if a == from_id and b == to_id:
                return WireDirection.FORWARD
            if a == to_id and b == from_id:
                return WireDirection.REVERSE

    return None


def get_wire_directions(
    paths: list[CurrentPath],
    wires: Iterable[Wire],
) -> dict[str, WireDirection]:
    """Wire id → direction for every powered wire, for flow animation."""
    powered = get_powered_wires(paths)
    directions: dict[str, WireDirection] = {}
    for wire in wires:
        if wire.id not in powered:
            continue
        direction = get_wire_current_direction(paths, wire)
        if direction is not None:
            directions[wire.id] = direction
    return directions


def find_short_circuits(paths: list[CurrentPath]) -> list[CurrentPath]:
    return [p for p in paths if p.is_complete and p.is_short_circuit]


def is_component_powered(paths: list[CurrentPath], component_id: str) -> bool:
    """True if any conducting path passes through one of the component's ports."""
    prefix = f"{component_id}:"
    for path in _conducting(paths):
        for node_id in path.nodes:
            if node_id.startswith(prefix):
                return True
    return False


def get_powered_components(
    paths: list[CurrentPath], graph: CircuitGraph | None = None
) -> set[str]:
    """Ids of components with a port on a conducting path.

    With `graph` the owning component is read from the node itself, so
    component ids containing ':' resolve correctly.
    """
    powered: set[str] = set()
    for path in _conducting(paths):
        for node_id in path.nodes:
            node = graph.nodes.get(node_id) if graph is not None else None
            if node is not None:
                powered.add(node.component_id)
            else:
                powered.add(parse_node_id(node_id)[0])
    return powered
