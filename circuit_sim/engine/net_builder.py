"""Net Builder — union-find grouping of wired endpoints.

A net is a maximal set of ports and junctions joined by wires. Switch
state plays no part here: nets describe physical wiring, not where
current flows.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from circuit_sim.schemas.schematic import (
    Component,
    Junction,
    PortEndpoint,
    Wire,
    WireEndpoint,
)
from circuit_sim.schemas.simulation import Net


def endpoint_key(endpoint: WireEndpoint) -> str:
    if isinstance(endpoint, PortEndpoint):
        return f"port:{endpoint.component_id}:{endpoint.port_id}"
    return f"junction:{endpoint.junction_id}"


class UnionFind:
    """Disjoint sets over string keys, path compression + union by rank."""

    def __init__(self) -> None:
        self.parent: dict[str, str] = {}
        self.rank: dict[str, int] = {}

    def _make_set(self, x: str) -> None:
        if x not in self.parent:
            self.parent[x] = x
            self.rank[x] = 0

    def find(self, x: str) -> str:
        """Root of x. Unknown keys become singleton sets."""
        self._make_set(x)
        root = x
        while self.parent[root] != root:
            root = self.parent[root]

        # Path compression
        while x != root:
            next_x = self.parent[x]
            self.parent[x] = root
            x = next_x
        return root

    def union(self, x: str, y: str) -> None:
        root_x = self.find(x)
        root_y = self.find(y)
        if root_x == root_y:
            return

        rank_x = self.rank[root_x]
        rank_y = self.rank[root_y]
        if rank_x < rank_y:
            self.parent[root_x] = root_y
        elif rank_x > rank_y:
            self.parent[root_y] = root_x
        else:
            self.parent[root_y] = root_x
            self.rank[root_x] = rank_x + 1

    def groups(self) -> dict[str, set[str]]:
        """Root → members, in first-registration order."""
        grouped: dict[str, set[str]] = {}
        for key in list(self.parent):
            grouped.setdefault(self.find(key), set()).add(key)
        return grouped


def _endpoint_exists(
    endpoint: WireEndpoint,
    components: Mapping[str, Component],
    junctions: Mapping[str, Junction],
) -> bool:
    if isinstance(endpoint, PortEndpoint):
        return endpoint.component_id in components
    return endpoint.junction_id in junctions


def build_nets(
    wires: Iterable[Wire],
    components: Mapping[str, Component],
    junctions: Mapping[str, Junction],
) -> list[Net]:
    """Group wired endpoints into nets. Singletons are dropped."""
    uf = UnionFind()

    for component in components.values():
        for port in component.ports:
            uf.find(f"port:{component.id}:{port.id}")
    for junction in junctions.values():
        uf.find(f"junction:{junction.id}")

    for wire in wires:
        if _endpoint_exists(wire.from_, components, junctions) and _endpoint_exists(
            wire.to, components, junctions
        ):
            uf.union(endpoint_key(wire.from_), endpoint_key(wire.to))

    return [
        Net(id=root, members=members)
        for root, members in uf.groups().items()
        if len(members) >= 2
    ]


def assign_net_voltages(nets: list[Net], node_voltages: Mapping[str, float]) -> None:
    """Set each net's voltage to the highest voltage among its port members.

    Junction members carry no node of their own and are skipped.
    """
    for net in nets:
        voltage = 0.0
        for member in net.members:
            kind, _, node_id = member.partition(":")
            if kind == "port":
                voltage = max(voltage, node_voltages.get(node_id, 0.0))
        net.voltage = voltage
