"""Connection Validator — rule checks applied when a wire is drawn.

Deterministic, never raises. An invalid connection is reported through
`ConnectionValidationResult(valid=False, reason=...)` and never reaches
the circuit graph.

Checks, in order:
  1. Port connected to itself
  2. Two ports on the same component
  3. Source and target components (or junctions) exist
  4. Source and target ports exist
  5. Port directions compatible
  6. Wire not already present (either direction)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from circuit_sim.engine.net_builder import endpoint_key
from circuit_sim.schemas.schematic import (
    Component,
    Junction,
    JunctionEndpoint,
    PortEndpoint,
    PortType,
    Wire,
    WireEndpoint,
)
from circuit_sim.schemas.validation import ConnectionValidationResult

MAX_CONNECTIONS_PER_PORT = 100


def _invalid(reason: str) -> ConnectionValidationResult:
    return ConnectionValidationResult(valid=False, reason=reason)


def get_port_type(component: Component, port_id: str) -> PortType | None:
    port = component.get_port(port_id)
    return port.type if port is not None else None


def are_port_types_compatible(from_type: PortType, to_type: PortType) -> bool:
    """Bidirectional ports connect to anything; otherwise output ↔ input only."""
    if PortType.BIDIRECTIONAL in (from_type, to_type):
        return True
    return {from_type, to_type} == {PortType.INPUT, PortType.OUTPUT}


def wire_exists(wires: Iterable[Wire], a: WireEndpoint, b: WireEndpoint) -> bool:
    key_a = endpoint_key(a)
    key_b = endpoint_key(b)
    for wire in wires:
        keys = (endpoint_key(wire.from_), endpoint_key(wire.to))
        if keys == (key_a, key_b) or keys == (key_b, key_a):
            return True
    return False


def _missing_owner(
    endpoint: WireEndpoint,
    role: str,
    components: Mapping[str, Component],
    junctions: Mapping[str, Junction],
) -> ConnectionValidationResult | None:
    """Reason when the endpoint's component or junction does not exist."""
    if isinstance(endpoint, JunctionEndpoint):
        if endpoint.junction_id not in junctions:
            return _invalid(f"{role} junction not found: {endpoint.junction_id}")
        return None
    if endpoint.component_id not in components:
        return _invalid(f"{role} component not found: {endpoint.component_id}")
    return None


def _endpoint_port_type(
    endpoint: WireEndpoint, components: Mapping[str, Component]
) -> PortType | None:
    # Junctions behave as bidirectional ports
    if isinstance(endpoint, JunctionEndpoint):
        return PortType.BIDIRECTIONAL
    return get_port_type(components[endpoint.component_id], endpoint.port_id)


def is_valid_connection(
    from_: WireEndpoint,
    to: WireEndpoint,
    components: Mapping[str, Component],
    existing_wires: Iterable[Wire] = (),
    junctions: Mapping[str, Junction] | None = None,
) -> ConnectionValidationResult:
    """Validate a wire between two endpoints before it is created."""
    junctions = junctions or {}

    if endpoint_key(from_) == endpoint_key(to):
        return _invalid("Cannot connect a port to itself")

    if (
        isinstance(from_, PortEndpoint)
        and isinstance(to, PortEndpoint)
        and from_.component_id == to.component_id
    ):
        return _invalid("Cannot connect ports on the same component")

    for endpoint, role in ((from_, "Source"), (to, "Target")):
        failure = _missing_owner(endpoint, role, components, junctions)
        if failure is not None:
            return failure

    from_type = _endpoint_port_type(from_, components)
    if from_type is None:
        return _invalid(f"Source port not found: {from_.port_id}")
    to_type = _endpoint_port_type(to, components)
    if to_type is None:
        return _invalid(f"Target port not found: {to.port_id}")

    if not are_port_types_compatible(from_type, to_type):
        return _invalid(
            f"Incompatible port types: {from_type.value} cannot connect to {to_type.value}"
        )

    if wire_exists(existing_wires, from_, to):
        return _invalid("Wire already exists between these ports")

    return ConnectionValidationResult(valid=True)


def can_accept_connection(
    component: Component, port_id: str, existing_wires: Iterable[Wire]
) -> bool:
    """Ports may branch freely up to MAX_CONNECTIONS_PER_PORT wires."""
    if component.get_port(port_id) is None:
        return False

    key = endpoint_key(PortEndpoint(component_id=component.id, port_id=port_id))
    count = sum(
        1
        for wire in existing_wires
        if endpoint_key(wire.from_) == key or endpoint_key(wire.to) == key
    )
    return count < MAX_CONNECTIONS_PER_PORT


def get_valid_targets(
    from_: WireEndpoint,
    components: Mapping[str, Component],
    existing_wires: Iterable[Wire],
) -> list[PortEndpoint]:
    """Every component port a wire starting at `from_` may end on."""
    wires = list(existing_wires)
    targets: list[PortEndpoint] = []
    for component in components.values():
        for port in component.ports:
            candidate = PortEndpoint(component_id=component.id, port_id=port.id)
            if is_valid_connection(from_, candidate, components, wires).valid:
                targets.append(candidate)
    return targets
