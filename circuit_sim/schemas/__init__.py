from circuit_sim.schemas.schematic import (
    Component,
    Junction,
    JunctionEndpoint,
    Port,
    PortEndpoint,
    Wire,
)
from circuit_sim.schemas.graph import CircuitEdge, CircuitGraph, CircuitNode
from circuit_sim.schemas.runtime import RuntimeState, SwitchState, SwitchStateMap
from circuit_sim.schemas.simulation import (
    CurrentPath,
    Net,
    ShortCircuit,
    SimulationOptions,
    SimulationResult,
)
from circuit_sim.schemas.validation import ConnectionValidationResult

__all__ = [
    "Component",
    "Junction",
    "JunctionEndpoint",
    "Port",
    "PortEndpoint",
    "Wire",
    "CircuitEdge",
    "CircuitGraph",
    "CircuitNode",
    "RuntimeState",
    "SwitchState",
    "SwitchStateMap",
    "CurrentPath",
    "Net",
    "ShortCircuit",
    "SimulationOptions",
    "SimulationResult",
    "ConnectionValidationResult",
]
