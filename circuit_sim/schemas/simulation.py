from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from circuit_sim.schemas.graph import CircuitGraph
from circuit_sim.schemas.runtime import SwitchStateMap


class WireDirection(str, Enum):
    FORWARD = "forward"
    REVERSE = "reverse"


class SimulationOptions(BaseModel):
    """Per-call knobs. Unset values fall back to Settings."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    max_path_length: int | None = Field(default=None, ge=1)
    detect_short_circuits: bool | None = None
    max_path_count: int | None = Field(default=None, ge=1)


class CurrentPath(BaseModel):
    nodes: list[str]  # power → ground order
    wire_ids: list[str] = Field(default_factory=list)
    power_source: str
    voltage: float
    is_complete: bool
    is_short_circuit: bool


class ShortCircuit(BaseModel):
    path: list[str]
    power_source: str
    voltage: float


class Net(BaseModel):
    id: str  # union-find root key
    members: set[str]  # "port:comp:portId" | "junction:juncId"
    voltage: float | None = None


class SimulationResult(BaseModel):
    node_voltages: dict[str, float] = Field(default_factory=dict)
    current_paths: list[CurrentPath] = Field(default_factory=list)
    powered_components: set[str] = Field(default_factory=set)
    powered_wires: set[str] = Field(default_factory=set)
    wire_directions: dict[str, WireDirection] = Field(default_factory=dict)
    short_circuits: list[ShortCircuit] = Field(default_factory=list)
    switch_states: SwitchStateMap = Field(default_factory=SwitchStateMap)
    nets: list[Net] = Field(default_factory=list)
    graph: CircuitGraph = Field(default_factory=CircuitGraph)
    success: bool
    error: str | None = None
