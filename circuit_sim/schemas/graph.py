from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class NodeType(str, Enum):
    POWER = "power"
    GROUND = "ground"
    SWITCH = "switch"
    LOAD = "load"
    JUNCTION = "junction"
    INPUT = "input"


class CircuitNode(BaseModel):
    id: str  # componentId:portId
    component_id: str
    port_id: str
    type: NodeType
    source_voltage: float | None = None  # power nodes only
    voltage: float | None = None


class CircuitEdge(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    wire_id: str | None = None  # None for internal component edges
    conductance: bool
    is_switch: bool = False
    switch_component_id: str | None = None


class CircuitGraph(BaseModel):
    nodes: dict[str, CircuitNode] = Field(default_factory=dict)
    edges: dict[str, list[CircuitEdge]] = Field(default_factory=dict)
    power_nodes: list[str] = Field(default_factory=list)
    ground_nodes: list[str] = Field(default_factory=list)
    switch_nodes: list[str] = Field(default_factory=list)
    load_nodes: list[str] = Field(default_factory=list)
