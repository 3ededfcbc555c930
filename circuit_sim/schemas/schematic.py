"""Schematic input schemas — blocks, ports, junctions and wires.

These mirror what the canvas editor hands to the simulation core. Only
the fields the engine reads are declared; anything else a block carries
(position, size, colour, ...) is tolerated and ignored.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PortType(str, Enum):
    INPUT = "input"
    OUTPUT = "output"
    BIDIRECTIONAL = "bidirectional"


class Port(BaseModel):
    model_config = ConfigDict(
        extra="allow", alias_generator=to_camel, populate_by_name=True
    )

    id: str
    type: PortType
    label: str | None = None
    position: str = "left"  # top, bottom, left, right


class Component(BaseModel):
    """A schematic block.

    `type` is one of power_24v, power_12v, gnd, powersource, plc_out,
    plc_in, button, led, scope. Unknown types are accepted and
    classified from their port directions.
    """

    model_config = ConfigDict(
        extra="allow", alias_generator=to_camel, populate_by_name=True
    )

    id: str
    type: str
    ports: list[Port] = Field(default_factory=list)
    label: str | None = None

    # powersource
    voltage: float | None = None
    polarity: str = "positive"  # positive, negative, ground

    # plc_out
    address: str | int | None = None
    normally_open: bool = True
    inverted: bool = False

    # button
    contact_config: str = "1a"  # 1a, 1b, 1a1b, 2a, 2b, 2a2b, 3a3b
    pressed: bool | None = None

    def get_port(self, port_id: str) -> Port | None:
        for port in self.ports:
            if port.id == port_id:
                return port
        return None


class Junction(BaseModel):
    model_config = ConfigDict(
        extra="allow", alias_generator=to_camel, populate_by_name=True
    )

    id: str


class PortEndpoint(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    component_id: str
    port_id: str


class JunctionEndpoint(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    junction_id: str


WireEndpoint = PortEndpoint | JunctionEndpoint


class Wire(BaseModel):
    model_config = ConfigDict(
        extra="allow", alias_generator=to_camel, populate_by_name=True
    )

    id: str
    from_: WireEndpoint = Field(alias="from")
    to: WireEndpoint
