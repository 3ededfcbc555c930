"""Connection router — validate a wire before the editor creates it."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from circuit_sim.schemas.schematic import Component, Junction, Wire, WireEndpoint
from circuit_sim.schemas.validation import ConnectionValidationResult
from circuit_sim.validation.connection import is_valid_connection

router = APIRouter()


class ConnectionRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    from_: WireEndpoint = Field(alias="from")
    to: WireEndpoint
    components: list[Component] = Field(default_factory=list)
    junctions: list[Junction] = Field(default_factory=list)
    wires: list[Wire] = Field(default_factory=list)


@router.post("/validate", response_model=ConnectionValidationResult)
def validate_connection(request: ConnectionRequest):
    return is_valid_connection(
        request.from_,
        request.to,
        {c.id: c for c in request.components},
        request.wires,
        junctions={j.id: j for j in request.junctions},
    )
