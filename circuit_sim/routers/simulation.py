"""Simulation router — stateless single-tick simulation endpoint."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from circuit_sim.engine.simulator import simulate_circuit
from circuit_sim.schemas.runtime import RuntimeState
from circuit_sim.schemas.schematic import Component, Junction, Wire
from circuit_sim.schemas.simulation import SimulationOptions, SimulationResult

router = APIRouter()


class SimulationRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    components: list[Component] = Field(default_factory=list)
    wires: list[Wire] = Field(default_factory=list)
    junctions: list[Junction] = Field(default_factory=list)
    runtime_state: RuntimeState = Field(default_factory=RuntimeState)
    options: SimulationOptions = Field(default_factory=SimulationOptions)


@router.post("/run", response_model=SimulationResult)
def run_simulation(request: SimulationRequest):
    """Simulate one tick. Failures come back with success=false, not 5xx."""
    return simulate_circuit(
        request.components,
        request.wires,
        request.junctions,
        request.runtime_state,
        request.options,
    )
