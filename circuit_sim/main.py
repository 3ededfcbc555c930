"""Circuit Sim — HTTP adapter for the simulation core.

Responsibilities:
  1. Single-tick circuit simulation (stateless)
  2. Wire connection validation

The core itself does no I/O. This app only decodes requests, calls
the engine and returns its result objects.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from circuit_sim import __version__
from circuit_sim.config import get_settings
from circuit_sim.routers import connections, simulation


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    application = FastAPI(
        title=settings.app_name,
        version=__version__,
        description=(
            "Topological PLC schematic simulation.\n\n"
            "Computes conducting paths, port voltages, powered loads, "
            "short circuits and nets for one tick."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── Simulation (stateless) ───
    application.include_router(
        simulation.router, prefix="/api/simulation", tags=["Simulation"]
    )

    # ─── Connection validation ───
    application.include_router(
        connections.router, prefix="/api/connections", tags=["Connections"]
    )

    @application.get("/health")
    async def health_check():
        return {"status": "ok", "service": "circuit-sim", "version": __version__}

    return application


app = create_app()
