from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Circuit Sim"
    debug: bool = False
    log_level: str = "INFO"

    # HTTP adapter
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://localhost:1420",
            "http://localhost:3000",
        ]
    )

    # Simulation defaults (overridable per call via SimulationOptions)
    max_path_length: int = Field(default=100, ge=1)
    detect_short_circuits: bool = True
    max_path_count: int | None = Field(default=None, ge=1)  # None = unlimited

    model_config = SettingsConfigDict(
        env_prefix="CIRCUIT_SIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
