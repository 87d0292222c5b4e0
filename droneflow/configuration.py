"""Mini README: Centralised configuration models and helpers for DroneFlow.

Structure:
    * DroneflowSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read environment variables (``DRONEFLOW_``
    prefix or a local ``.env`` file), choose the storage backend, and tune the
    two settlement constants: the operator's fixed monthly salary and the
    per-hectare deduction charged to field partners for work on their own
    farms. The configuration is cached so validation happens once per process;
    tests call ``get_settings.cache_clear()`` after changing the environment.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings

SUPPORTED_BACKENDS = ("memory", "json")


class DroneflowSettings(BaseSettings):
    """Runtime configuration for the DroneFlow settlement service."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory where the JSON store keeps one file per entity.",
    )
    store_backend: str = Field(
        "json",
        description="Persistence backend registered in the store registry (memory or json).",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the HTTP API to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the HTTP API exposes.",
        ge=1,
        le=65535,
    )
    fixed_salary: float = Field(
        5000.0,
        description="Flat monthly salary credited to the salaried operator and added to every month's costs.",
        ge=0,
    )
    per_hectare_deduction_rate: float = Field(
        100.0,
        description="Amount per hectare deducted from a field partner for services on their own farm.",
        ge=0,
    )
    log_level: str = Field("INFO", description="Root logging level used by the CLI and web app.")

    class Config:
        env_prefix = "DRONEFLOW_"
        env_file = ".env"
        case_sensitive = False

    @validator("data_directory", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @validator("store_backend")
    def _known_backend(cls, value: str) -> str:
        """Reject backends the store registry does not provide."""

        normalised = value.strip().lower()
        if normalised not in SUPPORTED_BACKENDS:
            raise ValueError(f"Unsupported store backend: {value}")
        return normalised


@lru_cache()
def get_settings() -> DroneflowSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return DroneflowSettings()
