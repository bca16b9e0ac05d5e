"""
Engine configuration.

Tunables for overlap resolution, bounds fallback, proposal insertion and
placement helpers, plus the HTTP/CLI runtime settings. Values come from
the environment (prefix `FLOWCORE_`) or a local `.env` file.

Dependencies: pydantic_settings
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Settings shared by the engine, the API and the CLI."""

    model_config = SettingsConfigDict(
        env_prefix="FLOWCORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Overlap resolution
    min_gap: float = Field(default=20, description="Gap left between separated nodes")
    max_overlap_passes: int = Field(default=10, ge=1, description="Pass bound for overlap resolution")

    # Bounds
    fallback_half_extent: float = Field(
        default=500,
        description="Half size of the box returned for an empty node set",
    )

    # Proposal insertion
    default_anchor_x: float = 400
    default_anchor_y: float = 300

    # Placement helpers
    placement_step: float = 3
    placement_max_attempts: int = 50
    extent_min_padding: float = 300
    extent_max_padding: float = 600
    minimap_threshold: float = 0.7

    # Runtime
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    api_host: str = "127.0.0.1"
    api_port: int = 8765
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://localhost:3000",
            "http://127.0.0.1:5173",
        ]
    )


@lru_cache
def get_settings() -> EngineSettings:
    """Return the process-wide settings instance."""
    return EngineSettings()
