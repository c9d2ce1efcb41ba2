"""
Application settings.

Values come from environment variables prefixed with ``ENVELOPE_`` (or a
``.env`` file), e.g. ``ENVELOPE_DATA_DIR=/tmp/envelope``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the CLI and flows."""

    model_config = SettingsConfigDict(
        env_prefix="ENVELOPE_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "climate-envelope"
    app_env: str = "development"
    debug: bool = False

    data_dir: Path = Path("data")

    # WorldClim 2.1 resolution: 10m, 5m, 2.5m or 30s
    worldclim_resolution: str = "10m"
    variables: list[str] = Field(default_factory=lambda: ["prec", "tavg"])
    quantiles: list[float] = Field(default_factory=lambda: [0.05, 0.5, 0.95])

    gbif_max_records: int = Field(default=1000, gt=0)

    @field_validator("quantiles")
    @classmethod
    def _check_quantiles(cls, value: list[float]) -> list[float]:
        for q in value:
            if not 0.0 <= q <= 1.0:
                msg = f"Quantile level must be within [0, 1], got {q}"
                raise ValueError(msg)
        return value


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (read once)."""
    return Settings()
