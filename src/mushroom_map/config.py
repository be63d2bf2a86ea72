"""Application settings loaded from the environment (``MUSHROOM_MAP_*``) or ``.env``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path  # noqa: TC003 (pydantic resolves it at runtime)

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MUSHROOM_MAP_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "mushroom-map"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    data_dir: Path = Field(default=Path("data"), description="Root of the observation store")

    # Consensus is reached when the top weighted score is >= threshold
    # and leads the runner-up by >= margin.
    consensus_threshold: int = Field(default=10, ge=1)
    consensus_margin: int = Field(default=5, ge=0)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
