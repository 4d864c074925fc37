"""Application settings for backend runtime and tests."""

from __future__ import annotations

import logging

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings

from fanfare_engine.core import MAX_PLAYERS


class Settings(BaseSettings):
    """Typed settings loaded from environment variables or explicit kwargs."""

    fanfare_app_env: str = "dev"
    fanfare_app_host: str = "127.0.0.1"
    fanfare_app_port: int = Field(default=8000, ge=1)

    fanfare_cors_allow_origins: str = "*"
    fanfare_default_max_players: int = Field(default=MAX_PLAYERS, ge=2, le=MAX_PLAYERS)
    fanfare_log_level: str = "INFO"

    @field_validator("fanfare_log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept only level names the logging module knows."""
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.fanfare_cors_allow_origins.split(",") if origin.strip()]


def load_settings() -> Settings:
    """Load settings from process environment."""
    return Settings()
