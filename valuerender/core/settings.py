"""Runtime settings read from ``VALUERENDER_*`` environment variables."""

from __future__ import annotations

import logging

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError

RECURSION_MAX_DEPTH = 1000


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="VALUERENDER_", case_sensitive=False)

    include_max_depth: int = Field(default=RECURSION_MAX_DEPTH, ge=1)
    file_mode: str = "0600"
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level


def load_settings() -> Settings:
    """Load settings, reporting invalid environment values as ConfigError."""
    try:
        return Settings()
    except ValidationError as e:
        problems = "; ".join(
            f"VALUERENDER_{'.'.join(map(str, err['loc'])).upper()}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"invalid settings: {problems}") from e
