"""Runtime configuration, read from environment variables."""

import os
from functools import lru_cache

from pydantic import BaseModel, field_validator

ENV_PREFIX = "XIANGQI_"


class Settings(BaseModel):
    database_url: str = "sqlite:///./xiangqi.db"
    log_level: str = "INFO"
    history_limit: int = 200
    cors_origins: list[str] = ["*"]

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @classmethod
    def from_env(cls) -> "Settings":
        """Only the variables that are actually set override the defaults."""
        values = {
            name: os.environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in os.environ
        }
        return cls(**values)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
