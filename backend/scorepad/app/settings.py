"""Scorepad configuration via environment variables."""

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class StorageBackend(str, Enum):
    FILE = "file"
    MEMORY = "memory"


class ScorepadSettings(BaseSettings):
    model_config = {"env_prefix": "SCOREPAD_"}

    storage_backend: StorageBackend = StorageBackend.FILE
    data_dir: str = Field(default="backend/data/scorepad", min_length=1)
    # Prefix of every persisted key, e.g. "flip7_players".
    namespace: str = Field(default="flip7", pattern=r"^[A-Za-z0-9_-]+$")
    log_dir: str | None = None

    @field_validator("log_dir", mode="before")
    @classmethod
    def validate_log_dir(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v
