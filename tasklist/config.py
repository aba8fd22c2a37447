"""Application settings loaded from environment variables (+ optional .env)."""

import json
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the task list service."""

    app_name: str = Field(default="Task Manager API", description="Application title")
    version: str = Field(default="1.0.0", description="Reported API version")
    storage_path: Path = Field(
        default=Path("./runtime_data/storage.json"),
        description="JSON file backing the key/value storage",
    )
    storage_key: str = Field(default="tasks", description="Key holding the task collection")
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API",
    )
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(default="console", description="'console' or 'json'")
    host: str = Field(default="127.0.0.1", description="Development server host")
    port: int = Field(default=8000, description="Development server port")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TASKLIST_",
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_origins(cls, value: object) -> list[str]:
        """Accept a JSON array or a comma-separated string."""
        if isinstance(value, str):
            cleaned = value.strip()
            if not cleaned:
                return []
            if cleaned.startswith("["):
                try:
                    parsed = json.loads(cleaned)
                except json.JSONDecodeError:
                    parsed = None
                if isinstance(parsed, list):
                    return [str(v) for v in parsed]
            return [part.strip() for part in cleaned.split(",") if part.strip()]
        if isinstance(value, list):
            return [str(v) for v in value]
        return []

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("console", "json"):
            raise ValueError("log_format must be 'console' or 'json'")
        return value
