"""Application settings powered by ``pydantic-settings``."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Any, Literal, Sequence

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .. import __version__ as package_version

EnvironmentName = Literal["development", "test", "ci"]
CommaSeparated = Annotated[list[str], NoDecode]

_ENVIRONMENT_ALIASES: dict[str, EnvironmentName] = {
    "development": "development",
    "dev": "development",
    "test": "test",
    "testing": "test",
    "ci": "ci",
}

_ENVIRONMENT_PROFILES: dict[EnvironmentName, dict[str, Any]] = {
    "development": {
        "log_level": "DEBUG",
        "reload": True,
        "db_echo": False,
        "auto_create_tables": True,
    },
    "test": {
        "log_level": "WARNING",
        "reload": False,
        "db_echo": False,
        "auto_create_tables": False,
    },
    "ci": {
        "log_level": "INFO",
        "reload": False,
        "db_echo": False,
        "auto_create_tables": True,
    },
}


class Settings(BaseSettings):
    """Runtime configuration for the task tracker service."""

    model_config = SettingsConfigDict(
        env_prefix="TASK_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "Task Tracker API"
    environment: EnvironmentName = "development"
    api_prefix: str = "/api"
    version: str = package_version
    database_url: str = "sqlite+aiosqlite:///./task_tracker.db"
    db_echo: bool = False
    auto_create_tables: bool = True
    cors_allow_origins: CommaSeparated = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
    )
    cors_allow_credentials: bool = True
    cors_allow_methods: CommaSeparated = Field(default_factory=lambda: ["*"])
    cors_allow_headers: CommaSeparated = Field(default_factory=lambda: ["*"])
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"
    reload: bool = True
    export_filename: str = "tasks_export.csv"

    @field_validator("environment", mode="before")
    @classmethod
    def _normalise_environment(cls, value: object) -> EnvironmentName:
        if isinstance(value, str):
            normalized = value.strip().lower()
        else:
            normalized = ""
        return _ENVIRONMENT_ALIASES.get(normalized, "development")

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _coerce_comma_separated(cls, value: object) -> list[str]:
        """Allow comma separated strings for CORS configuration."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, Sequence):
            return [str(item) for item in value if str(item).strip()]
        return []

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> str:
        if not isinstance(value, str):
            return "INFO"
        return value.upper()

    @model_validator(mode="after")
    def _apply_environment_profile(self) -> "Settings":
        profile = _ENVIRONMENT_PROFILES[self.environment]
        fields_set = set(getattr(self, "model_fields_set", set()))
        for field_name, value in profile.items():
            if field_name not in fields_set:
                setattr(self, field_name, value)
        return self


@lru_cache()
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    return Settings()
