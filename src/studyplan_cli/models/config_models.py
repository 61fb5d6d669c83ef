"""Configuration models for StudyPlan CLI.

The configuration describes the two storage backends the planner can use:
the local SQLite vault and the remote PostgREST store.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class RemoteConfig(BaseModel):
    """Remote store configuration."""

    url: str = Field(default="", description="Base URL of the remote store")
    api_key: str = Field(default="", description="Public API key sent as 'apikey'")
    timeout: int = Field(default=30)
    retry: int = Field(default=3, ge=0)

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @property
    def is_configured(self) -> bool:
        return bool(self.url)


class LocalConfig(BaseModel):
    """Local vault configuration."""

    db_path: str | None = Field(
        default=None, description="SQLite file path (defaults to the data dir)"
    )


class SyncConfig(BaseModel):
    """Sync configuration."""

    on_login: bool = Field(default=True)


class OutputConfig(BaseModel):
    """Output configuration."""

    color: bool = Field(default=True)


class AppConfig(BaseModel):
    """Main StudyPlan configuration."""

    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    local: LocalConfig = Field(default_factory=LocalConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
