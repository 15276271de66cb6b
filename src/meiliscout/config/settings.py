"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (MEILISCOUT_ prefix)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class MeiliSearchSettings(BaseModel):
    """Connection settings for the Meilisearch instance."""

    host: str = Field(default="http://localhost:7700", description="Meilisearch instance URL")
    key: str | None = Field(default=None, description="Master key or API key")
    timeout: int | None = Field(default=None, description="Client request timeout in seconds")

    @field_validator("host")
    @classmethod
    def _strip_host(cls, v: str) -> str:
        return v.rstrip("/")


class ScoutSettings(BaseModel):
    """Searchable model behavior."""

    driver: str = Field(default="meilisearch", description="Default engine driver name")
    prefix: str = Field(default="", description="Prefix prepended to every index name")
    soft_delete: bool = Field(default=False, description="Keep soft-deleted models in the index")
    chunk_size: int = Field(default=500, ge=1, description="Models per batch when importing")
    index_settings: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Meilisearch index settings keyed by index name",
    )


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root settings.

    Configuration is loaded from environment variables with the MEILISCOUT_ prefix.
    Nested settings use double underscores: MEILISCOUT_MEILISEARCH__HOST=http://search:7700

    Example:
        MEILISCOUT_MEILISEARCH__KEY=masterKey
        MEILISCOUT_SCOUT__PREFIX=staging_
        MEILISCOUT_SCOUT__SOFT_DELETE=true
    """

    model_config = {
        "env_prefix": "MEILISCOUT_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    meilisearch: MeiliSearchSettings = Field(default_factory=MeiliSearchSettings)
    scout: ScoutSettings = Field(default_factory=ScoutSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are passed as init arguments, so they win
        over environment variables for the keys they set.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
