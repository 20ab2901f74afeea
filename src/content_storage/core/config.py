# src/content_storage/core/config.py
"""
Configuration schema and loading for content storage.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class FolderStorageSettings(BaseModel):
    """Filesystem backend configuration.

    Example YAML:
        filesystem:
          root_path: /var/lib/contents
          disable_prefix_hash: false
    """

    model_config = {"frozen": True}

    root_path: Path = Field(
        default=Path(".content-storage"),
        description="Root directory of the storage tree",
    )
    disable_prefix_hash: bool = Field(
        default=False,
        description="Store files directly under root instead of sha1 shard directories",
    )


class S3StorageSettings(BaseModel):
    """S3 backend configuration."""

    model_config = {"frozen": True}

    bucket: str = Field(min_length=1, description="Bucket holding the records")
    region: str | None = Field(default=None, description="AWS region of the bucket")
    key_prefix: str = Field(
        default="",
        description="Prefix prepended to every id to form the object key",
    )
    endpoint_url: str | None = Field(
        default=None,
        description="Custom endpoint (S3-compatible stores, local emulators)",
    )
    max_workers: int = Field(
        default=8,
        gt=0,
        description="Threads used to fan out batch lookups",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    model_config = {"frozen": True}

    level: str = Field(default="INFO", description="Log level name")
    json_output: bool = Field(default=False, description="Render logs as JSON lines")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"level must be one of {sorted(_LOG_LEVELS)}, got {v!r}")
        return level


class StorageSettings(BaseModel):
    """Top-level content storage configuration.

    This is the single source of truth for backend selection. All settings are
    validated and frozen after construction.
    """

    model_config = {"frozen": True}

    backend: Literal["filesystem", "s3", "memory"] = Field(
        default="filesystem",
        description="Storage backend type",
    )
    filesystem: FolderStorageSettings = Field(
        default_factory=FolderStorageSettings,
        description="Filesystem backend configuration",
    )
    s3: S3StorageSettings | None = Field(
        default=None,
        description="S3 backend configuration (required when backend is s3)",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    @model_validator(mode="after")
    def validate_s3_configured(self) -> "StorageSettings":
        """S3 backend needs its bucket settings."""
        if self.backend == "s3" and self.s3 is None:
            raise ValueError("backend 's3' requires an 's3' section with at least a bucket")
        return self


def load_settings(config_path: Path) -> StorageSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (CONTENT_STORAGE_*) - highest priority
    2. Config file (settings.yaml)
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: CONTENT_STORAGE_S3__BUCKET for nested keys.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated StorageSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Explicit check for file existence (Dynaconf silently accepts missing files)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="CONTENT_STORAGE",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; convert to lowercase for Pydantic
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {
        k.lower(): v
        for k, v in dynaconf_settings.as_dict().items()
        if k not in internal_keys
    }
    return StorageSettings(**_lower_keys(raw_config))


def _lower_keys(value: Any) -> Any:
    """Lowercase nested mapping keys (env overrides arrive uppercased)."""
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value
