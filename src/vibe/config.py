"""Configuration management for vibe."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path, PurePath
from typing import Annotated

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    SettingsError,
    YamlConfigSettingsSource,
)

DEFAULT_FILES_TO_COPY = (".envrc", ".claude/settings.local.json")


class ConfigError(RuntimeError):
    """Raised when the user configuration cannot be loaded."""


def default_config_file() -> Path:
    """Return the YAML config location, honouring ``VIBE_CONFIG_FILE`` and XDG."""

    explicit = os.environ.get("VIBE_CONFIG_FILE")
    if explicit:
        return Path(explicit).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME") or "~/.config"
    return Path(base).expanduser() / "vibe" / "config.yaml"


class VibeSettings(BaseSettings):
    """Runtime configuration sourced from the environment and an optional YAML file."""

    model_config = SettingsConfigDict(env_prefix="VIBE_", extra="ignore")

    workspaces_dir: str = Field(default=".vibe-workspaces")
    branch_prefix: str = Field(default="feature/")
    files_to_copy: Annotated[tuple[str, ...], NoDecode] = Field(default=DEFAULT_FILES_TO_COPY)
    claude_config_path: Path | None = Field(default=None)
    log_level: str = Field(default="WARNING")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=default_config_file()),
        )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError("VIBE_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG")
        return normalized

    @field_validator("workspaces_dir")
    @classmethod
    def _validate_workspaces_dir(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized or PurePath(normalized).is_absolute():
            raise ValueError("VIBE_WORKSPACES_DIR must be a path relative to the home directory")
        return normalized

    @field_validator("files_to_copy", mode="before")
    @classmethod
    def _parse_files_to_copy(cls, value):
        if value is None or value == "":
            return ()
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        if isinstance(value, (list, tuple)):
            return tuple(str(item) for item in value)
        raise TypeError("VIBE_FILES_TO_COPY must be a list of paths or a comma-separated string")

    @field_validator("files_to_copy")
    @classmethod
    def _validate_files_to_copy(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for entry in value:
            if PurePath(entry).is_absolute():
                raise ValueError(f"files_to_copy entries must be relative paths, got {entry!r}")
        return value

    def trust_config_path(self, home: Path) -> Path:
        """Location of the assistant's per-user trust config."""

        if self.claude_config_path is not None:
            return self.claude_config_path.expanduser()
        return home / ".claude.json"


def load_settings(**overrides) -> VibeSettings:
    """Build settings, converting source errors into :class:`ConfigError`."""

    try:
        return VibeSettings(**overrides)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML in {default_config_file()}: {exc}") from exc
    except (ValidationError, SettingsError) as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> VibeSettings:
    """Return cached settings instance."""

    return load_settings()


def configure_logging(level: str) -> None:
    """Configure root logging for the CLI; records go to stderr."""

    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s: %(message)s",
    )


__all__ = [
    "ConfigError",
    "DEFAULT_FILES_TO_COPY",
    "VibeSettings",
    "configure_logging",
    "default_config_file",
    "get_settings",
    "load_settings",
]
