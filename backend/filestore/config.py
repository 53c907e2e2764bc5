"""File storage server configuration.

Loads a single config file at startup, ``config.json`` by default:

    {"storage_dir": "/var/lib/filestore"}

YAML is accepted as well when the file ends in ``.yaml`` / ``.yml``.  Only
``storage_dir`` is required; the ``server`` and ``logging`` sections are
optional and fall back to the defaults below.  The config is read once and
never reloaded.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("config.json")

_YAML_SUFFIXES = {".yaml", ".yml"}

# Levels understood by both the logging module and uvicorn.
LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


class ConfigError(RuntimeError):
    """Config file is missing, unreadable, unparseable or invalid."""


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class StorageConfig(BaseModel):
    """Storage root handed to the storage service. Immutable once built."""
    model_config = ConfigDict(frozen=True)

    storage_root: Path

    @field_validator("storage_root")
    @classmethod
    def _absolute(cls, v: Path) -> Path:
        return Path(os.path.abspath(v))


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)


class LoggingSettings(BaseModel):
    level: str = "info"

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.strip().lower()
        if level not in LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(LOG_LEVELS)}")
        return level


class AppConfig(BaseModel):
    storage_dir: str
    server:      ServerSettings  = Field(default_factory=ServerSettings)
    logging:     LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("storage_dir")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("storage_dir must not be empty")
        return v

    def storage_config(self) -> StorageConfig:
        """Resolve ``storage_dir`` (relative to the working directory)."""
        return StorageConfig(storage_root=Path(self.storage_dir))


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def _parse(path: Path, text: str) -> Any:
    if path.suffix.lower() in _YAML_SUFFIXES:
        return yaml.safe_load(text)
    return json.loads(text)


def load_config(path: Path = CONFIG_FILE) -> AppConfig:
    """Read and validate the config file at *path*.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        data: Dict[str, Any] = _parse(path, text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot parse config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    try:
        config = AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e

    logger.info(
        "Config loaded from %s (storage_dir=%s, server=%s:%s)",
        path,
        config.storage_dir,
        config.server.host,
        config.server.port,
    )
    return config
