"""
Application settings.

Each setting is resolved on its own from the first source that defines it:

    1. command-line flag
    2. environment variable 'CRUD_STRATEGY_<KEY>' (e.g. CRUD_STRATEGY_PORT=9090)
    3. YAML config file
    4. built-in default

The config file is located the same way: '--config', then 'CRUD_STRATEGY_CONFIG',
then '~/.config/crud-strategy-pattern/default.yaml'. A missing file reads as
empty. Example:

    verbosity: debug
    port: 9090
    backend: sqlite
    storage_path: /var/lib/crud/accounts.sqlite

When 'storage_path' is not set, the backend's default file name in the current
working directory is used ('accounts.csv' or 'accounts.sqlite').
"""

import os
from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path
from typing import Any, TextIO

import yaml  # type: ignore[import-untyped]
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from crud_strategy_pattern import APP_NAME, ENV_PREFIX

CONFIG_ENV_VAR = f"{ENV_PREFIX}CONFIG"


class StorageBackend(StrEnum):
    """Available 'Crud' implementations."""

    CSV = "csv"
    SQLITE = "sqlite"


class Verbosity(StrEnum):
    """Log levels accepted by 'verbosity', quietest first."""

    OFF = "off"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"
    TRACE = "trace"


DEFAULT_STORAGE_FILENAMES: dict[StorageBackend, str] = {
    StorageBackend.CSV: "accounts.csv",
    StorageBackend.SQLITE: "accounts.sqlite",
}


class SettingsError(Exception):
    """The configuration could not be read or does not validate."""


class Settings(BaseModel):
    """
    Resolved runtime settings.

    Attributes:
        verbosity: Log level: off, error, warning, info, debug or trace.
        address: Interface the HTTP server binds to.
        port: TCP port of the HTTP server.
        backend: Which store implementation serves the records.
        storage_path: Data file of the store; None means the backend default.
    """

    verbosity: Verbosity = Verbosity.INFO
    address: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    backend: StorageBackend = StorageBackend.CSV
    storage_path: Path | None = None

    def resolved_storage_path(self) -> Path:
        if self.storage_path is not None:
            return self.storage_path
        return Path.cwd() / DEFAULT_STORAGE_FILENAMES[self.backend]

    @field_validator("verbosity", mode="before")
    @classmethod
    def _lowercase_verbosity(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value


SETTING_KEYS: tuple[str, ...] = tuple(Settings.model_fields)


def default_config_path() -> Path:
    return Path.home() / ".config" / APP_NAME / "default.yaml"


def resolve_config_path(cli_value: Path | None, environ: Mapping[str, str] | None = None) -> Path:
    """Pick the config file: flag, then environment, then the per-user default."""
    environ = os.environ if environ is None else environ
    if cli_value is not None:
        return cli_value
    if environ.get(CONFIG_ENV_VAR):
        return Path(environ[CONFIG_ENV_VAR])
    return default_config_path()


def load_config_file(path: Path) -> dict[str, Any]:
    """Read the YAML config file; known keys only, empty if the file does not exist."""
    if not path.is_file():
        logger.debug(f"No config file at '{path}'")
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise SettingsError(f"Failed to read config file '{path}': {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(f"Config file '{path}' must contain a mapping, got {type(data).__name__}")
    unknown = sorted(str(key) for key in data if key not in SETTING_KEYS)
    if unknown:
        logger.warning(f"Ignoring unknown keys in '{path}': {', '.join(unknown)}")
    return {key: value for key, value in data.items() if key in SETTING_KEYS}


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Collect 'CRUD_STRATEGY_<KEY>' variables; empty values count as unset."""
    environ = os.environ if environ is None else environ
    overrides: dict[str, str] = {}
    for key in SETTING_KEYS:
        value = environ.get(f"{ENV_PREFIX}{key.upper()}")
        if value:
            overrides[key] = value
    return overrides


def resolve_settings(
    cli_values: Mapping[str, Any],
    config_path: Path,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Merge defaults <- config file <- environment <- flags and validate the result.

    'cli_values' maps setting keys to flag values; None means the flag was not given.
    """
    merged: dict[str, Any] = {}
    merged.update(load_config_file(config_path))
    merged.update(env_overrides(environ))
    merged.update({key: value for key, value in cli_values.items() if value is not None})
    try:
        return Settings.model_validate(merged)
    except ValidationError as exc:
        raise SettingsError(f"Invalid settings: {exc}") from exc


def write_settings(out: TextIO, settings: Settings) -> None:
    """Dump 'settings' as YAML, in the same shape the config file accepts."""
    yaml.safe_dump(settings.model_dump(mode="json"), out, sort_keys=False)
