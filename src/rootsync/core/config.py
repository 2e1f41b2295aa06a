"""rootsync configuration file and environment layering.

Precedence, lowest first: model defaults, ``rootsync.config.yaml`` in the
working directory (or an explicit path), ``ROOTSYNC_*`` environment variables
read by Config's own settings source, then caller overrides.
"""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import EnvSettingsSource, SettingsError

from rootsync.core.exceptions import ConfigError
from rootsync.core.models import Config

DEFAULT_CONFIG_FILENAME = "rootsync.config.yaml"


def default_config_path() -> Path:
    return Path.cwd() / DEFAULT_CONFIG_FILENAME


def load_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Config:
    """Build a validated Config from file, environment and overrides.

    A missing config file is not an error; defaults apply.

    Raises:
        ConfigError: If the file is unreadable or the merged values are invalid.
    """
    path = config_path or default_config_path()
    file_values = read_config_file(path) if path.exists() else {}
    try:
        env_values = EnvSettingsSource(Config)()
        layers = [file_values, env_values, overrides or {}]
        return Config(**functools.reduce(_merge, layers, {}))
    except (ValidationError, SettingsError) as e:
        msg = f"Config validation failed: {e}"
        raise ConfigError(msg) from e


def read_config_file(path: Path) -> dict[str, Any]:
    """Raw mapping stored in a config file; empty files read as {}."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        msg = f"Failed to parse YAML: {path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Failed to read config: {path}: {e}"
        raise ConfigError(msg) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Config file must be a YAML mapping, got {type(data).__name__}: {path}"
        raise ConfigError(msg)
    return data


def set_config_value(path: Path, key: str, value: Any) -> Any:
    """Store one dotted *key* in the config file at *path*.

    Only the keys already in the file plus *key* are written; values coming
    from the environment are never persisted. The value is validated and
    stored in its normalized form (e.g. "10, 20" becomes [10, 20]).

    Returns:
        The normalized value.

    Raises:
        ConfigError: On an unknown key, an invalid value or an unreadable file.
    """
    parts = _field_path(key)
    data = read_config_file(path) if path.exists() else {}
    override: Any = value
    for part in reversed(parts):
        override = {part: override}
    data = _merge(data, override)

    try:
        normalized = Config(**data).model_dump(mode="json")
    except (ValidationError, SettingsError) as e:
        msg = f"Invalid value for {key}: {e}"
        raise ConfigError(msg) from e
    for part in parts:
        normalized = normalized[part]

    target = data
    for part in parts[:-1]:
        target = target[part]
    target[parts[-1]] = normalized

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return normalized


def _field_path(key: str) -> list[str]:
    """Split a dotted key, checking each part against the Config schema."""
    parts = key.split(".")
    model: type[BaseModel] | None = Config
    for i, part in enumerate(parts):
        field = model.model_fields.get(part) if model is not None else None
        if field is None:
            msg = f"Unknown config key: {key}"
            raise ConfigError(msg)
        annotation = field.annotation
        is_model = isinstance(annotation, type) and issubclass(annotation, BaseModel)
        if is_model and i == len(parts) - 1:
            msg = f"{key} is a section; set one of its keys instead"
            raise ConfigError(msg)
        model = annotation if is_model else None
    return parts


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged
