"""
array-model — runtime settings loader.

Purpose
- Load effective settings from defaults, a TOML file, and environment variables.

Precedence: env (``ARRAY_MODEL_``) > file > defaults. The TOML file keeps the
settings under an ``[array_model]`` table; a missing implicit file is fine, a
missing explicit file is an error.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Final, Literal

from array_model.constants import CONFIG_TABLE, DEFAULT_CONFIG_FILE, ENV_PREFIX
from array_model.errors import ConfigLoadError

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})
_LOG_LEVELS: Final[frozenset[str]] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

_ValueKind = Literal["str", "bool"]


@dataclass(frozen=True, slots=True)
class Settings:
    """Process-wide behavior switches for models and the CLI."""

    enforce_limits: bool = True
    text_sort_keys: bool = False
    text_ensure_ascii: bool = False
    log_level: str = "WARNING"


def load_settings(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings with deterministic precedence: env > file > defaults."""

    resolved_path = _resolve_config_path(config_path)
    env_map = dict(os.environ if environ is None else environ)

    file_payload = _load_toml_file(resolved_path, required=config_path is not None)
    settings = _apply_overrides(Settings(), file_payload, source=str(resolved_path))
    settings = _apply_overrides(settings, _collect_env_overrides(env_map), source="environment")
    return settings


def settings_as_dict(settings: Settings) -> dict[str, Any]:
    return {item.name: getattr(settings, item.name) for item in fields(settings)}


def _resolve_config_path(config_path: str | Path | None) -> Path:
    if config_path is None:
        return (Path.cwd() / DEFAULT_CONFIG_FILE).resolve()
    return Path(config_path).expanduser().resolve()


def _load_toml_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigLoadError(f"config file not found: {path}")
        return {}

    try:
        with path.open("rb") as handle:
            parsed = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc

    table = parsed.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigLoadError(f"[{CONFIG_TABLE}] must be a table: {path}")
    return table


def _collect_env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for name, kind in sorted(_bindings().items()):
        env_name = f"{ENV_PREFIX}{name.upper()}"
        raw = environ.get(env_name)
        if raw is None:
            continue
        overrides[name] = _coerce_env(raw, kind, env_name)
    return overrides


def _bindings() -> dict[str, _ValueKind]:
    bindings: dict[str, _ValueKind] = {}
    for item in fields(Settings):
        bindings[item.name] = "bool" if isinstance(item.default, bool) else "str"
    return bindings


def _coerce_env(raw: str, value_type: _ValueKind, env_name: str) -> object:
    value = raw.strip()
    if value_type == "str":
        return value

    lowered = value.lower()
    if lowered in _BOOLEAN_TRUE:
        return True
    if lowered in _BOOLEAN_FALSE:
        return False
    raise ConfigLoadError(f"{env_name} must be a boolean (true/false/1/0/yes/no/on/off)")


def _apply_overrides(settings: Settings, payload: Mapping[str, object], *, source: str) -> Settings:
    bindings = _bindings()
    unknown = sorted(key for key in payload if key not in bindings)
    if unknown:
        raise ConfigLoadError(f"unknown settings in {source}: {unknown}")

    updates: dict[str, Any] = {}
    for key, value in payload.items():
        if bindings[key] == "bool":
            if not isinstance(value, bool):
                raise ConfigLoadError(f"{source}: {key} must be a boolean")
            updates[key] = value
            continue
        if not isinstance(value, str):
            raise ConfigLoadError(f"{source}: {key} must be a string")
        updates[key] = value.strip()

    if "log_level" in updates:
        level = str(updates["log_level"]).upper()
        if level not in _LOG_LEVELS:
            allowed = ", ".join(sorted(_LOG_LEVELS))
            raise ConfigLoadError(f"{source}: log_level must be one of: {allowed}")
        updates["log_level"] = level

    return replace(settings, **updates)


__all__ = ["Settings", "load_settings", "settings_as_dict"]
