"""
Options for the env tree loader and the YAML file they can be read from.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from .constants import CONVENTION_NEXTJS, SUPPORTED_CONVENTIONS


class ConfigError(RuntimeError):
    """Raised when the user provided configuration is invalid."""


@dataclass
class EnvTreeOptions:
    """Every recognised loader option, with its default."""

    convention: str = CONVENTION_NEXTJS
    start_dir: str | Path | None = None
    set_env: bool = True
    env_name: str | None = None
    prefix: str | None = None
    verbose: bool = False
    ceiling_dir: str | Path | None = None

    def __post_init__(self) -> None:
        if self.convention not in SUPPORTED_CONVENTIONS:
            raise ConfigError(f"Unsupported convention: {self.convention}")


_BOOL_KEYS = {"set_env", "verbose"}
_STR_KEYS = {"convention", "start_dir", "env_name", "prefix", "ceiling_dir"}


def _check_value(key: str, value: Any) -> Any:
    if value is None:
        if key in _BOOL_KEYS:
            raise ConfigError(f"Option '{key}' cannot be null")
        return value
    if key in _BOOL_KEYS and not isinstance(value, bool):
        raise ConfigError(f"Option '{key}' must be a boolean, got {value!r}")
    if key in _STR_KEYS:
        if isinstance(value, bool) or not isinstance(value, (str, int, float, Path)):
            raise ConfigError(f"Option '{key}' must be a string, got {value!r}")
        if not isinstance(value, Path):
            value = str(value)
    return value


def options_from_mapping(raw: Mapping[str, Any]) -> EnvTreeOptions:
    """Build options from a mapping, rejecting keys the loader does not know."""

    known = {item.name for item in fields(EnvTreeOptions)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
    values: Dict[str, Any] = {key: _check_value(key, value) for key, value in raw.items()}
    return EnvTreeOptions(**values)


def load_options(path: str | Path) -> EnvTreeOptions:
    """Load EnvTreeOptions from a YAML file."""

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {path}")
    return options_from_mapping(raw)


__all__ = ["ConfigError", "EnvTreeOptions", "load_options", "options_from_mapping"]
