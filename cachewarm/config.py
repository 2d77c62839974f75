"""Configuration loading for cachewarm (.cachewarm.yml)."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

import yaml

from .logging import get_logger
from .process import FailurePolicy

CONFIG_FILENAME = ".cachewarm.yml"

DEFAULT_REPO_URL = "https://github.com/denoland/deno_std"
DEFAULT_REPO_DIR = "./temp/deno_std"
DEFAULT_FILES_GLOB = "**/*/*.ts"
DEFAULT_EXCLUDE = (
    ".devcontainer/",
    ".git/",
    ".github/",
)
DEFAULT_DEPS_FILE = "./temp/imports.ts"
DEFAULT_DEPS_URL = "https://deno.land/std"
DEFAULT_CLONE_ARGS = ("--depth=1",)

_PATH_FIELDS = ("repo_dir", "deps_file")

_logger = get_logger("config")


class ConfigError(RuntimeError):
    """Raised when the configuration cannot be parsed or holds invalid values."""


@dataclass(frozen=True)
class WarmConfig:
    """Settings for a single cache warming run, built once at start-up."""

    repo_url: str = DEFAULT_REPO_URL
    repo_dir: Path = Path(DEFAULT_REPO_DIR)
    files_glob: str = DEFAULT_FILES_GLOB
    exclude: Tuple[str, ...] = DEFAULT_EXCLUDE
    deps_file: Path = Path(DEFAULT_DEPS_FILE)
    deps_url: str = DEFAULT_DEPS_URL
    cache_tool: Optional[str] = None
    clone_args: Tuple[str, ...] = DEFAULT_CLONE_ARGS
    failure_policy: FailurePolicy = FailurePolicy.IGNORE
    timeout: Optional[float] = None

    def with_overrides(self, **values: Any) -> "WarmConfig":
        """Return a copy with every non-None value in ``values`` applied."""
        changes = {
            name: _coerce_field(name, value)
            for name, value in values.items()
            if value is not None
        }
        return replace(self, **changes)


_FIELD_NAMES = frozenset(field.name for field in fields(WarmConfig))


def load_config(config_path: Path | str) -> WarmConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(Path(config_path))
    if not config_file.exists():
        _logger.debug("No configuration at %s; using defaults", config_file)
        return WarmConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    values: Dict[str, Any] = {}
    for key, value in data.items():
        if value is None:
            continue
        values[str(key)] = _coerce_field(str(key), value)

    base = config_file.parent
    for name in _PATH_FIELDS:
        path = values.get(name)
        if path is not None and not path.is_absolute():
            values[name] = base / path

    _logger.debug("Loaded configuration from %s", config_file)
    return WarmConfig(**values)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _coerce_field(name: str, value: Any) -> Any:
    if name not in _FIELD_NAMES:
        raise ConfigError(f"Unknown configuration key: {name}")
    if name in _PATH_FIELDS:
        return Path(_as_str(name, value)).expanduser()
    if name in ("exclude", "clone_args"):
        return _as_str_tuple(name, value)
    if name == "failure_policy":
        return _as_policy(value)
    if name == "timeout":
        return _as_timeout(value)
    return _as_str(name, value)


def _as_str(name: str, value: Any) -> str:
    if isinstance(value, Path):
        return str(value)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{name} must be a non-empty string")
    return value


def _as_str_tuple(name: str, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Sequence):
        items = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigError(f"{name} must be a list of strings")
            items.append(item)
        return tuple(items)
    raise ConfigError(f"{name} must be a list of strings")


def _as_policy(value: Any) -> FailurePolicy:
    if isinstance(value, FailurePolicy):
        return value
    try:
        return FailurePolicy(str(value).strip().lower())
    except ValueError as exc:
        choices = ", ".join(policy.value for policy in FailurePolicy)
        raise ConfigError(f"failure_policy must be one of: {choices}") from exc


def _as_timeout(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ConfigError("timeout must be a number of seconds")
    try:
        seconds = float(value)
    except ValueError as exc:
        raise ConfigError("timeout must be a number of seconds") from exc
    if seconds <= 0:
        raise ConfigError("timeout must be positive")
    return seconds


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "WarmConfig",
    "load_config",
]
