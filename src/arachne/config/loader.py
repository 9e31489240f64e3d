"""Settings loading and normalization for Arachne builds."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from arachne.config.model import ArachneSettings
from arachne.constants.config import (
    CONFIG_FILENAME,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MODULE_PATHS,
    VALID_LOG_LEVELS,
)
from arachne.exceptions import ConfigError, InitializerError
from arachne.script.initializer import Initializer, ScriptFile, parse_initializer


def load_settings(root: Path, config_path: Path | None = None) -> ArachneSettings:
    """Load and validate engine settings from ``arachne.yaml`` or an explicit path."""
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        return ArachneSettings(module_paths=_resolve_paths(list(DEFAULT_MODULE_PATHS), root))

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML config file at {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {path} must be a YAML mapping")

    base_dir = path.parent

    log_level = raw.get("log_level", DEFAULT_LOG_LEVEL)
    if not isinstance(log_level, str) or log_level.upper() not in VALID_LOG_LEVELS:
        raise ConfigError(f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, got {log_level!r}")

    initializers_raw = raw.get("initializers", [])
    if initializers_raw is None:
        initializers_raw = []
    if not isinstance(initializers_raw, list):
        raise ConfigError("initializers must be a list")

    return ArachneSettings(
        module_paths=_resolve_paths(
            _ensure_string_list(raw.get("module_paths", list(DEFAULT_MODULE_PATHS)), "module_paths"),
            base_dir,
        ),
        log_level=log_level.upper(),
        initializers=tuple(_build_initializer(spec, index, base_dir) for index, spec in enumerate(initializers_raw)),
        source_path=path,
    )


def _ensure_string_list(value: Any, key_name: str) -> list[str]:
    """Coerce a value to a list of strings, raising ConfigError on type mismatch."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key_name} must be a list of strings")
    return list(value)


def _resolve_paths(paths: list[str], base_dir: Path) -> tuple[Path, ...]:
    """Resolve search paths against the settings directory, dropping duplicates."""
    resolved: list[Path] = []
    for entry in paths:
        if not entry.strip():
            continue
        path = Path(entry)
        path = (path if path.is_absolute() else base_dir / path).resolve()
        if path not in resolved:
            resolved.append(path)
    return tuple(resolved)


def _build_initializer(spec: Any, index: int, base_dir: Path) -> Initializer:
    """Parse one initializer spec; script files resolve against the settings directory."""
    try:
        initializer = parse_initializer(spec)
    except InitializerError as exc:
        raise ConfigError(f"initializers[{index}]: {exc}") from exc
    if initializer is None:
        raise ConfigError(f"initializers[{index}] must not be empty")
    if isinstance(initializer, ScriptFile) and not initializer.path.is_absolute():
        return ScriptFile(path=base_dir / initializer.path)
    return initializer
