"""Stable validation error codes and allowed-key sets for settings and DSL validation."""

from __future__ import annotations

CFG001: str = "CFG001"  # settings file not found (explicit --config)
CFG002: str = "CFG002"  # invalid YAML parse
CFG003: str = "CFG003"  # top-level value is not a mapping
CFG004: str = "CFG004"  # unknown top-level key
CFG005: str = "CFG005"  # invalid value type
CFG006: str = "CFG006"  # invalid enum value
CFG007: str = "CFG007"  # root directory not found

INIT001: str = "INIT001"  # initializer spec is not a mapping
INIT002: str = "INIT002"  # initializer spec must name exactly one kind
INIT003: str = "INIT003"  # invalid value for the initializer kind

ARG001: str = "ARG001"  # arguments do not bind to the DSL function signature
ARG002: str = "ARG002"  # argument fails the declared schema

ALL_CFG_CODES: tuple[str, ...] = (CFG001, CFG002, CFG003, CFG004, CFG005, CFG006, CFG007)

ALL_INIT_CODES: tuple[str, ...] = (INIT001, INIT002, INIT003)

ALLOWED_CONFIG_KEYS: frozenset[str] = frozenset({"module_paths", "log_level", "initializers"})

LIST_OF_STRINGS_KEYS: tuple[str, ...] = ("module_paths",)
