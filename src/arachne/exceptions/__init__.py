"""Shared exception hierarchy for Arachne."""

from __future__ import annotations

from .base import ArachneError
from .config import ConfigError
from .script import (
    ArgumentValidationError,
    ConfigModuleNotFoundError,
    InitializerError,
    NotAConfigModuleError,
    ScopeError,
    ScriptFileNotFoundError,
    UnresolvedReferenceError,
)
from .store import TransactionError

__all__ = [
    "ArachneError",
    "ArgumentValidationError",
    "ConfigError",
    "ConfigModuleNotFoundError",
    "InitializerError",
    "NotAConfigModuleError",
    "ScopeError",
    "ScriptFileNotFoundError",
    "TransactionError",
    "UnresolvedReferenceError",
]
