"""Settings loading, validation, and normalization for Arachne builds.

This package facade re-exports all public names so that
``from arachne.config import ...`` statements work.
"""

from __future__ import annotations

from arachne.config.loader import load_settings
from arachne.config.model import ArachneSettings
from arachne.config.validator import _suggest_key, validate_config_file

__all__ = [
    "ArachneSettings",
    "_suggest_key",
    "load_settings",
    "validate_config_file",
]
