"""Configuration-related exceptions."""

from __future__ import annotations

from arachne.exceptions.base import ArachneError


class ConfigError(ArachneError, ValueError):
    """Raised when engine settings are invalid."""

    explanation = "The Arachne settings file or one of its initializer specs could not be used as given."
    suggestions = ("Run `arachne validate-config` to list every problem in the settings file.",)
