"""Common key/value logging layer for the Arachne engine.

Every call takes keyword pairs (``info(msg="Loaded module", module=name)``)
and forwards them to the standard ``logging`` backend as a single
``key=value`` line, which keeps log output parseable as data. Use a single
``msg`` key to replicate more traditional logging.
"""

from __future__ import annotations

import logging
from typing import Any

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")

_LOGGER_NAME = "arachne"


def format_keyvals(keyvals: dict[str, Any]) -> str:
    """Render keyvals as ``key=value`` pairs, ``msg`` first."""
    items = sorted(keyvals.items(), key=lambda kv: (kv[0] != "msg", kv[0]))
    return " ".join(f"{key}={value}" for key, value in items)


def _log(level: int, logger: str | None, keyvals: dict[str, Any]) -> None:
    target = logging.getLogger(logger or _LOGGER_NAME)
    if target.isEnabledFor(level):
        target.log(level, "%s", format_keyvals(keyvals), stacklevel=3)


def trace(*, logger: str | None = None, **keyvals: Any) -> None:
    _log(TRACE, logger, keyvals)


def debug(*, logger: str | None = None, **keyvals: Any) -> None:
    _log(logging.DEBUG, logger, keyvals)


def info(*, logger: str | None = None, **keyvals: Any) -> None:
    _log(logging.INFO, logger, keyvals)


def warn(*, logger: str | None = None, **keyvals: Any) -> None:
    _log(logging.WARNING, logger, keyvals)


def error(*, logger: str | None = None, **keyvals: Any) -> None:
    _log(logging.ERROR, logger, keyvals)
