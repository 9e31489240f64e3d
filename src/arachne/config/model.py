"""Settings data model for Arachne builds."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from arachne.constants.config import DEFAULT_LOG_LEVEL
from arachne.log import TRACE
from arachne.script.initializer import Initializer


@dataclass(frozen=True)
class ArachneSettings:
    """Resolved engine settings."""

    module_paths: tuple[Path, ...] = ()
    log_level: str = DEFAULT_LOG_LEVEL
    initializers: tuple[Initializer, ...] = ()
    source_path: Path | None = None

    @property
    def log_level_number(self) -> int:
        """Numeric ``logging`` level for ``log_level``."""
        if self.log_level == "TRACE":
            return TRACE
        return int(getattr(logging, self.log_level, logging.INFO))
