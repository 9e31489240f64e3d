"""Settings defaults and filenames."""

from __future__ import annotations

CONFIG_FILENAME: str = "arachne.yaml"

DEFAULT_MODULE_PATHS: tuple[str, ...] = (".",)
DEFAULT_LOG_LEVEL: str = "INFO"

VALID_LOG_LEVELS: frozenset[str] = frozenset({"TRACE", "DEBUG", "INFO", "WARNING", "ERROR"})

OUTPUT_TEMP_PREFIX: str = ".arachne-graph-"
OUTPUT_TEMP_SUFFIX: str = ".json.tmp"
