"""Serialization of built configuration graphs to JSON."""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import suppress
from pathlib import Path

from arachne.constants.config import OUTPUT_TEMP_PREFIX, OUTPUT_TEMP_SUFFIX
from arachne.store import ConfigGraph


def render_graph(graph: ConfigGraph) -> str:
    """Return the graph snapshot as indented, key-sorted JSON text."""
    return json.dumps(graph.to_dict(), indent=2, sort_keys=True)


def write_graph(path: Path, graph: ConfigGraph) -> Path:
    """Write the graph snapshot to *path*, replacing any previous build atomically."""
    text = render_graph(graph) + "\n"
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=OUTPUT_TEMP_PREFIX, suffix=OUTPUT_TEMP_SUFFIX)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.replace(temp_name, path)
    except OSError:
        with suppress(FileNotFoundError):
            Path(temp_name).unlink()
        raise
    return path
