"""Immutable in-memory entity store backing configuration graphs."""

from __future__ import annotations

from .graph import ConfigGraph, TempId, TxRecord, apply, attr, empty_graph, resolve_tempid

__all__ = ["ConfigGraph", "TempId", "TxRecord", "apply", "attr", "empty_graph", "resolve_tempid"]
