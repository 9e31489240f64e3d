"""Configuration graph output."""

from .json_io import render_graph, write_graph

__all__ = ["render_graph", "write_graph"]
