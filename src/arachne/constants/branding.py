"""CLI branding strings."""

from __future__ import annotations

CLI_DESCRIPTION: str = """\
Arachne configuration builder.

Builds a configuration graph by applying initializers (function references,
configuration modules, script files, ops batches and inline scripts) in order.
"""
