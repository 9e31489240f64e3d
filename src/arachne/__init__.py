"""Arachne configuration-script engine.

Builds configuration graphs by applying initializers (function references,
configuration modules, script files, literal ops batches, inline scripts)
against a scoped, transactional entity store.
"""

from __future__ import annotations

from arachne.script import (
    InlineScript,
    ModuleReference,
    NamedFunction,
    OpsBatch,
    ScriptFile,
    apply_initializer,
    build_config,
    context_config,
    defdsl,
    resolve_aid,
    transact,
    update,
)
from arachne.store import ConfigGraph, TempId

__version__ = "0.4.0"

__all__ = [
    "ConfigGraph",
    "InlineScript",
    "ModuleReference",
    "NamedFunction",
    "OpsBatch",
    "ScriptFile",
    "TempId",
    "__version__",
    "apply_initializer",
    "build_config",
    "context_config",
    "defdsl",
    "resolve_aid",
    "transact",
    "update",
]
