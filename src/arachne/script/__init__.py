"""Initialization and script support for configuration graphs.

DSL forms used inside config scripts and config modules::

    from arachne.script import defdsl, resolve_aid, transact
"""

from __future__ import annotations

from .dispatch import apply_initializer, build_config
from .dsl import DSL_REGISTRY, DslFunction, defdsl, dsl_args
from .forms import entity, link, set_attr
from .initializer import (
    Initializer,
    InlineScript,
    ModuleReference,
    NamedFunction,
    OpsBatch,
    ScriptFile,
    parse_initializer,
    validate_initializer_specs,
)
from .loader import discover_modules, load_config_module
from .provenance import Provenance, current_dsl_function, current_provenance, is_script_frame, script_frames
from .scope import (
    ContextScope,
    context_config,
    current_graph,
    in_scope,
    resolve_aid,
    transact,
    update,
    with_scope,
)

__all__ = [
    "DSL_REGISTRY",
    "ContextScope",
    "DslFunction",
    "Initializer",
    "InlineScript",
    "ModuleReference",
    "NamedFunction",
    "OpsBatch",
    "Provenance",
    "ScriptFile",
    "apply_initializer",
    "build_config",
    "context_config",
    "current_dsl_function",
    "current_graph",
    "current_provenance",
    "defdsl",
    "discover_modules",
    "dsl_args",
    "entity",
    "in_scope",
    "is_script_frame",
    "link",
    "load_config_module",
    "parse_initializer",
    "resolve_aid",
    "script_frames",
    "set_attr",
    "transact",
    "update",
    "validate_initializer_specs",
    "with_scope",
]
