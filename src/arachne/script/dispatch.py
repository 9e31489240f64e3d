"""Applying initializers to configuration graphs."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from arachne import log
from arachne.constants.config import DEFAULT_MODULE_PATHS
from arachne.exceptions import InitializerError
from arachne.script.initializer import (
    InlineScript,
    ModuleReference,
    NamedFunction,
    OpsBatch,
    ScriptFile,
    parse_initializer,
    resolve_function,
)
from arachne.script.loader import load_config_module
from arachne.script.namespace import eval_script, load_file
from arachne.script.scope import update, with_scope
from arachne.store import ConfigGraph, empty_graph
from arachne.store import apply as store_apply


def apply_initializer(
    cfg: ConfigGraph,
    initializer: Any,
    *,
    module_paths: Sequence[str | Path] = DEFAULT_MODULE_PATHS,
) -> ConfigGraph:
    """Apply the given initializer to the specified config and return the resulting config.

    *cfg* itself is never modified; if the initializer fails the error
    propagates and the caller keeps the original graph.
    """
    with with_scope(cfg) as scope:
        match initializer:
            case NamedFunction(ref=ref):
                result = update(resolve_function(ref))
                if not isinstance(result, ConfigGraph):
                    raise InitializerError(
                        initializer=initializer,
                        reason=f"`{ref}` returned {type(result).__name__}, not a ConfigGraph",
                    )
            case ModuleReference(name=name):
                load_config_module(name, module_paths)
            case ScriptFile(path=path):
                load_file(path)
            case OpsBatch(ops=ops):
                update(store_apply, ops)
            case InlineScript(source=source) if source:
                eval_script(source)
            case InlineScript() | None:
                pass
            case _:
                raise InitializerError(
                    initializer=initializer,
                    reason=f"unsupported initializer type {type(initializer).__name__}",
                )
        log.trace(logger=__name__, msg="Applied initializer", initializer=initializer)
        return scope.graph


def build_config(
    initializers: Iterable[Any],
    cfg: ConfigGraph | None = None,
    *,
    module_paths: Sequence[str | Path] = DEFAULT_MODULE_PATHS,
) -> ConfigGraph:
    """Apply initializers (variants or settings specs) in order, starting from *cfg* or an empty graph."""
    graph = cfg if cfg is not None else empty_graph()
    count = 0
    for raw in initializers:
        graph = apply_initializer(graph, parse_initializer(raw), module_paths=module_paths)
        count += 1
    log.info(
        logger=__name__,
        msg="Built config",
        initializers=count,
        entities=len(graph.entities),
        transactions=len(graph.transactions),
    )
    return graph
