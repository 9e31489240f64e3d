"""The context configuration of a running initializer.

Each ``apply_initializer`` call binds exactly one ``ContextScope`` through a
``ContextVar``; DSL forms read and update the graph held by that scope
without having it threaded through their arguments. Every accessor fails
with ScopeError when no scope is active.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

from arachne.constants.script import ARACHNE_ID_ATTR, DB_ID_ATTR, UNKNOWN_DSL_FUNCTION
from arachne.exceptions import ScopeError, UnresolvedReferenceError
from arachne.script.provenance import current_dsl_function, current_provenance, is_script_frame, script_stack
from arachne.store import ConfigGraph, TempId
from arachne.store import apply as store_apply
from arachne.store import attr as store_attr
from arachne.store import resolve_tempid as store_resolve_tempid


@dataclass
class ContextScope:
    """Mutable cell holding the graph under construction."""

    graph: ConfigGraph


_SCOPE: ContextVar[ContextScope | None] = ContextVar("arachne_context_scope", default=None)


def _active_scope() -> ContextScope:
    scope = _SCOPE.get()
    if scope is None:
        raise ScopeError()
    return scope


def in_scope() -> bool:
    """Whether a context scope is active for the calling context."""
    return _SCOPE.get() is not None


@contextmanager
def with_scope(graph: ConfigGraph) -> Iterator[ContextScope]:
    """Bind a fresh scope holding *graph* for the duration of the block.

    The scope is unbound on every exit path; read ``scope.graph`` after the
    block for the final value. Scopes nest: the enclosing scope is restored.
    """
    scope = ContextScope(graph=graph)
    token = _SCOPE.set(scope)
    try:
        yield scope
    finally:
        _SCOPE.reset(token)


def context_config() -> ConfigGraph:
    """Return the config value currently in context."""
    return _active_scope().graph


current_graph = context_config


def update(fn: Callable[..., ConfigGraph], *args: Any, **kwargs: Any) -> ConfigGraph:
    """Replace the context config with ``fn(config, *args, **kwargs)`` and return it."""
    scope = _active_scope()
    scope.graph = fn(scope.graph, *args, **kwargs)
    return scope.graph


def transact(ops: Iterable[Any], tempid: TempId | str | None = None) -> int | None:
    """Update the context config with the given ops.

    If a tempid is provided, the entity id it resolved to in the resulting
    config is returned. An empty batch is not a transaction and resolves no
    tempid.
    """
    provenance = current_provenance()
    previous = context_config()
    new_graph = update(store_apply, ops, provenance=provenance.snapshot() if provenance else None)
    if tempid is None or new_graph is previous:
        return None
    return store_resolve_tempid(new_graph, tempid)


def resolve_aid(aid: Any) -> int:
    """Return the entity id of the entity with the given Arachne ID in the context config.

    Raises UnresolvedReferenceError if no such entity exists yet.
    """
    cfg = context_config()
    eid = store_attr(cfg, (ARACHNE_ID_ATTR, aid), DB_ID_ATTR)
    if eid is None:
        provenance = current_provenance()
        stack_filter = provenance.stack_filter if provenance and provenance.stack_filter else is_script_frame
        raise UnresolvedReferenceError(
            cfg=cfg,
            aid=aid,
            dsl_fn=current_dsl_function() or UNKNOWN_DSL_FUNCTION,
            script_frames=script_stack(stack_filter),
        )
    return eid
