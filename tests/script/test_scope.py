"""Tests for the context scope and the scope-dependent accessors."""

from __future__ import annotations

import threading

import pytest

from arachne.exceptions import ScopeError, UnresolvedReferenceError
from arachne.script import context_config, resolve_aid, transact, update
from arachne.script.scope import in_scope, with_scope
from arachne.store import TempId, apply, attr, empty_graph


@pytest.mark.parametrize(
    "call",
    [
        context_config,
        lambda: update(lambda graph: graph),
        lambda: transact([{"arachne/id": "a"}]),
        lambda: resolve_aid("a"),
    ],
)
def test_accessors_require_scope(call) -> None:
    """Every scope-dependent accessor raises ScopeError with no active scope."""
    with pytest.raises(ScopeError, match="non-script context"):
        call()


def test_scope_error_raised_at_any_call_depth() -> None:
    """Nested helper calls outside any scope still fail with ScopeError."""

    def deep(depth: int):
        return deep(depth - 1) if depth else context_config()

    with pytest.raises(ScopeError):
        deep(10)


def test_with_scope_exposes_final_graph() -> None:
    """Updates made in the block are visible on the yielded scope afterwards."""
    base = empty_graph()
    with with_scope(base) as scope:
        assert context_config() is base
        transact([{"arachne/id": "app"}])

    assert not in_scope()
    assert attr(scope.graph, ("arachne/id", "app"), "db/id") == 1
    assert base.entities == {}


def test_scope_unbound_when_block_fails() -> None:
    """The scope is torn down even when the block raises."""
    with pytest.raises(RuntimeError):
        with with_scope(empty_graph()):
            raise RuntimeError("boom")

    assert not in_scope()


def test_nested_scopes_restore_outer_scope() -> None:
    """Leaving an inner scope restores the enclosing one unchanged."""
    outer_graph = apply(empty_graph(), [{"arachne/id": "outer"}])
    with with_scope(outer_graph) as outer:
        with with_scope(empty_graph()):
            transact([{"arachne/id": "inner"}])
            assert len(context_config().entities) == 1
        assert context_config() is outer_graph

    assert outer.graph is outer_graph


def test_update_passes_extra_arguments() -> None:
    """``update`` calls the function with the context config first."""
    with with_scope(empty_graph()):
        result = update(apply, [{"arachne/id": "a"}], provenance={"source": "test"})
        assert context_config() is result

    assert result.transactions[-1].provenance == {"source": "test"}


def test_transact_returns_resolved_tempid() -> None:
    """The tempid resolves against the graph after the transaction."""
    with with_scope(empty_graph()):
        transact([{"arachne/id": "first"}])
        eid = transact([{"db/id": "x", "arachne/id": "second"}], "x")
        assert eid == 2
        assert transact([{"arachne/id": "third"}]) is None


def test_transact_tempid_tracks_upserts() -> None:
    """A tempid bound to an existing Arachne ID resolves to that entity."""
    with with_scope(empty_graph()):
        first = transact([{"db/id": "a", "arachne/id": "srv"}], "a")
        second = transact([{"db/id": "b", "arachne/id": "srv", "port": 1}], "b")

    assert first == second == 1


def test_resolve_aid_finds_entity() -> None:
    """Known Arachne IDs resolve to their entity id."""
    graph = apply(empty_graph(), [{"arachne/id": "a"}, {"arachne/id": "b"}])
    with with_scope(graph):
        assert resolve_aid("b") == 2


def test_resolve_aid_missing_raises_without_mutation() -> None:
    """A missing Arachne ID raises with the current config attached."""
    graph = apply(empty_graph(), [{"arachne/id": "a"}])
    with with_scope(graph) as scope:
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            resolve_aid("nope")

    err = exc_info.value
    assert scope.graph is graph
    assert err.data["cfg"] is graph
    assert err.data["aid"] == "nope"
    assert err.data["dsl_fn"] == "<unknown>"
    assert "`nope`" in str(err)
    assert isinstance(err, LookupError)


def test_scope_is_not_shared_across_threads() -> None:
    """A scope bound in one thread is invisible to another."""
    seen: list[bool] = []
    with with_scope(empty_graph()):
        worker = threading.Thread(target=lambda: seen.append(in_scope()))
        worker.start()
        worker.join()
        assert in_scope()

    assert seen == [False]


def test_empty_transact_resolves_no_tempid() -> None:
    """An empty batch does not reuse tempids from the previous transaction."""
    with with_scope(empty_graph()):
        assert transact([{"db/id": TempId("x"), "k": 1}], TempId("x")) == 1
        assert transact([], TempId("x")) is None
        assert transact([], "x") is None
