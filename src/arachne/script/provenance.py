"""Provenance annotations for DSL invocations and script-frame filtering.

A DSL call runs under a ``Provenance`` record naming the qualified DSL
function, its literal arguments and a predicate selecting the stack frames
that originate from configuration scripts. Transactions stamp the active
record into the graph's transaction log; error reporting uses the predicate
to trim tracebacks down to user script code.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from types import FrameType, TracebackType
from typing import Any

from arachne.constants.script import CONFIG_MODULE_MARKER, SCRIPT_NAMESPACE_PREFIX

FramePredicate = Callable[[FrameType], bool]


@dataclass(frozen=True)
class Provenance:
    """Who or what produced a contribution to the configuration."""

    source: str
    function: str
    args: tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict)
    stack_filter: FramePredicate | None = field(default=None, compare=False, repr=False)

    def snapshot(self) -> dict[str, Any]:
        """Return the data recorded alongside a transaction."""
        return {
            "source": self.source,
            "function": self.function,
            "args": self.args,
            "kwargs": dict(self.kwargs),
        }


_PROVENANCE: ContextVar[Provenance | None] = ContextVar("arachne_provenance", default=None)


def current_provenance() -> Provenance | None:
    """Return the innermost active provenance record, if any."""
    return _PROVENANCE.get()


def current_dsl_function() -> str | None:
    """Return the qualified name of the DSL function currently executing."""
    provenance = _PROVENANCE.get()
    return provenance.function if provenance is not None else None


@contextmanager
def with_provenance(
    source: str,
    function: str,
    *,
    args: tuple[Any, ...] = (),
    kwargs: Mapping[str, Any] | None = None,
    stack_filter: FramePredicate | None = None,
) -> Iterator[Provenance]:
    """Run the block under a provenance record; the previous record is restored on exit."""
    provenance = Provenance(
        source=source,
        function=function,
        args=tuple(args),
        kwargs=dict(kwargs or {}),
        stack_filter=stack_filter,
    )
    token = _PROVENANCE.set(provenance)
    try:
        yield provenance
    finally:
        _PROVENANCE.reset(token)


def is_script_frame(frame: FrameType) -> bool:
    """Test if a frame executes code from a config script namespace or config module."""
    module_name = frame.f_globals.get("__name__", "")
    if isinstance(module_name, str) and module_name.startswith(SCRIPT_NAMESPACE_PREFIX):
        return True
    return frame.f_globals.get(CONFIG_MODULE_MARKER) is True


def script_frames(
    tb: TracebackType | None,
    predicate: FramePredicate = is_script_frame,
) -> list[traceback.FrameSummary]:
    """Filter a traceback down to the frames accepted by *predicate*."""
    frames = [(frame, lineno) for frame, lineno in traceback.walk_tb(tb) if predicate(frame)]
    return list(traceback.StackSummary.extract(iter(frames)))


def script_stack(
    predicate: FramePredicate = is_script_frame,
    frame: FrameType | None = None,
) -> list[traceback.FrameSummary]:
    """Return the current call stack filtered by *predicate*, outermost frame first."""
    frames = [(f, lineno) for f, lineno in traceback.walk_stack(frame) if predicate(f)]
    frames.reverse()
    return list(traceback.StackSummary.extract(iter(frames)))
