"""Tests for provenance records and script-frame filtering."""

from __future__ import annotations

import sys

import pytest

from arachne.script.namespace import eval_script
from arachne.script.provenance import (
    Provenance,
    current_dsl_function,
    current_provenance,
    is_script_frame,
    script_frames,
    script_stack,
    with_provenance,
)


def test_with_provenance_nests_and_restores() -> None:
    """The innermost record is active and the previous one returns on exit."""
    assert current_provenance() is None

    with with_provenance("user", "outer.fn", args=(1,)) as outer:
        assert current_dsl_function() == "outer.fn"
        with with_provenance("user", "inner.fn"):
            assert current_dsl_function() == "inner.fn"
        assert current_provenance() is outer

    assert current_provenance() is None
    assert current_dsl_function() is None


def test_provenance_restored_after_error() -> None:
    """A failing block still unwinds its provenance record."""
    with pytest.raises(ValueError):
        with with_provenance("user", "failing.fn"):
            raise ValueError("boom")

    assert current_provenance() is None


def test_snapshot_omits_stack_filter() -> None:
    """Snapshots contain only plain data."""
    provenance = Provenance("user", "demo.fn", args=("a",), kwargs={"b": 1}, stack_filter=is_script_frame)

    assert provenance.snapshot() == {
        "source": "user",
        "function": "demo.fn",
        "args": ("a",),
        "kwargs": {"b": 1},
    }
    assert provenance == Provenance("user", "demo.fn", args=("a",), kwargs={"b": 1})


def test_is_script_frame_accepts_script_namespaces() -> None:
    """Frames running in a script namespace are script frames; test frames are not."""
    module = eval_script("import sys\nframe = sys._getframe()\n")

    assert is_script_frame(module.frame)
    assert not is_script_frame(sys._getframe())


def test_is_script_frame_accepts_marked_modules() -> None:
    """Frames whose globals carry the config marker are script frames."""
    namespace = {"__name__": "plain_module", "__arachne_config__": True, "sys": sys}
    exec("frame = sys._getframe()", namespace)

    assert is_script_frame(namespace["frame"])


def test_script_frames_filters_traceback() -> None:
    """Only the frames from the script survive filtering."""
    with pytest.raises(ZeroDivisionError) as exc_info:
        eval_script("def divide():\n    return 1 / 0\n\ndivide()\n")

    frames = script_frames(exc_info.value.__traceback__)

    assert [frame.lineno for frame in frames] == [4, 2]
    assert all(frame.filename.startswith("<arachne_config_script_") for frame in frames)


def test_script_stack_outside_scripts_is_empty() -> None:
    """Plain test code has no script frames on its stack."""
    assert script_stack() == []
