"""Tests for script evaluation namespaces."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from arachne.exceptions import ScriptFileNotFoundError
from arachne.script.namespace import eval_script, load_file, new_namespace_name, script_namespace


def test_namespace_names_are_unique() -> None:
    """Each call yields a fresh name with the script prefix."""
    names = {new_namespace_name() for _ in range(50)}

    assert len(names) == 50
    assert all(name.startswith("arachne_config_script_") for name in names)


def test_namespace_registered_only_while_running() -> None:
    """The namespace module lives in sys.modules only inside the block."""
    with script_namespace() as module:
        assert sys.modules[module.__name__] is module
        assert module.__arachne_config__ is True

    assert module.__name__ not in sys.modules


def test_eval_script_runs_in_fresh_namespace() -> None:
    """Globals from one script do not leak into the next."""
    first = eval_script("value = 1\n")
    second = eval_script("value = globals().get('value', 0) + 10\n")

    assert first.value == 1
    assert second.value == 10
    assert first.__name__ != second.__name__
    assert first.__name__ not in sys.modules


def test_eval_script_accepts_code_objects() -> None:
    """Pre-compiled code runs the same as source."""
    module = eval_script(compile("answer = 6 * 7\n", "<inline>", "exec"))

    assert module.answer == 42


def test_eval_script_errors_propagate_and_discard_namespace() -> None:
    """Script exceptions propagate; the namespace is still discarded."""
    before = {name for name in sys.modules if name.startswith("arachne_config_script_")}

    with pytest.raises(KeyError):
        eval_script("{}['missing']\n")

    after = {name for name in sys.modules if name.startswith("arachne_config_script_")}
    assert after == before


def test_load_file_executes_script(tmp_path: Path) -> None:
    """Script files run with ``__file__`` pointing at the script."""
    script = tmp_path / "extra.py"
    script.write_text("from pathlib import Path\nhere = Path(__file__).name\n", encoding="utf-8")

    module = load_file(script)

    assert module.here == "extra.py"
    assert module.__name__ not in sys.modules


def test_load_file_missing_path(tmp_path: Path) -> None:
    """Missing script files raise ScriptFileNotFoundError, a FileNotFoundError."""
    with pytest.raises(ScriptFileNotFoundError) as exc_info:
        load_file(tmp_path / "missing.py")

    assert isinstance(exc_info.value, FileNotFoundError)
    assert exc_info.value.data["path"].endswith("missing.py")
