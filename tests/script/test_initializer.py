"""Tests for initializer variants and settings specs."""

from __future__ import annotations

from pathlib import Path

import pytest

from arachne.constants.validation import INIT001, INIT002, INIT003
from arachne.exceptions import InitializerError
from arachne.script import InlineScript, ModuleReference, NamedFunction, OpsBatch, ScriptFile
from arachne.script.initializer import parse_initializer, resolve_function, validate_initializer_specs


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ({"function": "pkg.mod:fn"}, NamedFunction("pkg.mod:fn")),
        ({"module": " myapp.config "}, ModuleReference("myapp.config")),
        ({"file": "scripts/extra.py"}, ScriptFile(Path("scripts/extra.py"))),
        ({"ops": [{"arachne/id": "a"}]}, OpsBatch(({"arachne/id": "a"},))),
        ({"script": "x = 1"}, InlineScript("x = 1")),
        ({"script": None}, InlineScript(None)),
    ],
)
def test_parse_initializer_specs(raw: object, expected: object) -> None:
    """Each spec kind maps to its variant."""
    assert parse_initializer(raw) == expected


def test_parse_initializer_passes_variants_through() -> None:
    """Variants and None are returned unchanged."""
    batch = OpsBatch([])
    assert parse_initializer(batch) is batch
    assert parse_initializer(None) is None


@pytest.mark.parametrize(
    "raw",
    [
        "myapp.config",
        {},
        {"module": "a", "file": "b"},
        {"modul": "a"},
        {"module": ""},
        {"ops": "not-a-list"},
        {"script": 12},
    ],
)
def test_parse_initializer_rejects_invalid_specs(raw: object) -> None:
    """Malformed specs raise InitializerError."""
    with pytest.raises(InitializerError):
        parse_initializer(raw)


def test_script_file_coerces_path() -> None:
    """Script file paths are stored as Path objects."""
    assert ScriptFile("a/b.py").path == Path("a/b.py")


def test_resolve_function_accepts_both_forms() -> None:
    """Colon and dotted references resolve the same function."""
    import os.path

    assert resolve_function("os.path:join") is os.path.join
    assert resolve_function("os.path.join") is os.path.join


@pytest.mark.parametrize(
    ("ref", "fragment"),
    [
        ("nodots", "not a qualified function reference"),
        ("no_such_module_xyz:fn", "cannot import"),
        ("os.path:no_such_function", "has no attribute"),
        ("os:sep", "not callable"),
    ],
)
def test_resolve_function_failures(ref: str, fragment: str) -> None:
    """Unresolvable references raise InitializerError."""
    with pytest.raises(InitializerError, match=fragment):
        resolve_function(ref)


def test_validate_initializer_specs_collects_all_problems() -> None:
    """Every bad spec is reported with its index."""
    errors = validate_initializer_specs(
        [{"module": "ok"}, "bad", {"modul": "x"}, {"file": 3}],
        "arachne.yaml",
    )

    assert [(e.code, e.field) for e in errors] == [
        (INIT001, "initializers[1]"),
        (INIT002, "initializers[2].modul"),
        (INIT002, "initializers[2]"),
        (INIT003, "initializers[3].file"),
    ]
    assert all(e.path == "arachne.yaml" for e in errors)
