"""Tests for collect-all settings validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from arachne.config import _suggest_key, validate_config_file
from arachne.constants.validation import (
    ALL_CFG_CODES,
    ALL_INIT_CODES,
    ALLOWED_CONFIG_KEYS,
    CFG001,
    CFG002,
    CFG003,
    CFG004,
    CFG005,
    CFG006,
    CFG007,
    INIT002,
    INIT003,
)
from arachne.exceptions.validation import ValidationError, format_errors
from arachne.validation import preflight_validate


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "arachne.yaml"
    path.write_text(content, encoding="utf-8")
    return path


def _codes(errors: list[ValidationError]) -> list[str]:
    return [error.code for error in errors]


def test_missing_default_file_is_valid(tmp_path: Path) -> None:
    assert validate_config_file(tmp_path) == []


def test_missing_explicit_file(tmp_path: Path) -> None:
    errors = validate_config_file(tmp_path, tmp_path / "nope.yaml", config_explicit=True)

    assert _codes(errors) == [CFG001]


@pytest.mark.parametrize(
    ("content", "code"),
    [
        ("module_paths: [", CFG002),
        ("just a string\n", CFG003),
        ("modul_paths: [src]\n", CFG004),
        ("module_paths: src\n", CFG005),
        ("module_paths: [1, 2]\n", CFG005),
        ("initializers: {module: a}\n", CFG005),
        ("log_level: LOUD\n", CFG006),
        ("initializers:\n  - {module: a, file: b}\n", INIT002),
        ("initializers:\n  - ops: 3\n", INIT003),
    ],
)
def test_single_problem_codes(tmp_path: Path, content: str, code: str) -> None:
    errors = validate_config_file(tmp_path, _write(tmp_path, content))

    assert _codes(errors) == [code]


def test_collects_every_problem(tmp_path: Path) -> None:
    content = "log_levl: INFO\nlog_level: 3\nmodule_paths: src\ninitializers:\n  - module: ''\n"

    errors = validate_config_file(tmp_path, _write(tmp_path, content))

    assert sorted(_codes(errors)) == [CFG004, CFG005, CFG006, INIT003]
    unknown = next(error for error in errors if error.code == CFG004)
    assert unknown.field == "log_levl"
    assert unknown.hint == "did you mean `log_level`?"


def test_valid_file_has_no_errors(tmp_path: Path) -> None:
    content = "module_paths: [src]\nlog_level: WARNING\ninitializers:\n  - module: app.config\n  - script: null\n"

    assert validate_config_file(tmp_path, _write(tmp_path, content)) == []


def test_suggest_key() -> None:
    assert _suggest_key("initialisers", ALLOWED_CONFIG_KEYS) == "did you mean `initializers`?"
    assert _suggest_key("zzz", ALLOWED_CONFIG_KEYS) == ""


def test_preflight_reports_missing_root(tmp_path: Path) -> None:
    errors = preflight_validate(tmp_path / "absent")

    assert _codes(errors) == [CFG007]


def test_preflight_sorts_errors(tmp_path: Path) -> None:
    _write(tmp_path, "zzz: 1\nlog_level: LOUD\n")

    errors = preflight_validate(tmp_path)

    assert _codes(errors) == [CFG004, CFG006]


def test_format_errors_is_deterministic() -> None:
    errors = [
        ValidationError(code=CFG006, path="a.yaml", field="log_level", message="bad", hint="use INFO"),
        ValidationError(code=CFG004, path="a.yaml", field="x", message="unknown key `x`", line=3),
    ]

    assert format_errors(errors) == (
        "[CFG004] a.yaml:3 x: unknown key `x`\n[CFG006] a.yaml log_level: bad (use INFO)"
    )


def test_reported_codes_are_registered(tmp_path: Path) -> None:
    content = "bogus: 1\nlog_level: LOUD\nmodule_paths: 3\ninitializers:\n  - 5\n  - {module: a, ops: []}\n  - file: ''\n"

    errors = preflight_validate(tmp_path, _write(tmp_path, content))

    assert len(errors) == 6
    assert {error.code for error in errors} <= set(ALL_CFG_CODES) | set(ALL_INIT_CODES)
    assert len(set(ALL_CFG_CODES)) == len(ALL_CFG_CODES)
