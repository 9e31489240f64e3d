"""Initializer variants and their construction from settings specs.

An initializer is one unit of configuration-building work. Settings files
describe initializers as single-key mappings::

    initializers:
      - module: myapp.config
      - file: scripts/extra.py
      - function: myapp.defaults:base_config
      - ops: [{arachne/id: myapp/server, server/port: 8080}]
      - script: "transact([{'arachne/id': 'myapp/debug'}])"
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import CodeType
from typing import Any

from arachne.constants.script import INITIALIZER_KINDS
from arachne.constants.validation import INIT001, INIT002, INIT003
from arachne.exceptions import InitializerError
from arachne.exceptions.validation import ValidationError


@dataclass(frozen=True)
class NamedFunction:
    """Reference to a function ``graph -> graph``, as ``pkg.mod:fn`` or ``pkg.mod.fn``."""

    ref: str


@dataclass(frozen=True)
class ModuleReference:
    """Name of a configuration module to (re)load."""

    name: str


@dataclass(frozen=True)
class ScriptFile:
    """Path of a script file to execute in a fresh namespace."""

    path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))


@dataclass(frozen=True)
class OpsBatch:
    """Literal store operations applied directly to the graph."""

    ops: tuple[Any, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "ops", tuple(self.ops))


@dataclass(frozen=True)
class InlineScript:
    """Literal script source or compiled code; empty source is a no-op."""

    source: str | CodeType | None = None


Initializer = NamedFunction | ModuleReference | ScriptFile | OpsBatch | InlineScript

INITIALIZER_TYPES: tuple[type, ...] = (NamedFunction, ModuleReference, ScriptFile, OpsBatch, InlineScript)


def resolve_function(ref: str) -> Callable[..., Any]:
    """Import the module named by a qualified function reference and return the function."""
    if ":" in ref:
        module_name, _, attr_path = ref.partition(":")
    else:
        module_name, _, attr_path = ref.rpartition(".")
    if not module_name or not attr_path:
        raise InitializerError(initializer=ref, reason=f"`{ref}` is not a qualified function reference")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise InitializerError(initializer=ref, reason=f"cannot import `{module_name}` ({exc})") from exc

    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise InitializerError(initializer=ref, reason=f"`{module_name}` has no attribute `{attr_path}`") from exc

    if not callable(target):
        raise InitializerError(initializer=ref, reason=f"`{ref}` is not callable")
    return target


def _spec_problems(raw: Any) -> list[tuple[str, str, str]]:
    """Return ``(code, field, message)`` for everything wrong with an initializer spec."""
    if not isinstance(raw, Mapping):
        return [(INIT001, "", f"initializer spec must be a mapping, got {type(raw).__name__}")]

    problems: list[tuple[str, str, str]] = []
    for key in sorted(set(map(str, raw.keys())) - set(INITIALIZER_KINDS)):
        problems.append((INIT002, key, f"unknown initializer kind `{key}`"))
    kinds = [kind for kind in INITIALIZER_KINDS if kind in raw]
    if len(kinds) != 1:
        problems.append((INIT002, "", f"initializer spec must name exactly one of: {', '.join(INITIALIZER_KINDS)}"))
        return problems

    kind = kinds[0]
    value = raw[kind]
    if kind in ("function", "module", "file"):
        if not isinstance(value, str) or not value.strip():
            problems.append((INIT003, kind, f"`{kind}` must be a non-empty string"))
    elif kind == "ops":
        if not isinstance(value, list):
            problems.append((INIT003, kind, "`ops` must be a list of operations"))
    elif kind == "script" and value is not None and not isinstance(value, str):
        problems.append((INIT003, kind, "`script` must be a string"))
    return problems


def parse_initializer(raw: Any) -> Initializer | None:
    """Turn a settings spec (or an initializer variant) into an initializer variant."""
    if raw is None or isinstance(raw, INITIALIZER_TYPES):
        return raw

    problems = _spec_problems(raw)
    if problems:
        raise InitializerError(initializer=raw, reason=problems[0][2])

    kind = next(k for k in INITIALIZER_KINDS if k in raw)
    value = raw[kind]
    if kind == "function":
        return NamedFunction(ref=value.strip())
    if kind == "module":
        return ModuleReference(name=value.strip())
    if kind == "file":
        return ScriptFile(path=Path(value))
    if kind == "ops":
        return OpsBatch(ops=value)
    return InlineScript(source=value)


def validate_initializer_specs(specs: Sequence[Any], path_str: str) -> list[ValidationError]:
    """Validate every initializer spec and return all validation errors."""
    errors: list[ValidationError] = []
    for index, raw in enumerate(specs):
        for code, key, message in _spec_problems(raw):
            field_name = f"initializers[{index}]"
            errors.append(
                ValidationError(
                    code=code,
                    path=path_str,
                    field=f"{field_name}.{key}" if key else field_name,
                    message=message,
                )
            )
    return errors
