"""Shared pytest fixtures for config modules and scripts written to temporary directories."""

from __future__ import annotations

import sys
import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path
from types import ModuleType

import pytest

from arachne.constants.script import CONFIG_MODULE_MARKER


@pytest.fixture()
def module_root(tmp_path: Path) -> Path:
    """Return an empty directory used as a module search path."""
    root = tmp_path / "modules"
    root.mkdir()
    return root


@pytest.fixture()
def write_module(module_root: Path) -> Callable[..., Path]:
    """Return a helper writing a module (config-tagged by default) under ``module_root``."""

    def _write(name: str, body: str = "", *, config: bool = True) -> Path:
        parts = name.split(".")
        directory = module_root.joinpath(*parts[:-1])
        directory.mkdir(parents=True, exist_ok=True)
        for depth in range(1, len(parts)):
            init = module_root.joinpath(*parts[:depth], "__init__.py")
            if not init.exists():
                init.write_text("", encoding="utf-8")
        header = f"{CONFIG_MODULE_MARKER} = True\n" if config else ""
        path = directory / f"{parts[-1]}.py"
        path.write_text(header + textwrap.dedent(body), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _forget_test_modules(tmp_path_factory: pytest.TempPathFactory) -> Iterator[None]:
    """Drop modules imported from temporary directories or tagged as config modules."""
    before = set(sys.modules)
    yield
    base = str(tmp_path_factory.getbasetemp())
    for name in set(sys.modules) - before:
        module = sys.modules.get(name)
        if not isinstance(module, ModuleType):
            continue
        origin = getattr(module, "__file__", None) or ""
        if module.__dict__.get(CONFIG_MODULE_MARKER) is True or origin.startswith(base):
            sys.modules.pop(name, None)
