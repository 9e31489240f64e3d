"""Discovery and full reloading of configuration modules.

A configuration module is a Python module whose source declares
``__arachne_config__ = True`` at top level. Loading one first unloads every
configuration module known to the process, so each build evaluates all of
them from a clean slate.
"""

from __future__ import annotations

import ast
import importlib
import importlib.util
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

from arachne import log
from arachne.constants.script import CONFIG_MODULE_MARKER, SCRIPT_NAMESPACE_PREFIX
from arachne.exceptions import ConfigModuleNotFoundError, NotAConfigModuleError

_SKIPPED_DIRS: frozenset[str] = frozenset({"__pycache__", "node_modules", "site-packages"})


@dataclass(frozen=True)
class ModuleInfo:
    """A discoverable module and whether it is tagged as a configuration module."""

    name: str
    path: Path | None
    is_config: bool


def is_config_source(source: str, filename: str = "<unknown>") -> bool:
    """Test if module source declares the configuration module marker."""
    try:
        tree = ast.parse(source, filename)
    except (SyntaxError, ValueError) as exc:
        log.warn(logger=__name__, msg="Skipping module with invalid syntax", file=filename, error=exc)
        return False

    for node in tree.body:
        if isinstance(node, ast.Assign):
            targets = node.targets
        elif isinstance(node, ast.AnnAssign) and node.value is not None:
            targets = [node.target]
        else:
            continue
        if any(isinstance(t, ast.Name) and t.id == CONFIG_MODULE_MARKER for t in targets):
            return isinstance(node.value, ast.Constant) and node.value.value is True
    return False


def _is_config_file(path: Path) -> bool:
    try:
        source = importlib.util.decode_source(path.read_bytes())
    except (OSError, UnicodeDecodeError, SyntaxError) as exc:
        log.warn(logger=__name__, msg="Skipping unreadable module", file=path, error=exc)
        return False
    return is_config_source(source, str(path))


def _module_name(root: Path, path: Path) -> str | None:
    parts = path.relative_to(root).with_suffix("").parts
    if parts and parts[-1] == "__init__":
        parts = parts[:-1]
    if not parts or not all(part.isidentifier() for part in parts):
        return None
    return ".".join(parts)


def _skipped(root: Path, path: Path) -> bool:
    return any(part.startswith(".") or part in _SKIPPED_DIRS for part in path.relative_to(root).parts[:-1])


def discover_modules(paths: Sequence[Path]) -> dict[str, ModuleInfo]:
    """Find every module under the search paths; earlier paths win on name clashes."""
    found: dict[str, ModuleInfo] = {}
    for raw_root in paths:
        root = Path(raw_root).resolve()
        if not root.is_dir():
            log.warn(logger=__name__, msg="Module search path is not a directory", path=root)
            continue
        for path in sorted(root.rglob("*.py")):
            if _skipped(root, path):
                continue
            name = _module_name(root, path)
            if name is None or name in found:
                continue
            found[name] = ModuleInfo(name=name, path=path, is_config=_is_config_file(path))
    return found


def _find_importable(name: str) -> ModuleInfo | None:
    """Locate a module outside the search paths through the regular import system."""
    loaded = sys.modules.get(name)
    if isinstance(loaded, ModuleType):
        origin = getattr(loaded, "__file__", None)
        return ModuleInfo(
            name=name,
            path=Path(origin) if origin else None,
            is_config=loaded.__dict__.get(CONFIG_MODULE_MARKER) is True,
        )

    try:
        spec = importlib.util.find_spec(name)
    except (ImportError, ValueError):
        return None
    if spec is None:
        return None

    path = Path(spec.origin) if spec.origin and spec.origin.endswith(".py") else None
    return ModuleInfo(name=name, path=path, is_config=path is not None and _is_config_file(path))


def validate_config_module(discovered: dict[str, ModuleInfo], name: str, paths: Sequence[Path]) -> ModuleInfo:
    """Ensure *name* is present and a config module, raising otherwise."""
    info = discovered.get(name) or _find_importable(name)
    if info is None:
        raise ConfigModuleNotFoundError(module=name, paths=[str(p) for p in paths])
    if not info.is_config:
        raise NotAConfigModuleError(module=name, path=str(info.path) if info.path else None)
    return info


def loaded_config_modules() -> list[str]:
    """Names of currently imported modules that carry the configuration marker.

    Script namespaces that are still running are left out.
    """
    return sorted(
        name
        for name, module in list(sys.modules.items())
        if isinstance(module, ModuleType)
        and module.__dict__.get(CONFIG_MODULE_MARKER) is True
        and not name.startswith(SCRIPT_NAMESPACE_PREFIX)
    )


def unload_config_modules(discovered: dict[str, ModuleInfo]) -> list[str]:
    """Unload all config modules, so that they will be fully re-loaded."""
    names = {info.name for info in discovered.values() if info.is_config}
    names.update(loaded_config_modules())

    unloaded: list[str] = []
    for name in sorted(names):
        if sys.modules.pop(name, None) is None:
            continue
        parent_name, _, child = name.rpartition(".")
        parent = sys.modules.get(parent_name) if parent_name else None
        if isinstance(parent, ModuleType):
            parent.__dict__.pop(child, None)
        unloaded.append(name)

    if unloaded:
        log.debug(logger=__name__, msg="Unloaded config modules", modules=",".join(unloaded))
    return unloaded


@contextmanager
def _search_paths(paths: Sequence[Path]) -> Iterator[None]:
    added = [str(p) for p in paths if str(p) not in sys.path]
    sys.path[:0] = added
    try:
        yield
    finally:
        for entry in added:
            if entry in sys.path:
                sys.path.remove(entry)


def load_config_module(name: str, module_paths: Sequence[str | Path] = (".",)) -> ModuleType:
    """Evaluate the config DSL forms defined in the given module.

    The module must be a config module. Every config module is unloaded
    first, so any config modules the given module imports (transitively or
    directly) are re-evaluated as well.
    """
    paths = [Path(p).resolve() for p in module_paths]
    with _search_paths(paths):
        discovered = discover_modules(paths)
        validate_config_module(discovered, name, paths)
        unload_config_modules(discovered)
        importlib.invalidate_caches()
        log.info(logger=__name__, msg="Loading config module", module=name)
        return importlib.import_module(name)
