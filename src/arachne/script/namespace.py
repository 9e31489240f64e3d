"""Fresh, uniquely named evaluation namespaces for config scripts."""

from __future__ import annotations

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from types import CodeType, ModuleType

from arachne.constants.script import CONFIG_MODULE_MARKER, SCRIPT_NAMESPACE_PREFIX
from arachne.exceptions import ScriptFileNotFoundError

logger = logging.getLogger(__name__)


def new_namespace_name() -> str:
    """Return a module name no other script namespace in this process uses."""
    return f"{SCRIPT_NAMESPACE_PREFIX}_{uuid.uuid4().hex}"


@contextmanager
def script_namespace() -> Iterator[ModuleType]:
    """Invoke the block in the context of a new, unique config namespace.

    The namespace module is registered in ``sys.modules`` while the block
    runs and discarded afterwards.
    """
    name = new_namespace_name()
    module = ModuleType(name, "Arachne config script namespace")
    setattr(module, CONFIG_MODULE_MARKER, True)
    sys.modules[name] = module
    logger.debug("Created script namespace %s", name)
    try:
        yield module
    finally:
        sys.modules.pop(name, None)


def load_file(path: str | Path) -> ModuleType:
    """Execute a script file in a new namespace and return the namespace."""
    script_path = Path(path)
    if not script_path.is_file():
        raise ScriptFileNotFoundError(path=str(script_path))

    source = script_path.read_text(encoding="utf-8")
    code = compile(source, str(script_path), "exec")
    with script_namespace() as module:
        module.__file__ = str(script_path.resolve())
        exec(code, module.__dict__)
    return module


def eval_script(source: str | CodeType) -> ModuleType:
    """Execute inline script source (or a compiled code object) in a new namespace."""
    with script_namespace() as module:
        code = source if isinstance(source, CodeType) else compile(source, f"<{module.__name__}>", "exec")
        exec(code, module.__dict__)
    return module
