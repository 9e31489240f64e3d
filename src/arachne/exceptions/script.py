"""Exceptions raised while evaluating configuration scripts."""

from __future__ import annotations

import traceback
from collections.abc import Sequence
from typing import Any

from arachne.exceptions.base import ArachneError
from arachne.exceptions.validation import ValidationError, format_errors


def _called_from(frames: Sequence[traceback.FrameSummary]) -> list[str]:
    """Render script call sites as an explain() section, or nothing."""
    if not frames:
        return []
    return ["", "Called from:", *(line.rstrip("\n") for line in traceback.format_list(list(frames)))]


class ScopeError(ArachneError, RuntimeError):
    """Raised when a scope-dependent operation runs with no active context scope."""

    message = "Cannot reference context config in non-script context"
    explanation = (
        "You attempted to use one of Arachne's script-building DSL forms, but you're not currently "
        "in the context of a config initialization script. The script DSL forms work by imperatively "
        'updating a configuration that\'s currently "in context"; it is not meaningful to call DSL '
        "forms by themselves, or at the REPL."
    )
    suggestions = (
        "Use this DSL form only inside a config initialization script "
        "(such as you would pass to `arachne.build_config`).",
    )


class UnresolvedReferenceError(ArachneError, LookupError):
    """Raised when an Arachne ID does not name any entity in the context config."""

    message = "Could not find entity identified by `:aid`"
    explanation = (
        "An entity with an Arachne ID of `:aid` was referenced from a `:dsl_fn` DSL form. However, "
        "no entity with that Arachne ID actually exists in the config, yet.\n\n"
        "The `:dsl_fn` function does require that the entities it references be concretely "
        "defined in the context configuration before they can be used."
    )
    suggestions = (
        "Ensure that you have already created entities with the specified Arachne ID in your config script.",
        "Make sure that the Arachne IDs match exactly, with no typos.",
    )
    data_docs = {
        "cfg": "The config as of this invocation",
        "aid": "The missing Arachne ID",
        "dsl_fn": "The DSL form in question",
    }

    def __init__(
        self,
        *,
        cfg: Any,
        aid: Any,
        dsl_fn: str,
        script_frames: Sequence[traceback.FrameSummary] = (),
    ) -> None:
        super().__init__(cfg=cfg, aid=aid, dsl_fn=dsl_fn)
        self.script_frames: tuple[traceback.FrameSummary, ...] = tuple(script_frames)

    def explain(self) -> str:
        return "\n".join([super().explain(), *_called_from(self.script_frames)])


class ConfigModuleNotFoundError(ArachneError, ModuleNotFoundError):
    """Raised when a configuration module cannot be found on the search paths."""

    message = "Could not find config module `:module`"
    explanation = (
        "You specified that `:module` was an Arachne configuration module (that is, a module "
        "containing Arachne configuration DSL forms.)\n\n"
        "However, `:module` could not be found on the module search paths."
    )
    suggestions = (
        "Ensure that a module named `:module` exists on one of the configured `module_paths`.",
        "Ensure that the declaration and the usages of `:module` are all typo-free.",
    )
    data_docs = {"module": "The missing module", "paths": "The searched module paths"}


class NotAConfigModuleError(ArachneError, ImportError):
    """Raised when a module exists but is not tagged as a configuration module."""

    message = "`:module` is not a config module"
    explanation = (
        "You specified that `:module` was an Arachne configuration module (that is, a module "
        "containing Arachne configuration DSL forms.)\n\n"
        "Config modules are identified by a top-level `__arachne_config__ = True` assignment in "
        "the module source. However, `:module` does not declare it."
    )
    suggestions = (
        "Add `__arachne_config__ = True` to `:module`, if it is intended to be a config module.",
        "Use a different module that is actually a config module.",
    )
    data_docs = {"module": "The module", "path": "Where the module source was found"}


class ScriptFileNotFoundError(ArachneError, FileNotFoundError):
    """Raised when a config script file does not exist."""

    message = "Config script file not found: :path"
    suggestions = ("Check the path of the script initializer; relative paths resolve against the working directory.",)
    data_docs = {"path": "The missing script path"}


class InitializerError(ArachneError, ValueError):
    """Raised when an initializer cannot be interpreted or resolved."""

    message = "Invalid initializer: :reason"
    suggestions = (
        "Function references take the form `package.module:function` or `package.module.function`.",
        "Initializer specs are mappings with exactly one of `function`, `module`, `file`, `ops`, `script`.",
    )
    data_docs = {"initializer": "The offending initializer", "reason": "Why it was rejected"}


class ArgumentValidationError(ArachneError, TypeError):
    """Raised by a DSL function before its body runs when its arguments fail the declared shape."""

    message = "Invalid arguments to DSL form `:dsl_fn`"
    explanation = "The arguments passed to `:dsl_fn` do not conform to its declared argument schema."
    suggestions = ("Check the call against the documented arguments of `:dsl_fn`.",)
    data_docs = {
        "dsl_fn": "The DSL form in question",
        "args": "The literal positional arguments",
        "kwargs": "The literal keyword arguments",
        "errors": "Each validation failure",
    }

    def __init__(
        self,
        *,
        dsl_fn: str,
        errors: Sequence[ValidationError],
        args: tuple[Any, ...] = (),
        kwargs: dict[str, Any] | None = None,
        script_frames: Sequence[traceback.FrameSummary] = (),
    ) -> None:
        super().__init__(dsl_fn=dsl_fn, errors=tuple(errors), args=args, kwargs=dict(kwargs or {}))
        self.errors: tuple[ValidationError, ...] = tuple(errors)
        self.script_frames: tuple[traceback.FrameSummary, ...] = tuple(script_frames)

    def explain(self) -> str:
        report = [super().explain(), "", "Problems:", format_errors(list(self.errors))]
        return "\n".join([*report, *_called_from(self.script_frames)])
