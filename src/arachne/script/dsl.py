"""Definition of configuration DSL functions.

``defdsl`` wraps a plain builder function so every call validates its
arguments against a declared JSON Schema, runs under a provenance record
and exposes the conformed arguments to the body through ``dsl_args()``::

    @defdsl({
        "type": "object",
        "properties": {"aid": {"type": "string"}, "port": {"type": "integer"}},
        "required": ["aid"],
    })
    def server(aid, port=8080):
        \"\"\"Define a server entity.\"\"\"
        return transact([{"arachne/id": aid, "server/port": dsl_args()["port"]}])
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable, Mapping
from contextvars import ContextVar
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, TypeVar

from jsonschema import Draft202012Validator

from arachne.constants.validation import ARG001, ARG002
from arachne.exceptions import ArgumentValidationError, ScopeError
from arachne.exceptions.validation import ValidationError, sort_errors
from arachne.script.provenance import FramePredicate, is_script_frame, script_stack, with_provenance

F = TypeVar("F", bound=Callable[..., Any])

DEFAULT_ARGSPEC: Mapping[str, Any] = MappingProxyType({"type": "object"})


@dataclass(frozen=True)
class DslFunction:
    """Registry entry describing a defined DSL function."""

    name: str
    doc: str
    schema: Mapping[str, Any]
    signature: inspect.Signature
    fn: Callable[..., Any]


DSL_REGISTRY: dict[str, DslFunction] = {}

_CONFORMED_ARGS: ContextVar[Mapping[str, Any] | None] = ContextVar("arachne_dsl_args", default=None)


def dsl_args() -> Mapping[str, Any]:
    """Return the conformed arguments of the DSL function currently executing."""
    conformed = _CONFORMED_ARGS.get()
    if conformed is None:
        raise ScopeError("dsl_args() is only available inside the body of a DSL function")
    return conformed


def _schema_view(value: Any) -> Any:
    """Convert tuples and read-only mappings to the JSON types the validator understands."""
    if isinstance(value, Mapping):
        return {k: _schema_view(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_schema_view(v) for v in value]
    return value


def _conform(
    name: str,
    signature: inspect.Signature,
    validator: Draft202012Validator,
    stack_filter: FramePredicate,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> Mapping[str, Any]:
    """Bind and validate call arguments, raising ArgumentValidationError on any problem."""
    try:
        bound = signature.bind(*args, **kwargs)
    except TypeError as exc:
        errors = [ValidationError(code=ARG001, path=name, field="", message=str(exc))]
        raise ArgumentValidationError(
            dsl_fn=name,
            errors=errors,
            args=args,
            kwargs=kwargs,
            script_frames=script_stack(stack_filter),
        ) from exc

    bound.apply_defaults()
    payload = dict(bound.arguments)
    errors = [
        ValidationError(
            code=ARG002,
            path=name,
            field=".".join(str(part) for part in err.absolute_path),
            message=err.message,
        )
        for err in validator.iter_errors(_schema_view(payload))
    ]
    if errors:
        raise ArgumentValidationError(
            dsl_fn=name,
            errors=sort_errors(errors),
            args=args,
            kwargs=kwargs,
            script_frames=script_stack(stack_filter),
        )
    return MappingProxyType(payload)


def defdsl(
    argspec: Mapping[str, Any] | None = None,
    *,
    name: str | None = None,
    stack_filter: FramePredicate = is_script_frame,
) -> Callable[[F], F]:
    """Define a DSL function that tracks provenance and validates its arguments.

    *argspec* is a JSON Schema for the mapping of parameter names to bound
    argument values (defaults applied). The schema itself is checked when the
    function is defined. *stack_filter* selects the call-site frames that
    errors raised by the function report.
    """
    schema = dict(argspec if argspec is not None else DEFAULT_ARGSPEC)
    Draft202012Validator.check_schema(schema)
    validator = Draft202012Validator(schema)

    def decorator(fn: F) -> F:
        qualified_name = name or f"{fn.__module__}.{fn.__qualname__}"
        signature = inspect.signature(fn)

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            conformed = _conform(qualified_name, signature, validator, stack_filter, args, kwargs)
            with with_provenance(
                "user",
                qualified_name,
                args=args,
                kwargs=kwargs,
                stack_filter=stack_filter,
            ):
                token = _CONFORMED_ARGS.set(conformed)
                try:
                    return fn(*args, **kwargs)
                finally:
                    _CONFORMED_ARGS.reset(token)

        wrapper.__dsl_name__ = qualified_name  # type: ignore[attr-defined]
        wrapper.__dsl_schema__ = schema  # type: ignore[attr-defined]
        DSL_REGISTRY[qualified_name] = DslFunction(
            name=qualified_name,
            doc=inspect.getdoc(fn) or "",
            schema=schema,
            signature=signature,
            fn=wrapper,
        )
        return wrapper  # type: ignore[return-value]

    return decorator
