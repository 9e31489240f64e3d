"""Settings file validation for Arachne builds."""

from __future__ import annotations

import difflib
from pathlib import Path

import yaml

from arachne.constants.config import CONFIG_FILENAME, VALID_LOG_LEVELS
from arachne.constants.validation import (
    ALLOWED_CONFIG_KEYS,
    CFG001,
    CFG002,
    CFG003,
    CFG004,
    CFG005,
    CFG006,
    LIST_OF_STRINGS_KEYS,
)
from arachne.exceptions.validation import ValidationError
from arachne.script.initializer import validate_initializer_specs


def validate_config_file(
    root: Path,
    config_path: Path | None = None,
    *,
    config_explicit: bool = False,
) -> list[ValidationError]:
    """Validate an arachne.yaml file and return all validation errors.

    This is the collect-all entry point used by both ``arachne validate-config``
    and ``arachne build`` preflight. It never raises; all problems are returned
    as :class:`ValidationError` instances.
    """
    errors: list[ValidationError] = []
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    path_str = str(path)

    if not path.exists():
        if config_explicit:
            errors.append(
                ValidationError(
                    code=CFG001,
                    path=path_str,
                    field="",
                    message=f"config file not found: {path}",
                )
            )
        return errors

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        errors.append(
            ValidationError(
                code=CFG002,
                path=path_str,
                field="",
                message=f"invalid YAML: {exc}",
            )
        )
        return errors

    if raw is None:
        return errors

    if not isinstance(raw, dict):
        errors.append(
            ValidationError(
                code=CFG003,
                path=path_str,
                field="",
                message=f"config must be a YAML mapping, got {type(raw).__name__}",
            )
        )
        return errors

    for key in sorted(map(str, raw.keys())):
        if key not in ALLOWED_CONFIG_KEYS:
            errors.append(
                ValidationError(
                    code=CFG004,
                    path=path_str,
                    field=key,
                    message=f"unknown key `{key}`",
                    hint=_suggest_key(key, ALLOWED_CONFIG_KEYS),
                )
            )

    if "log_level" in raw:
        val = raw["log_level"]
        if not isinstance(val, str) or val.upper() not in VALID_LOG_LEVELS:
            errors.append(
                ValidationError(
                    code=CFG006,
                    path=path_str,
                    field="log_level",
                    message="invalid value for `log_level`",
                    hint=f"expected one of: {', '.join(sorted(VALID_LOG_LEVELS))}; got: {val!r}",
                )
            )

    for key in LIST_OF_STRINGS_KEYS:
        if key not in raw or raw[key] is None:
            continue
        val = raw[key]
        if not isinstance(val, list) or not all(isinstance(item, str) for item in val):
            errors.append(
                ValidationError(
                    code=CFG005,
                    path=path_str,
                    field=key,
                    message=f"invalid type for `{key}`",
                    hint="expected a list of strings",
                )
            )

    if "initializers" in raw and raw["initializers"] is not None:
        specs = raw["initializers"]
        if not isinstance(specs, list):
            errors.append(
                ValidationError(
                    code=CFG005,
                    path=path_str,
                    field="initializers",
                    message="invalid type for `initializers`",
                    hint="expected a list of initializer specs",
                )
            )
        else:
            errors.extend(validate_initializer_specs(specs, path_str))

    return errors


def _suggest_key(key: str, allowed: frozenset[str]) -> str:
    """Return a 'did you mean' hint for a misspelled key, or an empty string."""
    matches = difflib.get_close_matches(key, sorted(allowed), n=1, cutoff=0.6)
    if matches:
        return f"did you mean `{matches[0]}`?"
    return ""
