"""Preflight validation orchestrator.

Runs settings-file validation (initializer specs included) behind a single
entry point that both ``arachne validate-config`` and ``arachne build``
share, keeping the two paths in sync.
"""

from __future__ import annotations

from pathlib import Path

from arachne.config import validate_config_file
from arachne.constants.validation import CFG007
from arachne.exceptions.validation import ValidationError, sort_errors


def preflight_validate(root: Path, config_path: Path | None = None) -> list[ValidationError]:
    """Run all preflight validation checks and return errors in deterministic order.

    Returns an empty list when everything is valid.
    """
    errors: list[ValidationError] = []
    resolved_root = root.resolve()
    if not resolved_root.is_dir():
        errors.append(
            ValidationError(
                code=CFG007,
                path=str(resolved_root),
                field="",
                message=f"root directory does not exist: {resolved_root}",
            )
        )
        return sort_errors(errors)

    errors.extend(validate_config_file(root, config_path, config_explicit=config_path is not None))
    return sort_errors(errors)
