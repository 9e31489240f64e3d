"""Base exception carrying structured, explainable error data."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_PLACEHOLDER = re.compile(r":([a-z][a-z0-9_]*)")


def _interpolate(template: str, data: Mapping[str, Any]) -> str:
    """Replace ``:key`` placeholders in *template* with values from *data*."""

    def _sub(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in data:
            return match.group(0)
        return str(data[key])

    return _PLACEHOLDER.sub(_sub, template)


class ArachneError(Exception):
    """Root of the Arachne exception hierarchy.

    Subclasses declare a ``message`` template (``:key`` placeholders are
    filled from the keyword data), an ``explanation``, remediation
    ``suggestions`` and ``data_docs`` describing each data key.
    """

    message: str = "Arachne error"
    explanation: str = ""
    suggestions: tuple[str, ...] = ()
    data_docs: Mapping[str, str] = {}

    def __init__(self, message: str | None = None, **data: Any) -> None:
        self.data: dict[str, Any] = dict(data)
        self.message = _interpolate(message if message is not None else type(self).message, self.data)
        super().__init__(self.message)

    def explain(self) -> str:
        """Render message, explanation and suggestions as a readable report."""
        lines = [self.message]
        explanation = _interpolate(self.explanation, self.data).strip()
        if explanation:
            lines.extend(["", explanation])
        if self.suggestions:
            lines.extend(["", "Suggestions:"])
            lines.extend(f"  - {_interpolate(s, self.data)}" for s in self.suggestions)
        return "\n".join(lines)
