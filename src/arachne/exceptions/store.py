"""Entity store exceptions."""

from __future__ import annotations

from arachne.exceptions.base import ArachneError


class TransactionError(ArachneError, ValueError):
    """Raised when an ops batch contains an operation the store cannot apply."""

    message = "Invalid operation: :reason"
    explanation = (
        "Operations must be mappings of attributes, `(\"db/add\", entity, attr, value)` "
        "or `(\"create-entity\", {attr: value})` sequences."
    )
    suggestions = ("Check the shape of the offending operation.",)
    data_docs = {
        "op": "The offending operation",
        "reason": "Why the operation was rejected",
    }
