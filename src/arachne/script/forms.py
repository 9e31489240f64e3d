"""Built-in DSL forms for config scripts."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from arachne.constants.script import ARACHNE_ID_ATTR, DB_ID_ATTR, OP_ADD
from arachne.script.dsl import defdsl, dsl_args
from arachne.script.scope import resolve_aid, transact
from arachne.store import TempId

_AID = {"type": "string", "minLength": 1}
_ATTR_NAME = {"type": "string", "minLength": 1, "not": {"const": DB_ID_ATTR}}


@defdsl(
    {
        "type": "object",
        "properties": {
            "aid": _AID,
            "attrs": {
                "type": ["object", "null"],
                "propertyNames": _ATTR_NAME,
                "additionalProperties": {"not": {"type": "null"}},
            },
        },
        "required": ["aid"],
    }
)
def entity(aid: str, attrs: Mapping[str, Any] | None = None) -> int:
    """Define the entity with the given Arachne ID, asserting *attrs* on it.

    An entity that already carries the Arachne ID is updated in place.
    Returns the entity id.
    """
    args = dsl_args()
    tid = TempId(args["aid"])
    # A one-op batch always binds its tempid.
    return cast(int, transact([{DB_ID_ATTR: tid, ARACHNE_ID_ATTR: args["aid"], **(args["attrs"] or {})}], tid))


@defdsl(
    {
        "type": "object",
        "properties": {"aid": _AID, "attr": _ATTR_NAME, "value": {"not": {"type": "null"}}},
        "required": ["aid", "attr", "value"],
    }
)
def set_attr(aid: str, attr: str, value: Any) -> int:
    """Assert one attribute on an existing entity; returns its entity id."""
    eid = resolve_aid(aid)
    transact([(OP_ADD, eid, attr, value)])
    return eid


@defdsl(
    {
        "type": "object",
        "properties": {"aid": _AID, "attr": _ATTR_NAME, "target": _AID},
        "required": ["aid", "attr", "target"],
    }
)
def link(aid: str, attr: str, target: str) -> int:
    """Point *attr* of one entity at another; both must already exist."""
    source = resolve_aid(aid)
    transact([(OP_ADD, source, attr, resolve_aid(target))])
    return source
