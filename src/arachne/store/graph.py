"""Configuration graph values and the transaction function that produces them.

A ``ConfigGraph`` is never mutated: ``apply`` copies the entities it touches
and returns a new graph, so the same ops applied to the same graph always
yield an equal result.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from arachne.constants.script import (
    DB_ID_ATTR,
    OP_ADD,
    OP_CREATE_ENTITY,
    UNIQUE_IDENTITY_ATTRS,
)
from arachne.exceptions import TransactionError

logger = logging.getLogger(__name__)

EntityRef = Any


@dataclass(frozen=True)
class TempId:
    """Placeholder for an entity that does not have an id until its transaction is applied."""

    label: str


@dataclass(frozen=True)
class TxRecord:
    """Entry in the graph's append-only transaction log."""

    tx: int
    op_count: int
    provenance: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class ConfigGraph:
    """Immutable accumulated configuration state."""

    entities: Mapping[int, Mapping[str, Any]] = field(default_factory=dict)
    next_eid: int = 1
    tempids: Mapping[str, int] = field(default_factory=dict)
    transactions: tuple[TxRecord, ...] = ()

    def entity(self, eid: int) -> Mapping[str, Any] | None:
        """Return the attributes of *eid*, or None if it does not exist."""
        return self.entities.get(eid)

    def find(self, attr_name: str, value: Any) -> int | None:
        """Return the lowest entity id whose *attr_name* equals *value*."""
        for eid in sorted(self.entities):
            attrs = self.entities[eid]
            if attr_name in attrs and attrs[attr_name] == value:
                return eid
        return None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible snapshot of the graph."""
        return {
            "entities": [
                {DB_ID_ATTR: eid, **{name: _jsonable(v) for name, v in sorted(self.entities[eid].items())}}
                for eid in sorted(self.entities)
            ],
            "transactions": [
                {
                    "tx": record.tx,
                    "op_count": record.op_count,
                    "provenance": _jsonable(record.provenance) if record.provenance else None,
                }
                for record in self.transactions
            ],
        }


def empty_graph() -> ConfigGraph:
    """Return a graph with no entities and no transactions."""
    return ConfigGraph()


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value, key=repr) if isinstance(value, (set, frozenset)) else value
        return [_jsonable(v) for v in items]
    return repr(value)


def _tempid_label(ref: Any) -> str | None:
    if isinstance(ref, TempId):
        return ref.label
    if isinstance(ref, str):
        return ref
    return None


def _normalize_op(op: Any) -> tuple[Any, dict[str, Any]]:
    """Return ``(target, attrs)`` for a single operation."""
    if isinstance(op, Mapping):
        attrs = {k: v for k, v in op.items() if k != DB_ID_ATTR}
        return op.get(DB_ID_ATTR), attrs

    if isinstance(op, Sequence) and not isinstance(op, (str, bytes)) and op:
        kind = op[0]
        if kind == OP_ADD:
            if len(op) != 4:
                raise TransactionError(op=op, reason=f"`{OP_ADD}` takes entity, attribute and value")
            return op[1], {op[2]: op[3]}
        if kind == OP_CREATE_ENTITY:
            if len(op) != 2 or not isinstance(op[1], Mapping):
                raise TransactionError(op=op, reason=f"`{OP_CREATE_ENTITY}` takes a single attribute mapping")
            attrs = {k: v for k, v in op[1].items() if k != DB_ID_ATTR}
            return op[1].get(DB_ID_ATTR), attrs
        raise TransactionError(op=op, reason=f"unknown operation {kind!r}")

    raise TransactionError(op=op, reason="operation must be a mapping or a sequence")


def _check_attrs(op: Any, attrs: Mapping[str, Any]) -> None:
    for name, value in attrs.items():
        if not isinstance(name, str) or not name:
            raise TransactionError(op=op, reason=f"attribute names must be non-empty strings, got {name!r}")
        if name == DB_ID_ATTR:
            raise TransactionError(op=op, reason=f"`{DB_ID_ATTR}` cannot be asserted as an attribute")
        if value is None:
            raise TransactionError(op=op, reason=f"attribute `{name}` has no value")


class _Transaction:
    """Working state of one ``apply`` call."""

    def __init__(self, graph: ConfigGraph) -> None:
        self.graph = graph
        self.entities: dict[int, dict[str, Any]] = {}
        self.next_eid = graph.next_eid
        self.tempids: dict[str, int] = {}
        self.pending_unique: dict[tuple[str, Any], int] = {}

    def allocate(self) -> int:
        eid = self.next_eid
        self.next_eid += 1
        return eid

    def exists(self, eid: int) -> bool:
        return eid in self.entities or eid in self.graph.entities

    def upsert_target(self, attrs: Mapping[str, Any]) -> int | None:
        for name in sorted(UNIQUE_IDENTITY_ATTRS & attrs.keys()):
            key = (name, attrs[name])
            if key in self.pending_unique:
                return self.pending_unique[key]
            existing = self.graph.find(name, attrs[name])
            if existing is not None:
                return existing
        return None

    def resolve_target(self, op: Any, target: Any, attrs: Mapping[str, Any]) -> int:
        label = _tempid_label(target)
        if target is None or label is not None:
            if label is not None and label in self.tempids:
                return self.tempids[label]
            eid = self.upsert_target(attrs)
            if eid is None:
                eid = self.allocate()
            if label is not None:
                self.tempids[label] = eid
            return eid

        if isinstance(target, bool):
            raise TransactionError(op=op, reason=f"invalid entity reference {target!r}")
        if isinstance(target, int):
            if not self.exists(target):
                raise TransactionError(op=op, reason=f"entity {target} does not exist")
            return target
        if isinstance(target, (tuple, list)) and len(target) == 2:
            lookup = (target[0], target[1])
            eid = self.graph.find(*lookup)
            if eid is None:
                eid = self.pending_unique.get(lookup)
            if eid is None:
                raise TransactionError(op=op, reason=f"lookup ref {target!r} matches no entity")
            return eid
        raise TransactionError(op=op, reason=f"invalid entity reference {target!r}")

    def resolve_value(self, op: Any, value: Any) -> Any:
        if isinstance(value, TempId):
            if value.label not in self.tempids:
                raise TransactionError(op=op, reason=f"tempid {value.label!r} is not defined in this transaction")
            return self.tempids[value.label]
        return value

    def assert_attrs(self, eid: int, attrs: Mapping[str, Any]) -> None:
        if eid not in self.entities:
            self.entities[eid] = dict(self.graph.entities.get(eid, {}))
        self.entities[eid].update(attrs)


def apply(graph: ConfigGraph, ops: Iterable[Any], *, provenance: Mapping[str, Any] | None = None) -> ConfigGraph:
    """Apply an ops batch to *graph* and return the resulting graph.

    Operations are mappings (optionally carrying ``db/id``),
    ``("db/add", entity, attr, value)`` or ``("create-entity", attrs)``.
    Raises TransactionError on malformed operations; *graph* is never modified.
    """
    if isinstance(ops, (str, bytes, Mapping)):
        raise TransactionError(op=ops, reason="an ops batch must be a sequence of operations")
    batch = list(ops)
    if not batch:
        return graph

    txn = _Transaction(graph)
    planned: list[tuple[Any, int, dict[str, Any]]] = []
    for op in batch:
        target, attrs = _normalize_op(op)
        _check_attrs(op, attrs)
        eid = txn.resolve_target(op, target, attrs)
        for name in UNIQUE_IDENTITY_ATTRS & attrs.keys():
            txn.pending_unique.setdefault((name, attrs[name]), eid)
        planned.append((op, eid, attrs))

    for op, eid, attrs in planned:
        txn.assert_attrs(eid, {name: txn.resolve_value(op, value) for name, value in attrs.items()})

    entities = dict(graph.entities)
    entities.update(txn.entities)
    record = TxRecord(
        tx=len(graph.transactions) + 1,
        op_count=len(batch),
        provenance=dict(provenance) if provenance else None,
    )
    logger.debug("Applied transaction %d with %d ops", record.tx, record.op_count)
    return ConfigGraph(
        entities=entities,
        next_eid=txn.next_eid,
        tempids=dict(txn.tempids),
        transactions=graph.transactions + (record,),
    )


def resolve_tempid(graph: ConfigGraph, tempid: TempId | str) -> int | None:
    """Return the entity id a tempid of the graph's latest transaction resolved to."""
    label = _tempid_label(tempid)
    if label is None:
        return None
    return graph.tempids.get(label)


def attr(graph: ConfigGraph, entity_ref: EntityRef, attr_name: str) -> Any:
    """Return the value of *attr_name* on the referenced entity, or None.

    *entity_ref* is an entity id or a lookup ref ``(attr, value)``.
    ``db/id`` returns the entity id itself.
    """
    if isinstance(entity_ref, tuple) and len(entity_ref) == 2:
        eid = graph.find(*entity_ref)
    elif isinstance(entity_ref, int) and not isinstance(entity_ref, bool):
        eid = entity_ref
    else:
        return None

    if eid is None or eid not in graph.entities:
        return None
    if attr_name == DB_ID_ATTR:
        return eid
    return graph.entities[eid].get(attr_name)
