"""Names and markers shared by the script engine."""

from __future__ import annotations

SCRIPT_NAMESPACE_PREFIX: str = "arachne_config_script"
CONFIG_MODULE_MARKER: str = "__arachne_config__"

UNKNOWN_DSL_FUNCTION: str = "<unknown>"

ARACHNE_ID_ATTR: str = "arachne/id"
DB_ID_ATTR: str = "db/id"

OP_ADD: str = "db/add"
OP_CREATE_ENTITY: str = "create-entity"

UNIQUE_IDENTITY_ATTRS: frozenset[str] = frozenset({ARACHNE_ID_ATTR})

INITIALIZER_KINDS: tuple[str, ...] = ("function", "module", "file", "ops", "script")
