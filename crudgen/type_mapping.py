# File: crudgen/type_mapping.py
"""
NexaFlow CrudGen - Column Type Mapping
=======================================
Maps raw database column types onto two vocabularies:

    1. A *target type*: a language-neutral sized type name (``integer``,
       ``long``, ``decimal``, ``datetime`` ...) plus an optional marker.
    2. A *wire type*: the coarse four-way split the generated TypeScript
       artifacts work with (``number``, ``boolean``, ``Date``, ``string``).

Both mappings are pure and cached; unknown types land in the string bucket.
"""

from __future__ import annotations

import functools
import logging
import re
from enum import Enum
from typing import Dict, FrozenSet, List, NamedTuple

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.type_mapping")

# ---------------------------------------------------------------------------
# Type vocabularies
# ---------------------------------------------------------------------------


class WireType(str, Enum):
    """Over-the-wire representation used by the rendered artifacts."""

    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "Date"
    STRING = "string"


class MappedType(NamedTuple):
    """A target type name with its optionality."""

    name: str
    nullable: bool

    @property
    def declaration(self) -> str:
        return f"{self.name}?" if self.nullable else self.name


DEFAULT_TARGET_TYPE: str = "string"

_TARGET_TYPE_MAP: Dict[str, str] = {
    # Integer family
    "int": "integer",
    "integer": "integer",
    "bigint": "long",
    "smallint": "short",
    "tinyint": "byte",
    # Boolean
    "bit": "boolean",
    "boolean": "boolean",
    "bool": "boolean",
    # Decimal / money family
    "decimal": "decimal",
    "numeric": "decimal",
    "money": "decimal",
    "smallmoney": "decimal",
    # Floating point
    "float": "double",
    "real": "double",
    "double": "double",
    # Temporal family
    "datetime": "datetime",
    "datetime2": "datetime",
    "smalldatetime": "datetime",
    "timestamp": "datetime",
    "date": "date",
    "time": "time",
    "datetimeoffset": "datetimeoffset",
    # Identifiers
    "uniqueidentifier": "guid",
    "uuid": "guid",
    # Text family
    "char": "string",
    "varchar": "string",
    "nchar": "string",
    "nvarchar": "string",
    "text": "string",
    "ntext": "string",
    # Binary family
    "binary": "bytes",
    "varbinary": "bytes",
    "image": "bytes",
    "blob": "bytes",
    "bytea": "bytes",
}

_NUMERIC_TARGETS: FrozenSet[str] = frozenset(
    {"integer", "long", "short", "byte", "decimal", "double"}
)
_TEMPORAL_TARGETS: FrozenSet[str] = frozenset(
    {"datetime", "date", "time", "datetimeoffset"}
)

# "varchar(50)", "DECIMAL(10, 2)", "double precision"
_TYPE_SUFFIX_RE: re.Pattern[str] = re.compile(r"\s*\(.*\)\s*$")


# ---------------------------------------------------------------------------
# Public mapping functions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def normalize_raw_type(raw_type: str) -> str:
    """
    Lower-case a raw column type and drop any length/precision suffix.

    Examples:
        >>> normalize_raw_type("NVARCHAR(50)")
        'nvarchar'
        >>> normalize_raw_type("double precision")
        'double'
    """
    base: str = _TYPE_SUFFIX_RE.sub("", raw_type.strip().lower())
    # Multi-word SQL types ("double precision", "timestamp without time zone")
    return base.split(" ")[0] if base else base


@functools.lru_cache(maxsize=None)
def target_type_name(raw_type: str) -> str:
    """Return the sized target type name for *raw_type* (``string`` if unknown)."""
    return _TARGET_TYPE_MAP.get(normalize_raw_type(raw_type), DEFAULT_TARGET_TYPE)


@functools.lru_cache(maxsize=None)
def map_target_type(raw_type: str, nullable: bool, is_primary_key: bool) -> MappedType:
    """
    Map a column onto its target type.

    The optional marker is suppressed for primary keys even when the
    column itself is declared nullable.
    """
    return MappedType(
        name=target_type_name(raw_type),
        nullable=nullable and not is_primary_key,
    )


@functools.lru_cache(maxsize=None)
def map_wire_type(raw_type: str) -> WireType:
    """Place *raw_type* into exactly one wire-type bucket."""
    target: str = target_type_name(raw_type)
    if target in _NUMERIC_TARGETS:
        return WireType.NUMBER
    if target == "boolean":
        return WireType.BOOLEAN
    if target in _TEMPORAL_TARGETS:
        return WireType.DATE
    return WireType.STRING


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "WireType",
    "MappedType",
    "DEFAULT_TARGET_TYPE",
    "normalize_raw_type",
    "target_type_name",
    "map_target_type",
    "map_wire_type",
]

logger.debug("crudgen.type_mapping loaded.")
