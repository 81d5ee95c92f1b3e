# File: crudgen/errors.py
"""
NexaFlow CrudGen - Error Taxonomy
==================================
Exceptions raised inside the generation pipeline.

Propagation policy:
    - ``SchemaError`` (and subclasses) is per-table: the orchestrator records
      it and moves on to the next table.
    - ``PatchAnchorNotFound`` is per-patch: the navigation patcher logs it
      and skips that insertion.
    - ``OSError`` (built-in) is per-file: recorded, processing continues.
    - Anything else is unexpected and aborts the whole request.
"""

from __future__ import annotations

import logging
from typing import List, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.errors")


class CrudGenError(Exception):
    """Base class for all expected, recoverable pipeline errors."""


class SchemaError(CrudGenError):
    """A table cannot be generated from its schema (e.g. it has no columns)."""

    def __init__(self, message: str, table: Optional[str] = None) -> None:
        super().__init__(message)
        self.table: Optional[str] = table


class TableNotFoundError(SchemaError):
    """The schema source has no table with the requested name."""

    def __init__(self, name: str, schema: str) -> None:
        super().__init__(f"Table {schema}.{name} was not found", f"{schema}.{name}")
        self.name: str = name
        self.schema: str = schema


class SchemaDiscoveryError(CrudGenError):
    """The schema source failed while talking to its backing store."""


class PatchAnchorNotFound(CrudGenError):
    """An expected anchor (sentinel route, guard import, menu array) is missing."""

    def __init__(self, anchor: str, path: str) -> None:
        super().__init__(f"Anchor {anchor!r} not found in {path}")
        self.anchor: str = anchor
        self.path: str = path


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "CrudGenError",
    "SchemaError",
    "TableNotFoundError",
    "SchemaDiscoveryError",
    "PatchAnchorNotFound",
]

logger.debug("crudgen.errors loaded.")
