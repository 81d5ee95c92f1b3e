# File: crudgen/discovery.py
"""
NexaFlow CrudGen - Schema Discovery
====================================
Where table metadata comes from.

    ``SchemaSource``          Protocol the orchestrator depends on.
    ``FileSchemaSource``      Tables declared in a YAML/JSON document.
    ``DatabaseSchemaSource``  Tables reflected from a live database through
                              the SQLAlchemy inspector.

Document format (YAML shown)::

    tables:
      - schema: dbo
        name: Order_Items
        columns:
          - {name: Id, type: int, is_primary_key: true, is_identity: true}
          - {name: Sku, type: varchar(50), max_length: 50}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union, runtime_checkable

import yaml
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import CompileError, SQLAlchemyError

from crudgen.errors import SchemaDiscoveryError, TableNotFoundError
from crudgen.models import DEFAULT_SCHEMA, ColumnInfo, TableInfo

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.discovery")

# Dialects with no schema namespace; the default schema stands for "none"
_SCHEMALESS_DIALECTS: Tuple[str, ...] = ("sqlite",)


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class SchemaSource(Protocol):
    """Anything that can describe tables."""

    def get_table(self, name: str, schema: str = DEFAULT_SCHEMA) -> TableInfo:
        """Return one table or raise ``TableNotFoundError``."""
        ...

    def list_tables(self) -> List[Tuple[str, str]]:
        """Return ``(schema, name)`` pairs."""
        ...


# ---------------------------------------------------------------------------
# Document loading
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_document(path: Path) -> Dict[str, Any]:
    """
    Load a JSON or YAML document, dispatching on the file extension.

    Unknown extensions are tried as JSON first, then YAML.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed or isn't a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if not path.is_file():
        raise ValueError(f"Path is not a file: {path}")

    suffix: str = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _load_yaml_file(path)
    if suffix == ".json":
        return _load_json_file(path)

    logger.info("Unknown extension '%s', trying JSON then YAML.", suffix)
    try:
        return _load_json_file(path)
    except ValueError:
        return _load_yaml_file(path)


# ---------------------------------------------------------------------------
# File-backed source
# ---------------------------------------------------------------------------


class FileSchemaSource:
    """Tables declared up front in a ``{"tables": [...]}`` document."""

    def __init__(self, document: Dict[str, Any]) -> None:
        raw_tables: Any = document.get("tables")
        if not isinstance(raw_tables, list):
            raise ValueError("Schema document must have a 'tables' list.")
        self._tables: List[TableInfo] = [TableInfo.model_validate(t) for t in raw_tables]
        logger.debug("FileSchemaSource holds %d table(s).", len(self._tables))

    @classmethod
    def from_file(cls, path: Path) -> "FileSchemaSource":
        return cls(load_document(path))

    def get_table(self, name: str, schema: str = DEFAULT_SCHEMA) -> TableInfo:
        key: Tuple[str, str] = (schema.lower(), name.lower())
        for table in self._tables:
            if (table.schema_name.lower(), table.name.lower()) == key:
                return table
        raise TableNotFoundError(name, schema)

    def list_tables(self) -> List[Tuple[str, str]]:
        return [(t.schema_name, t.name) for t in self._tables]

    def __repr__(self) -> str:
        return f"<FileSchemaSource {len(self._tables)} tables>"


# ---------------------------------------------------------------------------
# Database-backed source
# ---------------------------------------------------------------------------


class DatabaseSchemaSource:
    """
    Reflects tables through ``sqlalchemy.inspect``.

    Accepts an ``Engine`` or a database URL.  Every driver failure surfaces
    as ``SchemaDiscoveryError`` with the original exception chained.
    """

    def __init__(
        self,
        engine: Union[Engine, str],
        default_schema: str = DEFAULT_SCHEMA,
    ) -> None:
        self._engine: Engine = create_engine(engine) if isinstance(engine, str) else engine
        self._default_schema: str = default_schema
        self._schemaless: bool = self._engine.dialect.name in _SCHEMALESS_DIALECTS

    def _schema_arg(self, schema: str) -> Optional[str]:
        if self._schemaless and schema.lower() == self._default_schema.lower():
            return None
        return schema

    def _raw_type(self, type_obj: Any) -> str:
        try:
            return str(type_obj.compile(dialect=self._engine.dialect)).lower()
        except CompileError:
            # NullType and friends have no DDL rendering
            return type(type_obj).__name__.lower()

    def _is_identity(self, col: Dict[str, Any], raw_type: str, pk_columns: List[str]) -> bool:
        if col.get("autoincrement") is True or col.get("identity") is not None:
            return True
        # SQLite aliases a lone INTEGER PRIMARY KEY to the rowid
        return (
            self._engine.dialect.name == "sqlite"
            and pk_columns == [col["name"]]
            and raw_type == "integer"
        )

    def list_tables(self) -> List[Tuple[str, str]]:
        try:
            inspector = inspect(self._engine)
            schema_name: str = (
                self._default_schema
                if self._schemaless
                else inspector.default_schema_name or self._default_schema
            )
            return [(schema_name, name) for name in inspector.get_table_names()]
        except SQLAlchemyError as exc:
            raise SchemaDiscoveryError(f"Failed to list tables: {exc}") from exc

    def get_table(self, name: str, schema: str = DEFAULT_SCHEMA) -> TableInfo:
        schema_arg: Optional[str] = self._schema_arg(schema)
        try:
            inspector = inspect(self._engine)
            actual: Optional[str] = next(
                (
                    t
                    for t in inspector.get_table_names(schema=schema_arg)
                    if t.lower() == name.lower()
                ),
                None,
            )
            if actual is None:
                raise TableNotFoundError(name, schema)

            pk_columns: List[str] = (
                inspector.get_pk_constraint(actual, schema=schema_arg).get("constrained_columns")
                or []
            )
            references: Dict[str, Tuple[str, str]] = {}
            for fk in inspector.get_foreign_keys(actual, schema=schema_arg):
                for local, remote in zip(fk["constrained_columns"], fk["referred_columns"]):
                    references[local] = (fk["referred_table"], remote)

            columns: List[ColumnInfo] = []
            for col in inspector.get_columns(actual, schema=schema_arg):
                col_name: str = col["name"]
                ref: Optional[Tuple[str, str]] = references.get(col_name)
                raw_type: str = self._raw_type(col["type"])
                columns.append(
                    ColumnInfo(
                        name=col_name,
                        raw_type=raw_type,
                        nullable=bool(col.get("nullable", True)),
                        is_primary_key=col_name in pk_columns,
                        is_identity=self._is_identity(col, raw_type, pk_columns),
                        max_length=getattr(col["type"], "length", None),
                        is_foreign_key=ref is not None,
                        referenced_table=ref[0] if ref else None,
                        referenced_column=ref[1] if ref else None,
                    )
                )
        except SQLAlchemyError as exc:
            raise SchemaDiscoveryError(f"Failed to inspect table {schema}.{name}: {exc}") from exc

        logger.info("Discovered %s.%s with %d column(s).", schema, actual, len(columns))
        return TableInfo(schema_name=schema, name=actual, columns=columns)

    def __repr__(self) -> str:
        return f"<DatabaseSchemaSource {self._engine.dialect.name}>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "SchemaSource",
    "load_document",
    "FileSchemaSource",
    "DatabaseSchemaSource",
]

logger.debug("crudgen.discovery loaded.")
