# File: crudgen/models.py
"""
NexaFlow CrudGen - Core Data Models
====================================
Pydantic V2 models for the table metadata consumed by the generator, the
files it produces, its request/result envelopes and its configuration.

Flow::

    TableInfo ──▶ NamingBundle ──▶ artifact bodies ──▶ GeneratedFile[]
                                                     └──▶ GenerationResult

Everything here is created fresh per request and discarded afterwards.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from crudgen.naming import column_display_name, column_property_name
from crudgen.type_mapping import MappedType, WireType, map_target_type, map_wire_type

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.models")

# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    use_enum_values=True,
    frozen=False,
    extra="forbid",
)

DEFAULT_SCHEMA: str = "dbo"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ArtifactKind(str, Enum):
    """The eight artifacts rendered for every table."""

    MODEL = "model"
    SERVICE = "service"
    LIST_LOGIC = "list_logic"
    LIST_MARKUP = "list_markup"
    LIST_STYLE = "list_style"
    FORM_LOGIC = "form_logic"
    FORM_MARKUP = "form_markup"
    FORM_STYLE = "form_style"


class FileType(str, Enum):
    """Coarse file category reported back to callers."""

    MODEL = "model"
    SERVICE = "service"
    COMPONENT = "component"
    TEMPLATE = "template"
    STYLESHEET = "stylesheet"


ARTIFACT_FILE_TYPES: Dict[ArtifactKind, FileType] = {
    ArtifactKind.MODEL: FileType.MODEL,
    ArtifactKind.SERVICE: FileType.SERVICE,
    ArtifactKind.LIST_LOGIC: FileType.COMPONENT,
    ArtifactKind.LIST_MARKUP: FileType.TEMPLATE,
    ArtifactKind.LIST_STYLE: FileType.STYLESHEET,
    ArtifactKind.FORM_LOGIC: FileType.COMPONENT,
    ArtifactKind.FORM_MARKUP: FileType.TEMPLATE,
    ArtifactKind.FORM_STYLE: FileType.STYLESHEET,
}


# ---------------------------------------------------------------------------
# Schema metadata
# ---------------------------------------------------------------------------


class ColumnInfo(BaseModel):
    """
    A single column as reported by schema discovery.

    Target and wire types are derived on access, never stored.
    """

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Column name as in the database.")
    raw_type: str = Field(
        ...,
        min_length=1,
        alias="type",
        description="Database type name, e.g. 'varchar' or 'decimal(10,2)'.",
    )
    nullable: bool = Field(default=False, description="Whether the column allows NULL.")
    is_primary_key: bool = Field(default=False, description="Part of the primary key?")
    is_identity: bool = Field(
        default=False, description="Value generated by the database (IDENTITY/serial)."
    )
    max_length: Optional[int] = Field(
        default=None, description="Max length for character types (None = unbounded)."
    )
    is_foreign_key: bool = Field(default=False, description="References another table?")
    referenced_table: Optional[str] = Field(
        default=None, description="Referenced table for foreign keys."
    )
    referenced_column: Optional[str] = Field(
        default=None, description="Referenced column for foreign keys."
    )

    @field_validator("max_length")
    @classmethod
    def _drop_unbounded_length(cls, v: Optional[int]) -> Optional[int]:
        # SQL Server reports (max) columns as -1
        if v is not None and v <= 0:
            return None
        return v

    # -- Derived helpers ----------------------------------------------------

    @property
    def target_type(self) -> MappedType:
        return map_target_type(self.raw_type, self.nullable, self.is_primary_key)

    @property
    def wire_type(self) -> WireType:
        return map_wire_type(self.raw_type)

    @property
    def is_optional(self) -> bool:
        return self.nullable and not self.is_primary_key

    @property
    def property_name(self) -> str:
        return column_property_name(self.name)

    @property
    def display_name(self) -> str:
        return column_display_name(self.name)

    def __repr__(self) -> str:
        pk_flag: str = " PK" if self.is_primary_key else ""
        null_flag: str = " NULL" if self.nullable else " NOT NULL"
        return f"<Column {self.name} {self.raw_type}{pk_flag}{null_flag}>"


class TableInfo(BaseModel):
    """
    A table with its columns.

    Zero columns is accepted here; the orchestrator rejects such tables
    as a per-table ``SchemaError`` instead of failing the whole parse.
    """

    model_config = _SHARED_CONFIG

    schema_name: str = Field(
        default=DEFAULT_SCHEMA,
        alias="schema",
        min_length=1,
        description="Database schema (e.g. 'dbo').",
    )
    name: str = Field(..., min_length=1, description="Table name.")
    columns: List[ColumnInfo] = Field(default_factory=list, description="Columns in order.")

    @property
    def qualified_name(self) -> str:
        return f"{self.schema_name}.{self.name}"

    @property
    def primary_key(self) -> Optional[ColumnInfo]:
        """First primary-key column, if any."""
        for col in self.columns:
            if col.is_primary_key:
                return col
        return None

    @property
    def editable_columns(self) -> List[ColumnInfo]:
        """Columns that get a form control (identity columns are excluded)."""
        return [c for c in self.columns if not c.is_identity]

    @property
    def string_columns(self) -> List[ColumnInfo]:
        return [c for c in self.columns if c.wire_type == WireType.STRING]

    def __repr__(self) -> str:
        return f"<Table {self.qualified_name} ({len(self.columns)} cols)>"


# ---------------------------------------------------------------------------
# Generated output
# ---------------------------------------------------------------------------


class GeneratedFile(BaseModel):
    """One generated artifact file with its destination and content."""

    model_config = _SHARED_CONFIG

    file_name: str = Field(..., min_length=1, description="Base name, e.g. 'orderItem.model.ts'.")
    file_path: str = Field(..., min_length=1, description="Full destination path.")
    file_type: FileType = Field(..., description="Coarse category.")
    kind: ArtifactKind = Field(..., description="Which of the eight artifacts this is.")
    content: str = Field(default="", description="File body.")
    line_count: int = Field(default=0, ge=0, description="Computed line count.")
    size_bytes: int = Field(default=0, ge=0, description="Computed UTF-8 byte size.")

    @model_validator(mode="after")
    def _compute_metrics(self) -> "GeneratedFile":
        lines: int = 0
        if self.content:
            lines = self.content.count("\n") + (0 if self.content.endswith("\n") else 1)
        object.__setattr__(self, "line_count", lines)
        object.__setattr__(self, "size_bytes", len(self.content.encode("utf-8")))
        return self

    def __repr__(self) -> str:
        return f"<GeneratedFile {self.file_path} ({self.line_count} lines)>"


# ---------------------------------------------------------------------------
# Request / result envelopes
# ---------------------------------------------------------------------------


class GenerationRequest(BaseModel):
    """Input to ``CrudGenerator.generate``."""

    model_config = _SHARED_CONFIG

    selected_tables: List[str] = Field(
        default_factory=list,
        description="Table identifiers, optionally schema-qualified ('dbo.Orders').",
    )
    output_base_path: str = Field(
        default="../AngularApp/src/app",
        min_length=1,
        description="Root of the SPA source tree (where app.routes.ts lives).",
    )
    generate_frontend: bool = Field(default=True, description="Render SPA artifacts.")
    generate_backend: bool = Field(
        default=False, description="Accepted for compatibility; not supported."
    )
    dry_run: bool = Field(
        default=False, description="Render and report, but write and patch nothing."
    )

    @field_validator("selected_tables")
    @classmethod
    def _strip_blank_tables(cls, v: List[str]) -> List[str]:
        return [t.strip() for t in v if t and t.strip()]


class GenerationResult(BaseModel):
    """Outcome of a generation request. Partial success is a normal outcome."""

    model_config = _SHARED_CONFIG

    success: bool = Field(default=False, description="Overall verdict.")
    message: str = Field(default="", description="One-line human summary.")
    files: List[GeneratedFile] = Field(default_factory=list, description="Files produced.")
    errors: List[str] = Field(default_factory=list, description="Accumulated errors.")

    def summary(self) -> str:
        """Return a human-readable report."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        lines.append(f"{'='*60}")
        lines.append("  NexaFlow CrudGen: Generation Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:  {status}")
        lines.append(f"  Message: {self.message}")
        lines.append(f"  Files:   {len(self.files)}")
        if self.files:
            lines.append(f"{'─'*60}")
            for f in self.files:
                lines.append(f"    ✓ {f.file_path} ({f.line_count} lines)")
        if self.errors:
            lines.append(f"{'─'*60}")
            lines.append(f"  Errors ({len(self.errors)}):")
            for err in self.errors:
                lines.append(f"    ✗ {err}")
        lines.append(f"{'='*60}")
        return "\n".join(lines)


class CleanupRequest(BaseModel):
    """Input to ``CrudGenerator.cleanup``."""

    model_config = _SHARED_CONFIG

    base_path: str = Field(
        default="../AngularApp/src/app",
        min_length=1,
        description="Root of the SPA source tree to clean.",
    )


class CleanupResult(BaseModel):
    """Outcome of a cleanup request."""

    model_config = _SHARED_CONFIG

    success: bool = Field(default=False, description="Overall verdict.")
    message: str = Field(default="", description="One-line human summary.")
    deleted_paths: List[str] = Field(default_factory=list, description="Removed paths.")
    errors: List[str] = Field(default_factory=list, description="Accumulated errors.")

    def summary(self) -> str:
        """Return a human-readable report."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        lines.append(f"{'='*60}")
        lines.append("  NexaFlow CrudGen: Cleanup Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:  {status}")
        lines.append(f"  Message: {self.message}")
        for path in self.deleted_paths:
            lines.append(f"    ⊘ {path}")
        if self.errors:
            lines.append(f"{'─'*60}")
            lines.append(f"  Errors ({len(self.errors)}):")
            for err in self.errors:
                lines.append(f"    ✗ {err}")
        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Generator configuration
# ---------------------------------------------------------------------------


class GeneratorConfig(BaseModel):
    """
    Settings that control rendering, patching and cleanup.

    Defaults match the stock SPA layout; a YAML/JSON file can override any
    field (see ``crudgen.generator.load_config``).
    """

    model_config = _SHARED_CONFIG

    default_schema: str = Field(
        default=DEFAULT_SCHEMA, min_length=1, description="Schema for bare table names."
    )
    routes_file: str = Field(
        default="app.routes.ts", description="Route table file, relative to the base path."
    )
    menu_file: str = Field(
        default="components/sidebar/sidebar.ts",
        description="Sidebar menu file, relative to the base path.",
    )
    guard_symbol: str = Field(
        default="authGuard",
        min_length=1,
        description="Route guard; its import line anchors new imports.",
    )
    menu_anchor_title: str = Field(
        default="Settings", description="Menu item new entries are inserted before."
    )
    menu_icon: str = Field(default="📋", description="Icon for generated menu items.")
    display_column_limit: int = Field(
        default=5, ge=1, le=50, description="Columns shown in the list view."
    )
    items_per_page: int = Field(
        default=10, ge=1, le=1000, description="Initial list page size."
    )
    preserved_components: List[str] = Field(
        default_factory=lambda: [
            "product-list",
            "product-form",
            "login",
            "header",
            "sidebar",
            "footer",
            "dashboard",
            "code-generator",
        ],
        description="Hand-written component folders cleanup must never touch.",
    )
    preserved_models: List[str] = Field(
        default_factory=lambda: ["product.model.ts"],
        description="Hand-written model files cleanup must never touch.",
    )
    preserved_services: List[str] = Field(
        default_factory=lambda: ["product.ts", "auth.ts", "database.service.ts"],
        description="Hand-written service files cleanup must never touch.",
    )

    def routes_path(self, base_path: Path) -> Path:
        return base_path / self.routes_file

    def menu_path(self, base_path: Path) -> Path:
        return base_path / self.menu_file


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "DEFAULT_SCHEMA",
    "ArtifactKind",
    "FileType",
    "ARTIFACT_FILE_TYPES",
    "ColumnInfo",
    "TableInfo",
    "GeneratedFile",
    "GenerationRequest",
    "GenerationResult",
    "CleanupRequest",
    "CleanupResult",
    "GeneratorConfig",
]

logger.debug("crudgen.models loaded (%d public symbols).", len(__all__))
