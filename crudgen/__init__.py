# File: crudgen/__init__.py
"""
NexaFlow CrudGen - Angular CRUD Artifact Generator
===================================================

Turns relational table metadata into a model, a data-access service and
list/form components (logic, markup, styles) for an Angular standalone
application, then splices the new screens into the app's route table and
sidebar menu without disturbing anything else in those files.

Architecture overview::

    ┌──────────────┐     ┌───────────────┐     ┌──────────────────┐
    │ CLI / HTTP   │────▶│ CrudGenerator │────▶│ TemplateGenerator│
    │ (cli, api)   │     │ (generator.py)│     │  (templates.py)  │
    └──────────────┘     └───────┬───────┘     └──────────────────┘
                                 │
                 ┌───────────────┼────────────────┐
                 ▼               ▼                ▼
          ┌────────────┐  ┌────────────┐  ┌──────────────┐
          │ discovery  │  │ assembler  │  │  navigation  │
          │  (.py)     │  │  (.py)     │  │   (.py)      │
          └────────────┘  └────────────┘  └──────────────┘

Usage::

    # As a library
    from crudgen import CrudGenerator, FileSchemaSource, GenerationRequest
    gen = CrudGenerator(FileSchemaSource.from_file(Path("schema.yaml")))
    gen.generate(GenerationRequest(selected_tables=["dbo.Order_Items"]))

    # From the command line
    python -m crudgen generate -s schema.yaml -t dbo.Order_Items -v

Public API:
    - CrudGenerator      : Batch orchestrator (generate / cleanup)
    - NavigationPatcher  : Route table & sidebar menu patcher
    - TemplateGenerator  : Artifact template engine
    - FileSchemaSource, DatabaseSchemaSource : Schema sources
    - derive_naming      : Table identifier → naming bundle
"""

from __future__ import annotations

__version__: str = "1.0.0"
__author__: str = "NexaFlow Team"
__license__: str = "MIT"

from crudgen.errors import (
    CrudGenError,
    PatchAnchorNotFound,
    SchemaDiscoveryError,
    SchemaError,
    TableNotFoundError,
)
from crudgen.type_mapping import MappedType, WireType, map_target_type, map_wire_type
from crudgen.naming import NamingBundle, derive_naming, pluralize, singularize
from crudgen.models import (
    ArtifactKind,
    CleanupRequest,
    CleanupResult,
    ColumnInfo,
    FileType,
    GeneratedFile,
    GenerationRequest,
    GenerationResult,
    GeneratorConfig,
    TableInfo,
)
from crudgen.templates import TemplateGenerator
from crudgen.assembler import artifact_paths, assemble_artifacts
from crudgen.navigation import NavigationPatcher, PatchReport, PatchState
from crudgen.discovery import (
    DatabaseSchemaSource,
    FileSchemaSource,
    SchemaSource,
    load_document,
)
from crudgen.generator import CrudGenerator, load_config, split_table_identifier
from crudgen.utils import Timer

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Orchestrator
    "CrudGenerator",
    "load_config",
    "split_table_identifier",
    # Errors
    "CrudGenError",
    "SchemaError",
    "TableNotFoundError",
    "SchemaDiscoveryError",
    "PatchAnchorNotFound",
    # Types & naming
    "WireType",
    "MappedType",
    "map_target_type",
    "map_wire_type",
    "NamingBundle",
    "derive_naming",
    "singularize",
    "pluralize",
    # Models
    "ArtifactKind",
    "FileType",
    "ColumnInfo",
    "TableInfo",
    "GeneratedFile",
    "GenerationRequest",
    "GenerationResult",
    "CleanupRequest",
    "CleanupResult",
    "GeneratorConfig",
    # Rendering & assembly
    "TemplateGenerator",
    "artifact_paths",
    "assemble_artifacts",
    # Navigation
    "NavigationPatcher",
    "PatchReport",
    "PatchState",
    # Schema sources
    "SchemaSource",
    "FileSchemaSource",
    "DatabaseSchemaSource",
    "load_document",
    # Utilities
    "Timer",
]
