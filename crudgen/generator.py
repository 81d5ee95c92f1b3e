# File: crudgen/generator.py
"""
NexaFlow CrudGen - Generation Pipeline (Orchestrator)
======================================================

Connects every phase for a batch of tables:

    Schema source → Naming → Templates → Assembler → Disk → Navigation

The ``CrudGenerator`` class backs both the CLI and the HTTP API.

Workflow per selected table (strictly sequential)::

    1. Split ``schema.name`` (bare names get the default schema).
    2. Fetch ``TableInfo`` from the ``SchemaSource``.
    3. Render the eight artifacts and assemble their paths.
    4. Write each file atomically.
    5. Patch the route table and the sidebar menu.

Error handling strategy:
    - Per-table errors (``CrudGenError``) are recorded and the batch moves on.
    - Per-file ``OSError`` is recorded and the remaining files are written.
    - Anything else aborts the batch with a failure result.
    - Partial progress counts as success; errors are always reported.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from crudgen.assembler import (
    COMPONENTS_DIR,
    FORM_SUFFIX,
    LIST_SUFFIX,
    MODELS_DIR,
    SERVICES_DIR,
    assemble_artifacts,
)
from crudgen.discovery import (
    DatabaseSchemaSource,
    FileSchemaSource,
    SchemaSource,
    load_document,
)
from crudgen.errors import CrudGenError, SchemaError
from crudgen.models import (
    ArtifactKind,
    CleanupRequest,
    CleanupResult,
    GeneratedFile,
    GenerationRequest,
    GenerationResult,
    GeneratorConfig,
    TableInfo,
)
from crudgen.naming import NamingBundle, derive_naming
from crudgen.navigation import NavigationPatcher, PatchReport
from crudgen.templates import TemplateGenerator
from crudgen.utils import Timer, remove_path, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.generator")

# ---------------------------------------------------------------------------
# Result messages
# ---------------------------------------------------------------------------

EMPTY_SELECTION_MESSAGE: str = "At least one table must be selected for code generation"
GENERATION_FAILED_MESSAGE: str = "Code generation failed"
GENERATION_PARTIAL_MESSAGE: str = "Code generation completed with errors"
CLEANUP_FAILED_MESSAGE: str = "Cleanup failed"
CLEANUP_PARTIAL_MESSAGE: str = "Cleanup completed with errors"
CLEANUP_EMPTY_MESSAGE: str = "No generated files found to clean up"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def split_table_identifier(identifier: str, default_schema: str) -> Tuple[str, str]:
    """
    Split ``schema.name`` into its parts.

    Examples:
        >>> split_table_identifier("sales.Orders", "dbo")
        ('sales', 'Orders')
        >>> split_table_identifier("Orders", "dbo")
        ('dbo', 'Orders')

    Raises:
        SchemaError: If no table name is left.
    """
    schema: str = default_schema
    name: str = identifier.strip()
    if "." in name:
        head, name = name.rsplit(".", 1)
        schema = head.strip() or default_schema
        name = name.strip()
    if not name:
        raise SchemaError(f"Invalid table identifier {identifier!r}", identifier)
    return schema, name


def load_config(path: Optional[Path] = None) -> GeneratorConfig:
    """
    Load a ``GeneratorConfig`` from a YAML/JSON file, or the defaults.

    Raises:
        FileNotFoundError: If *path* doesn't exist.
        ValueError: If the file can't be parsed or fails validation.
    """
    if path is None:
        return GeneratorConfig()
    data: Dict[str, Any] = load_document(Path(path))
    config: GeneratorConfig = GeneratorConfig.model_validate(data)
    logger.info("Loaded generator config from %s.", path)
    return config


def build_source(
    schema_file: Optional[Path] = None,
    database_url: Optional[str] = None,
    default_schema: Optional[str] = None,
) -> SchemaSource:
    """
    Pick a schema source: a schema file wins over a database URL.

    Raises:
        ValueError: If neither is given, or the schema file is invalid.
    """
    if schema_file is not None:
        return FileSchemaSource.from_file(Path(schema_file))
    if database_url:
        if default_schema:
            return DatabaseSchemaSource(database_url, default_schema=default_schema)
        return DatabaseSchemaSource(database_url)
    raise ValueError("A schema file or a database URL is required.")


# ---------------------------------------------------------------------------
# CrudGenerator: orchestrator
# ---------------------------------------------------------------------------


class CrudGenerator:
    """
    Batch orchestrator for artifact generation and cleanup.

    Usage::

        generator = CrudGenerator(FileSchemaSource.from_file(Path("schema.yaml")))
        result = generator.generate(
            GenerationRequest(selected_tables=["dbo.Order_Items"],
                              output_base_path="../AngularApp/src/app")
        )
        print(result.summary())

    Reusable: create once, call ``generate()`` many times.
    """

    def __init__(
        self,
        source: SchemaSource,
        config: Optional[GeneratorConfig] = None,
    ) -> None:
        self._source: SchemaSource = source
        self._config: GeneratorConfig = config or GeneratorConfig()
        self._renderer: TemplateGenerator = TemplateGenerator(self._config)
        logger.debug("CrudGenerator initialised with %r.", source)

    @property
    def source(self) -> SchemaSource:
        return self._source

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    def navigation(self, base_path: Path) -> NavigationPatcher:
        return NavigationPatcher(base_path, self._config)

    # -----------------------------------------------------------------
    # Public: generate
    # -----------------------------------------------------------------

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """Generate artifacts for every selected table."""
        if not request.selected_tables:
            logger.warning(EMPTY_SELECTION_MESSAGE)
            return GenerationResult(
                success=False,
                message=EMPTY_SELECTION_MESSAGE,
                errors=[EMPTY_SELECTION_MESSAGE],
            )

        base_path: Path = Path(request.output_base_path)
        files: List[GeneratedFile] = []
        errors: List[str] = []

        try:
            with Timer("generate"):
                for identifier in request.selected_tables:
                    self._generate_table(identifier, request, base_path, files, errors)
        except Exception as exc:
            logger.error("Code generation aborted: %s", exc, exc_info=True)
            return GenerationResult(
                success=False,
                message=GENERATION_FAILED_MESSAGE,
                errors=[f"Unexpected error: {exc}"],
            )

        success: bool = not errors or bool(files)
        message: str = (
            f"Successfully generated {len(files)} files for "
            f"{len(request.selected_tables)} table(s)"
            if not errors
            else GENERATION_PARTIAL_MESSAGE
        )
        logger.info("%s (%d error(s)).", message, len(errors))
        return GenerationResult(success=success, message=message, files=files, errors=errors)

    def render_table(self, table: TableInfo, base_path: Path) -> List[GeneratedFile]:
        """Render and assemble one table's files without touching disk."""
        naming: NamingBundle = derive_naming(table.name)
        bodies: Dict[ArtifactKind, str] = self._renderer.generate_all_for_table(table, naming)
        return assemble_artifacts(bodies, naming, base_path)

    def _generate_table(
        self,
        identifier: str,
        request: GenerationRequest,
        base_path: Path,
        files: List[GeneratedFile],
        errors: List[str],
    ) -> None:
        prefix: str = f"Error generating code for table {identifier}: "

        try:
            schema, name = split_table_identifier(identifier, self._config.default_schema)
            table: TableInfo = self._source.get_table(name, schema)
            if not table.columns:
                raise SchemaError(f"No columns found for table {schema}.{name}", identifier)
        except CrudGenError as exc:
            logger.warning("%s%s", prefix, exc)
            errors.append(f"{prefix}{exc}")
            return

        if request.generate_backend:
            logger.warning("Backend generation is not supported; ignoring it for %s.", identifier)

        if not request.generate_frontend:
            logger.info("Front-end generation disabled; nothing to do for %s.", identifier)
            return

        with Timer(f"render {table.qualified_name}"):
            rendered: List[GeneratedFile] = self.render_table(table, base_path)

        if request.dry_run:
            logger.info("Dry run: %d file(s) rendered for %s.", len(rendered), identifier)
            files.extend(rendered)
            return

        for generated in rendered:
            try:
                write_file(Path(generated.file_path), generated.content)
            except OSError as exc:
                logger.error("Failed to write %s: %s", generated.file_path, exc)
                errors.append(f"{prefix}Failed to write {generated.file_path}: {exc}")
                continue
            files.append(generated)

        try:
            report: PatchReport = self.navigation(base_path).apply(table.name)
        except OSError as exc:
            logger.error("Failed to update navigation for %s: %s", identifier, exc)
            errors.append(f"{prefix}Failed to update navigation: {exc}")
            return
        for warning in report.warnings:
            logger.warning("%s: %s", identifier, warning)

    # -----------------------------------------------------------------
    # Public: cleanup
    # -----------------------------------------------------------------

    def cleanup(self, request: CleanupRequest) -> CleanupResult:
        """
        Delete generated component folders, models and services under
        ``request.base_path`` and unhook them from navigation.

        Anything on the preserved allow-lists is left alone.
        """
        base_path: Path = Path(request.base_path)
        deleted: List[str] = []
        errors: List[str] = []

        try:
            with Timer("cleanup"):
                stems: List[str] = self._cleanup_components(base_path, deleted, errors)
                self._cleanup_files(
                    base_path / MODELS_DIR, "*.model.ts",
                    self._config.preserved_models, deleted, errors,
                )
                self._cleanup_files(
                    base_path / SERVICES_DIR, "*.service.ts",
                    self._config.preserved_services, deleted, errors,
                )

                patcher: NavigationPatcher = self.navigation(base_path)
                for stem in stems:
                    try:
                        patcher.remove(stem)
                    except OSError as exc:
                        logger.error("Failed to unhook %s from navigation: %s", stem, exc)
                        errors.append(f"Failed to update navigation for {stem}: {exc}")
        except Exception as exc:
            logger.error("Cleanup aborted: %s", exc, exc_info=True)
            return CleanupResult(
                success=False,
                message=CLEANUP_FAILED_MESSAGE,
                errors=[f"Unexpected error: {exc}"],
            )

        if errors:
            message: str = CLEANUP_PARTIAL_MESSAGE
        elif deleted:
            message = f"Cleaned up {len(deleted)} generated file(s)"
        else:
            message = CLEANUP_EMPTY_MESSAGE
        logger.info(message)
        return CleanupResult(
            success=not errors or bool(deleted),
            message=message,
            deleted_paths=deleted,
            errors=errors,
        )

    def _cleanup_components(
        self,
        base_path: Path,
        deleted: List[str],
        errors: List[str],
    ) -> List[str]:
        """Remove ``*-list``/``*-form`` folders; return their table stems."""
        components_dir: Path = base_path / COMPONENTS_DIR
        stems: List[str] = []
        if not components_dir.is_dir():
            return stems

        preserved = set(self._config.preserved_components)
        for entry in sorted(components_dir.iterdir()):
            if not entry.is_dir() or entry.name in preserved:
                continue
            for suffix in (LIST_SUFFIX, FORM_SUFFIX):
                if not entry.name.endswith(suffix):
                    continue
                stem: str = entry.name[: -len(suffix)]
                if self._delete(entry, deleted, errors) and stem and stem not in stems:
                    stems.append(stem)
                break
        return stems

    def _cleanup_files(
        self,
        directory: Path,
        pattern: str,
        preserved: List[str],
        deleted: List[str],
        errors: List[str],
    ) -> None:
        if not directory.is_dir():
            return
        for entry in sorted(directory.glob(pattern)):
            if entry.is_file() and entry.name not in preserved:
                self._delete(entry, deleted, errors)

    def _delete(self, path: Path, deleted: List[str], errors: List[str]) -> bool:
        try:
            remove_path(path)
        except OSError as exc:
            logger.error("Failed to delete %s: %s", path, exc)
            errors.append(f"Failed to delete {path}: {exc}")
            return False
        deleted.append(str(path))
        return True


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "EMPTY_SELECTION_MESSAGE",
    "split_table_identifier",
    "load_config",
    "build_source",
    "CrudGenerator",
]

logger.debug("crudgen.generator loaded.")
