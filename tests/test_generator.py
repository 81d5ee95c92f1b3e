"""
tests/test_generator.py
Unit tests for crudgen.generator module (CrudGenerator orchestrator).

Tests cover:
- Full generation into a temporary SPA tree
- Stable artifact paths and ordering
- Partial success (unknown tables, tables without columns, write errors)
- Empty selection, dry run, front-end toggle, backend flag
- Unexpected errors abort the batch
- Identifier splitting, config loading, source selection
- Cleanup with allow-lists and navigation restoration
"""

from __future__ import annotations

import logging
import pathlib
from typing import List, Set, Tuple

import pytest
import yaml

from crudgen.assembler import artifact_paths, assemble_artifacts
from crudgen.discovery import DatabaseSchemaSource, FileSchemaSource
from crudgen.errors import SchemaError
from crudgen.generator import (
    EMPTY_SELECTION_MESSAGE,
    CrudGenerator,
    build_source,
    load_config,
    split_table_identifier,
)
from crudgen.models import (
    DEFAULT_SCHEMA,
    ArtifactKind,
    CleanupRequest,
    GenerationRequest,
    GeneratorConfig,
    TableInfo,
)
from crudgen.naming import derive_naming
from crudgen.utils import read_file


ORDER_ITEM_FILES: Set[str] = {
    "models/orderItem.model.ts",
    "services/orderItem.service.ts",
    "components/orderItems-list/orderItems-list.ts",
    "components/orderItems-list/orderItems-list.html",
    "components/orderItems-list/orderItems-list.css",
    "components/orderItems-form/orderItems-form.ts",
    "components/orderItems-form/orderItems-form.html",
    "components/orderItems-form/orderItems-form.css",
}


def _request(app_root: pathlib.Path, *tables: str, **kwargs: object) -> GenerationRequest:
    return GenerationRequest(
        selected_tables=list(tables), output_base_path=str(app_root), **kwargs
    )


def _relative(paths: List[str], root: pathlib.Path) -> Set[str]:
    return {pathlib.Path(p).relative_to(root).as_posix() for p in paths}


class _ExplodingSource:
    """Schema source that fails in an unexpected way."""

    def get_table(self, name: str, schema: str = DEFAULT_SCHEMA) -> TableInfo:
        raise RuntimeError("connection reset")

    def list_tables(self) -> List[Tuple[str, str]]:
        return []


# ===========================================================================
# Assembler
# ===========================================================================


class TestAssembler:
    """Artifact paths depend only on naming and base path."""

    def test_paths(self, tmp_path: pathlib.Path) -> None:
        paths = artifact_paths(derive_naming("dbo.Order_Items"), tmp_path)
        assert {p.relative_to(tmp_path).as_posix() for p in paths.values()} == ORDER_ITEM_FILES

    def test_order_and_metadata(self, tmp_path: pathlib.Path) -> None:
        bodies = {kind: f"// {kind.value}\n" for kind in ArtifactKind}
        files = assemble_artifacts(bodies, derive_naming("Customers"), tmp_path)
        assert [f.kind for f in files] == list(ArtifactKind)
        assert files[0].file_name == "customer.model.ts"
        assert files[0].file_type == "model"
        assert files[0].line_count == 1

    def test_missing_kinds_skipped(self, tmp_path: pathlib.Path) -> None:
        files = assemble_artifacts(
            {ArtifactKind.SERVICE: "x"}, derive_naming("Customers"), tmp_path
        )
        assert [f.file_name for f in files] == ["customer.service.ts"]


# ===========================================================================
# Generation
# ===========================================================================


class TestGenerate:
    """End-to-end generation into a temporary app tree."""

    def test_success(self, generator: CrudGenerator, app_root: pathlib.Path) -> None:
        result = generator.generate(_request(app_root, "dbo.Order_Items"))
        assert result.success is True
        assert result.errors == []
        assert result.message == "Successfully generated 8 files for 1 table(s)"
        assert _relative([f.file_path for f in result.files], app_root) == ORDER_ITEM_FILES
        for f in result.files:
            assert read_file(pathlib.Path(f.file_path)) == f.content

        routes = read_file(app_root / "app.routes.ts")
        assert "component: OrderItemList, canActivate: [authGuard]" in routes
        menu = read_file(app_root / "components" / "sidebar" / "sidebar.ts")
        assert "'Order Item'" in menu

    def test_scenario_contents(self, generator: CrudGenerator, app_root: pathlib.Path) -> None:
        result = generator.generate(_request(app_root, "dbo.Order_Items"))
        by_kind = {f.kind: f.content for f in result.files}
        model = by_kind[ArtifactKind.MODEL]
        assert "sku: string;" in model
        assert "quantity: number;" in model
        assert "unitPrice: number;" in model
        assert "formatCurrency(item.unitPrice)" in by_kind[ArtifactKind.LIST_MARKUP]

    def test_paths_stable_across_runs(
        self, generator: CrudGenerator, app_root: pathlib.Path
    ) -> None:
        first = generator.generate(_request(app_root, "Order_Items"))
        second = generator.generate(_request(app_root, "Order_Items"))
        assert [f.file_path for f in first.files] == [f.file_path for f in second.files]
        assert [f.content for f in first.files] == [f.content for f in second.files]
        assert read_file(app_root / "app.routes.ts").count("OrderItemList }") == 1

    def test_multiple_tables(self, generator: CrudGenerator, app_root: pathlib.Path) -> None:
        result = generator.generate(_request(app_root, "dbo.Order_Items", "Customers"))
        assert len(result.files) == 16
        assert result.message == "Successfully generated 16 files for 2 table(s)"

    def test_unknown_table_is_partial(
        self, generator: CrudGenerator, app_root: pathlib.Path
    ) -> None:
        result = generator.generate(_request(app_root, "dbo.Order_Items", "dbo.Missing"))
        assert result.success is True
        assert len(result.files) == 8
        assert result.errors == [
            "Error generating code for table dbo.Missing: Table dbo.Missing was not found"
        ]
        assert result.message == "Code generation completed with errors"

    def test_table_without_columns(
        self, generator: CrudGenerator, app_root: pathlib.Path, routes_text: str
    ) -> None:
        result = generator.generate(_request(app_root, "Audit_Log"))
        assert result.success is False
        assert result.files == []
        assert result.errors == [
            "Error generating code for table Audit_Log: No columns found for table dbo.Audit_Log"
        ]
        assert read_file(app_root / "app.routes.ts") == routes_text

    @pytest.mark.parametrize("tables", [[], ["  ", ""]])
    def test_empty_selection(
        self, generator: CrudGenerator, app_root: pathlib.Path, tables: List[str]
    ) -> None:
        result = generator.generate(_request(app_root, *tables))
        assert result.success is False
        assert result.message == EMPTY_SELECTION_MESSAGE
        assert result.files == []

    def test_dry_run_touches_nothing(
        self,
        generator: CrudGenerator,
        app_root: pathlib.Path,
        routes_text: str,
        sidebar_text: str,
    ) -> None:
        result = generator.generate(_request(app_root, "dbo.Order_Items", dry_run=True))
        assert result.success is True
        assert len(result.files) == 8
        assert not (app_root / "models" / "orderItem.model.ts").exists()
        assert read_file(app_root / "app.routes.ts") == routes_text
        assert read_file(app_root / "components" / "sidebar" / "sidebar.ts") == sidebar_text

    def test_frontend_disabled(
        self, generator: CrudGenerator, app_root: pathlib.Path, routes_text: str
    ) -> None:
        result = generator.generate(
            _request(app_root, "dbo.Order_Items", generate_frontend=False)
        )
        assert result.success is True
        assert result.files == []
        assert read_file(app_root / "app.routes.ts") == routes_text

    def test_backend_flag_is_logged(
        self,
        generator: CrudGenerator,
        app_root: pathlib.Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        caplog.set_level(logging.WARNING, logger="crudgen.generator")
        result = generator.generate(
            _request(app_root, "dbo.Order_Items", generate_backend=True, dry_run=True)
        )
        assert result.success is True
        assert "Backend generation is not supported" in caplog.text

    def test_unexpected_error_aborts(self, app_root: pathlib.Path) -> None:
        result = CrudGenerator(_ExplodingSource()).generate(_request(app_root, "Orders"))
        assert result.success is False
        assert result.message == "Code generation failed"
        assert result.errors == ["Unexpected error: connection reset"]

    def test_write_error_is_partial(
        self, generator: CrudGenerator, app_root: pathlib.Path
    ) -> None:
        # A plain file where the list component folder should go
        (app_root / "components" / "orderItems-list").write_text("", encoding="utf-8")
        result = generator.generate(_request(app_root, "dbo.Order_Items"))
        assert result.success is True
        assert len(result.files) == 5
        assert len(result.errors) == 3
        assert all("Failed to write" in e for e in result.errors)
        assert "OrderItemList" in read_file(app_root / "app.routes.ts")

    def test_config_flows_into_templates(
        self, schema_source: FileSchemaSource, app_root: pathlib.Path
    ) -> None:
        generator = CrudGenerator(schema_source, GeneratorConfig(items_per_page=50))
        result = generator.generate(_request(app_root, "Customers", dry_run=True))
        list_logic = [f for f in result.files if f.kind == ArtifactKind.LIST_LOGIC][0]
        assert "itemsPerPage = 50;" in list_logic.content

    def test_summary(self, generator: CrudGenerator, app_root: pathlib.Path) -> None:
        result = generator.generate(_request(app_root, "dbo.Missing"))
        text = result.summary()
        assert "Generation Report" in text
        assert "Table dbo.Missing was not found" in text


# ===========================================================================
# Helpers
# ===========================================================================


class TestHelpers:
    """Identifier splitting, config loading, source selection."""

    @pytest.mark.parametrize(
        "identifier, expected",
        [
            ("sales.Orders", ("sales", "Orders")),
            ("Orders", ("dbo", "Orders")),
            (" sales . Orders ", ("sales", "Orders")),
            (".Orders", ("dbo", "Orders")),
        ],
    )
    def test_split_table_identifier(self, identifier: str, expected: Tuple[str, str]) -> None:
        assert split_table_identifier(identifier, "dbo") == expected

    def test_split_rejects_empty_name(self) -> None:
        with pytest.raises(SchemaError):
            split_table_identifier("dbo.", "dbo")

    def test_load_config_defaults(self) -> None:
        assert load_config() == GeneratorConfig()

    def test_load_config_file(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "crudgen.yaml"
        path.write_text(
            yaml.safe_dump({"items_per_page": 20, "menu_anchor_title": "Help"}),
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.items_per_page == 20
        assert config.menu_anchor_title == "Help"
        assert config.guard_symbol == "authGuard"

    def test_load_config_rejects_unknown_keys(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "crudgen.json"
        path.write_text('{"colour": "blue"}', encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)

    def test_load_config_missing_file(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_build_source(self, schema_yaml_path: pathlib.Path) -> None:
        assert isinstance(build_source(schema_file=schema_yaml_path), FileSchemaSource)
        assert isinstance(build_source(database_url="sqlite://"), DatabaseSchemaSource)
        with pytest.raises(ValueError):
            build_source()


# ===========================================================================
# Cleanup
# ===========================================================================


class TestCleanup:
    """Generated artifacts go, hand-written ones stay."""

    def test_round_trip(
        self,
        generator: CrudGenerator,
        app_root: pathlib.Path,
        routes_text: str,
        sidebar_text: str,
    ) -> None:
        generator.generate(_request(app_root, "dbo.Order_Items", "Customers"))
        result = generator.cleanup(CleanupRequest(base_path=str(app_root)))

        assert result.success is True
        assert result.errors == []
        assert _relative(result.deleted_paths, app_root) == {
            "components/customers-form",
            "components/customers-list",
            "components/orderItems-form",
            "components/orderItems-list",
            "models/customer.model.ts",
            "models/orderItem.model.ts",
            "services/customer.service.ts",
            "services/orderItem.service.ts",
        }
        assert result.message == "Cleaned up 8 generated file(s)"
        assert read_file(app_root / "app.routes.ts") == routes_text
        assert read_file(app_root / "components" / "sidebar" / "sidebar.ts") == sidebar_text

    def test_preserved_entries_survive(
        self, generator: CrudGenerator, app_root: pathlib.Path
    ) -> None:
        generator.generate(_request(app_root, "Customers"))
        generator.cleanup(CleanupRequest(base_path=str(app_root)))
        for name in ("product-list", "product-form", "login", "dashboard", "header", "sidebar"):
            assert (app_root / "components" / name).is_dir()
        assert (app_root / "models" / "product.model.ts").is_file()
        assert (app_root / "services" / "product.ts").is_file()
        assert (app_root / "services" / "database.service.ts").is_file()

    def test_nothing_to_clean(self, generator: CrudGenerator, app_root: pathlib.Path) -> None:
        result = generator.cleanup(CleanupRequest(base_path=str(app_root)))
        assert result.success is True
        assert result.deleted_paths == []
        assert result.message == "No generated files found to clean up"

    def test_missing_base_path(self, generator: CrudGenerator, tmp_path: pathlib.Path) -> None:
        result = generator.cleanup(CleanupRequest(base_path=str(tmp_path / "absent")))
        assert result.success is True
        assert result.message == "No generated files found to clean up"

    def test_custom_allow_list(
        self, schema_source: FileSchemaSource, app_root: pathlib.Path
    ) -> None:
        config = GeneratorConfig(
            preserved_components=["product-list", "product-form", "customers-list", "sidebar"]
        )
        generator = CrudGenerator(schema_source, config)
        generator.generate(_request(app_root, "Customers"))
        result = generator.cleanup(CleanupRequest(base_path=str(app_root)))
        assert (app_root / "components" / "customers-list").is_dir()
        assert not (app_root / "components" / "customers-form").exists()
        assert "Cleanup Report" in result.summary()
