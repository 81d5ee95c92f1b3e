"""
tests/test_cli.py
Unit tests for crudgen.cli (argparse front end).

Tests cover:
- generate / cleanup / tables / serve subcommands
- Exit codes for success, generation failure, cleanup and input errors
- Config file and flag overrides
- --version
"""

from __future__ import annotations

import pathlib
from typing import Any, Dict, List

import pytest

from crudgen.cli import (
    EXIT_GENERATION_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    cli_main,
)


def _run(argv: List[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli_main(argv)
    return exc_info.value.code


# ===========================================================================
# generate
# ===========================================================================


class TestGenerateCommand:
    """crudgen generate"""

    def test_success(
        self,
        schema_yaml_path: pathlib.Path,
        app_root: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run(
            ["generate", "-s", str(schema_yaml_path), "-t", "dbo.Order_Items", "-o", str(app_root)]
        )
        assert code == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "Generation Report" in out
        assert "Successfully generated 8 files for 1 table(s)" in out
        assert (app_root / "models" / "orderItem.model.ts").is_file()

    def test_repeatable_table_flag(
        self,
        schema_yaml_path: pathlib.Path,
        app_root: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run(
            [
                "generate", "-s", str(schema_yaml_path),
                "-t", "Order_Items", "-t", "Customers",
                "-o", str(app_root),
            ]
        )
        assert code == EXIT_SUCCESS
        assert "16 files for 2 table(s)" in capsys.readouterr().out

    def test_all_tables_failing(
        self, schema_yaml_path: pathlib.Path, app_root: pathlib.Path
    ) -> None:
        code = _run(["generate", "-s", str(schema_yaml_path), "-t", "Missing", "-o", str(app_root)])
        assert code == EXIT_GENERATION_ERROR

    def test_dry_run(self, schema_yaml_path: pathlib.Path, app_root: pathlib.Path) -> None:
        code = _run(
            [
                "generate", "-s", str(schema_yaml_path),
                "-t", "Customers", "-o", str(app_root), "--dry-run",
            ]
        )
        assert code == EXIT_SUCCESS
        assert not (app_root / "components" / "customers-list").exists()

    def test_page_size_flag_overrides_config(
        self,
        schema_yaml_path: pathlib.Path,
        app_root: pathlib.Path,
        tmp_path: pathlib.Path,
    ) -> None:
        config = tmp_path / "crudgen.yaml"
        config.write_text("items_per_page: 20\n", encoding="utf-8")
        code = _run(
            [
                "generate", "-s", str(schema_yaml_path),
                "-t", "Customers", "-o", str(app_root),
                "--config", str(config), "--page-size", "40",
            ]
        )
        assert code == EXIT_SUCCESS
        logic = app_root / "components" / "customers-list" / "customers-list.ts"
        assert "itemsPerPage = 40;" in logic.read_text(encoding="utf-8")

    def test_missing_source(self, app_root: pathlib.Path) -> None:
        assert _run(["generate", "-t", "Customers", "-o", str(app_root)]) == EXIT_INPUT_ERROR

    def test_missing_schema_file(self, tmp_path: pathlib.Path) -> None:
        code = _run(["generate", "-s", str(tmp_path / "absent.yaml"), "-t", "Customers"])
        assert code == EXIT_INPUT_ERROR

    def test_invalid_config(self, schema_yaml_path: pathlib.Path, tmp_path: pathlib.Path) -> None:
        config = tmp_path / "crudgen.yaml"
        config.write_text("items_per_page: 0\n", encoding="utf-8")
        code = _run(
            ["generate", "-s", str(schema_yaml_path), "-t", "Customers", "--config", str(config)]
        )
        assert code == EXIT_INPUT_ERROR


# ===========================================================================
# cleanup / tables / serve
# ===========================================================================


class TestOtherCommands:
    """crudgen cleanup, tables, serve, --version"""

    def test_cleanup(
        self,
        schema_yaml_path: pathlib.Path,
        app_root: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _run(["generate", "-s", str(schema_yaml_path), "-t", "Customers", "-o", str(app_root)])
        capsys.readouterr()

        code = _run(["cleanup", "-o", str(app_root)])
        assert code == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "Cleanup Report" in out
        assert "Cleaned up 4 generated file(s)" in out

    def test_cleanup_nothing_found(
        self, app_root: pathlib.Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert _run(["cleanup", "-o", str(app_root)]) == EXIT_SUCCESS
        assert "No generated files found to clean up" in capsys.readouterr().out

    def test_tables(
        self, schema_yaml_path: pathlib.Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert _run(["tables", "-s", str(schema_yaml_path)]) == EXIT_SUCCESS
        assert capsys.readouterr().out.splitlines() == [
            "dbo.Order_Items",
            "dbo.Customers",
            "dbo.Audit_Log",
        ]

    def test_tables_without_source(self) -> None:
        assert _run(["tables"]) == EXIT_INPUT_ERROR

    def test_serve(
        self, schema_yaml_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: List[Dict[str, Any]] = []

        def fake_run(app: Any, **kwargs: Any) -> None:
            calls.append({"app": app, **kwargs})

        monkeypatch.setattr("uvicorn.run", fake_run)
        code = _run(["serve", "-s", str(schema_yaml_path), "--port", "9001"])
        assert code == EXIT_SUCCESS
        assert calls[0]["host"] == "127.0.0.1"
        assert calls[0]["port"] == 9001
        assert calls[0]["app"].title == "NexaFlow CrudGen"

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(["--version"]) == 0
        assert "NexaFlow CrudGen v1.0.0" in capsys.readouterr().out
