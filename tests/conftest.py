"""
tests/conftest.py
Shared fixtures for the crudgen test suite.

No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
The Angular app fixture mirrors the stock SPA layout: a route table, a
sidebar component and a few hand-written screens that must survive
cleanup.
"""

from __future__ import annotations

import copy
import logging
import pathlib
from typing import Any, Dict, Iterator

import pytest
import yaml

from crudgen.discovery import FileSchemaSource
from crudgen.generator import CrudGenerator
from crudgen.models import TableInfo


# ---------------------------------------------------------------------------
# Navigation file fixtures
# ---------------------------------------------------------------------------

ROUTES_TS: str = """\
import { Routes } from '@angular/router';
import { Login } from './components/login/login';
import { Dashboard } from './components/dashboard/dashboard';
import { ProductList } from './components/product-list/product-list';
import { ProductForm } from './components/product-form/product-form';
import { CodeGenerator } from './components/code-generator/code-generator';
import { authGuard } from './guards/auth-guard';

export const routes: Routes = [
  { path: '', redirectTo: '/dashboard', pathMatch: 'full' },
  { path: 'login', component: Login },
  { path: 'dashboard', component: Dashboard, canActivate: [authGuard] },
  { path: 'generator', component: CodeGenerator, canActivate: [authGuard] },
  { path: 'products', component: ProductList, canActivate: [authGuard] },
  { path: 'products/new', component: ProductForm, canActivate: [authGuard] },
  { path: 'products/edit/:id', component: ProductForm, canActivate: [authGuard] },
  { path: 'settings', component: Dashboard, canActivate: [authGuard] },
  { path: '**', redirectTo: '/dashboard' } // Wildcard route for 404 errors
];
"""

SIDEBAR_TS: str = """\
import { Component } from '@angular/core';
import { CommonModule } from '@angular/common';
import { RouterModule } from '@angular/router';

interface MenuItem {
  title: string;
  icon: string;
  route: string;
  isActive?: boolean;
}

@Component({
  selector: 'app-sidebar',
  standalone: true,
  imports: [CommonModule, RouterModule],
  templateUrl: './sidebar.html',
  styleUrl: './sidebar.css'
})
export class Sidebar {
  menuItems: MenuItem[] = [
    { title: 'Dashboard', icon: '📊', route: '/dashboard' },
    { title: 'Code Generator', icon: '⚙️', route: '/generator' },
    { title: 'Products', icon: '📦', route: '/products' },
    { title: 'Settings', icon: '⚙️', route: '/settings' }
  ];

  constructor() {}
}
"""


@pytest.fixture()
def routes_text() -> str:
    return ROUTES_TS


@pytest.fixture()
def sidebar_text() -> str:
    return SIDEBAR_TS


# ---------------------------------------------------------------------------
# Table metadata fixtures
# ---------------------------------------------------------------------------

_ORDER_ITEMS: Dict[str, Any] = {
    "schema": "dbo",
    "name": "Order_Items",
    "columns": [
        {"name": "Id", "type": "int", "is_primary_key": True, "is_identity": True},
        {"name": "Sku", "type": "varchar(50)", "max_length": 50},
        {"name": "Quantity", "type": "int"},
        {"name": "UnitPrice", "type": "decimal(10,2)"},
        {"name": "Notes", "type": "nvarchar", "nullable": True, "max_length": -1},
        {"name": "CreatedDate", "type": "datetime", "nullable": True},
        {"name": "IsActive", "type": "bit"},
    ],
}

_CUSTOMERS: Dict[str, Any] = {
    "schema": "dbo",
    "name": "Customers",
    "columns": [
        {"name": "Id", "type": "int", "is_primary_key": True, "is_identity": True},
        {"name": "Name", "type": "nvarchar(100)", "max_length": 100},
        {"name": "Email", "type": "varchar(255)", "nullable": True, "max_length": 255},
    ],
}

_AUDIT_LOG: Dict[str, Any] = {"schema": "dbo", "name": "Audit_Log", "columns": []}


@pytest.fixture()
def order_items_dict() -> Dict[str, Any]:
    return copy.deepcopy(_ORDER_ITEMS)


@pytest.fixture()
def order_items_table(order_items_dict: Dict[str, Any]) -> TableInfo:
    return TableInfo.model_validate(order_items_dict)


@pytest.fixture()
def customers_table() -> TableInfo:
    return TableInfo.model_validate(copy.deepcopy(_CUSTOMERS))


@pytest.fixture()
def schema_document() -> Dict[str, Any]:
    """Two generatable tables plus one with no columns."""
    return {"tables": copy.deepcopy([_ORDER_ITEMS, _CUSTOMERS, _AUDIT_LOG])}


@pytest.fixture()
def schema_yaml_path(schema_document: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the schema document to a temporary YAML file and return its path."""
    path = tmp_path / "schema.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.safe_dump(schema_document, fh, default_flow_style=False, allow_unicode=True)
    return path


@pytest.fixture()
def schema_source(schema_document: Dict[str, Any]) -> FileSchemaSource:
    return FileSchemaSource(schema_document)


@pytest.fixture()
def generator(schema_source: FileSchemaSource) -> CrudGenerator:
    return CrudGenerator(schema_source)


# ---------------------------------------------------------------------------
# SPA source tree
# ---------------------------------------------------------------------------


@pytest.fixture()
def app_root(tmp_path: pathlib.Path) -> pathlib.Path:
    """A minimal ``src/app`` tree with navigation files and hand-written screens."""
    root = tmp_path / "AngularApp" / "src" / "app"
    (root / "components" / "sidebar").mkdir(parents=True)
    (root / "app.routes.ts").write_text(ROUTES_TS, encoding="utf-8")
    (root / "components" / "sidebar" / "sidebar.ts").write_text(SIDEBAR_TS, encoding="utf-8")

    for name in ("product-list", "product-form", "login", "dashboard", "header"):
        folder = root / "components" / name
        folder.mkdir(parents=True, exist_ok=True)
        (folder / f"{name}.ts").write_text(f"// {name}\n", encoding="utf-8")

    (root / "models").mkdir()
    (root / "models" / "product.model.ts").write_text("// product model\n", encoding="utf-8")
    (root / "services").mkdir()
    (root / "services" / "product.ts").write_text("// product service\n", encoding="utf-8")
    (root / "services" / "database.service.ts").write_text("// db service\n", encoding="utf-8")
    return root


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_crudgen_logger() -> Iterator[None]:
    """Undo the CLI's logger configuration after every test."""
    yield
    logging.disable(logging.NOTSET)
    root_logger = logging.getLogger("crudgen")
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
