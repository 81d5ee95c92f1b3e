"""
tests/test_templates.py
Unit tests for crudgen.templates module (TemplateGenerator).

Tests cover:
- Model interface (optional markers, target type comments)
- Service (CRUD operations, search predicate)
- List component logic and markup (sorting, paging, cell formatting)
- Form component logic and markup (controls, validators, widgets)
- Fixed stylesheets
- Aggregate generation and determinism
"""

from __future__ import annotations

from typing import List

import pytest

from crudgen.models import ArtifactKind, ColumnInfo, GeneratorConfig, TableInfo
from crudgen.naming import derive_naming
from crudgen.templates import (
    TemplateGenerator,
    cell_content,
    control_default,
    control_validators,
    input_type,
)


def _column(name: str, raw_type: str, **kwargs: object) -> ColumnInfo:
    return ColumnInfo(name=name, raw_type=raw_type, **kwargs)


# ===========================================================================
# Model
# ===========================================================================


class TestModelGeneration:
    """Model interface rendering."""

    def test_interface_fields(self, order_items_table: TableInfo) -> None:
        body = TemplateGenerator().generate_model(
            order_items_table, derive_naming(order_items_table.name)
        )
        assert "export interface OrderItem {" in body
        assert "  id: number;" in body
        assert "  sku: string;" in body
        assert "  quantity: number;" in body
        assert "  unitPrice: number;" in body
        assert "  isActive: boolean;" in body
        assert "  createdDate?: Date;" in body
        assert "  notes?: string;" in body

    def test_target_type_comment(self, order_items_table: TableInfo) -> None:
        body = TemplateGenerator().generate_model(
            order_items_table, derive_naming(order_items_table.name)
        )
        assert "/** UnitPrice: decimal */" in body
        assert "/** CreatedDate: datetime? */" in body

    def test_nullable_primary_key_not_optional(self) -> None:
        table = TableInfo(
            name="Tags",
            columns=[_column("Id", "int", nullable=True, is_primary_key=True)],
        )
        body = TemplateGenerator().generate_model(table, derive_naming("Tags"))
        assert "  id: number;" in body
        assert "id?:" not in body


# ===========================================================================
# Service
# ===========================================================================


class TestServiceGeneration:
    """In-memory data service rendering."""

    def test_operations(self, order_items_table: TableInfo) -> None:
        body = TemplateGenerator().generate_service(
            order_items_table, derive_naming(order_items_table.name)
        )
        assert "@Injectable({" in body
        assert "providedIn: 'root'" in body
        assert "export class OrderItemService {" in body
        assert "import { OrderItem } from '../models/orderItem.model';" in body
        for op in (
            "getOrderItems(): Observable<OrderItem[]>",
            "getOrderItemById(id: number)",
            "addOrderItem(",
            "updateOrderItem(",
            "deleteOrderItem(",
            "searchOrderItems(",
            "getCategories(): string[]",
        ):
            assert op in body
        assert "private nextId = 1;" in body
        assert "new BehaviorSubject<OrderItem[]>([])" in body

    def test_search_covers_string_columns(self, order_items_table: TableInfo) -> None:
        body = TemplateGenerator().generate_service(
            order_items_table, derive_naming(order_items_table.name)
        )
        assert "(item.sku ?? '').toLowerCase().includes(term) ||" in body
        assert "(item.notes ?? '').toLowerCase().includes(term)\n" in body
        assert "item.quantity ?? ''" not in body

    def test_search_without_string_columns_matches_everything(self) -> None:
        table = TableInfo(
            name="Counters",
            columns=[
                _column("Id", "int", is_primary_key=True),
                _column("Value", "bigint"),
            ],
        )
        body = TemplateGenerator().generate_service(table, derive_naming("Counters"))
        assert ".includes(term)" not in body
        assert "\n      true\n" in body

    def test_string_key_uses_string_ids(self) -> None:
        table = TableInfo(
            name="Sessions",
            columns=[
                _column("Token", "uniqueidentifier", is_primary_key=True),
                _column("UserName", "varchar(50)"),
            ],
        )
        body = TemplateGenerator().generate_service(table, derive_naming("Sessions"))
        assert "getSessionById(id: string)" in body
        assert "token: String(this.nextId++)" in body


# ===========================================================================
# List component
# ===========================================================================


class TestListGeneration:
    """List logic and markup."""

    def test_component_metadata(self, order_items_table: TableInfo) -> None:
        body = TemplateGenerator().generate_list_component(
            order_items_table, derive_naming(order_items_table.name)
        )
        assert "selector: 'app-order-items-list'" in body
        assert "templateUrl: './orderItems-list.html'" in body
        assert "styleUrl: './orderItems-list.css'" in body
        assert "export class OrderItemList implements OnInit, OnDestroy {" in body
        assert "from '../../services/orderItem.service'" in body

    def test_sorting_and_paging(self, order_items_table: TableInfo) -> None:
        body = TemplateGenerator().generate_list_component(
            order_items_table, derive_naming(order_items_table.name)
        )
        assert "sortField: keyof OrderItem = 'id';" in body
        assert "itemsPerPage = 10;" in body
        assert "if (aValue == null) {" in body
        assert "return [1, 2, 3, 4, 5, -1, total];" in body
        assert "return [1, -1, total - 4, total - 3, total - 2, total - 1, total];" in body
        assert "return [1, -1, current - 1, current, current + 1, -1, total];" in body
        assert "getPaginatedOrderItems(): OrderItem[]" in body
        assert "Intl.NumberFormat('en-US', { style: 'currency', currency: 'USD' })" in body

    def test_navigation_targets(self, order_items_table: TableInfo) -> None:
        body = TemplateGenerator().generate_list_component(
            order_items_table, derive_naming(order_items_table.name)
        )
        assert "this.router.navigate(['/order-items/new']);" in body
        assert "this.router.navigate(['/order-items/edit', item.id]);" in body

    def test_page_size_from_config(self, order_items_table: TableInfo) -> None:
        gen = TemplateGenerator(GeneratorConfig(items_per_page=25))
        body = gen.generate_list_component(
            order_items_table, derive_naming(order_items_table.name)
        )
        assert "itemsPerPage = 25;" in body

    def test_markup_shell_and_cells(self, order_items_table: TableInfo) -> None:
        body = TemplateGenerator().generate_list_template(
            order_items_table, derive_naming(order_items_table.name)
        )
        for tag in ("<app-header></app-header>", "<app-sidebar></app-sidebar>", "<app-footer></app-footer>"):
            assert tag in body
        assert "<h1>Order Items</h1>" in body
        assert "sortBy('sku')" in body
        assert "{{ formatCurrency(item.unitPrice) }}" in body
        assert "{{ item.quantity }}" in body
        assert 'class="list-container"' in body
        assert "getVisiblePages()" in body

    def test_markup_column_limit(self, order_items_table: TableInfo) -> None:
        naming = derive_naming(order_items_table.name)
        default_body = TemplateGenerator().generate_list_template(order_items_table, naming)
        assert "sortBy('createdDate')" not in default_body

        wide = TemplateGenerator(GeneratorConfig(display_column_limit=7))
        wide_body = wide.generate_list_template(order_items_table, naming)
        assert "{{ item.createdDate | date:'short' }}" in wide_body
        assert 'class="status-badge"' in wide_body


class TestCellContent:
    """Per-column list cell expressions."""

    def test_currency_requires_number(self) -> None:
        assert cell_content(_column("Price", "money")) == "{{ formatCurrency(item.price) }}"
        assert cell_content(_column("PriceCode", "varchar")) == "{{ item.priceCode }}"

    def test_date_pipe(self) -> None:
        assert cell_content(_column("ShippedOn", "date")) == "{{ item.shippedOn | date:'short' }}"

    def test_boolean_badge(self) -> None:
        cell = cell_content(_column("IsActive", "bit"))
        assert cell.startswith('<span class="status-badge"')
        assert "item.isActive ? 'Yes' : 'No'" in cell


# ===========================================================================
# Form component
# ===========================================================================


class TestFormGeneration:
    """Form logic and markup."""

    def test_controls_and_validators(self, order_items_table: TableInfo) -> None:
        body = TemplateGenerator().generate_form_component(
            order_items_table, derive_naming(order_items_table.name)
        )
        assert "export class OrderItemForm implements OnInit {" in body
        assert "sku: ['', [Validators.required, Validators.maxLength(50)]]," in body
        assert "quantity: [0, [Validators.required, Validators.min(0)]]," in body
        assert "isActive: [false, [Validators.required]]," in body
        assert "notes: ['']," in body
        assert "createdDate: ['']," in body
        # identity key gets no control
        assert "id: [" not in body

    def test_edit_mode(self, order_items_table: TableInfo) -> None:
        body = TemplateGenerator().generate_form_component(
            order_items_table, derive_naming(order_items_table.name)
        )
        assert "this.id = +params['id'];" in body
        assert "this.isEditMode = true;" in body
        assert "getFieldError(fieldName: string): string" in body

    def test_email_validator(self, customers_table: TableInfo) -> None:
        body = TemplateGenerator().generate_form_component(
            customers_table, derive_naming(customers_table.name)
        )
        assert "email: ['', [Validators.maxLength(255), Validators.email]]," in body

    def test_markup_widgets(self, order_items_table: TableInfo) -> None:
        body = TemplateGenerator().generate_form_template(
            order_items_table, derive_naming(order_items_table.name)
        )
        assert 'class="entity-form"' in body
        assert 'class="form-container"' in body
        assert '<label for="sku" class="form-label">Sku *</label>' in body
        assert '<label for="notes" class="form-label">Notes</label>' in body
        assert '<textarea id="notes" formControlName="notes" class="form-input" rows="3"' in body
        assert '<input type="checkbox" id="isActive"' in body
        assert '<input type="number" id="quantity"' in body
        assert '<input type="date" id="createdDate"' in body
        assert "getFieldError('sku')" in body


class TestInputType:
    """Widget heuristics, name before wire type."""

    @pytest.mark.parametrize(
        "name, raw_type, expected",
        [
            ("Email", "varchar", "email"),
            ("Password", "varchar", "password"),
            ("PhoneNumber", "varchar", "tel"),
            ("Website", "varchar", "url"),
            ("Description", "nvarchar", "textarea"),
            ("Status", "int", "select"),
            ("Quantity", "int", "number"),
            ("IsActive", "bit", "checkbox"),
            ("ShipDate", "datetime", "date"),
            ("StartTime", "datetime", "datetime-local"),
            ("Created", "datetime", "date"),
            ("Sku", "varchar", "text"),
        ],
    )
    def test_widget(self, name: str, raw_type: str, expected: str) -> None:
        assert input_type(_column(name, raw_type)) == expected

    def test_defaults_by_wire_type(self) -> None:
        assert control_default(_column("A", "varchar")) == "''"
        assert control_default(_column("A", "int")) == "0"
        assert control_default(_column("A", "bit")) == "false"
        assert control_default(_column("A", "datetime")) == "''"

    def test_nullable_string_has_no_validators(self) -> None:
        assert control_validators(_column("Note", "text", nullable=True)) == []


# ===========================================================================
# Styles & aggregate
# ===========================================================================


class TestAggregate:
    """Fixed styles, artifact order and determinism."""

    def test_styles_are_fixed(self) -> None:
        gen = TemplateGenerator()
        assert ".list-container" in gen.generate_list_styles()
        assert ".form-container" in gen.generate_form_styles()
        assert ".entity-form" in gen.generate_form_styles()
        assert gen.generate_list_styles() == TemplateGenerator().generate_list_styles()

    def test_all_artifacts_in_order(self, order_items_table: TableInfo) -> None:
        bodies = TemplateGenerator().generate_all_for_table(order_items_table)
        expected: List[ArtifactKind] = list(ArtifactKind)
        assert list(bodies.keys()) == expected
        assert all(body for body in bodies.values())

    def test_deterministic(self, order_items_table: TableInfo) -> None:
        first = TemplateGenerator().generate_all_for_table(order_items_table)
        second = TemplateGenerator().generate_all_for_table(order_items_table)
        assert first == second
