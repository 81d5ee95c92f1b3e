# File: crudgen/templates.py
"""
NexaFlow CrudGen - Artifact Template Engine
============================================
Pure-Python rendering of the eight Angular artifacts generated per table:

    1. Model interface                   (``*.model.ts``)
    2. Data-access service               (``*.service.ts``)
    3. List component logic              (``*-list.ts``)
    4. List component markup             (``*-list.html``)
    5. List component styles             (``*-list.css``)
    6. Form component logic              (``*-form.ts``)
    7. Form component markup             (``*-form.html``)
    8. Form component styles             (``*-form.css``)

**Determinism contract:**
    - Every ``generate_*`` method is a pure function of the table, its
      naming bundle and the generator config: no I/O, no clock reads, no
      counters.  Re-rendering an unchanged table is byte-identical.
    - All string assembly uses the ``List[str]`` + ``"\\n".join()`` pattern.
    - Stylesheets are fixed text with no per-table variance.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from crudgen.models import ArtifactKind, ColumnInfo, GeneratorConfig, TableInfo
from crudgen.naming import NamingBundle, derive_naming, to_display_name
from crudgen.type_mapping import WireType

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.templates")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_I: str = "  "  # TypeScript / HTML indent unit
_I2: str = _I * 2
_I3: str = _I * 3
_I4: str = _I * 4

_DEFAULT_PK_PROPERTY: str = "id"

_CURRENCY_HINTS: Tuple[str, ...] = ("price", "amount", "cost")

# Column-name heuristics for form widgets, checked in this order
_INPUT_NAME_HINTS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("email",), "email"),
    (("password",), "password"),
    (("phone", "tel"), "tel"),
    (("url", "website"), "url"),
    (("description", "comment", "note"), "textarea"),
    (("category", "status", "type"), "select"),
)

_CONTROL_DEFAULTS: Dict[str, str] = {
    WireType.STRING.value: "''",
    WireType.NUMBER.value: "0",
    WireType.BOOLEAN.value: "false",
    WireType.DATE.value: "''",
}

_PAGE_LAYOUT_CSS: str = """\
.page-layout {
  min-height: 100vh;
  display: flex;
  flex-direction: column;
}

.content-wrapper {
  display: flex;
  flex: 1;
}

.main-content {
  flex: 1;
  padding: 2rem;
  background-color: #f8f9fa;
  margin-left: 250px;
}

@media (max-width: 768px) {
  .main-content {
    margin-left: 0;
    padding: 1rem;
  }
}

.header-section h1 {
  color: #2c3e50;
  margin: 0;
  font-size: 2rem;
  font-weight: 600;
}

.btn {
  padding: 0.5rem 1rem;
  border: none;
  border-radius: 4px;
  font-weight: 500;
  cursor: pointer;
  display: inline-flex;
  align-items: center;
  gap: 0.5rem;
  transition: all 0.2s;
}

.btn:disabled {
  opacity: 0.6;
  cursor: not-allowed;
}

.btn-primary {
  background: #007bff;
  color: white;
}

.btn-primary:hover:not(:disabled) {
  background: #0056b3;
}

.btn-secondary {
  background: #6c757d;
  color: white;
}

.btn-secondary:hover:not(:disabled) {
  background: #545b62;
}
"""

_LIST_CSS: str = _PAGE_LAYOUT_CSS + """
.list-container {
  max-width: 1200px;
  margin: 0 auto;
}

.header-section {
  display: flex;
  justify-content: space-between;
  align-items: center;
  margin-bottom: 2rem;
  flex-wrap: wrap;
  gap: 1rem;
}

.filter-section {
  background: #fff;
  padding: 1.5rem;
  border-radius: 8px;
  box-shadow: 0 1px 3px rgba(0, 0, 0, 0.1);
  margin-bottom: 1.5rem;
  display: flex;
  gap: 1rem;
  align-items: center;
  flex-wrap: wrap;
}

.search-bar {
  flex: 1;
  min-width: 250px;
}

.search-input,
.filter-select {
  width: 100%;
  padding: 0.75rem;
  border: 1px solid #ddd;
  border-radius: 4px;
  font-size: 1rem;
  background: white;
}

.search-input:focus {
  outline: none;
  border-color: #007bff;
  box-shadow: 0 0 0 2px rgba(0, 123, 255, 0.25);
}

.table-container {
  background: #fff;
  border-radius: 8px;
  box-shadow: 0 1px 3px rgba(0, 0, 0, 0.1);
  overflow: hidden;
  margin-bottom: 1.5rem;
}

.data-table {
  width: 100%;
  border-collapse: collapse;
}

.data-table th,
.data-table td {
  padding: 1rem;
  text-align: left;
  border-bottom: 1px solid #e9ecef;
}

.data-table th {
  background: #f8f9fa;
  font-weight: 600;
  color: #495057;
}

.sortable-header {
  cursor: pointer;
  user-select: none;
}

.sortable-header:hover {
  background: #e9ecef;
}

.sort-icon {
  margin-left: 0.5rem;
  color: #6c757d;
}

.table-row:hover {
  background: #f8f9fa;
}

.actions-cell {
  display: flex;
  gap: 0.5rem;
}

.status-badge {
  padding: 0.25rem 0.5rem;
  border-radius: 12px;
  font-size: 0.75rem;
  font-weight: 500;
  background: #dc3545;
  color: white;
}

.status-active {
  background: #28a745;
}

.btn-outline {
  background: transparent;
  color: #007bff;
  border: 1px solid #007bff;
}

.btn-outline:hover:not(:disabled),
.btn.active {
  background: #007bff;
  color: white;
}

.btn-danger {
  background: #dc3545;
  color: white;
}

.btn-sm {
  padding: 0.375rem 0.75rem;
  font-size: 0.875rem;
}

.empty-state {
  text-align: center;
  padding: 3rem;
  color: #6c757d;
}

.empty-icon {
  font-size: 3rem;
  margin-bottom: 1rem;
}

.pagination-section {
  display: flex;
  justify-content: space-between;
  align-items: center;
  background: #fff;
  padding: 1rem;
  border-radius: 8px;
  box-shadow: 0 1px 3px rgba(0, 0, 0, 0.1);
  flex-wrap: wrap;
  gap: 1rem;
}

.pagination-info,
.page-size-selector,
.pagination-controls,
.page-numbers {
  display: flex;
  align-items: center;
  gap: 0.5rem;
  color: #6c757d;
}

@media (max-width: 768px) {
  .header-section,
  .filter-section,
  .pagination-section {
    flex-direction: column;
    align-items: stretch;
  }

  .data-table th,
  .data-table td {
    padding: 0.5rem;
  }

  .actions-cell {
    flex-direction: column;
  }
}
"""

_FORM_CSS: str = _PAGE_LAYOUT_CSS + """
.form-container {
  max-width: 800px;
  margin: 0 auto;
}

.header-section {
  margin-bottom: 2rem;
}

.entity-form {
  background: #fff;
  padding: 2rem;
  border-radius: 8px;
  box-shadow: 0 1px 3px rgba(0, 0, 0, 0.1);
}

.form-grid {
  display: grid;
  grid-template-columns: repeat(auto-fit, minmax(300px, 1fr));
  gap: 1.5rem;
  margin-bottom: 2rem;
}

.form-group {
  display: flex;
  flex-direction: column;
}

.form-label {
  margin-bottom: 0.5rem;
  font-weight: 500;
  color: #495057;
}

.form-input {
  padding: 0.75rem;
  border: 1px solid #ced4da;
  border-radius: 4px;
  font-size: 1rem;
  transition: border-color 0.2s, box-shadow 0.2s;
}

.form-input:focus {
  outline: none;
  border-color: #007bff;
  box-shadow: 0 0 0 2px rgba(0, 123, 255, 0.25);
}

.form-input.ng-invalid.ng-touched {
  border-color: #dc3545;
}

.field-error {
  color: #dc3545;
  font-size: 0.875rem;
  margin-top: 0.25rem;
}

.form-actions {
  display: flex;
  gap: 1rem;
  justify-content: flex-end;
  padding-top: 1.5rem;
  border-top: 1px solid #e9ecef;
}

input[type="checkbox"].form-input {
  width: auto;
  align-self: flex-start;
}

textarea.form-input {
  resize: vertical;
  min-height: 100px;
}

@media (max-width: 768px) {
  .form-grid {
    grid-template-columns: 1fr;
  }

  .form-actions {
    flex-direction: column-reverse;
  }
}
"""


# ---------------------------------------------------------------------------
# Column-level helpers
# ---------------------------------------------------------------------------


def _primary_key(table: TableInfo) -> Tuple[str, str]:
    """Return ``(property, wire type)`` of the key, defaulting to ``id: number``."""
    pk: Optional[ColumnInfo] = table.primary_key
    if pk is None:
        return _DEFAULT_PK_PROPERTY, WireType.NUMBER.value
    return pk.property_name, pk.wire_type.value


def _is_currency(col: ColumnInfo) -> bool:
    lowered: str = col.name.lower()
    return col.wire_type == WireType.NUMBER and any(h in lowered for h in _CURRENCY_HINTS)


def cell_content(col: ColumnInfo, item: str = "item") -> str:
    """Angular expression rendering one list cell for *col*."""
    ref: str = f"{item}.{col.property_name}"
    if _is_currency(col):
        return f"{{{{ formatCurrency({ref}) }}}}"
    if col.wire_type == WireType.DATE:
        return f"{{{{ {ref} | date:'short' }}}}"
    if col.wire_type == WireType.BOOLEAN:
        return (
            f'<span class="status-badge" [class.status-active]="{ref}">'
            f"{{{{ {ref} ? 'Yes' : 'No' }}}}</span>"
        )
    return f"{{{{ {ref} }}}}"


def input_type(col: ColumnInfo) -> str:
    """
    Pick the form widget for *col*.

    Name heuristics win over the wire type; ``textarea`` and ``select`` are
    rendered as their own elements rather than ``<input>`` types.
    """
    lowered: str = col.name.lower()
    for hints, widget in _INPUT_NAME_HINTS:
        if any(h in lowered for h in hints):
            return widget

    wire: WireType = col.wire_type
    if wire == WireType.NUMBER:
        return "number"
    if wire == WireType.BOOLEAN:
        return "checkbox"
    if wire == WireType.DATE:
        if "date" in lowered:
            return "date"
        if "time" in lowered:
            return "datetime-local"
        return "date"
    return "text"


def control_validators(col: ColumnInfo) -> List[str]:
    """Angular validators for the form control of *col*."""
    validators: List[str] = []
    if not col.nullable:
        validators.append("Validators.required")
    if col.wire_type == WireType.STRING:
        if col.max_length is not None:
            validators.append(f"Validators.maxLength({col.max_length})")
        if "email" in col.name.lower():
            validators.append("Validators.email")
    if col.wire_type == WireType.NUMBER:
        validators.append("Validators.min(0)")
    return validators


def control_default(col: ColumnInfo) -> str:
    return _CONTROL_DEFAULTS.get(col.wire_type.value, "''")


# ---------------------------------------------------------------------------
# TemplateGenerator class
# ---------------------------------------------------------------------------


class TemplateGenerator:
    """
    Stateless artifact renderer.

    Each ``generate_*`` method takes a ``TableInfo`` and its
    ``NamingBundle`` and returns the complete text of one file.

    Thread-safe: no mutable instance state.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None) -> None:
        self._config: GeneratorConfig = config or GeneratorConfig()
        logger.debug(
            "TemplateGenerator initialised (columns shown=%d, page size=%d).",
            self._config.display_column_limit,
            self._config.items_per_page,
        )

    # ===================================================================
    # 1. Model interface
    # ===================================================================

    def generate_model(self, table: TableInfo, naming: NamingBundle) -> str:
        """One interface field per column; ``?`` for nullable non-key columns."""
        lines: List[str] = []
        lines.append("/**")
        lines.append(f" * {naming.class_name} model for table {table.qualified_name}.")
        lines.append(" * Generated by NexaFlow CrudGen.")
        lines.append(" */")
        lines.append(f"export interface {naming.class_name} {{")
        for col in table.columns:
            optional: str = "?" if col.is_optional else ""
            lines.append(f"{_I}/** {col.name}: {col.target_type.declaration} */")
            lines.append(f"{_I}{col.property_name}{optional}: {col.wire_type.value};")
        lines.append("}")
        lines.append("")
        return "\n".join(lines)

    # ===================================================================
    # 2. Data-access service
    # ===================================================================

    def generate_service(self, table: TableInfo, naming: NamingBundle) -> str:
        """In-memory CRUD service over a ``BehaviorSubject`` stream."""
        cls: str = naming.class_name
        plural: str = naming.plural_pascal
        store: str = naming.plural_camel
        pk, pk_type = _primary_key(table)
        new_id: str = "this.nextId++" if pk_type == WireType.NUMBER.value else "String(this.nextId++)"

        lines: List[str] = []
        lines.append("import { Injectable } from '@angular/core';")
        lines.append("import { BehaviorSubject, Observable } from 'rxjs';")
        lines.append(f"import {{ {cls} }} from '../models/{naming.singular_camel}.model';")
        lines.append("")
        lines.append("@Injectable({")
        lines.append(f"{_I}providedIn: 'root'")
        lines.append("})")
        lines.append(f"export class {cls}Service {{")
        lines.append(f"{_I}private {store}: {cls}[] = [];")
        lines.append(f"{_I}private {store}Subject = new BehaviorSubject<{cls}[]>([]);")
        lines.append(f"{_I}private nextId = 1;")
        lines.append("")

        # -- read --
        lines.append(f"{_I}get{plural}(): Observable<{cls}[]> {{")
        lines.append(f"{_I2}return this.{store}Subject.asObservable();")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}get{cls}ById(id: {pk_type}): {cls} | undefined {{")
        lines.append(f"{_I2}return this.{store}.find(item => item.{pk} === id);")
        lines.append(f"{_I}}}")
        lines.append("")

        # -- create --
        lines.append(f"{_I}add{cls}(item: Omit<{cls}, '{pk}'>): boolean {{")
        lines.append(f"{_I2}try {{")
        lines.append(f"{_I3}const created = {{ ...item, {pk}: {new_id} }} as {cls};")
        lines.append(f"{_I3}this.{store}.push(created);")
        lines.append(f"{_I3}this.publish();")
        lines.append(f"{_I3}return true;")
        lines.append(f"{_I2}}} catch (error) {{")
        lines.append(f"{_I3}console.error('Error adding {naming.singular_camel}:', error);")
        lines.append(f"{_I3}return false;")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I}}}")
        lines.append("")

        # -- update --
        lines.append(f"{_I}update{cls}(id: {pk_type}, updates: Partial<{cls}>): boolean {{")
        lines.append(f"{_I2}const index = this.{store}.findIndex(item => item.{pk} === id);")
        lines.append(f"{_I2}if (index === -1) {{")
        lines.append(f"{_I3}return false;")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}this.{store}[index] = {{ ...this.{store}[index], ...updates, {pk}: id }};")
        lines.append(f"{_I2}this.publish();")
        lines.append(f"{_I2}return true;")
        lines.append(f"{_I}}}")
        lines.append("")

        # -- delete --
        lines.append(f"{_I}delete{cls}(id: {pk_type}): boolean {{")
        lines.append(f"{_I2}const index = this.{store}.findIndex(item => item.{pk} === id);")
        lines.append(f"{_I2}if (index === -1) {{")
        lines.append(f"{_I3}return false;")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}this.{store}.splice(index, 1);")
        lines.append(f"{_I2}this.publish();")
        lines.append(f"{_I2}return true;")
        lines.append(f"{_I}}}")
        lines.append("")

        # -- search --
        lines.append(f"{_I}search{plural}(searchTerm: string): {cls}[] {{")
        lines.append(f"{_I2}if (!searchTerm.trim()) {{")
        lines.append(f"{_I3}return this.{store};")
        lines.append(f"{_I2}}}")
        lines.append("")
        lines.append(f"{_I2}const term = searchTerm.toLowerCase();")
        lines.append(f"{_I2}return this.{store}.filter(item =>")
        lines.extend(self._search_predicate(table))
        lines.append(f"{_I2});")
        lines.append(f"{_I}}}")
        lines.append("")

        lines.append(f"{_I}getCategories(): string[] {{")
        lines.append(f"{_I2}return [];")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}private publish(): void {{")
        lines.append(f"{_I2}this.{store}Subject.next([...this.{store}]);")
        lines.append(f"{_I}}}")
        lines.append("}")
        lines.append("")
        return "\n".join(lines)

    def _search_predicate(self, table: TableInfo) -> List[str]:
        """OR of case-insensitive substring tests over string columns."""
        string_cols: List[ColumnInfo] = table.string_columns
        if not string_cols:
            # Nothing searchable: every record matches
            return [f"{_I3}true"]
        lines: List[str] = []
        for index, col in enumerate(string_cols):
            connector: str = " ||" if index < len(string_cols) - 1 else ""
            lines.append(
                f"{_I3}(item.{col.property_name} ?? '').toLowerCase().includes(term){connector}"
            )
        return lines

    # ===================================================================
    # 3. List component logic
    # ===================================================================

    def generate_list_component(self, table: TableInfo, naming: NamingBundle) -> str:
        """Sortable, searchable, paginated listing over the service stream."""
        cls: str = naming.class_name
        plural: str = naming.plural_pascal
        store: str = naming.plural_camel
        svc: str = f"{naming.singular_camel}Service"
        pk, _ = _primary_key(table)

        lines: List[str] = []
        lines.append("import { Component, OnDestroy, OnInit } from '@angular/core';")
        lines.append("import { CommonModule } from '@angular/common';")
        lines.append("import { FormsModule } from '@angular/forms';")
        lines.append("import { Router } from '@angular/router';")
        lines.append("import { Subscription } from 'rxjs';")
        lines.append(f"import {{ {cls}Service }} from '../../services/{naming.singular_camel}.service';")
        lines.append(f"import {{ {cls} }} from '../../models/{naming.singular_camel}.model';")
        lines.append("import { Header } from '../header/header';")
        lines.append("import { Sidebar } from '../sidebar/sidebar';")
        lines.append("import { Footer } from '../footer/footer';")
        lines.append("")
        lines.append("@Component({")
        lines.append(f"{_I}selector: 'app-{naming.plural_kebab}-list',")
        lines.append(f"{_I}standalone: true,")
        lines.append(f"{_I}imports: [CommonModule, FormsModule, Header, Sidebar, Footer],")
        lines.append(f"{_I}templateUrl: './{store}-list.html',")
        lines.append(f"{_I}styleUrl: './{store}-list.css'")
        lines.append("})")
        lines.append(f"export class {naming.list_component} implements OnInit, OnDestroy {{")
        lines.append(f"{_I}{store}: {cls}[] = [];")
        lines.append(f"{_I}filtered{plural}: {cls}[] = [];")
        lines.append(f"{_I}searchTerm = '';")
        lines.append(f"{_I}selectedCategory = '';")
        lines.append(f"{_I}categories: string[] = [];")
        lines.append("")
        lines.append(f"{_I}currentPage = 1;")
        lines.append(f"{_I}itemsPerPage = {self._config.items_per_page};")
        lines.append(f"{_I}totalItems = 0;")
        lines.append("")
        lines.append(f"{_I}sortField: keyof {cls} = '{pk}';")
        lines.append(f"{_I}sortDirection: 'asc' | 'desc' = 'asc';")
        lines.append("")
        lines.append(f"{_I}private subscription = new Subscription();")
        lines.append("")
        lines.append(f"{_I}constructor(private {svc}: {cls}Service, private router: Router) {{}}")
        lines.append("")
        lines.append(f"{_I}ngOnInit(): void {{")
        lines.append(f"{_I2}this.subscription.add(")
        lines.append(f"{_I3}this.{svc}.get{plural}().subscribe(items => {{")
        lines.append(f"{_I4}this.{store} = items;")
        lines.append(f"{_I4}this.applyFiltersAndSort();")
        lines.append(f"{_I3}}})")
        lines.append(f"{_I2});")
        lines.append(f"{_I2}this.categories = this.{svc}.getCategories();")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}ngOnDestroy(): void {{")
        lines.append(f"{_I2}this.subscription.unsubscribe();")
        lines.append(f"{_I}}}")
        lines.append("")

        # -- filtering & sorting --
        lines.append(f"{_I}applyFiltersAndSort(): void {{")
        lines.append(f"{_I2}const filtered = this.searchTerm.trim()")
        lines.append(f"{_I3}? this.{svc}.search{plural}(this.searchTerm)")
        lines.append(f"{_I3}: [...this.{store}];")
        lines.append("")
        lines.append(f"{_I2}filtered.sort((a, b) => this.compare(a[this.sortField], b[this.sortField]));")
        lines.append("")
        lines.append(f"{_I2}this.filtered{plural} = filtered;")
        lines.append(f"{_I2}this.totalItems = filtered.length;")
        lines.append(f"{_I2}this.currentPage = 1;")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}// null/undefined always sort last, whatever the direction")
        lines.append(f"{_I}private compare(aValue: unknown, bValue: unknown): number {{")
        lines.append(f"{_I2}if (aValue == null && bValue == null) {{")
        lines.append(f"{_I3}return 0;")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}if (aValue == null) {{")
        lines.append(f"{_I3}return 1;")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}if (bValue == null) {{")
        lines.append(f"{_I3}return -1;")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}let comparison = 0;")
        lines.append(f"{_I2}if ((aValue as any) < (bValue as any)) {{")
        lines.append(f"{_I3}comparison = -1;")
        lines.append(f"{_I2}}} else if ((aValue as any) > (bValue as any)) {{")
        lines.append(f"{_I3}comparison = 1;")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}return this.sortDirection === 'desc' ? -comparison : comparison;")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}onSearch(): void {{")
        lines.append(f"{_I2}this.applyFiltersAndSort();")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}onCategoryChange(): void {{")
        lines.append(f"{_I2}this.applyFiltersAndSort();")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}sortBy(field: keyof {cls}): void {{")
        lines.append(f"{_I2}if (this.sortField === field) {{")
        lines.append(f"{_I3}this.sortDirection = this.sortDirection === 'asc' ? 'desc' : 'asc';")
        lines.append(f"{_I2}}} else {{")
        lines.append(f"{_I3}this.sortField = field;")
        lines.append(f"{_I3}this.sortDirection = 'asc';")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}this.applyFiltersAndSort();")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}getSortIcon(field: keyof {cls}): string {{")
        lines.append(f"{_I2}if (this.sortField !== field) {{")
        lines.append(f"{_I3}return '↕';")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}return this.sortDirection === 'asc' ? '↑' : '↓';")
        lines.append(f"{_I}}}")
        lines.append("")

        # -- pagination --
        lines.append(f"{_I}getPaginated{plural}(): {cls}[] {{")
        lines.append(f"{_I2}const start = (this.currentPage - 1) * this.itemsPerPage;")
        lines.append(f"{_I2}return this.filtered{plural}.slice(start, start + this.itemsPerPage);")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}getTotalPages(): number {{")
        lines.append(f"{_I2}return Math.ceil(this.totalItems / this.itemsPerPage);")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}goToPage(page: number): void {{")
        lines.append(f"{_I2}if (page >= 1 && page <= this.getTotalPages()) {{")
        lines.append(f"{_I3}this.currentPage = page;")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}previousPage(): void {{")
        lines.append(f"{_I2}this.goToPage(this.currentPage - 1);")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}nextPage(): void {{")
        lines.append(f"{_I2}this.goToPage(this.currentPage + 1);")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}getStartIndex(): number {{")
        lines.append(f"{_I2}return this.totalItems === 0 ? 0 : (this.currentPage - 1) * this.itemsPerPage + 1;")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}getEndIndex(): number {{")
        lines.append(f"{_I2}return Math.min(this.currentPage * this.itemsPerPage, this.totalItems);")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.extend(self._visible_pages_method())
        lines.append("")
        lines.append(f"{_I}onPageSizeChange(): void {{")
        lines.append(f"{_I2}this.currentPage = 1;")
        lines.append(f"{_I2}this.applyFiltersAndSort();")
        lines.append(f"{_I}}}")
        lines.append("")

        # -- navigation & actions --
        lines.append(f"{_I}add{cls}(): void {{")
        lines.append(f"{_I2}this.router.navigate(['/{naming.plural_kebab}/new']);")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}edit{cls}(item: {cls}): void {{")
        lines.append(f"{_I2}this.router.navigate(['/{naming.plural_kebab}/edit', item.{pk}]);")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}delete{cls}(item: {cls}): void {{")
        lines.append(f"{_I2}if (!confirm('Are you sure you want to delete this {naming.display_name.lower()}?')) {{")
        lines.append(f"{_I3}return;")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}if (!this.{svc}.delete{cls}(item.{pk})) {{")
        lines.append(f"{_I3}alert('Failed to delete {naming.display_name.lower()}');")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}formatCurrency(amount: number | null | undefined): string {{")
        lines.append(f"{_I2}if (amount == null) {{")
        lines.append(f"{_I3}return '';")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}return new Intl.NumberFormat('en-US', {{ style: 'currency', currency: 'USD' }}).format(amount);")
        lines.append(f"{_I}}}")
        lines.append("}")
        lines.append("")
        return "\n".join(lines)

    def _visible_pages_method(self) -> List[str]:
        """
        Page window: all pages up to 7; otherwise first/last pages with
        ``-1`` marking an ellipsis.
        """
        lines: List[str] = []
        lines.append(f"{_I}getVisiblePages(): number[] {{")
        lines.append(f"{_I2}const total = this.getTotalPages();")
        lines.append(f"{_I2}const current = this.currentPage;")
        lines.append(f"{_I2}if (total <= 7) {{")
        lines.append(f"{_I3}return Array.from({{ length: total }}, (_, i) => i + 1);")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}if (current <= 4) {{")
        lines.append(f"{_I3}return [1, 2, 3, 4, 5, -1, total];")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}if (current >= total - 3) {{")
        lines.append(f"{_I3}return [1, -1, total - 4, total - 3, total - 2, total - 1, total];")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}return [1, -1, current - 1, current, current + 1, -1, total];")
        lines.append(f"{_I}}}")
        return lines

    # ===================================================================
    # 4. List component markup
    # ===================================================================

    def generate_list_template(self, table: TableInfo, naming: NamingBundle) -> str:
        """Table of the first N columns plus search, actions and pagination."""
        cls: str = naming.class_name
        plural: str = naming.plural_pascal
        title: str = to_display_name(plural)
        noun: str = title.lower()
        shown: List[ColumnInfo] = table.columns[: self._config.display_column_limit]
        row: str = _I * 7

        lines: List[str] = []
        lines.append('<div class="page-layout">')
        lines.append(f"{_I}<app-header></app-header>")
        lines.append("")
        lines.append(f'{_I}<div class="content-wrapper">')
        lines.append(f"{_I2}<app-sidebar></app-sidebar>")
        lines.append("")
        lines.append(f'{_I2}<main class="main-content">')
        lines.append(f'{_I3}<div class="list-container">')
        lines.append(f'{_I4}<div class="header-section">')
        lines.append(f"{_I4}{_I}<h1>{title}</h1>")
        lines.append(f'{_I4}{_I}<button type="button" class="btn btn-primary" (click)="add{cls}()">')
        lines.append(f"{_I4}{_I2}+ Add {naming.display_name}")
        lines.append(f"{_I4}{_I}</button>")
        lines.append(f"{_I4}</div>")
        lines.append("")
        lines.append(f'{_I4}<div class="filter-section">')
        lines.append(f'{_I4}{_I}<div class="search-bar">')
        lines.append(f'{_I4}{_I2}<input type="text" class="search-input" placeholder="Search {noun}..."')
        lines.append(f'{_I4}{_I3}[(ngModel)]="searchTerm" (input)="onSearch()">')
        lines.append(f"{_I4}{_I}</div>")
        lines.append(f'{_I4}{_I}<select class="filter-select" [(ngModel)]="selectedCategory" (change)="onCategoryChange()">')
        lines.append(f'{_I4}{_I2}<option value="">All Categories</option>')
        lines.append(f'{_I4}{_I2}<option *ngFor="let category of categories" [value]="category">{{{{ category }}}}</option>')
        lines.append(f"{_I4}{_I}</select>")
        lines.append(f"{_I4}</div>")
        lines.append("")
        lines.append(f'{_I4}<div class="table-container">')
        lines.append(f'{_I4}{_I}<table class="data-table">')
        lines.append(f"{_I4}{_I2}<thead>")
        lines.append(f"{_I4}{_I3}<tr>")
        for col in shown:
            prop: str = col.property_name
            lines.append(f"{row}<th class=\"sortable-header\" (click)=\"sortBy('{prop}')\">")
            lines.append(f"{row}{_I}{col.display_name}")
            lines.append(f"{row}{_I}<span class=\"sort-icon\">{{{{ getSortIcon('{prop}') }}}}</span>")
            lines.append(f"{row}</th>")
        lines.append(f'{row}<th class="actions-column">Actions</th>')
        lines.append(f"{_I4}{_I3}</tr>")
        lines.append(f"{_I4}{_I2}</thead>")
        lines.append(f"{_I4}{_I2}<tbody>")
        lines.append(f'{_I4}{_I3}<tr *ngFor="let item of getPaginated{plural}()" class="table-row">')
        for col in shown:
            lines.append(f"{row}<td>{cell_content(col)}</td>")
        lines.append(f'{row}<td class="actions-cell">')
        lines.append(f'{row}{_I}<button type="button" class="btn btn-outline btn-sm" (click)="edit{cls}(item)">Edit</button>')
        lines.append(f'{row}{_I}<button type="button" class="btn btn-danger btn-sm" (click)="delete{cls}(item)">Delete</button>')
        lines.append(f"{row}</td>")
        lines.append(f"{_I4}{_I3}</tr>")
        lines.append(f"{_I4}{_I2}</tbody>")
        lines.append(f"{_I4}{_I}</table>")
        lines.append("")
        lines.append(f'{_I4}{_I}<div class="empty-state" *ngIf="filtered{plural}.length === 0">')
        lines.append(f'{_I4}{_I2}<div class="empty-icon">{self._config.menu_icon}</div>')
        lines.append(f"{_I4}{_I2}<h3>No {title} Found</h3>")
        lines.append(f"{_I4}{_I}</div>")
        lines.append(f"{_I4}</div>")
        lines.append("")
        lines.append(f'{_I4}<div class="pagination-section" *ngIf="totalItems > 0">')
        lines.append(f'{_I4}{_I}<div class="pagination-info">')
        lines.append(f"{_I4}{_I2}<span>Showing {{{{ getStartIndex() }}}} to {{{{ getEndIndex() }}}} of {{{{ totalItems }}}} entries</span>")
        lines.append(f'{_I4}{_I2}<div class="page-size-selector">')
        lines.append(f"{_I4}{_I3}<label>Show:</label>")
        lines.append(f'{_I4}{_I3}<select [(ngModel)]="itemsPerPage" (change)="onPageSizeChange()">')
        for size in (10, 25, 50, 100):
            lines.append(f'{_I4}{_I4}<option [ngValue]="{size}">{size}</option>')
        lines.append(f"{_I4}{_I3}</select>")
        lines.append(f"{_I4}{_I2}</div>")
        lines.append(f"{_I4}{_I}</div>")
        lines.append(f'{_I4}{_I}<div class="pagination-controls">')
        lines.append(f'{_I4}{_I2}<button type="button" class="btn btn-outline btn-sm" [disabled]="currentPage === 1" (click)="previousPage()">Previous</button>')
        lines.append(f'{_I4}{_I2}<div class="page-numbers">')
        lines.append(f'{_I4}{_I3}<button *ngFor="let page of getVisiblePages()" type="button" class="btn btn-outline btn-sm"')
        lines.append(f'{_I4}{_I4}[class.active]="page === currentPage" [disabled]="page === -1"')
        lines.append(f'{_I4}{_I4}(click)="page !== -1 && goToPage(page)">')
        lines.append(f"{_I4}{_I4}{{{{ page === -1 ? '...' : page }}}}")
        lines.append(f"{_I4}{_I3}</button>")
        lines.append(f"{_I4}{_I2}</div>")
        lines.append(f'{_I4}{_I2}<button type="button" class="btn btn-outline btn-sm" [disabled]="currentPage === getTotalPages()" (click)="nextPage()">Next</button>')
        lines.append(f"{_I4}{_I}</div>")
        lines.append(f"{_I4}</div>")
        lines.append(f"{_I3}</div>")
        lines.append(f"{_I2}</main>")
        lines.append(f"{_I}</div>")
        lines.append("")
        lines.append(f"{_I}<app-footer></app-footer>")
        lines.append("</div>")
        lines.append("")
        return "\n".join(lines)

    # ===================================================================
    # 5. List component styles
    # ===================================================================

    def generate_list_styles(self) -> str:
        return _LIST_CSS

    # ===================================================================
    # 6. Form component logic
    # ===================================================================

    def generate_form_component(self, table: TableInfo, naming: NamingBundle) -> str:
        """Reactive create/edit form; edit mode is driven by the ``id`` route param."""
        cls: str = naming.class_name
        svc: str = f"{naming.singular_camel}Service"
        form: str = f"{naming.singular_camel}Form"
        pk, pk_type = _primary_key(table)
        id_param: str = "+params['id']" if pk_type == WireType.NUMBER.value else "params['id']"
        editable: List[ColumnInfo] = table.editable_columns

        lines: List[str] = []
        lines.append("import { Component, OnInit } from '@angular/core';")
        lines.append("import { CommonModule } from '@angular/common';")
        lines.append("import { FormBuilder, FormGroup, ReactiveFormsModule, Validators } from '@angular/forms';")
        lines.append("import { ActivatedRoute, Router } from '@angular/router';")
        lines.append(f"import {{ {cls}Service }} from '../../services/{naming.singular_camel}.service';")
        lines.append("import { Header } from '../header/header';")
        lines.append("import { Sidebar } from '../sidebar/sidebar';")
        lines.append("import { Footer } from '../footer/footer';")
        lines.append("")
        lines.append("@Component({")
        lines.append(f"{_I}selector: 'app-{naming.plural_kebab}-form',")
        lines.append(f"{_I}standalone: true,")
        lines.append(f"{_I}imports: [CommonModule, ReactiveFormsModule, Header, Sidebar, Footer],")
        lines.append(f"{_I}templateUrl: './{naming.plural_camel}-form.html',")
        lines.append(f"{_I}styleUrl: './{naming.plural_camel}-form.css'")
        lines.append("})")
        lines.append(f"export class {naming.form_component} implements OnInit {{")
        lines.append(f"{_I}{form}: FormGroup;")
        lines.append(f"{_I}isEditMode = false;")
        lines.append(f"{_I}isSubmitting = false;")
        lines.append(f"{_I}private {pk}: {pk_type} | null = null;")
        lines.append("")
        lines.append(f"{_I}private readonly fieldLabels: Record<string, string> = {{")
        for col in editable:
            lines.append(f"{_I2}{col.property_name}: '{col.display_name}',")
        lines.append(f"{_I}}};")
        lines.append("")
        lines.append(f"{_I}constructor(")
        lines.append(f"{_I2}private fb: FormBuilder,")
        lines.append(f"{_I2}private {svc}: {cls}Service,")
        lines.append(f"{_I2}private router: Router,")
        lines.append(f"{_I2}private route: ActivatedRoute")
        lines.append(f"{_I}) {{")
        lines.append(f"{_I2}this.{form} = this.fb.group({{")
        for col in editable:
            validators: List[str] = control_validators(col)
            default: str = control_default(col)
            if validators:
                lines.append(f"{_I3}{col.property_name}: [{default}, [{', '.join(validators)}]],")
            else:
                lines.append(f"{_I3}{col.property_name}: [{default}],")
        lines.append(f"{_I2}}});")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}ngOnInit(): void {{")
        lines.append(f"{_I2}this.route.params.subscribe(params => {{")
        lines.append(f"{_I3}if (params['id']) {{")
        lines.append(f"{_I4}this.isEditMode = true;")
        lines.append(f"{_I4}this.{pk} = {id_param};")
        lines.append(f"{_I4}this.load{cls}();")
        lines.append(f"{_I3}}}")
        lines.append(f"{_I2}}});")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}load{cls}(): void {{")
        lines.append(f"{_I2}if (this.{pk} == null) {{")
        lines.append(f"{_I3}return;")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}const existing = this.{svc}.get{cls}ById(this.{pk});")
        lines.append(f"{_I2}if (existing) {{")
        lines.append(f"{_I3}this.{form}.patchValue(existing);")
        lines.append(f"{_I2}}} else {{")
        lines.append(f"{_I3}alert('{naming.display_name} not found');")
        lines.append(f"{_I3}this.router.navigate(['/{naming.plural_kebab}']);")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}onSubmit(): void {{")
        lines.append(f"{_I2}if (this.{form}.invalid) {{")
        lines.append(f"{_I3}this.{form}.markAllAsTouched();")
        lines.append(f"{_I3}return;")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}this.isSubmitting = true;")
        lines.append(f"{_I2}const value = this.{form}.value;")
        lines.append(f"{_I2}const saved = this.isEditMode && this.{pk} != null")
        lines.append(f"{_I3}? this.{svc}.update{cls}(this.{pk}, value)")
        lines.append(f"{_I3}: this.{svc}.add{cls}(value);")
        lines.append(f"{_I2}this.isSubmitting = false;")
        lines.append(f"{_I2}if (saved) {{")
        lines.append(f"{_I3}this.router.navigate(['/{naming.plural_kebab}']);")
        lines.append(f"{_I2}}} else {{")
        lines.append(f"{_I3}alert('Failed to save {naming.display_name.lower()}');")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}onCancel(): void {{")
        lines.append(f"{_I2}this.router.navigate(['/{naming.plural_kebab}']);")
        lines.append(f"{_I}}}")
        lines.append("")
        lines.append(f"{_I}getFieldError(fieldName: string): string {{")
        lines.append(f"{_I2}const field = this.{form}.get(fieldName);")
        lines.append(f"{_I2}if (!field?.errors || !field.touched) {{")
        lines.append(f"{_I3}return '';")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}const label = this.fieldLabels[fieldName] ?? fieldName;")
        lines.append(f"{_I2}if (field.errors['required']) {{")
        lines.append(f"{_I3}return `${{label}} is required`;")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}if (field.errors['email']) {{")
        lines.append(f"{_I3}return 'Please enter a valid email address';")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}if (field.errors['min']) {{")
        lines.append(f"{_I3}return `${{label}} must be at least ${{field.errors['min'].min}}`;")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}if (field.errors['maxlength']) {{")
        lines.append(f"{_I3}return `${{label}} must be at most ${{field.errors['maxlength'].requiredLength}} characters`;")
        lines.append(f"{_I2}}}")
        lines.append(f"{_I2}return '';")
        lines.append(f"{_I}}}")
        lines.append("}")
        lines.append("")
        return "\n".join(lines)

    # ===================================================================
    # 7. Form component markup
    # ===================================================================

    def generate_form_template(self, table: TableInfo, naming: NamingBundle) -> str:
        """One labelled widget per editable column."""
        form: str = f"{naming.singular_camel}Form"

        lines: List[str] = []
        lines.append('<div class="page-layout">')
        lines.append(f"{_I}<app-header></app-header>")
        lines.append("")
        lines.append(f'{_I}<div class="content-wrapper">')
        lines.append(f"{_I2}<app-sidebar></app-sidebar>")
        lines.append("")
        lines.append(f'{_I2}<main class="main-content">')
        lines.append(f'{_I3}<div class="form-container">')
        lines.append(f'{_I4}<div class="header-section">')
        lines.append(f"{_I4}{_I}<h1>{{{{ isEditMode ? 'Edit' : 'Add New' }}}} {naming.display_name}</h1>")
        lines.append(f"{_I4}</div>")
        lines.append("")
        lines.append(f'{_I4}<form [formGroup]="{form}" (ngSubmit)="onSubmit()" class="entity-form">')
        lines.append(f'{_I4}{_I}<div class="form-grid">')
        for col in table.editable_columns:
            lines.extend(self._form_field(col, _I4 + _I2))
        lines.append(f"{_I4}{_I}</div>")
        lines.append("")
        lines.append(f'{_I4}{_I}<div class="form-actions">')
        lines.append(f'{_I4}{_I2}<button type="button" class="btn btn-secondary" (click)="onCancel()" [disabled]="isSubmitting">Cancel</button>')
        lines.append(f'{_I4}{_I2}<button type="submit" class="btn btn-primary" [disabled]="{form}.invalid || isSubmitting">')
        lines.append(f"{_I4}{_I3}{{{{ isSubmitting ? 'Saving...' : (isEditMode ? 'Update' : 'Create') }}}}")
        lines.append(f"{_I4}{_I2}</button>")
        lines.append(f"{_I4}{_I}</div>")
        lines.append(f"{_I4}</form>")
        lines.append(f"{_I3}</div>")
        lines.append(f"{_I2}</main>")
        lines.append(f"{_I}</div>")
        lines.append("")
        lines.append(f"{_I}<app-footer></app-footer>")
        lines.append("</div>")
        lines.append("")
        return "\n".join(lines)

    def _form_field(self, col: ColumnInfo, pad: str) -> List[str]:
        prop: str = col.property_name
        label: str = col.display_name
        widget: str = input_type(col)
        required: str = " *" if not col.nullable else ""

        lines: List[str] = []
        lines.append(f'{pad}<div class="form-group">')
        lines.append(f'{pad}{_I}<label for="{prop}" class="form-label">{label}{required}</label>')
        if widget == "textarea":
            lines.append(
                f'{pad}{_I}<textarea id="{prop}" formControlName="{prop}" class="form-input" '
                f'rows="3" placeholder="Enter {label.lower()}"></textarea>'
            )
        elif widget == "select":
            lines.append(f'{pad}{_I}<select id="{prop}" formControlName="{prop}" class="form-input">')
            lines.append(f'{pad}{_I2}<option value="">Select {label}</option>')
            lines.append(f"{pad}{_I}</select>")
        elif widget == "checkbox":
            lines.append(f'{pad}{_I}<input type="checkbox" id="{prop}" formControlName="{prop}" class="form-input">')
        else:
            lines.append(
                f'{pad}{_I}<input type="{widget}" id="{prop}" formControlName="{prop}" '
                f'class="form-input" placeholder="Enter {label.lower()}">'
            )
        lines.append(f"{pad}{_I}<div class=\"field-error\" *ngIf=\"getFieldError('{prop}')\">")
        lines.append(f"{pad}{_I2}{{{{ getFieldError('{prop}') }}}}")
        lines.append(f"{pad}{_I}</div>")
        lines.append(f"{pad}</div>")
        return lines

    # ===================================================================
    # 8. Form component styles
    # ===================================================================

    def generate_form_styles(self) -> str:
        return _FORM_CSS

    # ===================================================================
    # Aggregate generation (all artifacts for one table)
    # ===================================================================

    def generate_all_for_table(
        self,
        table: TableInfo,
        naming: Optional[NamingBundle] = None,
    ) -> Dict[ArtifactKind, str]:
        """
        Render all eight artifacts for a single table, in fixed order.

        *naming* defaults to the bundle derived from ``table.name``.
        """
        bundle: NamingBundle = naming or derive_naming(table.name)
        result: Dict[ArtifactKind, str] = {
            ArtifactKind.MODEL: self.generate_model(table, bundle),
            ArtifactKind.SERVICE: self.generate_service(table, bundle),
            ArtifactKind.LIST_LOGIC: self.generate_list_component(table, bundle),
            ArtifactKind.LIST_MARKUP: self.generate_list_template(table, bundle),
            ArtifactKind.LIST_STYLE: self.generate_list_styles(),
            ArtifactKind.FORM_LOGIC: self.generate_form_component(table, bundle),
            ArtifactKind.FORM_MARKUP: self.generate_form_template(table, bundle),
            ArtifactKind.FORM_STYLE: self.generate_form_styles(),
        }
        logger.debug(
            "Rendered %d artifacts for table '%s' (%d lines).",
            len(result),
            table.qualified_name,
            sum(body.count("\n") for body in result.values()),
        )
        return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "TemplateGenerator",
    "cell_content",
    "input_type",
    "control_validators",
    "control_default",
]

logger.debug("crudgen.templates loaded.")
