# File: crudgen/navigation.py
"""
NexaFlow CrudGen - Navigation Patcher
======================================
Idempotent, reversible edits to the two hand-maintained navigation files
of the SPA:

    ``app.routes.ts``                  imports + route table
    ``components/sidebar/sidebar.ts``  sidebar ``menuItems`` array

Both files are parsed into line-level records (import lines, route lines,
menu item lines).  Edits insert or delete whole lines; every line that is
not touched keeps its exact bytes, newline style included.  New lines are
produced by a fixed formatter and copy the indentation of their anchor.

``apply`` flow per table:

    1. Legacy pre-pass: singular component import paths are rewritten to
       the plural folders, unspaced menu titles are retitled.
    2. Missing imports are inserted after the guard import.
    3. Missing routes are inserted before the catch-all ``'**'`` route.
    4. A missing menu item is inserted before the ``Settings`` item.

``remove`` deletes exactly the lines ``apply`` would have added.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from crudgen.assembler import COMPONENTS_DIR, FORM_SUFFIX, LIST_SUFFIX
from crudgen.errors import PatchAnchorNotFound
from crudgen.models import GeneratorConfig
from crudgen.naming import NamingBundle, derive_naming
from crudgen.utils import path_lock, read_file, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.navigation")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns
# ---------------------------------------------------------------------------

_IMPORT_RE: re.Pattern[str] = re.compile(
    r"^(?P<indent>\s*)import\s*\{(?P<symbols>[^}]*)\}\s*from\s*"
    r"(?P<quote>['\"])(?P<module>[^'\"]+)(?P=quote)\s*;?\s*$"
)
_ROUTE_RE: re.Pattern[str] = re.compile(
    r"^(?P<indent>\s*)\{\s*path\s*:\s*'(?P<path>[^']*)'(?P<rest>[^}]*)\}\s*,?\s*(?://.*)?$"
)
_COMPONENT_RE: re.Pattern[str] = re.compile(r"component\s*:\s*(?P<component>\w+)")
_MENU_START_RE: re.Pattern[str] = re.compile(r"menuItems\s*:\s*MenuItem\[\]\s*=\s*\[\s*$")
_MENU_ITEM_RE: re.Pattern[str] = re.compile(
    r"^(?P<indent>\s*)\{\s*title\s*:\s*'(?P<title>[^']*)'\s*,\s*"
    r"icon\s*:\s*'(?P<icon>[^']*)'\s*,\s*"
    r"route\s*:\s*'(?P<route>[^']*)'[^}]*\}\s*(?P<comma>,)?\s*$"
)

SENTINEL_PATH: str = "**"


# ---------------------------------------------------------------------------
# Patch state & report
# ---------------------------------------------------------------------------


class PatchState(str, Enum):
    """Presence of one table's entries in one navigation file."""

    ABSENT = "absent"
    PRESENT_LEGACY = "present_legacy"
    PRESENT_CURRENT = "present_current"


@dataclass(slots=True)
class PatchReport:
    """What a patch run changed, did and complained about."""

    files_changed: List[str] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.files_changed)

    def merge(self, other: "PatchReport") -> None:
        self.files_changed.extend(other.files_changed)
        self.actions.extend(other.actions)
        self.warnings.extend(other.warnings)


# ---------------------------------------------------------------------------
# Line records
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ImportLine:
    index: int
    symbols: Tuple[str, ...]
    module: str
    indent: str


@dataclass(slots=True)
class RouteLine:
    index: int
    path: str
    component: Optional[str]
    indent: str


@dataclass(slots=True)
class MenuItemLine:
    index: int
    title: str
    icon: str
    route: str
    indent: str
    has_comma: bool


def _split_ending(line: str) -> Tuple[str, str]:
    """Split *line* into its body and its newline sequence."""
    body: str = line.rstrip("\r\n")
    return body, line[len(body):]


def _detect_newline(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


class _LineDocument:
    """Mutable list of lines with newline-preserving insert/replace/delete."""

    def __init__(self, text: str) -> None:
        self.lines: List[str] = text.splitlines(keepends=True)
        self.newline: str = _detect_newline(text)

    def body(self, index: int) -> str:
        return _split_ending(self.lines[index])[0]

    def replace_body(self, index: int, new_body: str) -> None:
        ending: str = _split_ending(self.lines[index])[1]
        self.lines[index] = new_body + ending

    def insert_block(self, index: int, bodies: List[str]) -> None:
        # Inserting at EOF after a line without a terminator needs one first
        if index == len(self.lines) and self.lines and not _split_ending(self.lines[-1])[1]:
            self.lines[-1] += self.newline
        self.lines[index:index] = [b + self.newline for b in bodies]

    def delete(self, indices: List[int]) -> None:
        for index in sorted(set(indices), reverse=True):
            del self.lines[index]

    def render(self) -> str:
        return "".join(self.lines)


class RouteTableDocument(_LineDocument):
    """Import lines and route lines of the route table file."""

    @property
    def imports(self) -> List[ImportLine]:
        records: List[ImportLine] = []
        for index in range(len(self.lines)):
            m = _IMPORT_RE.match(self.body(index))
            if m:
                symbols: Tuple[str, ...] = tuple(
                    s.strip() for s in m.group("symbols").split(",") if s.strip()
                )
                records.append(ImportLine(index, symbols, m.group("module"), m.group("indent")))
        return records

    @property
    def routes(self) -> List[RouteLine]:
        records: List[RouteLine] = []
        for index in range(len(self.lines)):
            m = _ROUTE_RE.match(self.body(index))
            if m:
                comp = _COMPONENT_RE.search(m.group("rest"))
                records.append(
                    RouteLine(
                        index,
                        m.group("path"),
                        comp.group("component") if comp else None,
                        m.group("indent"),
                    )
                )
        return records

    @property
    def sentinel(self) -> Optional[RouteLine]:
        for route in self.routes:
            if route.path == SENTINEL_PATH:
                return route
        return None

    def sentinel_anchor(self, path: str) -> RouteLine:
        sentinel: Optional[RouteLine] = self.sentinel
        if sentinel is None:
            raise PatchAnchorNotFound(f"{{ path: '{SENTINEL_PATH}' }}", path)
        return sentinel

    def import_anchor(self, guard_symbol: str, path: str) -> ImportLine:
        """Last import of *guard_symbol*, else the last import of any kind."""
        imports: List[ImportLine] = self.imports
        guarded: List[ImportLine] = [i for i in imports if guard_symbol in i.symbols]
        if guarded:
            return guarded[-1]
        if imports:
            logger.debug("No %s import in %s; anchoring on last import.", guard_symbol, path)
            return imports[-1]
        raise PatchAnchorNotFound(f"import {{ {guard_symbol} }}", path)


class MenuDocument(_LineDocument):
    """Item lines of the sidebar ``menuItems`` array."""

    @property
    def start_index(self) -> Optional[int]:
        for index in range(len(self.lines)):
            if _MENU_START_RE.search(self.body(index)):
                return index
        return None

    @property
    def close_position(self) -> Optional[Tuple[int, int]]:
        """``(line, column)`` of the ``]`` that closes the array opened on the start line."""
        start: Optional[int] = self.start_index
        if start is None:
            return None
        depth: int = 1
        for index in range(start + 1, len(self.lines)):
            body: str = self.body(index)
            quote: Optional[str] = None
            column: int = 0
            while column < len(body):
                char: str = body[column]
                if quote is not None:
                    if char == "\\":
                        column += 1
                    elif char == quote:
                        quote = None
                elif char in "'\"`":
                    quote = char
                elif body.startswith("//", column):
                    break
                elif char == "[":
                    depth += 1
                elif char == "]":
                    depth -= 1
                    if depth == 0:
                        return index, column
                column += 1
        return None

    @property
    def close_index(self) -> Optional[int]:
        position: Optional[Tuple[int, int]] = self.close_position
        return position[0] if position is not None else None

    def close_anchor(self, path: str) -> int:
        close: Optional[int] = self.close_index
        if close is None:
            raise PatchAnchorNotFound("] closing menuItems", path)
        return close

    def split_inline_close(self) -> None:
        """Move a ``]`` that trails the last item onto its own line."""
        position: Optional[Tuple[int, int]] = self.close_position
        start: Optional[int] = self.start_index
        if position is None or start is None:
            return
        index, column = position
        body: str = self.body(index)
        head: str = body[:column].rstrip()
        if not head.strip():
            return
        start_body: str = self.body(start)
        indent: str = start_body[: len(start_body) - len(start_body.lstrip())]
        self.replace_body(index, head)
        self.insert_block(index + 1, [indent + body[column:]])

    @property
    def items(self) -> List[MenuItemLine]:
        start: Optional[int] = self.start_index
        position: Optional[Tuple[int, int]] = self.close_position
        if start is None or position is None:
            return []
        close, column = position
        records: List[MenuItemLine] = []
        for index in range(start + 1, close + 1):
            body: str = self.body(index) if index < close else self.body(index)[:column]
            m = _MENU_ITEM_RE.match(body)
            if m:
                records.append(
                    MenuItemLine(
                        index,
                        m.group("title"),
                        m.group("icon"),
                        m.group("route"),
                        m.group("indent"),
                        m.group("comma") is not None,
                    )
                )
        return records


# ---------------------------------------------------------------------------
# Line formatter
# ---------------------------------------------------------------------------


def component_module(naming: NamingBundle, suffix: str, legacy: bool = False) -> str:
    """Import path of a generated component, relative to the route file."""
    stem: str = f"{naming.singular_camel if legacy else naming.plural_camel}{suffix}"
    return f"./{COMPONENTS_DIR}/{stem}/{stem}"


def format_import(symbols: Tuple[str, ...], module: str) -> str:
    return f"import {{ {', '.join(symbols)} }} from '{module}';"


def format_route(path: str, component: str, guard_symbol: str) -> str:
    return f"{{ path: '{path}', component: {component}, canActivate: [{guard_symbol}] }},"


def format_menu_item(title: str, icon: str, route: str, trailing_comma: bool = True) -> str:
    line: str = f"{{ title: '{title}', icon: '{icon}', route: '{route}' }}"
    return line + "," if trailing_comma else line


def route_entries(naming: NamingBundle) -> List[Tuple[str, str]]:
    """The three ``(path, component)`` routes of a table."""
    kebab: str = naming.plural_kebab
    return [
        (kebab, naming.list_component),
        (f"{kebab}/new", naming.form_component),
        (f"{kebab}/edit/:id", naming.form_component),
    ]


def _menu_titles(naming: NamingBundle) -> Tuple[str, ...]:
    return (naming.class_name.lower(), naming.display_name.lower())


# ---------------------------------------------------------------------------
# State detection
# ---------------------------------------------------------------------------


def detect_route_state(text: str, naming: NamingBundle) -> PatchState:
    doc: RouteTableDocument = RouteTableDocument(text)
    components: Tuple[str, str] = (naming.list_component, naming.form_component)
    current_modules: Tuple[str, str] = (
        component_module(naming, LIST_SUFFIX),
        component_module(naming, FORM_SUFFIX),
    )
    legacy_modules: List[str] = [
        m
        for m in (
            component_module(naming, LIST_SUFFIX, legacy=True),
            component_module(naming, FORM_SUFFIX, legacy=True),
        )
        if m not in current_modules
    ]
    current: bool = False
    for imp in doc.imports:
        if not any(c in imp.symbols for c in components):
            continue
        if imp.module in legacy_modules:
            return PatchState.PRESENT_LEGACY
        current = True
    if current or any(r.component in components for r in doc.routes):
        return PatchState.PRESENT_CURRENT
    return PatchState.ABSENT


def detect_menu_state(text: str, naming: NamingBundle) -> PatchState:
    doc: MenuDocument = MenuDocument(text)
    class_title: str = naming.class_name.lower()
    display_title: str = naming.display_name.lower()
    state: PatchState = PatchState.ABSENT
    for item in doc.items:
        title: str = item.title.lower()
        if title == display_title:
            return PatchState.PRESENT_CURRENT
        if title == class_title:
            state = PatchState.PRESENT_LEGACY
    return state


# ---------------------------------------------------------------------------
# NavigationPatcher class
# ---------------------------------------------------------------------------


class NavigationPatcher:
    """
    Applies and removes one table's navigation entries.

    Every read-modify-write of a file runs under ``utils.path_lock`` and
    writes back only when the text actually changed.
    """

    def __init__(self, base_path: Path, config: Optional[GeneratorConfig] = None) -> None:
        self._config: GeneratorConfig = config or GeneratorConfig()
        self._base_path: Path = Path(base_path)
        self.routes_path: Path = self._config.routes_path(self._base_path)
        self.menu_path: Path = self._config.menu_path(self._base_path)

    # -- Public API ---------------------------------------------------------

    def apply(self, table_identifier: str) -> PatchReport:
        """Add imports, routes and a menu item for *table_identifier*."""
        naming: NamingBundle = derive_naming(table_identifier)
        report: PatchReport = PatchReport()
        self._patch_file(self.routes_path, lambda t: self._apply_routes(t, naming, report), report)
        self._patch_file(self.menu_path, lambda t: self._apply_menu(t, naming, report), report)
        logger.info(
            "Navigation for %s: %d action(s), %d warning(s).",
            naming.class_name,
            len(report.actions),
            len(report.warnings),
        )
        return report

    def remove(self, table_identifier: str) -> PatchReport:
        """Delete every navigation line referring to *table_identifier*."""
        naming: NamingBundle = derive_naming(table_identifier)
        report: PatchReport = PatchReport()
        self._patch_file(self.routes_path, lambda t: self._remove_routes(t, naming, report), report)
        self._patch_file(self.menu_path, lambda t: self._remove_menu(t, naming, report), report)
        return report

    def detect_states(self, table_identifier: str) -> Tuple[PatchState, PatchState]:
        """``(route state, menu state)``; a missing file counts as ``ABSENT``."""
        naming: NamingBundle = derive_naming(table_identifier)
        route_state: PatchState = PatchState.ABSENT
        menu_state: PatchState = PatchState.ABSENT
        if self.routes_path.is_file():
            route_state = detect_route_state(read_file(self.routes_path), naming)
        if self.menu_path.is_file():
            menu_state = detect_menu_state(read_file(self.menu_path), naming)
        return route_state, menu_state

    # -- File plumbing ------------------------------------------------------

    def _patch_file(
        self,
        path: Path,
        transform: Callable[[str], str],
        report: PatchReport,
    ) -> None:
        if not path.is_file():
            message: str = f"Navigation file not found: {path}"
            logger.warning(message)
            report.warnings.append(message)
            return

        with path_lock(path):
            original: str = read_file(path)
            updated: str = transform(original)
            if updated != original:
                write_file(path, updated)
                report.files_changed.append(str(path))
                logger.debug("Patched %s", path)

    def _warn(self, exc: PatchAnchorNotFound, report: PatchReport) -> None:
        logger.warning("%s; skipping.", exc)
        report.warnings.append(str(exc))

    # -- Route table --------------------------------------------------------

    def _apply_routes(self, text: str, naming: NamingBundle, report: PatchReport) -> str:
        doc: RouteTableDocument = RouteTableDocument(text)
        path: str = str(self.routes_path)
        guard: str = self._config.guard_symbol
        wanted: List[Tuple[str, str]] = [
            (naming.list_component, component_module(naming, LIST_SUFFIX)),
            (naming.form_component, component_module(naming, FORM_SUFFIX)),
        ]

        # 1. Legacy singular import paths
        for symbol, module in wanted:
            suffix: str = LIST_SUFFIX if symbol == naming.list_component else FORM_SUFFIX
            legacy: str = component_module(naming, suffix, legacy=True)
            if legacy == module:
                continue
            for imp in doc.imports:
                if symbol in imp.symbols and imp.module == legacy:
                    doc.replace_body(imp.index, doc.body(imp.index).replace(legacy, module))
                    report.actions.append(f"Migrated import of {symbol} to {module}")

        # 2. Imports
        existing_symbols = {s for imp in doc.imports for s in imp.symbols}
        missing_imports: List[Tuple[str, str]] = [
            (symbol, module) for symbol, module in wanted if symbol not in existing_symbols
        ]
        if missing_imports:
            try:
                anchor: ImportLine = doc.import_anchor(guard, path)
            except PatchAnchorNotFound as exc:
                self._warn(exc, report)
            else:
                doc.insert_block(
                    anchor.index + 1,
                    [anchor.indent + format_import((s,), m) for s, m in missing_imports],
                )
                report.actions.extend(f"Added import of {s}" for s, _ in missing_imports)

        # 3. Routes
        existing_paths = {r.path.lower() for r in doc.routes}
        missing_routes: List[Tuple[str, str]] = [
            (p, c) for p, c in route_entries(naming) if p.lower() not in existing_paths
        ]
        if missing_routes:
            try:
                sentinel: RouteLine = doc.sentinel_anchor(path)
            except PatchAnchorNotFound as exc:
                self._warn(exc, report)
            else:
                doc.insert_block(
                    sentinel.index,
                    [sentinel.indent + format_route(p, c, guard) for p, c in missing_routes],
                )
                report.actions.extend(f"Added route '{p}'" for p, _ in missing_routes)

        return doc.render()

    def _remove_routes(self, text: str, naming: NamingBundle, report: PatchReport) -> str:
        doc: RouteTableDocument = RouteTableDocument(text)
        components: Tuple[str, str] = (naming.list_component, naming.form_component)
        doomed: List[int] = []

        for imp in doc.imports:
            kept: Tuple[str, ...] = tuple(s for s in imp.symbols if s not in components)
            if kept == imp.symbols:
                continue
            if kept:
                doc.replace_body(imp.index, imp.indent + format_import(kept, imp.module))
            else:
                doomed.append(imp.index)
            report.actions.append(f"Removed import from {imp.module}")

        for route in doc.routes:
            if route.component in components:
                doomed.append(route.index)
                report.actions.append(f"Removed route '{route.path}'")

        doc.delete(doomed)
        return doc.render()

    # -- Sidebar menu -------------------------------------------------------

    def _apply_menu(self, text: str, naming: NamingBundle, report: PatchReport) -> str:
        doc: MenuDocument = MenuDocument(text)
        path: str = str(self.menu_path)
        display: str = naming.display_name

        if doc.start_index is None:
            self._warn(PatchAnchorNotFound("menuItems: MenuItem[] = [", path), report)
            return text
        try:
            doc.close_anchor(path)
        except PatchAnchorNotFound as exc:
            self._warn(exc, report)
            return text

        # 1. Legacy unspaced titles
        if naming.class_name.lower() != display.lower():
            for item in doc.items:
                if item.title.lower() == naming.class_name.lower():
                    doc.replace_body(
                        item.index,
                        doc.body(item.index).replace(f"'{item.title}'", f"'{display}'", 1),
                    )
                    report.actions.append(f"Retitled menu item '{item.title}' to '{display}'")

        # 2. Menu item
        items: List[MenuItemLine] = doc.items
        titles: Tuple[str, ...] = _menu_titles(naming)
        if any(item.title.lower() in titles for item in items):
            return doc.render()

        icon: str = self._config.menu_icon
        route: str = f"/{naming.plural_kebab}"
        anchor_title: str = self._config.menu_anchor_title.lower()
        anchor: Optional[MenuItemLine] = next(
            (item for item in items if item.title.lower() == anchor_title), None
        )

        if anchor is not None:
            doc.insert_block(anchor.index, [anchor.indent + format_menu_item(display, icon, route)])
        else:
            logger.debug(
                "No '%s' menu item in %s; appending to the end of the array.",
                self._config.menu_anchor_title,
                path,
            )
            doc.split_inline_close()
            items = doc.items
            close: int = doc.close_anchor(path)
            indent: str
            trailing: bool = False
            if items:
                last: MenuItemLine = items[-1]
                indent = last.indent
                trailing = last.has_comma
                if not last.has_comma:
                    doc.replace_body(last.index, doc.body(last.index).rstrip() + ",")
            else:
                closing: str = doc.body(close)
                indent = closing[: len(closing) - len(closing.lstrip())] + "  "
            doc.insert_block(close, [indent + format_menu_item(display, icon, route, trailing)])

        report.actions.append(f"Added menu item '{display}'")
        return doc.render()

    def _remove_menu(self, text: str, naming: NamingBundle, report: PatchReport) -> str:
        doc: MenuDocument = MenuDocument(text)
        items: List[MenuItemLine] = doc.items
        titles: Tuple[str, ...] = _menu_titles(naming)
        doomed: List[MenuItemLine] = [item for item in items if item.title.lower() in titles]
        if not doomed:
            return text

        # Deleting a comma-less last item leaves the new last item's comma behind
        survivors: List[MenuItemLine] = [item for item in items if item not in doomed]
        if items[-1] in doomed and not items[-1].has_comma and survivors:
            new_last: MenuItemLine = survivors[-1]
            if new_last.has_comma:
                doc.replace_body(new_last.index, doc.body(new_last.index).rstrip()[:-1])

        # An item sharing its line with the closing bracket leaves the bracket behind
        if any(item.index == doc.close_index for item in doomed):
            doc.split_inline_close()
        for item in doomed:
            report.actions.append(f"Removed menu item '{item.title}'")
        doc.delete([item.index for item in doomed])
        return doc.render()


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "PatchState",
    "PatchReport",
    "ImportLine",
    "RouteLine",
    "MenuItemLine",
    "RouteTableDocument",
    "MenuDocument",
    "component_module",
    "format_import",
    "format_route",
    "format_menu_item",
    "route_entries",
    "detect_route_state",
    "detect_menu_state",
    "NavigationPatcher",
]

logger.debug("crudgen.navigation loaded.")
