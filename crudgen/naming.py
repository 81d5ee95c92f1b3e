# File: crudgen/naming.py
"""
NexaFlow CrudGen - Naming Derivation
=====================================
Turns a raw table identifier such as ``dbo.Order_Items`` into the naming
bundle used for every artifact, route and menu entry::

    >>> derive_naming("dbo.Order_Items")
    <NamingBundle OrderItem / orderItems / order-items>

Pipeline: strip schema → tokenize → recapitalize → singularize → pluralize
→ derive camel / kebab / display forms.

All functions here are pure.  They are decorated with
``@lru_cache(maxsize=None)`` because the same handful of names is derived
over and over while rendering templates and matching navigation entries.
"""

from __future__ import annotations

import functools
import logging
import re
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.naming")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns
# ---------------------------------------------------------------------------

_TOKEN_RE: re.Pattern[str] = re.compile(r"[A-Z]?[a-z]+|[A-Z]+(?![a-z])|\d+")
_SEPARATOR_RE: re.Pattern[str] = re.compile(r"[_\-\s]+")
_KEBAB_BOUNDARY_RE: re.Pattern[str] = re.compile(r"(?<=.)([A-Z])")

# Longest all-caps token kept verbatim as an acronym
_ACRONYM_MAX_LEN: int = 3
# Display titles are stricter: "ID" stays, "API" becomes "Api"
_DISPLAY_ACRONYM_MAX_LEN: int = 2

_VOWELS: str = "aeiou"


# ---------------------------------------------------------------------------
# Naming bundle
# ---------------------------------------------------------------------------


class NamingBundle(BaseModel):
    """
    Every case/plural variant of a table name needed by the generator.

    Immutable and a pure function of the table identifier.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    singular_pascal: str = Field(..., min_length=1, description="e.g. 'OrderItem'.")
    singular_camel: str = Field(..., min_length=1, description="e.g. 'orderItem'.")
    plural_camel: str = Field(..., min_length=1, description="e.g. 'orderItems'.")
    plural_kebab: str = Field(..., min_length=1, description="e.g. 'order-items'.")

    @property
    def class_name(self) -> str:
        return self.singular_pascal

    @property
    def plural_pascal(self) -> str:
        return self.plural_camel[:1].upper() + self.plural_camel[1:]

    @property
    def display_name(self) -> str:
        """Spaced title used for menu entries (``Order Item``)."""
        return to_display_name(self.singular_pascal)

    @property
    def list_component(self) -> str:
        return f"{self.singular_pascal}List"

    @property
    def form_component(self) -> str:
        return f"{self.singular_pascal}Form"

    def __repr__(self) -> str:
        return (
            f"<NamingBundle {self.singular_pascal} / "
            f"{self.plural_camel} / {self.plural_kebab}>"
        )


# ---------------------------------------------------------------------------
# Tokenizing & casing
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def strip_schema(identifier: str) -> str:
    """Drop a ``schema.`` qualifier: ``dbo.Order_Items`` → ``Order_Items``."""
    return identifier.rsplit(".", 1)[-1].strip()


@functools.lru_cache(maxsize=None)
def tokenize(name: str) -> Tuple[str, ...]:
    """
    Split *name* on ``_``, ``-``, whitespace and case boundaries.

    Examples:
        >>> tokenize("Order_Items")
        ('Order', 'Items')
        >>> tokenize("APIKeys")
        ('API', 'Keys')
    """
    cleaned: str = _SEPARATOR_RE.sub(" ", name)
    return tuple(_TOKEN_RE.findall(cleaned))


def _recapitalize(token: str, acronym_max_len: int) -> str:
    if token.isdigit():
        return token
    if token.isupper() and len(token) <= acronym_max_len:
        return token
    return token[0].upper() + token[1:].lower()


@functools.lru_cache(maxsize=None)
def to_pascal_case(name: str) -> str:
    """
    Convert any identifier to PascalCase.

    All-caps tokens of up to three letters survive as acronyms; everything
    else is re-normalised (``ORDER_ITEMS`` → ``OrderItems``).
    """
    tokens: Tuple[str, ...] = tokenize(name)
    if not tokens:
        return name[:1].upper() + name[1:]
    return "".join(_recapitalize(t, _ACRONYM_MAX_LEN) for t in tokens)


@functools.lru_cache(maxsize=None)
def to_camel_case(pascal: str) -> str:
    """Lower-case the first character of a PascalCase name."""
    return pascal[:1].lower() + pascal[1:]


@functools.lru_cache(maxsize=None)
def to_kebab_case(pascal: str) -> str:
    """Insert ``-`` before every inner capital and lower-case the result."""
    return _KEBAB_BOUNDARY_RE.sub(r"-\1", pascal).lower()


@functools.lru_cache(maxsize=None)
def to_display_name(name: str) -> str:
    """
    Human-readable, space-separated title.

    Examples:
        >>> to_display_name("OrderItem")
        'Order Item'
        >>> to_display_name("customer_ID")
        'Customer ID'
    """
    tokens: Tuple[str, ...] = tokenize(name)
    if not tokens:
        return name
    return " ".join(_recapitalize(t, _DISPLAY_ACRONYM_MAX_LEN) for t in tokens)


# ---------------------------------------------------------------------------
# Singular / plural
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def singularize(name: str) -> str:
    """
    Suffix-rule singularisation, first match wins:

        ``ies`` → ``y``; ``ses/xes/zes/ches/shes`` → strip ``es``;
        trailing ``s`` (but not ``ss`` or ``us``) → strip ``s``.
    """
    lower: str = name.lower()
    if lower.endswith("ies") and len(name) > 3:
        return name[:-3] + "y"
    if lower.endswith(("ses", "xes", "zes", "ches", "shes")):
        return name[:-2]
    if lower.endswith("s") and not lower.endswith(("ss", "us")):
        return name[:-1]
    return name


@functools.lru_cache(maxsize=None)
def pluralize(name: str) -> str:
    """
    Inverse of :func:`singularize` for regular nouns.

    Examples:
        >>> pluralize("Category"), pluralize("Box"), pluralize("Product")
        ('Categories', 'Boxes', 'Products')
    """
    lower: str = name.lower()
    if len(name) > 1 and lower.endswith("y") and lower[-2] not in _VOWELS:
        return name[:-1] + "ies"
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return name + "es"
    return name + "s"


# ---------------------------------------------------------------------------
# Bundle derivation
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def derive_naming(identifier: str) -> NamingBundle:
    """
    Derive the full naming bundle for a (possibly schema-qualified) table.

    Raises:
        ValueError: If nothing is left once the schema prefix is stripped.
    """
    bare: str = strip_schema(identifier)
    if not bare:
        raise ValueError(f"Cannot derive names from empty table identifier {identifier!r}")

    singular_pascal: str = singularize(to_pascal_case(bare))
    plural_pascal: str = pluralize(singular_pascal)

    bundle: NamingBundle = NamingBundle(
        singular_pascal=singular_pascal,
        singular_camel=to_camel_case(singular_pascal),
        plural_camel=to_camel_case(plural_pascal),
        plural_kebab=to_kebab_case(plural_pascal),
    )
    logger.debug("Derived naming for %r: %r", identifier, bundle)
    return bundle


@functools.lru_cache(maxsize=None)
def column_property_name(column_name: str) -> str:
    """
    camelCase property name for a column (no singularisation).

    A leading acronym is lower-cased as a whole: ``ID`` → ``id``,
    ``URLPath`` → ``urlPath``.
    """
    tokens: Tuple[str, ...] = tokenize(column_name)
    if not tokens:
        return to_camel_case(column_name)
    head: str = tokens[0].lower()
    tail: str = "".join(_recapitalize(t, _ACRONYM_MAX_LEN) for t in tokens[1:])
    return head + tail


@functools.lru_cache(maxsize=None)
def column_display_name(column_name: str) -> str:
    """Column label for headers and form fields (``UnitPrice`` → ``Unit Price``)."""
    return to_display_name(column_name)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "NamingBundle",
    "strip_schema",
    "tokenize",
    "to_pascal_case",
    "to_camel_case",
    "to_kebab_case",
    "to_display_name",
    "singularize",
    "pluralize",
    "derive_naming",
    "column_property_name",
    "column_display_name",
]

logger.debug("crudgen.naming loaded (%d public symbols).", len(__all__))
