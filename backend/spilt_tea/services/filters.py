"""Declarative WHERE-clause builder for the search endpoints.

Callers describe optional filters as ``FilterSpec(field, value, mode)`` and
``build_filter`` folds the ones with a value into a single AND clause. When
no filter carries a value the result is ``None``, meaning an unrestricted
query.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Union

from sqlalchemy import String, and_, cast, func, or_
from sqlalchemy.sql.elements import ColumnElement

CONTAINS = "contains"   # case-insensitive substring
EXACT = "exact"         # equality
DIGITS = "digits"       # compare digits only, on both sides
HAS = "has"             # JSON list contains the value as an element

_NON_DIGITS = re.compile(r"[^0-9]")
# Formatting stripped from stored values in DIGITS mode
PHONE_PUNCTUATION = " -().+/."


@dataclass(frozen=True)
class FilterSpec:
    field: str
    value: Any
    mode: str = CONTAINS


@dataclass(frozen=True)
class AnyOf:
    """OR-group: matches when any member spec matches."""

    specs: Sequence[FilterSpec] = field(default_factory=tuple)


Filter = Union[FilterSpec, AnyOf]


def _has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _strip_punctuation(column: Any) -> ColumnElement:
    for char in PHONE_PUNCTUATION:
        column = func.replace(column, char, "", type_=String)
    return column


def _clause(model: Any, spec: FilterSpec) -> Optional[ColumnElement]:
    if not _has_value(spec.value):
        return None

    column = getattr(model, spec.field)

    if spec.mode == CONTAINS:
        return column.ilike(f"%{spec.value}%")
    if spec.mode == EXACT:
        return column == spec.value
    if spec.mode == DIGITS:
        digits = _NON_DIGITS.sub("", str(spec.value))
        if not digits:
            return None
        return _strip_punctuation(column).contains(digits)
    if spec.mode == HAS:
        # JSON arrays are serialized as '["a", "b"]', so an element match is a
        # substring match on its JSON encoding.
        return cast(column, String).contains(json.dumps(spec.value), autoescape=True)

    raise ValueError(f"Unknown filter mode: {spec.mode}")


def build_filter(model: Any, filters: Sequence[Filter]) -> Optional[ColumnElement]:
    """Fold filters into one AND clause, or None when none apply.

    Args:
        model: Mapped class whose attributes the specs name
        filters: FilterSpec entries and AnyOf groups, in output order

    Returns:
        Combined clause, or None for an unrestricted query
    """
    clauses: List[ColumnElement] = []

    for item in filters:
        if isinstance(item, AnyOf):
            members = [c for c in (_clause(model, s) for s in item.specs) if c is not None]
            if members:
                clauses.append(or_(*members))
        else:
            clause = _clause(model, item)
            if clause is not None:
                clauses.append(clause)

    if not clauses:
        return None
    return and_(*clauses)


def apply_filter(stmt: Any, clause: Optional[ColumnElement]) -> Any:
    """Attach a clause from build_filter to a select, leaving it unrestricted on None."""
    if clause is None:
        return stmt
    return stmt.where(clause)
