"""
Pure helpers that turn filter/sort/page parameters into SQLAlchemy query fragments.

Nothing here touches a session: same input, same clause. Empty conditions are
represented by None or true() and are dropped when clauses are combined.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

from sqlalchemy import and_, or_, true
from sqlalchemy.orm import Query
from sqlalchemy.sql.elements import ColumnElement, True_

SortOrder = Literal["asc", "desc"]


@dataclass(frozen=True)
class PageSlice:
    """Offset window for one page: rows [skip, skip + take)."""

    skip: int
    take: int

    def apply(self, query: Query) -> Query:
        return query.offset(self.skip).limit(self.take)

    def slice(self, rows: list[Any]) -> list[Any]:
        """Same window over rows already in memory."""
        return rows[self.skip : self.skip + self.take]


def paginate(page: int | None = 1, limit: int | None = 10) -> PageSlice:
    """Page numbers are 1-based; absent values default to page 1 of 10."""
    page = page or 1
    limit = limit or 10
    return PageSlice(skip=(page - 1) * limit, take=limit)


def sort(
    columns: Mapping[str, Any],
    field: str | None = None,
    order: SortOrder | None = "asc",
) -> list[ColumnElement]:
    """
    ORDER BY for one whitelisted field, or [] when no (known) field is requested.

    columns maps the public sort key (e.g. "createdAt") to the model column.
    """
    if not field or field not in columns:
        return []
    column = columns[field]
    return [column.desc() if order == "desc" else column.asc()]


def _is_empty(clause: Any) -> bool:
    return clause is None or isinstance(clause, True_)


def combine_and(clauses: Iterable[Any]) -> ColumnElement:
    valid = [c for c in clauses if not _is_empty(c)]
    if not valid:
        return true()
    if len(valid) == 1:
        return valid[0]
    return and_(*valid)


def combine_or(clauses: Iterable[Any]) -> ColumnElement:
    valid = [c for c in clauses if not _is_empty(c)]
    if not valid:
        return true()
    if len(valid) == 1:
        return valid[0]
    return or_(*valid)


def contains(column: Any, term: str | None) -> ColumnElement | None:
    """Case-insensitive substring match; None for an absent or blank term."""
    if term is None or not term.strip():
        return None
    return column.ilike(f"%{term.strip()}%")


def where_from_filters(
    model: type,
    filters: Mapping[str, Any],
    text_fields: Iterable[str] = (),
    exact_fields: Iterable[str] = (),
) -> ColumnElement:
    """
    Conjunction of one condition per present filter.

    text_fields match as case-insensitive substrings (name/email/address);
    exact_fields (enums, ids) match by equality. Keys that are absent, None or ""
    contribute nothing.
    """
    conditions: list[ColumnElement | None] = []
    for field in text_fields:
        conditions.append(contains(getattr(model, field), filters.get(field)))
    for field in exact_fields:
        value = filters.get(field)
        if value is None or value == "":
            continue
        conditions.append(getattr(model, field) == value)
    return combine_and(conditions)


def search_clause(model: type, term: str | None, fields: Iterable[str]) -> ColumnElement:
    """OR of substring matches of one term across several fields."""
    return combine_or(contains(getattr(model, field), term) for field in fields)


def date_range(
    column: Any, start: datetime | None = None, end: datetime | None = None
) -> ColumnElement | None:
    """Inclusive [start, end] on a date column; None when both bounds are absent."""
    return _range(column, start, end)


def numeric_range(
    column: Any, low: float | None = None, high: float | None = None
) -> ColumnElement | None:
    """Inclusive [low, high] on a numeric column; None when both bounds are absent."""
    return _range(column, low, high)


def _range(column: Any, low: Any, high: Any) -> ColumnElement | None:
    bounds = []
    if low is not None:
        bounds.append(column >= low)
    if high is not None:
        bounds.append(column <= high)
    if not bounds:
        return None
    return combine_and(bounds)
