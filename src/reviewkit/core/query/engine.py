"""
Generic list query: search, filter, sort and paginate in one pass.

Every list view (review log, template picker, dashboards) goes through the
same pipeline:

    records --term/filters--> matched --stable sort--> ordered --slice--> page

Records may be mappings (as handed back by a store) or attribute-bearing
objects such as pydantic models. Field access is ``record.get(name)`` for
mappings and ``getattr(record, name, None)`` otherwise, so a missing field
reads as ``None``.

Ordering
--------
- ``None`` sorts before any value.
- ``date``/``datetime`` values compare by instant. Naive datetimes are taken
  as UTC; bare dates as midnight UTC. ISO strings in a declared date field
  are parsed first.
- Numbers compare numerically; everything else by string order.
- Values of different kinds never compare directly: numbers sort before
  instants, and instants before text.
- ``desc`` negates the comparator. The sort is stable, so ties keep their
  input order in both directions.

The engine is pure: it never mutates ``records`` and identical inputs give
identical pages.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import UTC, date, datetime, time
from enum import Enum
from functools import cmp_to_key
from typing import Any, TypeVar

from reviewkit.core.contracts.query import ALL, QueryPage, QuerySpec
from reviewkit.core.errors import InvalidQuerySpec

R = TypeVar("R")


# ------------------------------ Field access --------------------------------


def field_value(record: Any, name: str) -> Any:
    """Read ``name`` from a mapping or an object; missing reads as ``None``."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _has_field(record: Any, name: str) -> bool:
    if isinstance(record, Mapping):
        return name in record
    return hasattr(record, name)


def _plain(value: Any) -> Any:
    """Unwrap enums to their value."""
    if isinstance(value, Enum):
        return value.value
    return value


def _as_text(value: Any) -> str:
    value = _plain(value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


# ------------------------------- Predicates ---------------------------------


def _matches_term(record: Any, needle: str, search_fields: Sequence[str]) -> bool:
    if not needle:
        return True
    for name in search_fields:
        value = field_value(record, name)
        if value is not None and needle in _as_text(value).casefold():
            return True
    return False


def _matches_filter(actual: Any, expected: Any) -> bool:
    actual = _plain(actual)
    expected = _plain(expected)
    if actual == expected:
        return True
    # String filters (CLI, query strings) compare against the rendered value.
    if isinstance(expected, str) and actual is not None and not isinstance(actual, str):
        return _as_text(actual) == expected
    return False


def _is_ignored_filter(value: Any) -> bool:
    return value is None or _plain(value) == ALL


# -------------------------------- Ordering ----------------------------------


def _to_instant(value: date) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    return datetime.combine(value, time.min, tzinfo=UTC)


def _sort_value(value: Any, is_date_field: bool) -> Any:
    value = _plain(value)
    if value is None:
        return None
    if isinstance(value, date):
        return _to_instant(value)
    if isinstance(value, str) and is_date_field:
        try:
            return _to_instant(datetime.fromisoformat(value))
        except ValueError:
            return value
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int | float) and not (isinstance(value, float) and math.isnan(value)):
        return value
    return str(value)


def _kind_rank(value: Any) -> int:
    if isinstance(value, int | float):
        return 0
    if isinstance(value, datetime):
        return 1
    return 2


def _compare(a: Any, b: Any) -> int:
    if a is None or b is None:
        return (a is not None) - (b is not None)
    rank_a, rank_b = _kind_rank(a), _kind_rank(b)
    if rank_a != rank_b:
        return (rank_a > rank_b) - (rank_a < rank_b)
    if rank_a == 2:
        a, b = _as_text(a), _as_text(b)
    return (a > b) - (a < b)


def _comparator(field: str, descending: bool, is_date_field: bool) -> Callable[[Any, Any], int]:
    def cmp(left: Any, right: Any) -> int:
        result = _compare(
            _sort_value(field_value(left, field), is_date_field),
            _sort_value(field_value(right, field), is_date_field),
        )
        return -result if descending else result

    return cmp


# --------------------------------- Engine -----------------------------------


class ListQueryEngine:
    """
    Query runner bound to one record shape.

    Parameters
    ----------
    search_fields : Iterable[str]
        Fields the free-text term is matched against.
    sort_fields : Iterable[str] | None
        Allowed sort fields. When ``None``, any field present on at least
        one record may be used.
    date_fields : Iterable[str]
        Fields whose ISO string values sort as instants.
    """

    __slots__ = ("search_fields", "sort_fields", "date_fields")

    def __init__(
        self,
        search_fields: Iterable[str],
        sort_fields: Iterable[str] | None = None,
        date_fields: Iterable[str] = (),
    ) -> None:
        self.search_fields: tuple[str, ...] = tuple(search_fields)
        self.sort_fields: frozenset[str] | None = (
            frozenset(sort_fields) if sort_fields is not None else None
        )
        self.date_fields: frozenset[str] = frozenset(date_fields)

    def _check(self, records: Sequence[Any], spec: QuerySpec) -> None:
        if spec.page_size <= 0:
            raise InvalidQuerySpec(f"page_size must be positive, got {spec.page_size}")
        if spec.page_index < 1:
            raise InvalidQuerySpec(f"page_index must be >= 1, got {spec.page_index}")
        if spec.sort_field is None:
            return
        if self.sort_fields is not None:
            if spec.sort_field not in self.sort_fields:
                raise InvalidQuerySpec(
                    f"unknown sort field '{spec.sort_field}'; "
                    f"expected one of {sorted(self.sort_fields)}"
                )
        elif records and not any(_has_field(r, spec.sort_field) for r in records):
            raise InvalidQuerySpec(f"unknown sort field '{spec.sort_field}'")

    def filter(self, records: Iterable[R], spec: QuerySpec) -> list[R]:
        """Return the records matching ``spec.term`` and every filter."""
        needle = spec.term.strip().casefold()
        active = {k: v for k, v in spec.filters.items() if not _is_ignored_filter(v)}
        return [
            r
            for r in records
            if _matches_term(r, needle, self.search_fields)
            and all(_matches_filter(field_value(r, k), v) for k, v in active.items())
        ]

    def sort(self, records: Iterable[R], spec: QuerySpec) -> list[R]:
        """Return ``records`` stably ordered by ``spec.sort_field``."""
        items = list(records)
        if spec.sort_field is None:
            return items
        cmp = _comparator(
            spec.sort_field,
            spec.sort_direction == "desc",
            spec.sort_field in self.date_fields,
        )
        return sorted(items, key=cmp_to_key(cmp))

    def matching(self, records: Sequence[R], spec: QuerySpec) -> list[R]:
        """Filtered and sorted records across every page (export uses this)."""
        self._check(records, spec)
        return self.sort(self.filter(records, spec), spec)

    def query(self, records: Sequence[R], spec: QuerySpec) -> QueryPage[R]:
        """
        Run ``spec`` against ``records`` and return the requested page.

        Raises
        ------
        InvalidQuerySpec
            For a non-positive page size, a page index below 1, or an
            unknown sort field.
        """
        ordered = self.matching(records, spec)
        total = len(ordered)
        start = (spec.page_index - 1) * spec.page_size
        return QueryPage(
            page=tuple(ordered[start : start + spec.page_size]),
            total_count=total,
            total_pages=max(1, math.ceil(total / spec.page_size)),
            page_index=spec.page_index,
            page_size=spec.page_size,
        )


# Review log defaults (scored reviews and drafts as stored).
REVIEW_SEARCH_FIELDS: tuple[str, ...] = (
    "project_id",
    "review_type",
    "project_stage",
    "reviewer_name",
    "comments",
)
REVIEW_DATE_FIELDS: tuple[str, ...] = ("review_date", "created_at", "updated_at", "submitted_at")
REVIEW_SORT_FIELDS: tuple[str, ...] = (
    *REVIEW_DATE_FIELDS,
    "project_id",
    "review_type",
    "project_stage",
    "reviewer_name",
    "priority",
    "status",
    "overall_score",
    "version",
)


def review_log_engine() -> ListQueryEngine:
    """Engine preconfigured for the review log."""
    return ListQueryEngine(
        REVIEW_SEARCH_FIELDS, sort_fields=REVIEW_SORT_FIELDS, date_fields=REVIEW_DATE_FIELDS
    )


def query(
    records: Sequence[R],
    spec: QuerySpec,
    *,
    search_fields: Iterable[str] = (),
    sort_fields: Iterable[str] | None = None,
    date_fields: Iterable[str] = (),
) -> QueryPage[R]:
    """One-shot form of :meth:`ListQueryEngine.query`."""
    engine = ListQueryEngine(search_fields, sort_fields=sort_fields, date_fields=date_fields)
    return engine.query(records, spec)


__all__ = [
    "ListQueryEngine",
    "REVIEW_DATE_FIELDS",
    "REVIEW_SEARCH_FIELDS",
    "REVIEW_SORT_FIELDS",
    "field_value",
    "query",
    "review_log_engine",
]
