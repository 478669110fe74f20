"""
Dashboard aggregation over scored reviews.

Input records are scored reviews, either as :class:`ScoredReview` models or
as the dicts a store hands back. Every metric is recomputed from the full
set on each call; nothing is cached.

Metrics
-------
- ``total_count`` / ``completed_count`` / ``completion_rate``
  (status ``completed``; the rate is a fraction, 0 for an empty set).
- ``average_score``: mean ``overall_score`` of completed records.
- ``trend_pct``: every scored record in the window (any status) ordered by
  ``review_date`` and split so the older half holds ``ceil(n / 2)``;
  percent change of the mean score from the older to the newer half. 0 when
  a half is empty or the older mean is 0. Records without an
  ``overall_score`` are left out.
- ``category_distribution``: ``scheme_id -> category -> mean raw score``
  over completed records; categories come from each record's
  ``category_contributions``, a missing raw score counts as 0.
- ``groups``: ``dimension -> [GroupSummary]`` over completed records,
  sorted by group key.
- ``review_frequency``: records per 30-day month over the window span (see
  :func:`review_frequency`).
- ``stage_counts``: records per ``project_stage``, any status.
- ``status_counts``, ``issues_per_review``, ``recommendations_per_review``.

A :class:`TimeWindow` (inclusive on ``review_date``) narrows every metric.
"""

from __future__ import annotations

import math
from collections import Counter, defaultdict
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime
from enum import Enum
from statistics import fmean
from typing import Any

from reviewkit.core.contracts.metrics import DashboardMetrics, GroupSummary, TimeWindow
from reviewkit.core.contracts.review import ReviewStatus, ScoredReview
from reviewkit.core.errors import InvalidQuerySpec
from reviewkit.core.query.engine import field_value
from reviewkit.core.store.base import RecordStore

DEFAULT_GROUP_DIMENSIONS: tuple[str, ...] = ("project_stage", "reviewer_name")

GROUP_DIMENSIONS: frozenset[str] = frozenset(
    {
        "project_id",
        "project_stage",
        "review_type",
        "reviewer_name",
        "reviewer_role",
        "priority",
        "scheme_id",
        "score_label",
        "status",
    }
)

UNASSIGNED = "unassigned"
DAYS_PER_MONTH = 30.0


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _review_day(record: Any) -> date | None:
    value = field_value(record, "review_date")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value).date()
        except ValueError:
            return None
    return None


def _in_window(record: Any, window: TimeWindow | None) -> bool:
    if window is None or (window.start is None and window.end is None):
        return True
    day = _review_day(record)
    return day is not None and window.contains(day)


def _status(record: Any) -> str:
    value = _plain(field_value(record, "status"))
    return str(value) if value else "unknown"


def _is_completed(record: Any) -> bool:
    return _status(record) == ReviewStatus.COMPLETED.value


def _overall(record: Any) -> float:
    value = field_value(record, "overall_score")
    return float(value) if value is not None else 0.0


def _mean(values: Sequence[float]) -> float:
    return fmean(values) if values else 0.0


def _count(record: Any, name: str) -> int:
    items = field_value(record, name)
    return len(items) if items else 0


def _stage_counts(records: Iterable[Any]) -> dict[str, int]:
    stages = Counter(str(_plain(field_value(r, "project_stage")) or UNASSIGNED) for r in records)
    return dict(sorted(stages.items()))


# -------------------------------- Pieces ------------------------------------


def trend_pct(records: Sequence[Any]) -> float:
    """Percent change of the mean score between the older and newer half."""
    scored = [r for r in records if field_value(r, "overall_score") is not None]
    ordered = sorted(scored, key=lambda r: _review_day(r) or date.min)
    cut = math.ceil(len(ordered) / 2)
    older = [_overall(r) for r in ordered[:cut]]
    newer = [_overall(r) for r in ordered[cut:]]
    if not older or not newer:
        return 0.0
    base = _mean(older)
    if base == 0:
        return 0.0
    return (_mean(newer) - base) / base * 100.0


def review_frequency(records: Sequence[Any], window: TimeWindow | None = None) -> float:
    """
    Records per month, a month being 30 days.

    The span runs from the window start to the window end. An open bound
    falls back to the earliest or latest dated record. Spans shorter than a
    month count as one month, so a handful of same-day reviews reads as
    that many per month.
    """
    if not records:
        return 0.0
    days = sorted(d for d in (_review_day(r) for r in records) if d is not None)
    start = window.start if window is not None else None
    end = window.end if window is not None else None
    if days:
        start = start or days[0]
        end = end or days[-1]
    span = (end - start).days + 1 if start is not None and end is not None else 0
    months = max(1.0, span / DAYS_PER_MONTH)
    return len(records) / months


def category_distribution(records: Iterable[Any]) -> dict[str, dict[str, float]]:
    """Return ``scheme_id -> category -> mean raw score``."""
    sums: dict[str, dict[str, list[float]]] = defaultdict(lambda: defaultdict(list))
    for record in records:
        scheme_id = str(field_value(record, "scheme_id") or UNASSIGNED)
        scores: Mapping[str, Any] = field_value(record, "scores") or {}
        for key in field_value(record, "category_contributions") or {}:
            sums[scheme_id][key].append(float(scores.get(key) or 0.0))
    return {
        scheme_id: {key: _mean(values) for key, values in by_key.items()}
        for scheme_id, by_key in sorted(sums.items())
    }


def _check_dimension(dimension: str) -> None:
    if dimension not in GROUP_DIMENSIONS:
        raise InvalidQuerySpec(
            f"unknown group dimension '{dimension}'; expected one of {sorted(GROUP_DIMENSIONS)}"
        )


def group_by(records: Iterable[Any], dimension: str) -> list[GroupSummary]:
    """
    Count records and average their overall score per value of ``dimension``.

    Records with no value are grouped under ``"unassigned"``.

    Raises
    ------
    InvalidQuerySpec
        If ``dimension`` is not a groupable field.
    """
    _check_dimension(dimension)
    buckets: dict[str, list[float]] = defaultdict(list)
    for record in records:
        key = _plain(field_value(record, dimension))
        buckets[str(key) if key not in (None, "") else UNASSIGNED].append(_overall(record))
    return [
        GroupSummary(group_key=key, count=len(scores), average_score=_mean(scores))
        for key, scores in sorted(buckets.items())
    ]


# ------------------------------- Aggregate ----------------------------------


def aggregate(
    records: Iterable[Any],
    window: TimeWindow | None = None,
    group_dimensions: Sequence[str] = DEFAULT_GROUP_DIMENSIONS,
) -> DashboardMetrics:
    """
    Compute dashboard metrics for ``records``.

    Parameters
    ----------
    records:
        Scored reviews (models or dicts). Not mutated.
    window:
        Optional inclusive date window on ``review_date``.
    group_dimensions:
        Fields to group completed records by.

    Returns
    -------
    DashboardMetrics
        All zeros and empty mappings for an empty input.

    Raises
    ------
    InvalidQuerySpec
        If a group dimension is unknown.
    """
    for dimension in group_dimensions:
        _check_dimension(dimension)

    selected = [r for r in records if _in_window(r, window)]
    completed = [r for r in selected if _is_completed(r)]
    total = len(selected)

    return DashboardMetrics(
        total_count=total,
        completed_count=len(completed),
        completion_rate=len(completed) / total if total else 0.0,
        average_score=_mean([_overall(r) for r in completed]),
        trend_pct=trend_pct(selected),
        review_frequency=review_frequency(selected, window),
        status_counts=dict(sorted(Counter(_status(r) for r in selected).items())),
        stage_counts=_stage_counts(selected),
        category_distribution=category_distribution(completed),
        groups={dim: group_by(completed, dim) for dim in group_dimensions},
        issues_per_review=_mean([_count(r, "issues") for r in selected]),
        recommendations_per_review=_mean([_count(r, "recommendations") for r in selected]),
        window=window,
    )


def load_scored(store: RecordStore) -> list[dict[str, Any]]:
    """Load every scored review from ``store``."""
    return store.load_all(ScoredReview.COLLECTION)


__all__ = [
    "DEFAULT_GROUP_DIMENSIONS",
    "GROUP_DIMENSIONS",
    "aggregate",
    "category_distribution",
    "group_by",
    "load_scored",
    "review_frequency",
    "trend_pct",
]
