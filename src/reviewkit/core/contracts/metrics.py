"""Dashboard metric contracts produced by the aggregator."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TimeWindow(BaseModel):
    """Inclusive date window on ``review_date``. Either bound may be open."""

    model_config = ConfigDict(frozen=True)

    start: date | None = None
    end: date | None = None

    @model_validator(mode="after")
    def _ordered(self) -> TimeWindow:
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError("window start must not be after window end")
        return self

    def contains(self, day: date) -> bool:
        """Return True if ``day`` lies inside the window."""
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True


class GroupSummary(BaseModel):
    """Count and mean overall score of one group."""

    model_config = ConfigDict(frozen=True)

    group_key: str
    count: int
    average_score: float


class DashboardMetrics(BaseModel):
    """Summary metrics over a collection of scored reviews.

    Fields
    ------
    total_count / completed_count / completion_rate:
        Records in the window, those with status ``completed``, and their ratio.
    average_score:
        Mean ``overall_score`` of completed records.
    trend_pct:
        Percent change of the mean score between the older and newer half of
        the scored records in the window.
    review_frequency:
        Records per 30-day month over the window span.
    stage_counts:
        Records per ``project_stage``.
    status_counts:
        Records per status value.
    category_distribution:
        ``scheme_id -> category -> mean raw score``.
    groups:
        ``dimension -> [GroupSummary]`` sorted by ``group_key``.
    """

    model_config = ConfigDict(frozen=True)

    total_count: int = 0
    completed_count: int = 0
    completion_rate: float = 0.0
    average_score: float = 0.0
    trend_pct: float = 0.0
    review_frequency: float = 0.0
    status_counts: dict[str, int] = Field(default_factory=dict)
    stage_counts: dict[str, int] = Field(default_factory=dict)
    category_distribution: dict[str, dict[str, float]] = Field(default_factory=dict)
    groups: dict[str, list[GroupSummary]] = Field(default_factory=dict)
    issues_per_review: float = 0.0
    recommendations_per_review: float = 0.0
    window: TimeWindow | None = None


__all__ = ["TimeWindow", "GroupSummary", "DashboardMetrics"]
