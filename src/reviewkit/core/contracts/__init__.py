"""Pydantic contracts shared across the engine."""

from __future__ import annotations

from .metrics import DashboardMetrics, GroupSummary, TimeWindow
from .query import ALL, QueryPage, QuerySpec
from .review import (
    DraftStatus,
    Recommendation,
    ReviewDraft,
    ReviewIssue,
    ReviewStatus,
    ScoredReview,
)
from .scheme import CategoryDefinition, ScoringScheme, StepRequirement
from .score import CategoryBreakdown, ScoreLabel, ScoreResult
from .validation import ReasonCode, ValidationFailure

__all__ = [
    "ALL",
    "CategoryBreakdown",
    "CategoryDefinition",
    "DashboardMetrics",
    "DraftStatus",
    "GroupSummary",
    "QueryPage",
    "QuerySpec",
    "ReasonCode",
    "Recommendation",
    "ReviewDraft",
    "ReviewIssue",
    "ReviewStatus",
    "ScoreLabel",
    "ScoreResult",
    "ScoredReview",
    "ScoringScheme",
    "StepRequirement",
    "TimeWindow",
    "ValidationFailure",
]
