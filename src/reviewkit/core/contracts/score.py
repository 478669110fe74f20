"""Scoring output contracts.

- :class:`ScoreLabel`: qualitative band derived from an overall score.
- :class:`CategoryBreakdown`: one row of the per-category breakdown.
- :class:`ScoreResult`: what :func:`reviewkit.core.scoring.model.score` returns.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ScoreLabel(str, Enum):
    """Qualitative band on the 0-10 scale (lower bound inclusive)."""

    EXCELLENT = "excellent"
    GOOD = "good"
    SATISFACTORY = "satisfactory"
    NEEDS_IMPROVEMENT = "needs-improvement"
    POOR = "poor"


class CategoryBreakdown(BaseModel):
    """Score, weight and weighted contribution of one category."""

    model_config = ConfigDict(frozen=True)

    key: str
    score: float
    max_score: float
    weight: float
    weighted_score: float


class ScoreResult(BaseModel):
    """Overall weighted score with its band and per-category contributions."""

    model_config = ConfigDict(frozen=True)

    category_contributions: dict[str, float] = Field(default_factory=dict)
    overall_score: float
    label: ScoreLabel
    breakdown: tuple[CategoryBreakdown, ...] = ()


__all__ = ["ScoreLabel", "CategoryBreakdown", "ScoreResult"]
