"""Weighted multi-criteria scoring.

The overall score is the weighted mean of the raw category scores,
normalized by the scheme's actual weight total:

    overall = sum(raw[k] * weight[k]) / sum(weight[k])

A category defined by the scheme but absent from ``raw`` counts as 0, so
unrated categories pull the score down instead of being excluded. Raw keys
that the scheme does not define are ignored.

Bands (lower bound inclusive, 0-10 scale):

    >= 9 excellent | >= 8 good | >= 6 satisfactory | >= 4 needs-improvement | else poor

Deterministic, no I/O.
"""

from __future__ import annotations

import math
from collections.abc import Mapping

from reviewkit.core.contracts.scheme import ScoringScheme
from reviewkit.core.contracts.score import CategoryBreakdown, ScoreLabel, ScoreResult
from reviewkit.core.errors import InvalidScore

MIN_SCORE: float = 0.0
MAX_SCORE: float = 10.0

# Walked top-down; the first threshold <= score wins.
_BANDS: tuple[tuple[float, ScoreLabel], ...] = (
    (9.0, ScoreLabel.EXCELLENT),
    (8.0, ScoreLabel.GOOD),
    (6.0, ScoreLabel.SATISFACTORY),
    (4.0, ScoreLabel.NEEDS_IMPROVEMENT),
)


def band(score: float) -> ScoreLabel:
    """Return the qualitative band for an overall score."""
    for threshold, label in _BANDS:
        if score >= threshold:
            return label
    return ScoreLabel.POOR


def check_raw_score(category: str, value: object) -> float:
    """Return ``value`` as a float or raise :class:`InvalidScore`.

    Accepts ints and floats (not bools) that are finite and within [0, 10].
    """
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise InvalidScore(category, value, reason="not-a-number")
    number = float(value)
    if not math.isfinite(number) or number < MIN_SCORE or number > MAX_SCORE:
        raise InvalidScore(category, value)
    return number


def score(scheme: ScoringScheme, raw: Mapping[str, object]) -> ScoreResult:
    """Reduce per-category raw scores to an overall weighted score.

    Parameters
    ----------
    scheme:
        Weighted category definitions.
    raw:
        ``category key -> raw score`` in [0, 10]. Missing categories count as 0.

    Returns
    -------
    ScoreResult
        Overall score, its band, ``category_contributions`` (each category's
        share of the overall score) and a per-category breakdown.

    Raises
    ------
    InvalidScore
        If a scheme category's raw value is not a finite number in [0, 10].
    """
    total_weight = scheme.total_weight
    weighted_sum = 0.0
    contributions: dict[str, float] = {}
    breakdown: list[CategoryBreakdown] = []

    for category in scheme.categories:
        value = raw.get(category.key)
        rated = 0.0 if value is None else check_raw_score(category.key, value)
        weighted_sum += rated * category.weight
        contributions[category.key] = rated * category.weight / total_weight
        breakdown.append(
            CategoryBreakdown(
                key=category.key,
                score=rated,
                max_score=category.max_score,
                weight=category.weight,
                weighted_score=rated * category.weight / 100.0,
            )
        )

    # One division over the summed products keeps band boundaries exact.
    overall = weighted_sum / total_weight
    # Float error on a perfect 10 must not leave the 0-10 scale.
    overall = max(MIN_SCORE, min(MAX_SCORE, overall))

    return ScoreResult(
        category_contributions=contributions,
        overall_score=overall,
        label=band(overall),
        breakdown=tuple(breakdown),
    )


__all__ = ["MIN_SCORE", "MAX_SCORE", "band", "check_raw_score", "score"]
