"""Tests for the weighted scoring model and its bands."""

from __future__ import annotations

import pytest

from reviewkit.core.contracts.scheme import CategoryDefinition, ScoringScheme, StepRequirement
from reviewkit.core.contracts.score import ScoreLabel
from reviewkit.core.errors import InvalidScore
from reviewkit.core.scoring.model import band, check_raw_score, score


def _scheme(**weights: float) -> ScoringScheme:
    """Build a one-step scheme with the given category weights."""
    return ScoringScheme(
        id="test",
        name="Test",
        categories=tuple(CategoryDefinition(key=k, weight=w) for k, w in weights.items()),
        steps=(StepRequirement(name="only"),),
    )


def test_weighted_mean_and_band() -> None:
    """{A:60, B:40} with {A:8, B:6} scores 7.2, which is satisfactory."""
    result = score(_scheme(A=60, B=40), {"A": 8, "B": 6})

    assert result.overall_score == pytest.approx(7.2)
    assert result.label is ScoreLabel.SATISFACTORY
    assert result.category_contributions == pytest.approx({"A": 4.8, "B": 2.4})


def test_missing_category_counts_as_zero() -> None:
    """An unrated category pulls the score down instead of being skipped."""
    result = score(_scheme(A=60, B=40), {"A": 8})

    assert result.overall_score == pytest.approx(4.8)
    assert result.label is ScoreLabel.NEEDS_IMPROVEMENT
    assert result.category_contributions["B"] == 0.0


def test_unknown_raw_keys_are_ignored() -> None:
    """Keys outside the scheme are neither scored nor range-checked."""
    result = score(_scheme(A=60, B=40), {"A": 8, "B": 6, "Z": 100})
    assert result.overall_score == pytest.approx(7.2)
    assert "Z" not in result.category_contributions


def test_breakdown_rows() -> None:
    """The breakdown lists every category in scheme order."""
    result = score(_scheme(A=60, B=40), {"A": 8, "B": 6})

    assert [row.key for row in result.breakdown] == ["A", "B"]
    first = result.breakdown[0]
    assert first.score == 8.0
    assert first.weight == 60.0
    assert first.max_score == 10.0
    assert first.weighted_score == pytest.approx(4.8)


def test_perfect_and_empty_scores() -> None:
    """All tens land exactly on 10; no ratings land on 0."""
    scheme = _scheme(A=33.33, B=33.33, C=33.34)

    perfect = score(scheme, {"A": 10, "B": 10, "C": 10})
    assert perfect.overall_score == pytest.approx(10.0)
    assert perfect.overall_score <= 10.0
    assert perfect.label is ScoreLabel.EXCELLENT

    empty = score(scheme, {})
    assert empty.overall_score == 0.0
    assert empty.label is ScoreLabel.POOR


def test_score_is_deterministic() -> None:
    """Identical inputs give identical results."""
    scheme = _scheme(A=60, B=40)
    assert score(scheme, {"A": 7.5, "B": 3}) == score(scheme, {"A": 7.5, "B": 3})


@pytest.mark.parametrize(  # type: ignore[misc]
    ("value", "label"),
    [
        (10.0, ScoreLabel.EXCELLENT),
        (9.0, ScoreLabel.EXCELLENT),
        (8.99, ScoreLabel.GOOD),
        (8.0, ScoreLabel.GOOD),
        (6.0, ScoreLabel.SATISFACTORY),
        (5.99, ScoreLabel.NEEDS_IMPROVEMENT),
        (4.0, ScoreLabel.NEEDS_IMPROVEMENT),
        (3.99, ScoreLabel.POOR),
        (0.0, ScoreLabel.POOR),
    ],
)
def test_band_boundaries(value: float, label: ScoreLabel) -> None:
    """Lower bounds are inclusive."""
    assert band(value) is label


@pytest.mark.parametrize(  # type: ignore[misc]
    ("value", "reason"),
    [
        (11, "out-of-range"),
        (-0.5, "out-of-range"),
        (float("nan"), "out-of-range"),
        (float("inf"), "out-of-range"),
        ("8", "not-a-number"),
        (True, "not-a-number"),
    ],
)
def test_invalid_raw_score_names_category(value: object, reason: str) -> None:
    """Bad raw values raise InvalidScore naming the offending category."""
    with pytest.raises(InvalidScore) as info:
        score(_scheme(A=60, B=40), {"A": 5, "B": value})

    assert info.value.category == "B"
    assert info.value.reason == reason


def test_check_raw_score_accepts_bounds() -> None:
    """0 and 10 are both valid raw scores."""
    assert check_raw_score("A", 0) == 0.0
    assert check_raw_score("A", 10) == 10.0
