"""Scoring scheme contracts: weighted categories plus the wizard step layout.

A :class:`ScoringScheme` is the fixed set of weighted categories applicable
to one review type, together with the per-step requirements the validation
gate enforces. Schemes are immutable once built; a workflow selects one at
construction and keeps it for its whole lifetime.

Weights
-------
Weights are percentages in [0, 100] and must sum to 100 within
:data:`WEIGHT_TOLERANCE`. The scoring model still normalizes by the actual
total, so a scheme such as ``33.33/33.33/33.34`` scores exactly.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

#: Allowed deviation of the weight total from 100.
WEIGHT_TOLERANCE: float = 0.5

Weight = Annotated[float, Field(ge=0.0, le=100.0)]


class CategoryDefinition(BaseModel):
    """A single weighted scoring category."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1, description="Unique key within the scheme.")
    weight: Weight
    description: str = ""
    max_score: float = Field(default=10.0, gt=0.0)


class StepRequirement(BaseModel):
    """Declarative gate for one wizard step.

    Fields
    ------
    name:
        Short label of the step (``basics``, ``scoring``...).
    required_fields:
        Draft attributes that must hold a non-blank value.
    required_lists:
        Draft list attributes that must hold at least one non-blank entry.
    requires_score:
        If True, at least one scheme category must carry a non-zero raw score.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    required_fields: tuple[str, ...] = ()
    required_lists: tuple[str, ...] = ()
    requires_score: bool = False


class ScoringScheme(BaseModel):
    """Ordered categories plus the step-to-field mapping used by the gate."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    project_stage: str | None = None
    estimated_duration: int | None = Field(default=None, description="Expected effort in hours.")
    categories: tuple[CategoryDefinition, ...]
    steps: tuple[StepRequirement, ...]

    @model_validator(mode="after")
    def _check_invariants(self) -> ScoringScheme:
        """Reject empty, duplicated or badly weighted schemes."""
        if not self.categories:
            raise ValueError("a scoring scheme needs at least one category")
        if not self.steps:
            raise ValueError("a scoring scheme needs at least one workflow step")
        keys = [c.key for c in self.categories]
        if len(set(keys)) != len(keys):
            raise ValueError(f"duplicate category keys in scheme '{self.id}'")
        total = self.total_weight
        if abs(total - 100.0) > WEIGHT_TOLERANCE:
            raise ValueError(f"category weights of '{self.id}' sum to {total}, expected 100")
        return self

    @property
    def total_weight(self) -> float:
        """Sum of all category weights."""
        return sum(c.weight for c in self.categories)

    @property
    def total_steps(self) -> int:
        """Number of wizard steps declared by the scheme."""
        return len(self.steps)

    @property
    def category_keys(self) -> tuple[str, ...]:
        """Category keys in declaration order."""
        return tuple(c.key for c in self.categories)

    def weights(self) -> dict[str, float]:
        """Return a ``key -> weight`` mapping in declaration order."""
        return {c.key: c.weight for c in self.categories}


__all__ = [
    "WEIGHT_TOLERANCE",
    "CategoryDefinition",
    "StepRequirement",
    "ScoringScheme",
]
