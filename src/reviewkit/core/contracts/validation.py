"""Validation failure contract shared by the step gate and the workflow.

A failure names the offending draft field and a machine-checkable reason
code. It deliberately carries no human message: the presentation layer owns
the copy.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ReasonCode(str, Enum):
    """Why a gate rejected a field."""

    REQUIRED = "required"
    EMPTY_LIST = "empty-list"
    NO_NONZERO_SCORE = "no-nonzero-score"


class ValidationFailure(BaseModel):
    """One unsatisfied requirement of a workflow step."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(description="Draft attribute name, e.g. 'reviewer_name'.")
    reason: ReasonCode
    step: int | None = Field(default=None, description="1-based step that declared the rule.")


__all__ = ["ReasonCode", "ValidationFailure"]
