"""Review contracts: the mutable working draft and the immutable scored result.

This module defines:

- :class:`Recommendation` / :class:`ReviewIssue`: list items carried by a review.
- :class:`ReviewContent`: fields shared by drafts and scored reviews.
- :class:`ReviewDraft`: the mutable working record edited through the wizard.
- :class:`ScoredReview`: the frozen record produced once, at submit time.

Lifecycle
---------
A draft is created (or seeded from an earlier scored review), edited and
validated step by step, then submitted. Submission produces a
:class:`ScoredReview`; the draft itself is never edited again. Further edits
start from :meth:`ReviewDraft.seed_from`, which bumps ``version`` and links
the new draft to its predecessor through ``parent_id``.
"""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime
from enum import Enum
from typing import Annotated, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

from .score import ScoreLabel, ScoreResult

Priority = Literal["low", "medium", "high", "urgent"]
RawScore = Annotated[float, Field(ge=0.0, le=10.0)]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class DraftStatus(str, Enum):
    """Status of a working draft."""

    DRAFT = "draft"
    SUBMITTED = "submitted"


class ReviewStatus(str, Enum):
    """Status of a review as shown in logs and dashboards."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ON_HOLD = "on-hold"


class Recommendation(BaseModel):
    """A recommendation raised by the reviewer."""

    id: str = Field(default_factory=lambda: _new_id("REC"))
    description: str
    category: str = ""
    priority: Priority = "medium"
    expected_benefit: str = ""
    status: Literal["pending", "accepted", "rejected", "implemented"] = "pending"


class ReviewIssue(BaseModel):
    """An issue identified during the review."""

    id: str = Field(default_factory=lambda: _new_id("ISS"))
    description: str
    severity: Literal["low", "medium", "high", "critical"] = "medium"
    category: str = ""
    location: str = ""
    recommendation: str = ""
    status: Literal["open", "in-progress", "resolved", "closed"] = "open"


class ReviewContent(BaseModel):
    """Fields shared by :class:`ReviewDraft` and :class:`ScoredReview`."""

    id: str = Field(default_factory=lambda: _new_id("CR"))
    scheme_id: str
    project_id: str | None = None

    # Basic information
    review_type: str = ""
    project_stage: str = ""
    reviewer_name: str = ""
    reviewer_role: str = ""
    review_date: date = Field(default_factory=date.today)
    priority: Priority = "medium"
    tags: list[str] = Field(default_factory=list)

    # Scoring (raw category ratings on the 0-10 scale)
    scores: dict[str, RawScore] = Field(default_factory=dict)

    # Scope and content
    review_scope: str = ""
    review_limitations: str = ""
    review_objectives: list[str] = Field(default_factory=list)
    comments: str = ""
    executive_summary: str | None = None

    # Lists
    recommendations: list[Recommendation] = Field(default_factory=list)
    issues: list[ReviewIssue] = Field(default_factory=list)
    attachments: list[str] = Field(
        default_factory=list, description="Opaque references owned by the attachment store."
    )

    # Follow-up and notifications
    requires_follow_up: bool = False
    follow_up_date: date | None = None
    notify_stakeholders: bool = False
    stakeholder_emails: list[str] = Field(default_factory=list)

    # Lineage and timestamps
    version: int = Field(default=1, ge=1)
    parent_id: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class ReviewDraft(ReviewContent):
    """Mutable working record. Only :class:`ReviewWorkflow` should mutate it."""

    COLLECTION: ClassVar[str] = "review_drafts"

    model_config = ConfigDict(validate_assignment=True)

    current_step: int = Field(default=1, ge=1)
    status: DraftStatus = DraftStatus.DRAFT

    @classmethod
    def seed_from(cls, scored: ScoredReview) -> ReviewDraft:
        """Start a new draft from a submitted review.

        The new draft copies the review content, gets a fresh ``id``, points
        ``parent_id`` at ``scored.id`` and carries ``version + 1``.
        """
        content = scored.model_dump(include=set(ReviewContent.model_fields))
        now = _utcnow()
        content.update(
            id=_new_id("CR"),
            parent_id=scored.id,
            version=scored.version + 1,
            created_at=now,
            updated_at=now,
        )
        return cls.model_validate(content)


class ScoredReview(ReviewContent):
    """Immutable result of submitting a :class:`ReviewDraft`."""

    COLLECTION: ClassVar[str] = "scored_reviews"

    model_config = ConfigDict(frozen=True)

    overall_score: Annotated[float, Field(ge=0.0, le=10.0)]
    score_label: ScoreLabel
    category_contributions: dict[str, float] = Field(default_factory=dict)
    status: ReviewStatus = ReviewStatus.COMPLETED
    submitted_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_draft(
        cls,
        draft: ReviewDraft,
        result: ScoreResult,
        *,
        submitted_at: datetime | None = None,
    ) -> ScoredReview:
        """Freeze ``draft`` together with its scoring ``result``."""
        content = draft.model_dump(include=set(ReviewContent.model_fields))
        return cls.model_validate(
            {
                **content,
                "overall_score": result.overall_score,
                "score_label": result.label,
                "category_contributions": dict(result.category_contributions),
                "status": ReviewStatus.COMPLETED,
                "submitted_at": submitted_at or _utcnow(),
            }
        )


__all__ = [
    "DraftStatus",
    "ReviewStatus",
    "Recommendation",
    "ReviewIssue",
    "ReviewContent",
    "ReviewDraft",
    "ScoredReview",
]
