"""Default six-step layout of the review wizard.

1. basics    - review type, project stage and reviewer are required
2. scope     - scope text and at least one objective
3. scoring   - at least one category rated above zero
4. comments  - comments and at least one recommendation
5. issues    - optional
6. settings  - optional (follow-up, notifications, visibility)
"""

from __future__ import annotations

from reviewkit.core.contracts.scheme import StepRequirement

DEFAULT_STEPS: tuple[StepRequirement, ...] = (
    StepRequirement(
        name="basics",
        required_fields=("review_type", "project_stage", "reviewer_name"),
    ),
    StepRequirement(
        name="scope",
        required_fields=("review_scope",),
        required_lists=("review_objectives",),
    ),
    StepRequirement(name="scoring", requires_score=True),
    StepRequirement(
        name="comments",
        required_fields=("comments",),
        required_lists=("recommendations",),
    ),
    StepRequirement(name="issues"),
    StepRequirement(name="settings"),
)


__all__ = ["DEFAULT_STEPS"]
