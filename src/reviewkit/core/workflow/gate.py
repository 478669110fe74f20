"""Step validation gate.

Each wizard step declares its requirements in the scheme's ``steps``
(:class:`~reviewkit.core.contracts.scheme.StepRequirement`). The gate turns
those declarations into a list of :class:`ValidationFailure`; an empty list
means the step is satisfied.

Rules
-----
- ``required_fields``: value is ``None`` or a blank string -> ``required``.
- ``required_lists``: no non-blank entry -> ``empty-list``. Entries are
  strings, or items with a ``description`` (recommendations, issues).
- ``requires_score``: no scheme category rated above zero ->
  ``no-nonzero-score`` on field ``scores``.

Validation is step-local and never cached: callers re-run it after every
draft mutation they care about.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from reviewkit.core.contracts.review import ReviewDraft
from reviewkit.core.contracts.scheme import ScoringScheme, StepRequirement
from reviewkit.core.contracts.validation import ReasonCode, ValidationFailure


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _has_entry(items: Iterable[Any] | None) -> bool:
    """Return True if ``items`` holds at least one non-blank entry."""
    for item in items or ():
        text = getattr(item, "description", item)
        if not _is_blank(text):
            return True
    return False


def _has_nonzero_score(draft: ReviewDraft, scheme: ScoringScheme) -> bool:
    return any(draft.scores.get(key, 0.0) > 0.0 for key in scheme.category_keys)


def requirement_for(step_index: int, scheme: ScoringScheme) -> StepRequirement:
    """Return the requirement of a 1-based step.

    Raises
    ------
    ValueError
        If ``step_index`` is outside ``[1, scheme.total_steps]``.
    """
    if not 1 <= step_index <= scheme.total_steps:
        raise ValueError(f"step {step_index} is outside 1..{scheme.total_steps}")
    return scheme.steps[step_index - 1]


def validate(step_index: int, draft: ReviewDraft, scheme: ScoringScheme) -> list[ValidationFailure]:
    """Return the failures blocking ``step_index``; empty means satisfied."""
    req = requirement_for(step_index, scheme)
    failures: list[ValidationFailure] = []

    for name in req.required_fields:
        if _is_blank(getattr(draft, name, None)):
            failures.append(
                ValidationFailure(field=name, reason=ReasonCode.REQUIRED, step=step_index)
            )

    for name in req.required_lists:
        if not _has_entry(getattr(draft, name, None)):
            failures.append(
                ValidationFailure(field=name, reason=ReasonCode.EMPTY_LIST, step=step_index)
            )

    if req.requires_score and not _has_nonzero_score(draft, scheme):
        failures.append(
            ValidationFailure(field="scores", reason=ReasonCode.NO_NONZERO_SCORE, step=step_index)
        )

    return failures


def validate_all(draft: ReviewDraft, scheme: ScoringScheme) -> list[ValidationFailure]:
    """Run every step's gate in order and concatenate the failures."""
    failures: list[ValidationFailure] = []
    for step_index in range(1, scheme.total_steps + 1):
        failures.extend(validate(step_index, draft, scheme))
    return failures


__all__ = ["requirement_for", "validate", "validate_all"]
