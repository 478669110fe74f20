"""Typed, caller-facing error conditions raised by the engine.

Every condition here is recoverable: the presentation layer catches
:class:`ReviewEngineError` (or a specific subclass) and renders its own
copy from the structured attributes. Messages are for logs, not for users.

Taxonomy
--------
- :class:`InvalidScore`             raw score outside [0, 10] (or off-granularity on a draft)
- :class:`ValidationBlocked`        one or more step gates unsatisfied
- :class:`WorkflowAlreadySubmitted` mutation attempted on a submitted workflow
- :class:`InvalidQuerySpec`         bad page size/index or unknown sort/group field
- :class:`PermissionDenied`         role not in the editor allow-list
- :class:`InvalidTransition`        advance past the last step / retreat before the first
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reviewkit.core.contracts.validation import ValidationFailure


class ReviewEngineError(Exception):
    """Base class for every condition raised by reviewkit."""


class InvalidScore(ReviewEngineError):
    """A raw category score is not acceptable."""

    def __init__(self, category: str, value: object, reason: str = "out-of-range") -> None:
        self.category = category
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid score for category '{category}': {value!r} ({reason})")


class ValidationBlocked(ReviewEngineError):
    """A transition was refused because step gates reported failures."""

    def __init__(self, failures: Sequence[ValidationFailure], step: int | None = None) -> None:
        self.failures: tuple[ValidationFailure, ...] = tuple(failures)
        self.step = step
        fields = ", ".join(f"{f.field}:{f.reason.value}" for f in self.failures)
        where = f" at step {step}" if step is not None else ""
        super().__init__(f"Validation blocked{where}: {fields}")


class WorkflowAlreadySubmitted(ReviewEngineError):
    """The workflow reached its terminal state; no further mutation is allowed."""

    def __init__(self, draft_id: str) -> None:
        self.draft_id = draft_id
        super().__init__(
            f"Review '{draft_id}' is already submitted; seed a new draft to edit it"
        )


class InvalidQuerySpec(ReviewEngineError):
    """A query (or aggregation) request cannot be executed as given."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class PermissionDenied(ReviewEngineError):
    """The caller's role may not edit or submit reviews."""

    def __init__(self, role: str, allowed: Iterable[str]) -> None:
        self.role = role
        self.allowed = frozenset(allowed)
        super().__init__(
            f"Role '{role}' is not permitted; expected one of {sorted(self.allowed)}"
        )


class InvalidTransition(ReviewEngineError):
    """A step transition is not available from the current step."""

    def __init__(self, action: str, step: int, detail: str = "") -> None:
        self.action = action
        self.step = step
        suffix = f": {detail}" if detail else ""
        super().__init__(f"Cannot {action} from step {step}{suffix}")


__all__ = [
    "ReviewEngineError",
    "InvalidScore",
    "ValidationBlocked",
    "WorkflowAlreadySubmitted",
    "InvalidQuerySpec",
    "PermissionDenied",
    "InvalidTransition",
]
