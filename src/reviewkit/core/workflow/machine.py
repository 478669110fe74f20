"""
Review wizard state machine.

A :class:`ReviewWorkflow` owns one :class:`ReviewDraft` and sequences it
through the scheme's ordered steps. Transitions are named methods, each
guarded by the step validation gate:

    Step(1) -advance-> Step(2) -advance-> ... Step(N) -submit-> Submitted
        <-retreat-           <-retreat-
    any step -save_draft-> Draft-Saved (resumable; any edit returns to editing)

Every step carries a ``clean``/``dirty`` tag: dirty means the draft changed
since the last successful save.

Rules
-----
- ``advance()`` requires the current step's gate to pass and is rejected at
  the last step (call ``submit()`` instead).
- ``retreat()`` is never validated; it is rejected only at step 1.
- ``save_draft()`` is never validated and may be called repeatedly; it
  upserts the draft keyed by its id.
- ``submit()`` requires every step's gate to pass, scores the draft, hands
  the :class:`ScoredReview` to the store and locks the instance. If the
  store raises, the instance stays editable so the caller can retry.
- Rejected transitions always raise; nothing is a silent no-op.

Concurrency
-----------
Single-writer. The instance holds no lock; callers serialize access (one
editing session owns one workflow).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from reviewkit.core.contracts.review import (
    DraftStatus,
    Recommendation,
    ReviewDraft,
    ReviewIssue,
    ScoredReview,
)
from reviewkit.core.contracts.scheme import ScoringScheme
from reviewkit.core.contracts.score import ScoreResult
from reviewkit.core.contracts.validation import ValidationFailure
from reviewkit.core.errors import (
    InvalidScore,
    InvalidTransition,
    ValidationBlocked,
    WorkflowAlreadySubmitted,
)
from reviewkit.core.result import Result, err, ok
from reviewkit.core.scoring import model as scoring
from reviewkit.core.settings import get_logger
from reviewkit.core.store.base import RecordStore
from reviewkit.core.store.memory import InMemoryRecordStore

from . import gate
from .permissions import require_editor

logger = get_logger(__name__)

# Draft attributes owned by the workflow itself; `update()` refuses them.
_PROTECTED_FIELDS: frozenset[str] = frozenset(
    {
        "id",
        "scheme_id",
        "status",
        "current_step",
        "version",
        "parent_id",
        "created_at",
        "updated_at",
        "scores",
    }
)


class WorkflowPhase(str, Enum):
    """Coarse lifecycle phase of a workflow instance."""

    EDITING = "editing"
    DRAFT_SAVED = "draft-saved"
    SUBMITTED = "submitted"


class StepTag(str, Enum):
    """Whether the draft has unsaved changes."""

    CLEAN = "clean"
    DIRTY = "dirty"


@dataclass(frozen=True, slots=True)
class WorkflowState:
    """Observable state: current step, its tag and the lifecycle phase."""

    step: int
    tag: StepTag
    phase: WorkflowPhase


class ReviewWorkflow:
    """
    Finite state machine sequencing one draft through N validated steps.

    Parameters
    ----------
    scheme : ScoringScheme
        Categories and step layout; fixed for the instance's lifetime.
    role : str
        Caller's role, checked once against the editor allow-list.
    store : RecordStore | None
        Persistence collaborator. Defaults to a private in-memory store.
    draft : ReviewDraft | None
        Existing draft to resume. A copy is taken; a fresh draft is created
        (pre-filled from the scheme) when omitted.
    allowed_roles : Iterable[str] | None
        Override of the configured allow-list.

    Raises
    ------
    PermissionDenied
        If ``role`` is not an editor role.
    WorkflowAlreadySubmitted
        If ``draft`` is already submitted.
    """

    def __init__(
        self,
        scheme: ScoringScheme,
        role: str,
        store: RecordStore | None = None,
        draft: ReviewDraft | None = None,
        *,
        allowed_roles: frozenset[str] | set[str] | None = None,
    ) -> None:
        self.role: str = require_editor(role, allowed_roles)
        self.scheme: ScoringScheme = scheme
        self._store: RecordStore = store if store is not None else InMemoryRecordStore()

        if draft is None:
            draft = ReviewDraft(
                scheme_id=scheme.id,
                review_type=scheme.name,
                project_stage=scheme.project_stage or "",
                reviewer_role=self.role,
            )
        else:
            if draft.status is DraftStatus.SUBMITTED:
                raise WorkflowAlreadySubmitted(draft.id)
            if draft.scheme_id != scheme.id:
                raise ValueError(
                    f"draft '{draft.id}' uses scheme '{draft.scheme_id}', not '{scheme.id}'"
                )
            if draft.current_step > scheme.total_steps:
                raise ValueError(
                    f"draft '{draft.id}' is at step {draft.current_step} "
                    f"but the scheme has {scheme.total_steps}"
                )
            draft = draft.model_copy(deep=True)

        self._draft: ReviewDraft = draft
        self._tag: StepTag = StepTag.CLEAN
        self._phase: WorkflowPhase = WorkflowPhase.EDITING
        self._result: ScoredReview | None = None

    # ------------------------------- Queries --------------------------------

    @property
    def draft(self) -> ReviewDraft:
        """Return a deep copy of the working draft."""
        return self._draft.model_copy(deep=True)

    @property
    def current_step(self) -> int:
        return self._draft.current_step

    @property
    def total_steps(self) -> int:
        return self.scheme.total_steps

    @property
    def state(self) -> WorkflowState:
        return WorkflowState(step=self._draft.current_step, tag=self._tag, phase=self._phase)

    @property
    def submitted(self) -> bool:
        return self._phase is WorkflowPhase.SUBMITTED

    @property
    def result(self) -> ScoredReview | None:
        """The scored review produced by :meth:`submit`, once submitted."""
        return self._result

    def check_step(self, step: int | None = None) -> Result[int, list[ValidationFailure]]:
        """Run one step's gate without changing state.

        Returns ``Ok(step)`` when the gate passes, ``Err(failures)`` otherwise.
        Defaults to the current step.
        """
        index = self._draft.current_step if step is None else step
        failures = gate.validate(index, self._draft, self.scheme)
        if failures:
            return err(failures)
        return ok(index)

    def can_advance(self) -> bool:
        """Return True if :meth:`advance` would succeed right now."""
        if self.submitted or self._draft.current_step >= self.total_steps:
            return False
        return self.check_step().is_ok()

    def preview_score(self) -> ScoreResult:
        """Score the draft as it stands, without submitting."""
        return scoring.score(self.scheme, self._draft.scores)

    # -------------------------------- Edits ---------------------------------

    def update(self, **changes: Any) -> None:
        """Replace draft content fields (validated as a whole).

        Raises
        ------
        ValueError
            For unknown or workflow-owned field names, or invalid values.
        """
        self._ensure_editable()
        unknown = set(changes) - set(ReviewDraft.model_fields)
        if unknown:
            raise ValueError(f"unknown draft fields: {sorted(unknown)}")
        protected = set(changes) & _PROTECTED_FIELDS
        if protected:
            raise ValueError(f"fields managed by the workflow: {sorted(protected)}; use rate()")

        data = self._draft.model_dump()
        data.update(changes)
        self._draft = ReviewDraft.model_validate(data)
        self._touch()

    def rate(self, category: str, value: float) -> None:
        """Set one category's raw score (0-10, in steps of 0.5).

        Raises
        ------
        InvalidScore
            For unknown categories, out-of-range or off-granularity values.
        """
        self._ensure_editable()
        if category not in self.scheme.category_keys:
            raise InvalidScore(category, value, reason="unknown-category")
        number = scoring.check_raw_score(category, value)
        if not (number * 2).is_integer():
            raise InvalidScore(category, value, reason="granularity")

        self._draft.scores = {**self._draft.scores, category: number}
        self._touch()

    def add_recommendation(self, description: str, **fields: Any) -> Recommendation:
        """Append a recommendation and return it."""
        self._ensure_editable()
        rec = Recommendation(description=description, **fields)
        self._draft.recommendations = [*self._draft.recommendations, rec]
        self._touch()
        return rec

    def add_issue(self, description: str, **fields: Any) -> ReviewIssue:
        """Append an identified issue and return it."""
        self._ensure_editable()
        issue = ReviewIssue(description=description, **fields)
        self._draft.issues = [*self._draft.issues, issue]
        self._touch()
        return issue

    def attach(self, reference: str) -> None:
        """Attach an opaque attachment reference; the bytes live elsewhere."""
        self._ensure_editable()
        if not reference.strip():
            raise ValueError("attachment reference must not be blank")
        self._draft.attachments = [*self._draft.attachments, reference]
        self._touch()

    # ----------------------------- Transitions ------------------------------

    def advance(self) -> int:
        """Move to the next step if the current step's gate passes.

        Returns
        -------
        int
            The new current step.

        Raises
        ------
        InvalidTransition
            At the last step.
        ValidationBlocked
            If the current step's gate reports failures.
        """
        self._ensure_editable()
        step = self._draft.current_step
        if step >= self.total_steps:
            raise InvalidTransition("advance", step, "last step reached; call submit()")

        outcome = self.check_step(step)
        if outcome.is_err():
            failures = outcome.unwrap_err()
            logger.warning(
                "advance blocked on %s step %d: %d failure(s)", self._draft.id, step, len(failures)
            )
            raise ValidationBlocked(failures, step=step)

        self._draft.current_step = step + 1
        self._touch()
        logger.debug("%s advanced %d -> %d", self._draft.id, step, step + 1)
        return step + 1

    def retreat(self) -> int:
        """Move back one step. Never validated."""
        self._ensure_editable()
        step = self._draft.current_step
        if step <= 1:
            raise InvalidTransition("retreat", step, "already at the first step")

        self._draft.current_step = step - 1
        self._touch()
        logger.debug("%s retreated %d -> %d", self._draft.id, step, step - 1)
        return step - 1

    def save_draft(self) -> str:
        """Persist the draft as-is (valid or not) and return its id."""
        self._ensure_editable()
        self._draft.status = DraftStatus.DRAFT
        draft_id = self._store.save(self._draft)
        self._tag = StepTag.CLEAN
        self._phase = WorkflowPhase.DRAFT_SAVED
        logger.info("draft %s saved at step %d", draft_id, self._draft.current_step)
        return draft_id

    def submit(self) -> ScoredReview:
        """Validate every step, score, persist and lock the workflow.

        Raises
        ------
        ValidationBlocked
            Carrying the failures of every unsatisfied step.
        """
        self._ensure_editable()
        failures = gate.validate_all(self._draft, self.scheme)
        if failures:
            logger.warning("submit blocked on %s: %d failure(s)", self._draft.id, len(failures))
            raise ValidationBlocked(failures)

        now = datetime.now(UTC)
        result = scoring.score(self.scheme, self._draft.scores)
        scored = ScoredReview.from_draft(self._draft, result, submitted_at=now)

        locked = self._draft.model_copy(update={"status": DraftStatus.SUBMITTED, "updated_at": now})
        self._store.save(scored)
        self._store.save(locked)

        self._draft = locked
        self._result = scored
        self._tag = StepTag.CLEAN
        self._phase = WorkflowPhase.SUBMITTED
        logger.info(
            "review %s submitted: %.2f (%s)",
            scored.id,
            scored.overall_score,
            scored.score_label.value,
        )
        return scored

    # ------------------------------- Helpers --------------------------------

    def _ensure_editable(self) -> None:
        if self._phase is WorkflowPhase.SUBMITTED:
            raise WorkflowAlreadySubmitted(self._draft.id)

    def _touch(self) -> None:
        self._draft.updated_at = datetime.now(UTC)
        self._tag = StepTag.DIRTY
        self._phase = WorkflowPhase.EDITING


__all__ = ["ReviewWorkflow", "WorkflowState", "WorkflowPhase", "StepTag"]
