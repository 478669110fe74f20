"""Tests for the review wizard state machine."""

from __future__ import annotations

from typing import Any

import pytest

from reviewkit.core.contracts.review import (
    DraftStatus,
    ReviewDraft,
    ReviewStatus,
    ScoredReview,
)
from reviewkit.core.contracts.score import ScoreLabel
from reviewkit.core.contracts.validation import ReasonCode
from reviewkit.core.errors import (
    InvalidScore,
    InvalidTransition,
    PermissionDenied,
    ValidationBlocked,
    WorkflowAlreadySubmitted,
)
from reviewkit.core.scoring.schemes import DEFAULT_SCHEME, SCHEMATIC_DESIGN
from reviewkit.core.store.base import Record
from reviewkit.core.store.memory import InMemoryRecordStore
from reviewkit.core.workflow.machine import ReviewWorkflow, StepTag, WorkflowPhase


class FlakyStore(InMemoryRecordStore):
    """In-memory store whose next save of a scored review can be made to fail."""

    __slots__ = ("fail_scored",)

    def __init__(self) -> None:
        super().__init__()
        self.fail_scored = True

    def save(self, record: Record, *, collection: str | None = None) -> str:
        if isinstance(record, ScoredReview) and self.fail_scored:
            raise RuntimeError("store offline")
        return super().save(record, collection=collection)


def _workflow(store: Any = None) -> ReviewWorkflow:
    return ReviewWorkflow(SCHEMATIC_DESIGN, role="project-manager", store=store)


def _complete(wf: ReviewWorkflow) -> None:
    """Fill every required field of the default step layout."""
    wf.update(
        reviewer_name="Dana Whitfield",
        review_scope="MEP coordination",
        review_objectives=["Check slab penetrations"],
        comments="Two clashes remain.",
    )
    wf.rate("design_feasibility", 8)
    wf.rate("coordination_clarity", 6)
    wf.add_recommendation("Add sleeve schedule", priority="high")


def _walk_to_last_step(wf: ReviewWorkflow) -> None:
    while wf.current_step < wf.total_steps:
        wf.advance()


# ------------------------------ Construction --------------------------------


def test_role_is_checked_at_construction() -> None:
    """Roles outside the allow-list are rejected before any state exists."""
    with pytest.raises(PermissionDenied) as info:
        ReviewWorkflow(DEFAULT_SCHEME, role="viewer")
    assert info.value.role == "viewer"

    wf = ReviewWorkflow(DEFAULT_SCHEME, role="viewer", allowed_roles={"viewer"})
    assert wf.role == "viewer"


def test_new_draft_is_prefilled_from_scheme() -> None:
    """A fresh workflow starts clean at step 1 with the scheme's type and stage."""
    wf = _workflow()

    assert wf.state.step == 1
    assert wf.state.tag is StepTag.CLEAN
    assert wf.state.phase is WorkflowPhase.EDITING
    assert wf.draft.review_type == "Schematic Design Review"
    assert wf.draft.project_stage == "Schematic Design"
    assert wf.draft.reviewer_role == "project-manager"


# ------------------------------ Transitions ---------------------------------


def test_advance_is_gated_on_reviewer_name() -> None:
    """Step 1 rejects an empty reviewer name, then advances once it is set."""
    wf = _workflow()

    assert wf.can_advance() is False
    with pytest.raises(ValidationBlocked) as info:
        wf.advance()
    assert [(f.field, f.reason) for f in info.value.failures] == [
        ("reviewer_name", ReasonCode.REQUIRED)
    ]
    assert info.value.step == 1
    assert wf.current_step == 1

    wf.update(reviewer_name="Dana Whitfield")
    assert wf.can_advance() is True
    assert wf.advance() == 2


def test_check_step_returns_result() -> None:
    """`check_step` reports the gate outcome without raising."""
    wf = _workflow()

    outcome = wf.check_step()
    assert outcome.is_err()
    assert outcome.unwrap_err()[0].field == "reviewer_name"

    wf.update(reviewer_name="Dana")
    assert wf.check_step().unwrap() == 1


def test_retreat_is_never_validated() -> None:
    """Moving back ignores the gate but stops at step 1."""
    wf = _workflow()
    with pytest.raises(InvalidTransition):
        wf.retreat()

    wf.update(reviewer_name="Dana")
    wf.advance()
    wf.update(reviewer_name="")
    assert wf.retreat() == 1


def test_advance_past_last_step_is_rejected() -> None:
    """At the last step the only way forward is submit."""
    wf = _workflow()
    _complete(wf)
    _walk_to_last_step(wf)

    assert wf.current_step == 6
    assert wf.can_advance() is False
    with pytest.raises(InvalidTransition) as info:
        wf.advance()
    assert info.value.action == "advance"


# --------------------------------- Edits ------------------------------------


def test_rate_checks_range_granularity_and_category() -> None:
    """Ratings must be 0-10 in half steps, for a scheme category."""
    wf = _workflow()

    wf.rate("code_compliance", 7.5)
    assert wf.draft.scores == {"code_compliance": 7.5}

    with pytest.raises(InvalidScore) as too_high:
        wf.rate("code_compliance", 10.5)
    assert too_high.value.reason == "out-of-range"

    with pytest.raises(InvalidScore) as off_step:
        wf.rate("code_compliance", 7.3)
    assert off_step.value.reason == "granularity"

    with pytest.raises(InvalidScore) as unknown:
        wf.rate("aesthetics", 5)
    assert unknown.value.reason == "unknown-category"


def test_update_rejects_unknown_and_managed_fields() -> None:
    """Only content fields may be edited through `update`."""
    wf = _workflow()

    with pytest.raises(ValueError):
        wf.update(colour="blue")
    with pytest.raises(ValueError):
        wf.update(current_step=4)
    with pytest.raises(ValueError):
        wf.update(scores={"code_compliance": 3})
    with pytest.raises(ValueError):
        wf.update(priority="whenever")
    assert wf.state.tag is StepTag.CLEAN


def test_dirty_and_clean_tags() -> None:
    """Edits mark the state dirty; saving cleans it; editing again reopens it."""
    wf = _workflow()

    wf.update(reviewer_name="Dana")
    assert wf.state.tag is StepTag.DIRTY

    wf.save_draft()
    assert wf.state.tag is StepTag.CLEAN
    assert wf.state.phase is WorkflowPhase.DRAFT_SAVED

    wf.attach("blob://drawings/A-101.pdf")
    assert wf.state.tag is StepTag.DIRTY
    assert wf.state.phase is WorkflowPhase.EDITING
    assert wf.draft.attachments == ["blob://drawings/A-101.pdf"]


def test_draft_property_is_a_copy() -> None:
    """Mutating the returned draft does not reach the workflow."""
    wf = _workflow()
    detached = wf.draft
    detached.tags.append("leaked")
    detached.reviewer_name = "Mallory"

    assert wf.draft.tags == []
    assert wf.draft.reviewer_name == ""


# ------------------------------ Save / submit -------------------------------


def test_save_draft_is_unvalidated_and_idempotent() -> None:
    """An incomplete draft saves, and saving twice keeps one record."""
    store = InMemoryRecordStore()
    wf = _workflow(store)

    first = wf.save_draft()
    second = wf.save_draft()

    assert first == second == wf.draft.id
    docs = store.load_all("review_drafts")
    assert len(docs) == 1
    assert docs[0]["status"] == "draft"
    assert docs[0]["current_step"] == 1


def test_submit_reports_every_failing_step() -> None:
    """Submit validates all steps and reports them together."""
    wf = _workflow()

    with pytest.raises(ValidationBlocked) as info:
        wf.submit()

    assert {f.step for f in info.value.failures} == {1, 2, 3, 4}
    assert info.value.step is None
    assert not wf.submitted


def test_submit_scores_persists_and_locks() -> None:
    """A complete draft is scored, stored, and the workflow becomes read-only."""
    store = InMemoryRecordStore()
    wf = _workflow(store)
    _complete(wf)
    _walk_to_last_step(wf)

    scored = wf.submit()

    # (8 * 25 + 6 * 20) / 100
    assert scored.overall_score == pytest.approx(3.2)
    assert scored.score_label is ScoreLabel.POOR
    assert scored.status is ReviewStatus.COMPLETED
    assert scored.id == wf.draft.id
    assert wf.result == scored
    assert wf.state.phase is WorkflowPhase.SUBMITTED
    assert wf.draft.status is DraftStatus.SUBMITTED

    [stored] = store.load_all("scored_reviews")
    assert stored["overall_score"] == pytest.approx(3.2)
    assert stored["category_contributions"]["design_feasibility"] == pytest.approx(2.0)
    [draft_doc] = store.load_all("review_drafts")
    assert draft_doc["status"] == "submitted"


def test_submit_is_one_way() -> None:
    """Every transition and edit after submit raises WorkflowAlreadySubmitted."""
    wf = _workflow()
    _complete(wf)
    _walk_to_last_step(wf)
    wf.submit()

    for action in (
        wf.advance,
        wf.retreat,
        wf.save_draft,
        wf.submit,
        lambda: wf.update(comments="late"),
        lambda: wf.rate("code_compliance", 5),
        lambda: wf.add_issue("late issue"),
        lambda: wf.add_recommendation("late rec"),
        lambda: wf.attach("late.pdf"),
    ):
        with pytest.raises(WorkflowAlreadySubmitted):
            action()
    assert wf.can_advance() is False


def test_store_failure_leaves_workflow_editable() -> None:
    """If persistence raises, submit can be retried."""
    store = FlakyStore()
    wf = _workflow(store)
    _complete(wf)
    _walk_to_last_step(wf)

    with pytest.raises(RuntimeError, match="store offline"):
        wf.submit()
    assert not wf.submitted
    assert wf.state.phase is WorkflowPhase.EDITING

    store.fail_scored = False
    scored = wf.submit()
    assert wf.submitted
    assert len(store.load_all("scored_reviews")) == 1
    assert scored.reviewer_name == "Dana Whitfield"


def test_preview_score_matches_submit() -> None:
    """The live preview uses the same formula as submit."""
    wf = _workflow()
    _complete(wf)
    preview = wf.preview_score()
    _walk_to_last_step(wf)

    assert wf.submit().overall_score == preview.overall_score


# -------------------------------- Resume ------------------------------------


def test_resume_saved_draft() -> None:
    """A stored draft can be reloaded and continued at its saved step."""
    store = InMemoryRecordStore()
    wf = _workflow(store)
    wf.update(reviewer_name="Dana")
    wf.advance()
    draft_id = wf.save_draft()

    [doc] = store.load_all("review_drafts")
    resumed = ReviewWorkflow(
        SCHEMATIC_DESIGN,
        role="admin",
        store=store,
        draft=ReviewDraft.model_validate(doc),
    )

    assert resumed.current_step == 2
    assert resumed.draft.id == draft_id
    assert resumed.state.tag is StepTag.CLEAN


def test_resume_rejects_submitted_or_foreign_drafts() -> None:
    """Submitted drafts and drafts of another scheme cannot be resumed."""
    submitted = ReviewDraft(scheme_id=SCHEMATIC_DESIGN.id, status=DraftStatus.SUBMITTED)
    with pytest.raises(WorkflowAlreadySubmitted):
        ReviewWorkflow(SCHEMATIC_DESIGN, role="admin", draft=submitted)

    foreign = ReviewDraft(scheme_id="cd-review")
    with pytest.raises(ValueError):
        ReviewWorkflow(SCHEMATIC_DESIGN, role="admin", draft=foreign)


def test_seeded_draft_starts_a_new_version() -> None:
    """Editing a submitted review goes through a seeded draft."""
    wf = _workflow()
    _complete(wf)
    _walk_to_last_step(wf)
    scored = wf.submit()

    again = ReviewWorkflow(
        SCHEMATIC_DESIGN, role="admin", draft=ReviewDraft.seed_from(scored)
    )

    assert again.draft.version == 2
    assert again.draft.parent_id == scored.id
    assert again.draft.id != scored.id
    assert again.current_step == 1
    assert again.draft.scores == scored.scores
