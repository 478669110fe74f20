# scripts/smoke.py
"""
Smoke test script for the review workflow.

Walks one review through every wizard step against an in-memory store (or a
JSON file store with --store-dir), submits it, then runs the review log
query and the dashboard over the result.

Usage
-----
1. In-memory run with the default scheme:
    $ uv run python scripts/smoke.py

2. Persist to disk with a stage template:
    $ uv run python scripts/smoke.py --scheme dd-review --store-dir artifacts/smoke
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from reviewkit.core.analytics.dashboard import aggregate, load_scored
from reviewkit.core.contracts.query import QuerySpec
from reviewkit.core.errors import ReviewEngineError
from reviewkit.core.query.engine import review_log_engine
from reviewkit.core.scoring.schemes import get_scheme
from reviewkit.core.store.base import RecordStore
from reviewkit.core.store.memory import InMemoryRecordStore
from reviewkit.core.store.storage import JsonFileStore
from reviewkit.core.workflow.machine import ReviewWorkflow

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

# --------------------------------------------------------------------------- #
# Test Data
# --------------------------------------------------------------------------- #
RATINGS = {
    "design_feasibility": 8.0,
    "coordination_clarity": 6.5,
    "code_compliance": 9.0,
    "cost_schedule_impact": 7.0,
    "constructability_risk": 6.0,
    "bim_review_quality": 8.5,
}


def run(scheme_id: str, store: RecordStore) -> None:
    """Drive one review from step 1 to submit and print what came out."""
    scheme = get_scheme(scheme_id)
    wf = ReviewWorkflow(scheme, role="project-manager", store=store)

    # Step 1: basics
    wf.update(reviewer_name="Dana Whitfield", project_id="P-1001", project_stage="Schematic Design")
    wf.advance()

    # Step 2: scope
    wf.update(
        review_scope="Structural and MEP coordination, levels 1-4",
        review_objectives=["Confirm slab penetrations", "Check crane reach"],
    )
    wf.save_draft()
    wf.advance()

    # Step 3: scoring
    for key, value in RATINGS.items():
        wf.rate(key, value)
    print(f"  preview: {wf.preview_score().overall_score:.2f}")
    wf.advance()

    # Step 4: comments
    wf.update(comments="Coordination is mostly resolved; two clashes remain.")
    wf.add_recommendation("Add sleeve schedule to S-201", priority="high")
    wf.advance()

    # Step 5: issues, step 6: settings
    wf.add_issue("Duct clashes with beam at grid C/4", severity="high", location="Level 2")
    wf.advance()
    wf.update(requires_follow_up=True)

    scored = wf.submit()
    print(f"\n✅ Submitted {scored.id}: {scored.overall_score:.2f} ({scored.score_label.value})")

    records = load_scored(store)
    page = review_log_engine().query(records, QuerySpec(term="dana", sort_field="review_date"))
    print(f"🔎 Review log: {page.total_count} match(es) for 'dana'")

    metrics = aggregate(records)
    print(f"📊 Dashboard: {metrics.completed_count}/{metrics.total_count} completed")
    print(f"   average score {metrics.average_score:.2f}")


def main() -> None:
    """Execute the smoke test workflow."""
    parser = argparse.ArgumentParser(description="Run reviewkit smoke test")
    parser.add_argument("--scheme", "-s", default="default", help="Scoring scheme id")
    parser.add_argument("--store-dir", type=str, help="Persist to a JSON file store here")
    args = parser.parse_args()

    store: RecordStore
    if args.store_dir:
        store = JsonFileStore(Path(args.store_dir))
        print(f"\n📂 Using JSON store: {args.store_dir}")
    else:
        store = InMemoryRecordStore()
        print("\n📝 Using in-memory store (no --store-dir provided)")

    try:
        run(args.scheme, store)
    except (ReviewEngineError, KeyError) as exc:
        print(f"\n❌ Smoke run failed: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
