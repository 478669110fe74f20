"""Built-in scoring schemes for constructability reviews.

Three stage templates share the same six categories and differ only in
weighting; ``default`` uses the schematic-design weights without binding
a project stage.

| category              | default/sd | dd | cd |
|-----------------------|-----------:|---:|---:|
| design_feasibility    | 25         | 20 | 15 |
| coordination_clarity  | 20         | 25 | 20 |
| code_compliance       | 15         | 20 | 20 |
| cost_schedule_impact  | 20         | 15 | 20 |
| constructability_risk | 15         | 15 | 20 |
| bim_review_quality    |  5         |  5 |  5 |

Custom schemes can be loaded from JSON with :func:`load_scheme`; a file that
omits ``steps`` gets :data:`~reviewkit.core.workflow.steps.DEFAULT_STEPS`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from reviewkit.core.contracts.scheme import CategoryDefinition, ScoringScheme
from reviewkit.core.workflow.steps import DEFAULT_STEPS

_DESCRIPTIONS: dict[str, str] = {
    "design_feasibility": "Feasibility and practicality of the design approach",
    "coordination_clarity": "Clarity of design coordination and integration",
    "code_compliance": "Compliance with building codes and regulations",
    "cost_schedule_impact": "Impact on project cost and schedule",
    "constructability_risk": "Risk assessment for construction execution",
    "bim_review_quality": "Quality of BIM model and documentation",
}


def _categories(*weights: float) -> tuple[CategoryDefinition, ...]:
    """Zip ``weights`` onto the six standard categories, in table order."""
    return tuple(
        CategoryDefinition(key=key, weight=weight, description=desc)
        for (key, desc), weight in zip(_DESCRIPTIONS.items(), weights, strict=True)
    )


DEFAULT_SCHEME = ScoringScheme(
    id="default",
    name="Constructability Review",
    description="General constructability review with standard weighting",
    categories=_categories(25, 20, 15, 20, 15, 5),
    steps=DEFAULT_STEPS,
)

SCHEMATIC_DESIGN = ScoringScheme(
    id="sd-review",
    name="Schematic Design Review",
    description="Comprehensive review of schematic design for constructability",
    project_stage="Schematic Design",
    estimated_duration=6,
    categories=_categories(25, 20, 15, 20, 15, 5),
    steps=DEFAULT_STEPS,
)

DESIGN_DEVELOPMENT = ScoringScheme(
    id="dd-review",
    name="Design Development Review",
    description="Detailed review of design development documents",
    project_stage="Design Development",
    estimated_duration=8,
    categories=_categories(20, 25, 20, 15, 15, 5),
    steps=DEFAULT_STEPS,
)

CONSTRUCTION_DOCUMENTS = ScoringScheme(
    id="cd-review",
    name="Construction Documents Review",
    description="Final review of construction documents for buildability",
    project_stage="Construction Documents",
    estimated_duration=10,
    categories=_categories(15, 20, 20, 20, 20, 5),
    steps=DEFAULT_STEPS,
)

_BUILTIN: dict[str, ScoringScheme] = {
    s.id: s for s in (DEFAULT_SCHEME, SCHEMATIC_DESIGN, DESIGN_DEVELOPMENT, CONSTRUCTION_DOCUMENTS)
}


def list_schemes() -> list[ScoringScheme]:
    """Return the built-in schemes in a stable order."""
    return list(_BUILTIN.values())


def get_scheme(scheme_id: str) -> ScoringScheme:
    """Return a built-in scheme by id.

    Raises
    ------
    KeyError
        If no built-in scheme has that id.
    """
    try:
        return _BUILTIN[scheme_id]
    except KeyError:
        known = ", ".join(sorted(_BUILTIN))
        raise KeyError(f"Unknown scoring scheme '{scheme_id}' (known: {known})") from None


def load_scheme(path: Path) -> ScoringScheme:
    """Load a custom scheme from a JSON file."""
    with path.open("r", encoding="utf-8") as f:
        payload: dict[str, Any] = json.load(f)
    payload.setdefault("steps", [step.model_dump() for step in DEFAULT_STEPS])
    return ScoringScheme.model_validate(payload)


__all__ = [
    "DEFAULT_SCHEME",
    "SCHEMATIC_DESIGN",
    "DESIGN_DEVELOPMENT",
    "CONSTRUCTION_DOCUMENTS",
    "list_schemes",
    "get_scheme",
    "load_scheme",
]
