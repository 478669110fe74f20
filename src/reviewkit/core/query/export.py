"""CSV export of a record list (typically a query's full filtered set).

Cells are rendered as follows: ``None`` becomes an empty string, enums
their value, dates ISO-8601, lists of plain values are joined with ``"; "``
and nested mappings are written as compact JSON.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any

from .engine import field_value

DEFAULT_EXPORT_COLUMNS: tuple[str, ...] = (
    "id",
    "project_id",
    "review_type",
    "project_stage",
    "reviewer_name",
    "review_date",
    "priority",
    "status",
    "overall_score",
    "score_label",
)


def render_cell(value: Any) -> str:
    """Render one value as a CSV or table cell."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, date):
        return value.isoformat()
    if hasattr(value, "model_dump"):
        value = value.model_dump(mode="json")
    if isinstance(value, Mapping):
        return json.dumps(value, ensure_ascii=False, sort_keys=True, default=str)
    if isinstance(value, list | tuple):
        if any(isinstance(v, Mapping) or hasattr(v, "model_dump") for v in value):
            return json.dumps(
                [v.model_dump(mode="json") if hasattr(v, "model_dump") else v for v in value],
                ensure_ascii=False,
                default=str,
            )
        return "; ".join(render_cell(v) for v in value)
    return str(value)


def export_csv(records: Iterable[Any], columns: Sequence[str] = DEFAULT_EXPORT_COLUMNS) -> str:
    """Return ``records`` as CSV text with a header row of ``columns``."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(columns)
    for record in records:
        writer.writerow([render_cell(field_value(record, name)) for name in columns])
    return buffer.getvalue()


def write_csv(
    records: Iterable[Any],
    path: str | Path,
    columns: Sequence[str] = DEFAULT_EXPORT_COLUMNS,
) -> Path:
    """Write :func:`export_csv` output to ``path`` (parents created) and return it."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(export_csv(records, columns), encoding="utf-8")
    return target


__all__ = ["DEFAULT_EXPORT_COLUMNS", "export_csv", "render_cell", "write_csv"]
