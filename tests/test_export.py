"""Tests for CSV export of record lists."""

from __future__ import annotations

import csv
import io
from datetime import date
from pathlib import Path

from reviewkit.core.contracts.review import Recommendation, ReviewStatus
from reviewkit.core.query.export import DEFAULT_EXPORT_COLUMNS, export_csv, write_csv


def _rows(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


def test_header_uses_default_columns() -> None:
    """An empty list still yields the header row."""
    assert _rows(export_csv([])) == [list(DEFAULT_EXPORT_COLUMNS)]


def test_cells_are_rendered_plainly() -> None:
    """None is blank, enums and dates are plain, and commas are quoted."""
    record = {
        "id": "CR-1",
        "reviewer_name": "Lee, Ann",
        "review_date": date(2024, 3, 1),
        "status": ReviewStatus.COMPLETED,
        "overall_score": 7.2,
        "project_id": None,
        "tags": ["mep", "levels 1-4"],
    }
    columns = [
        "id",
        "reviewer_name",
        "review_date",
        "status",
        "overall_score",
        "project_id",
        "tags",
    ]
    rows = _rows(export_csv([record], columns))

    assert rows[1] == ["CR-1", "Lee, Ann", "2024-03-01", "completed", "7.2", "", "mep; levels 1-4"]


def test_nested_items_are_written_as_json() -> None:
    """Lists of models or mappings become a JSON array in one cell."""
    rec = Recommendation(id="REC-1", description="Add sleeves")
    [_, row] = _rows(export_csv([{"recommendations": [rec]}], ["recommendations"]))

    assert row[0].startswith('[{"id": "REC-1"')
    assert '"description": "Add sleeves"' in row[0]


def test_write_csv_creates_parent_dirs(tmp_path: Path) -> None:
    """`write_csv` writes UTF-8 text and returns the path."""
    target = tmp_path / "exports" / "log.csv"
    path = write_csv([{"id": "CR-1", "reviewer_name": "Zoë"}], target, ["id", "reviewer_name"])

    assert path == target
    assert path.read_text(encoding="utf-8") == "id,reviewer_name\nCR-1,Zoë\n"
