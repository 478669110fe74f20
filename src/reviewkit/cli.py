# src/reviewkit/cli.py
"""
reviewkit Command Line Interface (CLI).

A thin developer surface over the engine, built with `typer` and `rich`.
Every command reads its input from files or options and prints tables;
nothing here holds state between runs.

Commands
--------
- ``schemes``   List the built-in scoring schemes and their category weights.
- ``score``     Score raw category ratings against a scheme.
- ``query``     Search, filter, sort and page a JSON file of review records.
- ``dashboard`` Aggregate a JSON file of scored reviews into metrics.

Usage
-----
    $ reviewkit schemes
    $ reviewkit score sd-review -r design_feasibility=8 -r coordination_clarity=7
    $ reviewkit query artifacts/store/scored_reviews.json --term tower --sort review_date --desc
    $ reviewkit dashboard artifacts/store/scored_reviews.json --from 2024-01-01 -g reviewer_name

Engine errors (bad scores, bad query requests) are printed in red and the
command exits with code 1.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from reviewkit.core.analytics.dashboard import DEFAULT_GROUP_DIMENSIONS, aggregate
from reviewkit.core.contracts.metrics import DashboardMetrics, TimeWindow
from reviewkit.core.contracts.query import QuerySpec
from reviewkit.core.errors import ReviewEngineError
from reviewkit.core.query.engine import ListQueryEngine, review_log_engine
from reviewkit.core.query.export import DEFAULT_EXPORT_COLUMNS, render_cell, write_csv
from reviewkit.core.scoring.model import score as score_ratings
from reviewkit.core.scoring.schemes import get_scheme, list_schemes
from reviewkit.core.settings import load_settings

# Pick up REVIEWKIT_* and LOG_LEVEL from a local .env before settings load
load_dotenv()

app = typer.Typer(
    help="reviewkit: score, query and summarize constructability reviews.",
    rich_markup_mode="markdown",
)
console = Console()


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _fail(label: str, exc: Exception) -> typer.Exit:
    """Print an engine error in red and return the exit to raise."""
    console.print(f"[bold red]{label}:[/bold red] {exc}")
    return typer.Exit(code=1)


def _pairs(values: list[str] | None, option: str) -> dict[str, str]:
    """Parse repeated ``key=value`` options into a dict."""
    parsed: dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"expected key=value, got '{item}'", param_hint=option)
        parsed[key.strip()] = value.strip()
    return parsed


def _load_records(path: Path) -> list[dict[str, Any]]:
    """
    Read review records from a JSON file.

    Accepts either a list of records or the ``{id: record}`` document that
    :class:`~reviewkit.core.store.storage.JsonFileStore` writes.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        return list(data.values())
    if isinstance(data, list):
        return data
    raise typer.BadParameter("expected a JSON list or object of records", param_hint="RECORDS_JSON")


def _render_metrics(metrics: DashboardMetrics) -> None:
    summary = Table(title="Dashboard", show_header=False)
    summary.add_column("metric", style="bold")
    summary.add_column("value", justify="right")
    summary.add_row("total", str(metrics.total_count))
    summary.add_row("completed", str(metrics.completed_count))
    summary.add_row("completion rate", f"{metrics.completion_rate:.0%}")
    summary.add_row("average score", f"{metrics.average_score:.2f}")
    summary.add_row("trend", f"{metrics.trend_pct:+.1f}%")
    summary.add_row("reviews / month", f"{metrics.review_frequency:.2f}")
    summary.add_row("issues / review", f"{metrics.issues_per_review:.2f}")
    summary.add_row("recommendations / review", f"{metrics.recommendations_per_review:.2f}")
    for status, count in metrics.status_counts.items():
        summary.add_row(f"status: {status}", str(count))
    for stage, count in metrics.stage_counts.items():
        summary.add_row(f"stage: {stage}", str(count))
    console.print(summary)

    for dimension, groups in metrics.groups.items():
        table = Table(title=f"By {dimension}")
        table.add_column(dimension)
        table.add_column("count", justify="right")
        table.add_column("average", justify="right")
        for group in groups:
            table.add_row(group.group_key, str(group.count), f"{group.average_score:.2f}")
        console.print(table)

    for scheme_id, categories in metrics.category_distribution.items():
        table = Table(title=f"Categories ({scheme_id})")
        table.add_column("category")
        table.add_column("mean score", justify="right")
        for key, mean in categories.items():
            table.add_row(key, f"{mean:.2f}")
        console.print(table)


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def schemes() -> None:
    """List the built-in scoring schemes."""
    for scheme in list_schemes():
        table = Table(title=f"{scheme.name} [dim]({scheme.id})[/dim]")
        table.add_column("category")
        table.add_column("weight", justify="right")
        table.add_column("description", style="dim")
        for category in scheme.categories:
            table.add_row(category.key, f"{category.weight:g}%", category.description)
        console.print(table)


@app.command()  # type: ignore[misc]
def score(
    scheme_id: Annotated[str, typer.Argument(help="Scheme id (see `reviewkit schemes`).")],
    rating: Annotated[
        list[str] | None,
        typer.Option("--rating", "-r", help="Raw rating as category=value (0-10). Repeatable."),
    ] = None,
) -> None:
    """Score raw category ratings against a scheme."""
    try:
        scheme = get_scheme(scheme_id)
    except KeyError as e:
        raise _fail("Unknown scheme", e) from e

    raw: dict[str, Any] = {}
    for key, value in _pairs(rating, "--rating").items():
        try:
            raw[key] = float(value)
        except ValueError as e:
            raise typer.BadParameter(f"'{value}' is not a number", param_hint="--rating") from e

    try:
        result = score_ratings(scheme, raw)
    except ReviewEngineError as e:
        raise _fail("Scoring error", e) from e

    table = Table(title=scheme.name)
    table.add_column("category")
    table.add_column("score", justify="right")
    table.add_column("weight", justify="right")
    table.add_column("weighted", justify="right")
    for row in result.breakdown:
        table.add_row(row.key, f"{row.score:g}", f"{row.weight:g}%", f"{row.weighted_score:.2f}")
    console.print(table)
    console.print(
        Panel.fit(
            f"[bold]{result.overall_score:.2f}[/bold] / 10  ({result.label.value})",
            title="Overall",
            border_style="green",
        )
    )


@app.command()  # type: ignore[misc]
def query(
    records_json: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="JSON file of records."),
    ],
    term: Annotated[str, typer.Option("--term", "-t", help="Free-text search term.")] = "",
    filter_: Annotated[
        list[str] | None,
        typer.Option("--filter", "-f", help="Equality filter field=value. Repeatable."),
    ] = None,
    sort: Annotated[str | None, typer.Option("--sort", "-s", help="Sort field.")] = None,
    desc: Annotated[bool, typer.Option("--desc", help="Sort descending.")] = False,
    page: Annotated[int, typer.Option("--page", "-p", help="1-based page index.")] = 1,
    page_size: Annotated[
        int | None, typer.Option("--page-size", help="Records per page (default from settings).")
    ] = None,
    search_field: Annotated[
        list[str] | None,
        typer.Option("--search-field", help="Override the searchable fields. Repeatable."),
    ] = None,
    csv_path: Annotated[
        Path | None,
        typer.Option("--csv", help="Also write every matching record (all pages) to CSV."),
    ] = None,
) -> None:
    """Search, filter, sort and page a JSON file of review records."""
    records = _load_records(records_json)
    engine = (
        ListQueryEngine(search_field, date_fields=review_log_engine().date_fields)
        if search_field
        else review_log_engine()
    )
    spec = QuerySpec(
        term=term,
        filters=_pairs(filter_, "--filter"),
        sort_field=sort,
        sort_direction="desc" if desc else "asc",
        page_size=page_size if page_size is not None else load_settings().default_page_size,
        page_index=page,
    )

    try:
        result = engine.query(records, spec)
        matching = engine.matching(records, spec) if csv_path else []
    except ReviewEngineError as e:
        raise _fail("Query error", e) from e

    title = f"Page {result.page_index}/{result.total_pages} ({result.total_count} matching)"
    table = Table(title=title)
    for column in DEFAULT_EXPORT_COLUMNS:
        table.add_column(column)
    for record in result.page:
        table.add_row(*(render_cell(record.get(column)) for column in DEFAULT_EXPORT_COLUMNS))
    console.print(table)

    if csv_path:
        written = write_csv(matching, csv_path)
        console.print(f"[dim]Exported {len(matching)} record(s) to: {written}[/dim]")


@app.command()  # type: ignore[misc]
def dashboard(
    records_json: Annotated[
        Path,
        typer.Argument(
            exists=True, dir_okay=False, readable=True, help="JSON file of scored reviews."
        ),
    ],
    start: Annotated[
        datetime | None,
        typer.Option("--from", formats=["%Y-%m-%d"], help="First review date (inclusive)."),
    ] = None,
    end: Annotated[
        datetime | None,
        typer.Option("--to", formats=["%Y-%m-%d"], help="Last review date (inclusive)."),
    ] = None,
    group_by: Annotated[
        list[str] | None,
        typer.Option("--group-by", "-g", help="Group dimension. Repeatable."),
    ] = None,
) -> None:
    """Aggregate scored reviews into dashboard metrics."""
    records = _load_records(records_json)
    try:
        window = (
            TimeWindow(
                start=start.date() if start else None,
                end=end.date() if end else None,
            )
            if start or end
            else None
        )
    except ValueError as e:
        raise _fail("Invalid window", e) from e

    try:
        metrics = aggregate(records, window, group_by or DEFAULT_GROUP_DIMENSIONS)
    except ReviewEngineError as e:
        raise _fail("Aggregation error", e) from e

    _render_metrics(metrics)


if __name__ == "__main__":
    app()
