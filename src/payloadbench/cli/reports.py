"""Commands over the report store: aggregate and list."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from payloadbench.cli.display import (
    console,
    err_console,
    format_error,
    show_report_listing,
    show_summary,
)
from payloadbench.config import load_settings
from payloadbench.exceptions import AggregationError, ConfigError
from payloadbench.results.aggregation import aggregate_reports
from payloadbench.results.repository import ReportStore

ReportsDirOption = Annotated[
    Path | None,
    typer.Option("--reports-dir", "-o", help="Directory holding trial reports"),
]


def _store(reports_dir: Path | None) -> ReportStore:
    settings = load_settings(require_credentials=False, reports_dir=reports_dir)
    return ReportStore(settings.reports_dir)


def aggregate_cmd(reports_dir: ReportsDirOption = None) -> None:
    """Aggregate all stored trial reports into an overall comparison summary."""
    try:
        result = aggregate_reports(_store(reports_dir))
    except (ConfigError, AggregationError) as e:
        err_console.print(format_error(e))
        raise typer.Exit(code=1) from None

    if result.skipped:
        console.print(f"[yellow]Skipped {len(result.skipped)} unparseable report(s)[/yellow]")
    show_summary(result.summary)
    console.print(f"[green]Summary report saved:[/green] {result.markdown_path}")
    console.print(f"[green]Summary data saved:[/green] {result.json_path}")


def list_cmd(reports_dir: ReportsDirOption = None) -> None:
    """List stored trial reports."""
    try:
        store = _store(reports_dir)
    except ConfigError as e:
        err_console.print(format_error(e))
        raise typer.Exit(code=1) from None
    reports = store.list_trial_reports()
    if not reports:
        console.print(f"[dim]No trial reports in {store.base_path}[/dim]")
        return
    show_report_listing([(path, store.has_snapshot(path)) for path in reports])


__all__ = ["aggregate_cmd", "list_cmd"]
