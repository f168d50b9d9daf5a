"""Rich console rendering for CLI output.

Result tables go to stdout; errors go to stderr.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from payloadbench.domain import (
    COMPARISON_PAIRS,
    AggregatedSummary,
    PairDelta,
    TrialSummary,
)
from payloadbench.exceptions import PayloadBenchError
from payloadbench.results.report_writer import format_count, format_ms

console = Console()
err_console = Console(stderr=True)


def format_error(error: PayloadBenchError | Exception) -> str:
    return f"[red]Error:[/red] {escape(str(error))}"


def _deltas_table(title: str, deltas: dict[str, PairDelta]) -> Table:
    table = Table(title=title)
    table.add_column("Pair", style="cyan")
    table.add_column("Token savings", justify="right")
    table.add_column("Savings %", justify="right")
    table.add_column("Latency delta", justify="right")
    table.add_column("Conversion overhead", justify="right")
    for pair in COMPARISON_PAIRS:
        delta = deltas.get(pair.key)
        if delta is None:
            continue
        table.add_row(
            pair.label,
            f"{delta.token_savings:,.1f}",
            f"{delta.token_savings_percent:.2f}%",
            f"{format_ms(delta.api_latency_delta_ms)} "
            f"({pair.baseline.value} - {pair.comparison.value})",
            f"{format_ms(delta.conversion_overhead_ms)} "
            f"({pair.comparison.value} - {pair.baseline.value})",
        )
    return table


def show_trial(trial: TrialSummary) -> None:
    """Print one trial's metrics, deltas and response excerpts."""
    console.print(f"\n[bold]Model:[/bold] {trial.model}")
    console.print(f"[bold]Dataset:[/bold] {trial.dataset_path}")

    table = Table(title=f"Trial {trial.timestamp}")
    table.add_column("Format", style="cyan")
    table.add_column("Input tokens", justify="right")
    table.add_column("Prompt tokens", justify="right")
    table.add_column("Total tokens", justify="right")
    table.add_column("Data prep", justify="right")
    table.add_column("Response time", justify="right")
    for m in trial.formats:
        table.add_row(
            m.format.value,
            format_count(m.preflight_token_count),
            format_count(m.response_prompt_token_count),
            format_count(m.response_total_token_count),
            format_ms(m.conversion_ms),
            format_ms(m.api_latency_ms),
        )
    console.print(table)
    console.print(_deltas_table("Comparison deltas", trial.deltas))

    for m in trial.formats:
        excerpt = "[dim]no response text[/dim]"
        if m.response_text_excerpt:
            excerpt = escape(m.response_text_excerpt)
        console.print(f"[bold]{m.format.value}:[/bold] {excerpt}", highlight=False)


def show_summary(summary: AggregatedSummary, title: str | None = None) -> None:
    """Print averages across runs."""
    table = Table(title=title or f"Averages over {summary.total_runs} runs")
    table.add_column("Format", style="cyan")
    table.add_column("Input tokens", justify="right")
    table.add_column("Prompt tokens", justify="right")
    table.add_column("Total tokens", justify="right")
    table.add_column("Data prep", justify="right")
    table.add_column("Response time", justify="right")
    for variant, avg in summary.average_metrics.items():
        style = "bold green" if variant == summary.fastest_format else None
        table.add_row(
            variant.value,
            f"{avg.preflight_token_count:,.1f}",
            f"{avg.response_prompt_token_count:,.1f}",
            f"{avg.response_total_token_count:,.1f}",
            format_ms(avg.conversion_ms),
            format_ms(avg.api_latency_ms),
            style=style,
        )
    console.print(table)
    console.print(_deltas_table("Average comparison deltas", summary.average_deltas))
    console.print(f"Fastest format (avg API latency): [bold]{summary.fastest_format.value}[/bold]")
    console.print(f"Date range: {summary.date_range.earliest} to {summary.date_range.latest}")


def show_report_listing(rows: list[tuple[Path, bool]]) -> None:
    """Print stored trial reports and whether each has a snapshot."""
    table = Table(title="Stored trial reports")
    table.add_column("Report", style="cyan")
    table.add_column("Snapshot", justify="center")
    for path, has_snapshot in rows:
        table.add_row(path.name, "[green]yes[/green]" if has_snapshot else "[dim]no[/dim]")
    console.print(table)


__all__ = [
    "console",
    "err_console",
    "format_error",
    "show_report_listing",
    "show_summary",
    "show_trial",
]
