"""payloadbench run: run one or more benchmark trials against the model API."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from payloadbench._api import create_client
from payloadbench.cli.display import console, err_console, format_error, show_summary, show_trial
from payloadbench.config import load_settings, parse_series_options
from payloadbench.core.rate_limit import RateLimiter
from payloadbench.domain import TrialSummary
from payloadbench.exceptions import ConfigError, ModelClientError
from payloadbench.orchestration import TrialRunner, run_series
from payloadbench.results.repository import ReportStore, SavedTrial


def _on_trial(index: int, trial: TrialSummary, saved: SavedTrial) -> None:
    show_trial(trial)
    console.print(f"[green]Report saved:[/green] {saved.report_path}")


def run_cmd(
    repeat: Annotated[
        str | None,
        typer.Option("--repeat", "-r", help="Number of trials to run (default 1)"),
    ] = None,
    delay_ms: Annotated[
        str | None,
        typer.Option(
            "--delay-ms", "--delayMs", help="Delay between trials in milliseconds (default 20000)"
        ),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option("--model", "-m", help="Model name (overrides GEMINI_MODEL)"),
    ] = None,
    dataset: Annotated[
        Path | None,
        typer.Option("--dataset", "-d", help="Dataset file (.json or .yaml)"),
    ] = None,
    reports_dir: Annotated[
        Path | None,
        typer.Option("--reports-dir", "-o", help="Directory for reports"),
    ] = None,
) -> None:
    """Run benchmark trials comparing JSON, TOON and Markdown payloads."""
    try:
        settings = load_settings(
            require_credentials=True,
            model=model,
            dataset_path=dataset,
            reports_dir=reports_dir,
        )
        options = parse_series_options(repeat, delay_ms)
        runner = TrialRunner(
            client=create_client(settings),
            settings=settings,
            limiter=RateLimiter(settings.request_cooldown_ms),
        )
        store = ReportStore(settings.reports_dir)
        result = asyncio.run(run_series(runner, store, options, on_trial=_on_trial))
    except (ConfigError, ModelClientError) as e:
        err_console.print(format_error(e))
        raise typer.Exit(code=1) from None

    if result.average is not None:
        show_summary(result.average, title=f"Averages over {len(result.trials)} runs")


__all__ = ["run_cmd"]
