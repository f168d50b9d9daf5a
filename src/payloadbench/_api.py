"""Public library API: run a benchmark series or aggregate stored reports."""

from __future__ import annotations

import asyncio
from pathlib import Path

from payloadbench.config import BenchSettings, SeriesOptions, load_settings
from payloadbench.core.gemini import GeminiModelClient
from payloadbench.exceptions import ConfigError
from payloadbench.orchestration import SeriesResult, TrialRunner, run_series
from payloadbench.protocols import ModelClient, NotationEncoder
from payloadbench.results.aggregation import AggregationResult, aggregate_reports
from payloadbench.results.repository import ReportStore


def create_client(settings: BenchSettings) -> ModelClient:
    """Build the Gemini client for resolved settings.

    Raises:
        ConfigError: If no API key is configured.
    """
    if settings.api_key is None:
        raise ConfigError("Missing GEMINI_API_KEY environment variable.")
    return GeminiModelClient(api_key=settings.api_key.get_secret_value())


def run_benchmark(
    settings: BenchSettings | None = None,
    options: SeriesOptions | None = None,
    client: ModelClient | None = None,
    encoder: NotationEncoder | None = None,
) -> SeriesResult:
    """Run a benchmark series and persist every trial.

    Args:
        settings: Resolved settings. Loaded from the environment when None.
        options: Repeat count and inter-trial delay. One trial when None.
        client: Model client. A Gemini client is built from ``settings``
            when None.
        encoder: Compact-notation encoder override.

    Returns:
        SeriesResult with every trial, the saved paths and, for more than
        one trial, the averages.

    Raises:
        ConfigError: Missing credentials or unreadable dataset.
        ModelClientError: Any API call failed; the series stops.
    """
    if settings is None:
        settings = load_settings(require_credentials=client is None)
    if client is None:
        client = create_client(settings)

    runner = TrialRunner(client=client, settings=settings, encoder=encoder)
    store = ReportStore(settings.reports_dir)
    return asyncio.run(run_series(runner, store, options or SeriesOptions()))


def aggregate(reports_dir: Path | str | None = None) -> AggregationResult:
    """Aggregate every stored trial report and write the summary.

    Raises:
        AggregationError: No stored trial could be loaded.
    """
    settings = load_settings(
        require_credentials=False,
        reports_dir=Path(reports_dir) if reports_dir is not None else None,
    )
    return aggregate_reports(ReportStore(settings.reports_dir))
