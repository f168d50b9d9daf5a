"""Sequential series of trials with a fixed delay between them."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from loguru import logger

from payloadbench.config import SeriesOptions
from payloadbench.domain import AggregatedSummary, TrialSummary
from payloadbench.orchestration.trial import TrialRunner
from payloadbench.results.aggregation import summarize_trials
from payloadbench.results.report_writer import format_ms
from payloadbench.results.repository import ReportStore, SavedTrial

TrialCallback = Callable[[int, TrialSummary, SavedTrial], None]


@dataclass
class SeriesResult:
    """Outcome of a completed series."""

    trials: list[TrialSummary] = field(default_factory=list)
    saved: list[SavedTrial] = field(default_factory=list)
    average: AggregatedSummary | None = None


async def run_series(
    runner: TrialRunner,
    store: ReportStore,
    options: SeriesOptions,
    on_trial: TrialCallback | None = None,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> SeriesResult:
    """Run ``options.repeat`` trials one after another, persisting each.

    Trials never overlap. A failed trial propagates immediately and ends the
    series; trials already saved stay in the store.

    Args:
        runner: Trial runner (owns the rate limiter).
        store: Where each trial's reports are written.
        options: Repeat count and inter-trial delay.
        on_trial: Called with (index, trial, saved paths) after each trial.
        sleep: Awaitable sleep in seconds, injectable for tests.

    Returns:
        SeriesResult; ``average`` is set when more than one trial ran.
    """
    result = SeriesResult()
    logger.info(
        f"Planned runs: {options.repeat}. Delay between runs: {format_ms(options.delay_ms)}."
    )

    for index in range(options.repeat):
        logger.info(f"=== Benchmark run {index + 1} of {options.repeat} ===")
        trial = await runner.run_once()
        saved = store.save_trial(trial)
        result.trials.append(trial)
        result.saved.append(saved)
        if on_trial is not None:
            on_trial(index, trial, saved)

        if index < options.repeat - 1:
            logger.info(
                f"Waiting {format_ms(options.delay_ms)} before next run to respect rate limits..."
            )
            await sleep(options.delay_ms / 1000)

    if len(result.trials) > 1:
        result.average = summarize_trials(result.trials)
    return result


__all__ = ["SeriesResult", "TrialCallback", "run_series"]
