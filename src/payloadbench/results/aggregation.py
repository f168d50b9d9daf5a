"""Aggregation of stored trial reports into summary statistics.

Each trial is loaded from its structured snapshot when one exists and
validates, otherwise from its Markdown report. Unusable trials are skipped
with a warning; averages are taken over the trials that loaded.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from payloadbench.domain import (
    COMPARISON_PAIRS,
    FORMAT_ORDER,
    AggregatedSummary,
    AverageFormatMetrics,
    DateRange,
    FormatVariant,
    PairDelta,
    TrialSummary,
)
from payloadbench.exceptions import AggregationError, ReportParseError
from payloadbench.results.deltas import compute_deltas
from payloadbench.results.report_reader import read_markdown_report
from payloadbench.results.report_writer import render_summary_report
from payloadbench.results.repository import ReportStore


@dataclass
class LoadedTrials:
    """Trials recovered from the store, plus the files that were skipped."""

    trials: list[TrialSummary] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)


@dataclass
class AggregationResult:
    summary: AggregatedSummary
    markdown_path: Path
    json_path: Path
    skipped: list[Path] = field(default_factory=list)


def _average_deltas(trials: Sequence[TrialSummary]) -> dict[str, PairDelta]:
    count = len(trials)
    averages: dict[str, PairDelta] = {}
    for pair in COMPARISON_PAIRS:
        deltas = [trial.deltas[pair.key] for trial in trials]
        averages[pair.key] = PairDelta(
            baseline=pair.baseline,
            comparison=pair.comparison,
            token_savings=sum(d.token_savings for d in deltas) / count,
            token_savings_percent=sum(d.token_savings_percent for d in deltas) / count,
            api_latency_delta_ms=sum(d.api_latency_delta_ms for d in deltas) / count,
            conversion_overhead_ms=sum(d.conversion_overhead_ms for d in deltas) / count,
        )
    return averages


def _average_metrics(
    trials: Sequence[TrialSummary],
) -> dict[FormatVariant, AverageFormatMetrics]:
    count = len(trials)
    averages: dict[FormatVariant, AverageFormatMetrics] = {}
    for variant in FORMAT_ORDER:
        entries = [trial.metrics_for(variant) for trial in trials]
        averages[variant] = AverageFormatMetrics(
            format=variant,
            preflight_token_count=sum(m.preflight_token_count for m in entries) / count,
            response_prompt_token_count=sum(m.response_prompt_token_count or 0 for m in entries)
            / count,
            response_total_token_count=sum(m.response_total_token_count or 0 for m in entries)
            / count,
            conversion_ms=sum(m.conversion_ms for m in entries) / count,
            api_latency_ms=sum(m.api_latency_ms for m in entries) / count,
        )
    return averages


def summarize_trials(trials: Sequence[TrialSummary]) -> AggregatedSummary:
    """Reduce trial records into per-format and per-pair averages.

    Args:
        trials: Trials to average; each must carry a delta for every pair.

    Returns:
        AggregatedSummary. The fastest format is the one with the lowest
        average latency; ties go to the earliest format in enumeration order.

    Raises:
        AggregationError: If ``trials`` is empty.
    """
    if not trials:
        raise AggregationError("No valid reports found to aggregate")

    for trial in trials:
        missing = [pair.key for pair in COMPARISON_PAIRS if pair.key not in trial.deltas]
        if missing:
            raise AggregationError(f"Trial {trial.timestamp} has no deltas for {missing}")

    average_metrics = _average_metrics(trials)
    timestamps = sorted(trial.timestamp for trial in trials)
    fastest = min(FORMAT_ORDER, key=lambda variant: average_metrics[variant].api_latency_ms)

    return AggregatedSummary(
        total_runs=len(trials),
        model=trials[0].model,
        date_range=DateRange(earliest=timestamps[0], latest=timestamps[-1]),
        average_metrics=average_metrics,
        average_deltas=_average_deltas(trials),
        fastest_format=fastest,
    )


def load_trial_records(store: ReportStore) -> LoadedTrials:
    """Load every stored trial, preferring snapshots over Markdown parsing."""
    loaded = LoadedTrials()
    for report_path in store.list_trial_reports():
        try:
            snapshot = store.load_snapshot(report_path)
        except ReportParseError as e:
            logger.warning(f"{e}; falling back to Markdown report {report_path.name}")
            snapshot = None

        if snapshot is not None:
            trial = snapshot.model_copy(update={"deltas": compute_deltas(snapshot.formats)})
        else:
            trial = read_markdown_report(report_path)

        if trial is None:
            loaded.skipped.append(report_path)
            continue
        logger.debug(f"Loaded {report_path.name}")
        loaded.trials.append(trial)

    logger.info(
        f"Loaded {len(loaded.trials)} trial report(s), skipped {len(loaded.skipped)}"
    )
    return loaded


def aggregate_reports(store: ReportStore) -> AggregationResult:
    """Aggregate every stored trial and write the summary report.

    Raises:
        AggregationError: If no stored trial could be loaded.
    """
    loaded = load_trial_records(store)
    if not loaded.trials:
        raise AggregationError(f"No valid reports found to aggregate in {store.base_path}")

    summary = summarize_trials(loaded.trials)
    markdown_path, json_path = store.save_summary(summary, render_summary_report(summary))
    logger.info(f"Summary report saved to {markdown_path}")
    return AggregationResult(
        summary=summary,
        markdown_path=markdown_path,
        json_path=json_path,
        skipped=loaded.skipped,
    )


__all__ = [
    "AggregationResult",
    "LoadedTrials",
    "aggregate_reports",
    "load_trial_records",
    "summarize_trials",
]
