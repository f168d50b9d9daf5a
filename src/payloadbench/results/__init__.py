"""Results: deltas, report rendering/parsing, storage and aggregation."""

from payloadbench.results.aggregation import (
    AggregationResult,
    aggregate_reports,
    load_trial_records,
    summarize_trials,
)
from payloadbench.results.deltas import compute_deltas, compute_pair_delta
from payloadbench.results.report_reader import parse_markdown_report, read_markdown_report
from payloadbench.results.report_writer import (
    format_ms,
    render_summary_report,
    render_trial_report,
)
from payloadbench.results.repository import ReportStore, SavedTrial

__all__ = [
    "AggregationResult",
    "ReportStore",
    "SavedTrial",
    "aggregate_reports",
    "compute_deltas",
    "compute_pair_delta",
    "format_ms",
    "load_trial_records",
    "parse_markdown_report",
    "read_markdown_report",
    "render_summary_report",
    "render_trial_report",
    "summarize_trials",
]
