"""payloadbench -- token and latency benchmark for LLM payload serializations.

Public API:
    run_benchmark, aggregate, BenchSettings, SeriesOptions,
    TrialSummary, AggregatedSummary, FormatVariant, __version__
"""

from payloadbench._api import aggregate, run_benchmark
from payloadbench.config import BenchSettings, SeriesOptions
from payloadbench.domain import AggregatedSummary, FormatVariant, TrialSummary

__version__: str = "1.0.0"

__all__ = [
    "AggregatedSummary",
    "BenchSettings",
    "FormatVariant",
    "SeriesOptions",
    "TrialSummary",
    "__version__",
    "aggregate",
    "run_benchmark",
]
