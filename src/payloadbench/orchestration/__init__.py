"""Trial and series orchestration."""

from payloadbench.orchestration.series import SeriesResult, run_series
from payloadbench.orchestration.trial import (
    TrialRunner,
    build_contents,
    get_excerpt,
    utc_timestamp,
)

__all__ = [
    "SeriesResult",
    "TrialRunner",
    "build_contents",
    "get_excerpt",
    "run_series",
    "utc_timestamp",
]
