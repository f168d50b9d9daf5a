"""Domain models for payloadbench."""

from payloadbench.domain.formats import (
    COMPARISON_PAIRS,
    FORMAT_ORDER,
    ComparisonPair,
    FormatVariant,
)
from payloadbench.domain.metrics import (
    AggregatedSummary,
    AverageFormatMetrics,
    DateRange,
    FormatMetrics,
    PairDelta,
    TrialSummary,
)

__all__ = [
    "COMPARISON_PAIRS",
    "FORMAT_ORDER",
    "AggregatedSummary",
    "AverageFormatMetrics",
    "ComparisonPair",
    "DateRange",
    "FormatMetrics",
    "FormatVariant",
    "PairDelta",
    "TrialSummary",
]
