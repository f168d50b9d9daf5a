"""Metrics domain models for payloadbench."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from payloadbench.domain.formats import FORMAT_ORDER, FormatVariant


class FormatMetrics(BaseModel):
    """One format's measurement for one trial."""

    model_config = ConfigDict(frozen=True)

    format: FormatVariant = Field(..., description="Format variant measured")
    conversion_ms: float = Field(
        ..., ge=0.0, allow_inf_nan=False, description="Payload preparation time (ms)"
    )
    preflight_token_count: int = Field(
        ..., ge=0, description="Tokens counted before submission (count-tokens call)"
    )
    response_prompt_token_count: int | None = Field(
        default=None, ge=0, description="Prompt tokens reported with the response"
    )
    response_total_token_count: int | None = Field(
        default=None, ge=0, description="Prompt + output tokens reported with the response"
    )
    api_latency_ms: float = Field(
        ..., ge=0.0, allow_inf_nan=False, description="Generation call latency (ms)"
    )
    response_text_excerpt: str = Field(default="", description="Truncated response text")
    raw_response: Any = Field(
        default=None,
        exclude=True,
        description="Full raw response, persisted separately for audit",
    )


class PairDelta(BaseModel):
    """Comparison statistics for one baseline/comparison pair.

    Sign conventions are fixed per field, independent of operand order:

    - ``token_savings``: baseline tokens - comparison tokens (positive = comparison
      used fewer input tokens)
    - ``token_savings_percent``: token_savings / baseline tokens * 100, or 0 when the
      baseline counted no tokens
    - ``api_latency_delta_ms``: baseline latency - comparison latency (positive =
      comparison answered faster)
    - ``conversion_overhead_ms``: comparison prep time - baseline prep time
      (positive = comparison costs more preparation time)
    """

    model_config = ConfigDict(frozen=True)

    baseline: FormatVariant
    comparison: FormatVariant
    token_savings: int | float = Field(
        ..., description="Baseline minus comparison pre-flight tokens (mean when averaged)"
    )
    token_savings_percent: float = Field(..., description="Savings as % of baseline tokens")
    api_latency_delta_ms: float = Field(..., description="Baseline minus comparison latency")
    conversion_overhead_ms: float = Field(
        ..., description="Comparison minus baseline conversion time"
    )

    @property
    def token_winner(self) -> FormatVariant | None:
        """Format that sent fewer input tokens, None on a tie."""
        if self.token_savings > 0:
            return self.comparison
        if self.token_savings < 0:
            return self.baseline
        return None

    @property
    def latency_winner(self) -> FormatVariant | None:
        """Format that answered faster, None on a tie."""
        if self.api_latency_delta_ms > 0:
            return self.comparison
        if self.api_latency_delta_ms < 0:
            return self.baseline
        return None


class TrialSummary(BaseModel):
    """One full benchmark run across every format variant."""

    model: str
    dataset_path: str
    timestamp: str = Field(..., description="ISO-8601 run timestamp (identity and sort key)")
    formats: list[FormatMetrics]
    deltas: dict[str, PairDelta] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _one_entry_per_format(self) -> TrialSummary:
        seen = [m.format for m in self.formats]
        if len(seen) != len(FORMAT_ORDER) or set(seen) != set(FORMAT_ORDER):
            raise ValueError(
                f"Expected exactly one metrics entry per format {[f.value for f in FORMAT_ORDER]}, "
                f"got {[f.value for f in seen]}"
            )
        # Canonical order regardless of input order
        by_format = {m.format: m for m in self.formats}
        self.formats = [by_format[f] for f in FORMAT_ORDER]
        return self

    def metrics_for(self, variant: FormatVariant) -> FormatMetrics:
        """Return the metrics entry for a format."""
        for metrics in self.formats:
            if metrics.format == variant:
                return metrics
        raise KeyError(variant)


class AverageFormatMetrics(BaseModel):
    """Arithmetic means of one format's metrics across trials.

    Token counts missing from a trial contribute 0.
    """

    format: FormatVariant
    preflight_token_count: float = 0.0
    response_prompt_token_count: float = 0.0
    response_total_token_count: float = 0.0
    conversion_ms: float = 0.0
    api_latency_ms: float = 0.0


class DateRange(BaseModel):
    """Earliest and latest trial timestamps."""

    earliest: str
    latest: str


class AggregatedSummary(BaseModel):
    """Statistics reduced from N trial summaries."""

    total_runs: int = Field(..., ge=1)
    model: str
    date_range: DateRange
    average_metrics: dict[FormatVariant, AverageFormatMetrics]
    average_deltas: dict[str, PairDelta]
    fastest_format: FormatVariant


__all__ = [
    "AggregatedSummary",
    "AverageFormatMetrics",
    "DateRange",
    "FormatMetrics",
    "PairDelta",
    "TrialSummary",
]
