"""Tests for trial and summary Markdown rendering."""

from __future__ import annotations

from payloadbench.results.aggregation import summarize_trials
from payloadbench.results.report_writer import (
    NO_EXCERPT,
    format_count,
    format_excerpt,
    format_ms,
    render_summary_report,
    render_trial_report,
)
from tests.fakes import make_trial


class TestFormatting:
    """Tests for value formatting helpers."""

    def test_format_ms_has_one_decimal(self) -> None:
        assert format_ms(7533) == "7533.0ms"
        assert format_ms(1.25) == "1.2ms"
        assert format_ms(-0.44) == "-0.4ms"

    def test_format_count(self) -> None:
        assert format_count(1404) == "1,404"
        assert format_count(None) == "n/a"

    def test_format_excerpt(self) -> None:
        assert format_excerpt("") == NO_EXCERPT
        assert format_excerpt("Trends are up") == "> Trends are up"
        assert format_excerpt("```md\n- a\n```") == "```md\n- a\n```"


class TestTrialReport:
    """Tests for the trial report layout."""

    def test_header_metadata(self) -> None:
        text = render_trial_report(make_trial())
        assert text.startswith("# Gemini Benchmark Report\n")
        assert "- **Model used:** gemini-2.0-flash\n" in text
        assert "- **Dataset:** data/mock-analysis.json\n" in text
        assert "- **Run timestamp:** 2025-01-01T10:00:00.000Z\n" in text

    def test_section_order(self) -> None:
        text = render_trial_report(make_trial())
        headings = [line for line in text.splitlines() if line.startswith("## ")]
        assert headings == [
            "## Executive Summary",
            "## Detailed Metrics",
            "## Comparison Deltas",
            "## Response Highlights",
            "## Metric Definitions",
        ]

    def test_metrics_table(self) -> None:
        text = render_trial_report(make_trial())
        assert (
            "Format | Input tokens sent | Prompt tokens in response | "
            "Total tokens in response | Data prep time | Gemini response time\n"
            "--- | --- | --- | --- | --- | ---\n"
            "JSON | 1,404 | 1,390 | 1,800 | 0.5ms | 7533.0ms\n"
            "TOON | 1,004 | 1,390 | 1,800 | 1.8ms | 6712.0ms\n"
            "MARKDOWN | 1,200 | 1,390 | 1,800 | 2.4ms | 7100.0ms\n"
        ) in text

    def test_missing_response_tokens_render_as_na(self) -> None:
        text = render_trial_report(make_trial(response_tokens=(None, None)))
        assert "JSON | 1,404 | n/a | n/a | 0.5ms | 7533.0ms" in text

    def test_executive_summary_names_winners(self) -> None:
        text = render_trial_report(make_trial())
        assert "- TOON vs JSON: TOON reduced input tokens by 400 (28.5%) compared with JSON." in text
        assert (
            "- TOON vs JSON: TOON responses arrived approximately 821.0ms faster than JSON."
            in text
        )
        assert (
            "- MARKDOWN vs TOON: TOON reduced input tokens by 196 (19.5%) compared with MARKDOWN."
            in text
        )
        assert (
            "- MARKDOWN vs TOON: TOON responses arrived approximately 388.0ms faster than MARKDOWN."
            in text
        )

    def test_signed_overhead_lines(self) -> None:
        text = render_trial_report(make_trial(conversions=(2.0, 1.5, 2.4)))
        assert "- TOON conversion overhead: -0.5ms\n" in text
        assert "- MARKDOWN conversion overhead: 0.4ms\n" in text

    def test_ties_in_summary(self) -> None:
        trial = make_trial(tokens=(10, 10, 10), latencies=(100.0, 100.4, 100.0))
        text = render_trial_report(trial)
        assert "TOON vs JSON: both formats used the same number of input tokens." in text
        assert "TOON vs JSON: both formats returned responses in roughly the same time." in text

    def test_delta_section(self) -> None:
        text = render_trial_report(make_trial())
        assert (
            "### TOON vs JSON\n"
            "- **Token savings:** 400 tokens (28.49%)\n"
            "- **API latency delta (JSON - TOON):** 821.0ms\n"
            "- **Conversion overhead (TOON - JSON):** 1.3ms\n"
        ) in text

    def test_excerpts(self) -> None:
        text = render_trial_report(make_trial())
        assert "### JSON input\n> JSON answer\n" in text
        assert "### MARKDOWN input\n> MARKDOWN answer\n" in text


class TestSummaryReport:
    """Tests for the aggregate report layout."""

    def test_summary_content(self) -> None:
        trials = [
            make_trial(timestamp="2025-01-02T10:00:00.000Z"),
            make_trial(timestamp="2025-01-01T10:00:00.000Z"),
        ]
        text = render_summary_report(summarize_trials(trials))

        assert text.startswith("# Overall Comparison Summary\n")
        assert "- **Total Benchmark Runs:** 2\n" in text
        assert "- **Model Used:** gemini-2.0-flash\n" in text
        assert (
            "- **Date Range:** 2025-01-01T10:00:00.000Z to 2025-01-02T10:00:00.000Z\n" in text
        )
        assert "- **Fastest Format (avg API latency):** TOON\n" in text
        assert "- **TOON vs JSON:** TOON saved 400 tokens (28.49%)" in text
        assert "- **MARKDOWN vs TOON:** TOON saved 196 tokens (19.52%)" in text
        assert "JSON | 1,404 | 1,390 | 1,800 | 0.5ms | 7533.0ms" in text
        assert "## Key Insights" in text
        assert "1. **Token Efficiency:** TOON provides the best token savings" in text
        assert "2. **API Latency:** TOON has the fastest average API response time at 6712.0ms." in text
        assert "3. **Conversion Overhead:** TOON has lower conversion overhead (1.3ms)." in text

    def test_summary_has_no_run_specific_timestamp(self) -> None:
        summary = summarize_trials([make_trial()])
        assert render_summary_report(summary) == render_summary_report(summary)
