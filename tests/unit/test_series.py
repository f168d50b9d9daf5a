"""Tests for running a series of trials."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator

import pytest

from payloadbench.config import BenchSettings, SeriesOptions
from payloadbench.domain import TrialSummary
from payloadbench.exceptions import ModelClientError
from payloadbench.orchestration.series import run_series
from payloadbench.orchestration.trial import TrialRunner
from payloadbench.results.repository import ReportStore, SavedTrial
from tests.fakes import FakeClock, FakeDatasetLoader, FakeModelClient, fake_encoder


def _timestamps() -> Iterator[str]:
    for second in range(60):
        yield f"2025-01-01T10:00:{second:02d}.000Z"


def _runner(client: FakeModelClient, settings: BenchSettings, data: dict) -> TrialRunner:
    stamps = _timestamps()
    return TrialRunner(
        client,
        settings,
        encoder=fake_encoder,
        dataset_loader=FakeDatasetLoader(data),
        now=lambda: next(stamps),
    )


class TestRunSeries:
    """Tests for sequential trial execution."""

    def test_single_run_has_no_average(
        self, settings: BenchSettings, store: ReportStore, sample_data: dict
    ) -> None:
        clock = FakeClock()
        result = asyncio.run(
            run_series(
                _runner(FakeModelClient(), settings, sample_data),
                store,
                SeriesOptions(repeat=1, delay_ms=5000),
                sleep=clock.sleep,
            )
        )

        assert len(result.trials) == 1
        assert result.average is None
        assert clock.sleeps == []
        assert len(store.list_trial_reports()) == 1

    def test_repeat_sleeps_between_runs(
        self, settings: BenchSettings, store: ReportStore, sample_data: dict
    ) -> None:
        clock = FakeClock()
        result = asyncio.run(
            run_series(
                _runner(FakeModelClient(), settings, sample_data),
                store,
                SeriesOptions(repeat=3, delay_ms=1500),
                sleep=clock.sleep,
            )
        )

        assert len(result.trials) == 3
        assert clock.sleeps == [1.5, 1.5]
        assert [t.timestamp for t in result.trials] == [
            "2025-01-01T10:00:00.000Z",
            "2025-01-01T10:00:01.000Z",
            "2025-01-01T10:00:02.000Z",
        ]
        assert len(store.list_trial_reports()) == 3

    def test_average_when_more_than_one_run(
        self, settings: BenchSettings, store: ReportStore, sample_data: dict
    ) -> None:
        clock = FakeClock()
        client = FakeModelClient(token_counts={"JSON": 300, "TOON": 200, "MARKDOWN": 250})
        result = asyncio.run(
            run_series(
                _runner(client, settings, sample_data),
                store,
                SeriesOptions(repeat=2, delay_ms=0),
                sleep=clock.sleep,
            )
        )

        assert result.average is not None
        assert result.average.total_runs == 2
        assert result.average.average_deltas["toon_vs_json"].token_savings == 100

    def test_on_trial_callback(
        self, settings: BenchSettings, store: ReportStore, sample_data: dict
    ) -> None:
        seen: list[tuple[int, str, str]] = []

        def on_trial(index: int, trial: TrialSummary, saved: SavedTrial) -> None:
            seen.append((index, trial.timestamp, saved.report_path.name))

        clock = FakeClock()
        asyncio.run(
            run_series(
                _runner(FakeModelClient(), settings, sample_data),
                store,
                SeriesOptions(repeat=2, delay_ms=0),
                on_trial=on_trial,
                sleep=clock.sleep,
            )
        )

        assert seen == [
            (0, "2025-01-01T10:00:00.000Z", "benchmark-2025-01-01T10-00-00-000Z.md"),
            (1, "2025-01-01T10:00:01.000Z", "benchmark-2025-01-01T10-00-01-000Z.md"),
        ]

    def test_failure_stops_series(
        self, settings: BenchSettings, store: ReportStore, sample_data: dict
    ) -> None:
        clock = FakeClock()
        client = FakeModelClient(fail_on=("generate_content", "TOON"))

        with pytest.raises(ModelClientError):
            asyncio.run(
                run_series(
                    _runner(client, settings, sample_data),
                    store,
                    SeriesOptions(repeat=3, delay_ms=1000),
                    sleep=clock.sleep,
                )
            )

        assert store.list_trial_reports() == []
        assert clock.sleeps == []

    def test_logs_progress(
        self,
        settings: BenchSettings,
        store: ReportStore,
        sample_data: dict,
        log_messages: list[tuple[str, str]],
    ) -> None:
        clock = FakeClock()
        asyncio.run(
            run_series(
                _runner(FakeModelClient(), settings, sample_data),
                store,
                SeriesOptions(repeat=2, delay_ms=20000),
                sleep=clock.sleep,
            )
        )

        messages = [message for _, message in log_messages]
        assert "Planned runs: 2. Delay between runs: 20000.0ms." in messages
        assert "=== Benchmark run 2 of 2 ===" in messages
