"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from loguru import logger

from payloadbench.config import BenchSettings
from payloadbench.results.repository import ReportStore


@pytest.fixture
def log_messages():
    """Capture loguru messages (all levels) emitted during a test."""
    records: list[tuple[str, str]] = []
    handler_id = logger.add(
        lambda message: records.append(
            (message.record["level"].name, message.record["message"])
        ),
        level="DEBUG",
    )
    yield records
    logger.remove(handler_id)


@pytest.fixture
def reports_dir(tmp_path: Path) -> Path:
    path = tmp_path / "reports"
    path.mkdir()
    return path


@pytest.fixture
def store(reports_dir: Path) -> ReportStore:
    return ReportStore(reports_dir)


@pytest.fixture
def settings(tmp_path: Path, reports_dir: Path) -> BenchSettings:
    """Settings with no cooldown, pointing at temporary paths."""
    return BenchSettings(
        api_key="test-key",
        dataset_path=tmp_path / "dataset.json",
        reports_dir=reports_dir,
        request_cooldown_ms=0,
    )


@pytest.fixture
def sample_data() -> dict:
    return {
        "reportId": "r-1",
        "channels": [
            {"channel": "Search", "spend": 100.5, "clicks": 20},
            {"channel": "Email", "spend": 12.0},
        ],
        "risks": ["CPA rising"],
        "experimentsInFlight": [],
    }
