"""Report store: flat directory of trial reports, snapshots and raw responses."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from payloadbench.constants import (
    DEFAULT_REPORTS_DIR,
    RAW_RESPONSE_SUFFIX,
    SNAPSHOT_SUFFIX,
    SUMMARY_REPORT_STEM,
    TRIAL_REPORT_PREFIX,
    TRIAL_REPORT_SUFFIX,
)
from payloadbench.core.gemini import SERIALIZE_ERROR
from payloadbench.domain import AggregatedSummary, TrialSummary
from payloadbench.exceptions import ConfigError, ReportParseError
from payloadbench.results.persistence import _atomic_write
from payloadbench.results.report_writer import render_trial_report
from payloadbench.security import filename_safe_timestamp, is_safe_path


@dataclass
class SavedTrial:
    """Paths written for one trial."""

    report_path: Path
    snapshot_path: Path
    raw_response_paths: list[Path] = field(default_factory=list)


def _dump_raw_response(raw: object) -> str:
    try:
        return json.dumps(raw, indent=2, ensure_ascii=False) + "\n"
    except (TypeError, ValueError) as e:
        logger.warning(f"Raw response is not JSON-serializable: {e}")
        placeholder = {"error": SERIALIZE_ERROR, "message": str(e)}
        return json.dumps(placeholder, indent=2) + "\n"


class ReportStore:
    """File system store for benchmark reports.

    Directory structure:
        reports/
        ├── benchmark-2025-01-01T10-00-00-000Z.md
        ├── benchmark-2025-01-01T10-00-00-000Z.json
        ├── benchmark-2025-01-01T10-00-00-000Z-json-response.json
        ├── benchmark-2025-01-01T10-00-00-000Z-toon-response.json
        ├── benchmark-2025-01-01T10-00-00-000Z-markdown-response.json
        ├── OVERALL_COMPARISON_SUMMARY.md
        └── OVERALL_COMPARISON_SUMMARY.json

    Only ``benchmark-*.md`` files are discovered as trial reports.
    """

    def __init__(self, base_path: Path | None = None):
        """Initialize store.

        Args:
            base_path: Reports directory. Defaults to 'reports/'.
        """
        self._base = Path(base_path) if base_path is not None else DEFAULT_REPORTS_DIR

    @property
    def base_path(self) -> Path:
        return self._base

    def _checked(self, path: Path) -> Path:
        if not is_safe_path(self._base, path):
            raise ConfigError(f"Invalid report path: {path}")
        return path

    @staticmethod
    def base_name(timestamp: str) -> str:
        """File stem for a trial, e.g. ``benchmark-2025-01-01T10-00-00-000Z``."""
        return f"{TRIAL_REPORT_PREFIX}{filename_safe_timestamp(timestamp)}"

    def save_trial(self, summary: TrialSummary) -> SavedTrial:
        """Write the Markdown report, structured snapshot and raw responses.

        Args:
            summary: Completed trial.

        Returns:
            SavedTrial with every written path.
        """
        self._base.mkdir(parents=True, exist_ok=True)
        base = self.base_name(summary.timestamp)

        report_path = self._checked(self._base / f"{base}{TRIAL_REPORT_SUFFIX}")
        _atomic_write(render_trial_report(summary), report_path)
        logger.info(f"Markdown report saved to {report_path}")

        snapshot_path = self._checked(self._base / f"{base}{SNAPSHOT_SUFFIX}")
        _atomic_write(summary.model_dump_json(indent=2), snapshot_path)
        logger.debug(f"Snapshot saved to {snapshot_path}")

        saved = SavedTrial(report_path=report_path, snapshot_path=snapshot_path)
        for metrics in summary.formats:
            raw_path = self._checked(
                self._base / f"{base}-{metrics.format.slug}{RAW_RESPONSE_SUFFIX}"
            )
            _atomic_write(_dump_raw_response(metrics.raw_response), raw_path)
            logger.info(f"Raw {metrics.format.value} response saved to {raw_path}")
            saved.raw_response_paths.append(raw_path)
        return saved

    def list_trial_reports(self) -> list[Path]:
        """List trial report files sorted by name (and thereby by timestamp)."""
        if not self._base.exists():
            return []
        return sorted(
            p
            for p in self._base.glob(f"{TRIAL_REPORT_PREFIX}*{TRIAL_REPORT_SUFFIX}")
            if p.is_file()
        )

    @staticmethod
    def snapshot_path_for(report_path: Path) -> Path:
        return report_path.with_suffix(SNAPSHOT_SUFFIX)

    def has_snapshot(self, report_path: Path) -> bool:
        return self.snapshot_path_for(report_path).is_file()

    def load_snapshot(self, report_path: Path) -> TrialSummary | None:
        """Load the structured snapshot next to a trial report.

        Returns:
            TrialSummary if a snapshot exists, None otherwise.

        Raises:
            ReportParseError: If the snapshot exists but is invalid.
        """
        path = self.snapshot_path_for(report_path)
        if not path.is_file():
            return None
        try:
            return TrialSummary.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            raise ReportParseError(f"Invalid snapshot {path.name}: {e}") from e

    def save_summary(self, summary: AggregatedSummary, markdown: str) -> tuple[Path, Path]:
        """Write the aggregate Markdown and JSON, replacing previous ones.

        Returns:
            (markdown_path, json_path)
        """
        self._base.mkdir(parents=True, exist_ok=True)
        md_path = self._checked(self._base / f"{SUMMARY_REPORT_STEM}{TRIAL_REPORT_SUFFIX}")
        json_path = self._checked(self._base / f"{SUMMARY_REPORT_STEM}{SNAPSHOT_SUFFIX}")
        _atomic_write(markdown, md_path)
        _atomic_write(summary.model_dump_json(indent=2), json_path)
        return md_path, json_path


__all__ = ["ReportStore", "SavedTrial"]
