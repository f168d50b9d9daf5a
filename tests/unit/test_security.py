"""Tests for security utilities."""

import pytest

from payloadbench.exceptions import ConfigError
from payloadbench.security import filename_safe_timestamp, is_safe_path


class TestIsSafePath:
    """Tests for is_safe_path function."""

    def test_path_within_base(self, tmp_path):
        target = tmp_path / "subdir" / "file.txt"
        assert is_safe_path(tmp_path, target) is True

    def test_path_outside_base(self, tmp_path):
        target = tmp_path.parent / "other_dir" / "file.txt"
        assert is_safe_path(tmp_path, target) is False

    def test_path_traversal_attempt(self, tmp_path):
        target = tmp_path / ".." / ".." / "etc" / "passwd"
        assert is_safe_path(tmp_path, target) is False

    def test_sibling_with_common_prefix(self, tmp_path):
        base = tmp_path / "reports"
        assert is_safe_path(base, tmp_path / "reports_malicious" / "x.md") is False


class TestFilenameSafeTimestamp:
    """Tests for filename_safe_timestamp function."""

    def test_colons_and_periods_replaced(self):
        assert filename_safe_timestamp("2025-01-01T10:00:00.000Z") == "2025-01-01T10-00-00-000Z"

    def test_empty_raises(self):
        with pytest.raises(ConfigError, match="cannot be empty"):
            filename_safe_timestamp("")

    @pytest.mark.parametrize("timestamp", ["../x", "a/b", "a\\b"])
    def test_path_separators_rejected(self, timestamp):
        with pytest.raises(ConfigError, match="Invalid timestamp"):
            filename_safe_timestamp(timestamp)
