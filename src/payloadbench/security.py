"""Path safety helpers for the report store."""

import re
from pathlib import Path

from payloadbench.exceptions import ConfigError

_UNSAFE_TIMESTAMP_CHARS = re.compile(r"[:.]")


def is_safe_path(base_dir: Path, target_path: Path) -> bool:
    """Check if target_path is within base_dir (prevent path traversal).

    Uses Path.is_relative_to() so /foo/bar vs /foo/bar_malicious is handled
    correctly, unlike a string prefix check.

    Args:
        base_dir: The allowed base directory.
        target_path: The path to check.

    Returns:
        True if target_path is within base_dir.
    """
    try:
        base_resolved = base_dir.resolve()
        target_resolved = target_path.resolve()
        return target_resolved.is_relative_to(base_resolved)
    except (OSError, ValueError):
        return False


def filename_safe_timestamp(timestamp: str) -> str:
    """Replace characters that are unsafe in file names (colons, periods).

    Raises:
        ConfigError: If the timestamp is empty or contains path separators.
    """
    if not timestamp:
        raise ConfigError("Timestamp cannot be empty")
    if "/" in timestamp or "\\" in timestamp:
        raise ConfigError(f"Invalid timestamp for file naming: {timestamp!r}")
    return _UNSAFE_TIMESTAMP_CHARS.sub("-", timestamp)
