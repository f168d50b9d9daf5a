"""Benchmark dataset loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from payloadbench.exceptions import ConfigError

__all__ = ["load_dataset"]


def load_dataset(path: Path | str) -> Any:
    """Load the JSON-compatible dataset the benchmark serializes.

    ``.json`` files are parsed as JSON; ``.yaml``/``.yml`` files with
    ``yaml.safe_load`` (which yields the same JSON-compatible types).

    Raises:
        ConfigError: If the file is missing, has an unsupported extension or
            cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Dataset file not found: {path}")
    try:
        content = path.read_text(encoding="utf-8")
        if path.suffix in (".yaml", ".yml"):
            return yaml.safe_load(content)
        if path.suffix == ".json":
            return json.loads(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Parse error in {path}: {e}") from e
    raise ConfigError(f"Unsupported dataset format '{path.suffix}': use .json or .yaml")
