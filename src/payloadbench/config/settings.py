"""Runtime settings loading.

Settings come from the process environment (``.env`` is loaded by the CLI
before this module is used). A missing API credential is fatal before any
benchmark work begins.

Precedence (low → high):
  built-in defaults < env vars < CLI flags (applied by the caller)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, SecretStr, ValidationError

from payloadbench.constants import (
    API_KEY_ENV_VARS,
    COOLDOWN_ENV_VAR,
    DEFAULT_DATASET_PATH,
    DEFAULT_DELAY_MS,
    DEFAULT_EXCERPT_MAX_LENGTH,
    DEFAULT_MODEL,
    DEFAULT_REPEAT,
    DEFAULT_REPORTS_DIR,
    DEFAULT_REQUEST_COOLDOWN_MS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_P,
    MODEL_ENV_VAR,
)
from payloadbench.exceptions import ConfigError


class GenerationSettings(BaseModel):
    """Sampling parameters sent with every generation request."""

    model_config = {"extra": "forbid"}

    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    top_p: float = Field(default=DEFAULT_TOP_P, gt=0.0, le=1.0)

    def to_request_config(self) -> dict[str, Any]:
        return {"temperature": self.temperature, "top_p": self.top_p}


class BenchSettings(BaseModel):
    """Resolved settings for a benchmark run."""

    model_config = {"extra": "forbid"}

    api_key: SecretStr | None = Field(default=None, description="Model API credential")
    model: str = Field(default=DEFAULT_MODEL, min_length=1)
    dataset_path: Path = Field(default=DEFAULT_DATASET_PATH)
    reports_dir: Path = Field(default=DEFAULT_REPORTS_DIR)
    request_cooldown_ms: float = Field(
        default=DEFAULT_REQUEST_COOLDOWN_MS,
        ge=0.0,
        description="Minimum gap between consecutive outbound API calls",
    )
    excerpt_max_length: int = Field(default=DEFAULT_EXCERPT_MAX_LENGTH, ge=1)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)


class SeriesOptions(BaseModel):
    """How many trials to run and how long to wait between them."""

    repeat: int = Field(default=DEFAULT_REPEAT, ge=1)
    delay_ms: float = Field(default=DEFAULT_DELAY_MS, ge=0.0)


def _read_api_key() -> str | None:
    for env_key in API_KEY_ENV_VARS:
        if val := os.environ.get(env_key):
            return val
    return None


def load_settings(require_credentials: bool = True, **overrides: Any) -> BenchSettings:
    """Build settings from the environment.

    Args:
        require_credentials: Raise when no API key is configured.
        **overrides: Field values taking precedence over the environment
            (``None`` values are ignored).

    Returns:
        Resolved BenchSettings.

    Raises:
        ConfigError: If a value is invalid, or the credential is required but
            missing.
    """
    values: dict[str, Any] = {}
    if api_key := _read_api_key():
        values["api_key"] = api_key
    if model := os.environ.get(MODEL_ENV_VAR):
        values["model"] = model
    if cooldown := os.environ.get(COOLDOWN_ENV_VAR):
        values["request_cooldown_ms"] = cooldown
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        settings = BenchSettings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e

    if require_credentials and settings.api_key is None:
        raise ConfigError(f"Missing {API_KEY_ENV_VARS[0]} environment variable.")

    return settings


def _parse_number(raw: str | int | float | None, default: float) -> float:
    if raw is None:
        return default
    try:
        value = float(str(raw).strip())
    except ValueError:
        return default
    if value != value or value in (float("inf"), float("-inf")):
        return default
    return value


def parse_series_options(
    repeat: str | int | None = None,
    delay_ms: str | float | None = None,
) -> SeriesOptions:
    """Parse series switches, never failing.

    Malformed values fall back to the defaults; parsed values are clamped to
    ``repeat >= 1`` and ``delay_ms >= 0``.
    """
    parsed_repeat = int(_parse_number(repeat, DEFAULT_REPEAT))
    parsed_delay = _parse_number(delay_ms, DEFAULT_DELAY_MS)
    return SeriesOptions(repeat=max(1, parsed_repeat), delay_ms=max(0.0, parsed_delay))


__all__ = [
    "BenchSettings",
    "GenerationSettings",
    "SeriesOptions",
    "load_settings",
    "parse_series_options",
]
