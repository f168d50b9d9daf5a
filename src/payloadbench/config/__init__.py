"""Configuration for payloadbench."""

from payloadbench.config.settings import (
    BenchSettings,
    GenerationSettings,
    SeriesOptions,
    load_settings,
    parse_series_options,
)

__all__ = [
    "BenchSettings",
    "GenerationSettings",
    "SeriesOptions",
    "load_settings",
    "parse_series_options",
]
