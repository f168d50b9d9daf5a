"""Format variants and the fixed baseline/comparison pairs between them."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class FormatVariant(str, Enum):
    """Serialisation styles compared by a trial.

    Declaration order is the canonical enumeration order: metrics tables list
    formats in this order and fastest-format ties resolve to the earliest one.
    """

    JSON = "JSON"
    TOON = "TOON"
    MARKDOWN = "MARKDOWN"

    @property
    def slug(self) -> str:
        """Lower-case name used in file names and pair keys."""
        return self.value.lower()


FORMAT_ORDER: tuple[FormatVariant, ...] = tuple(FormatVariant)


class ComparisonPair(NamedTuple):
    """A comparison format measured against a baseline format."""

    comparison: FormatVariant
    baseline: FormatVariant

    @property
    def key(self) -> str:
        """Stable identifier, e.g. ``toon_vs_json``."""
        return f"{self.comparison.slug}_vs_{self.baseline.slug}"

    @property
    def label(self) -> str:
        """Display label, e.g. ``TOON vs JSON``."""
        return f"{self.comparison.value} vs {self.baseline.value}"


COMPARISON_PAIRS: tuple[ComparisonPair, ...] = (
    ComparisonPair(FormatVariant.TOON, FormatVariant.JSON),
    ComparisonPair(FormatVariant.MARKDOWN, FormatVariant.JSON),
    ComparisonPair(FormatVariant.MARKDOWN, FormatVariant.TOON),
)


__all__ = ["COMPARISON_PAIRS", "FORMAT_ORDER", "ComparisonPair", "FormatVariant"]
