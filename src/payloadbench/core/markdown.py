"""Markdown rendering of JSON-compatible data.

Rendering is split in two passes:

1. ``normalize`` decides the shape of every value and produces a tree made of a
   small closed set of blocks (Scalar, BulletList, Table, Section).
2. ``render`` turns that tree into text. It is total over the block types.

Shape rules:
- scalar → its string form
- array of scalars → bulleted list, order preserved
- array of objects → table; header is the union of keys in first-seen order,
  missing keys are empty cells, nested objects become ``key: value`` comma
  lists and nested arrays comma-joined lists
- object → one entry per key: ``**Label:** value`` for scalars, a sub-heading
  followed by the nested block for arrays/objects (``(empty)`` when the nested
  container is empty or an array of empty objects)
- top-level empty array/object → empty string
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Union

EMPTY_MARKER = "(empty)"

_BASE_HEADING_LEVEL = 3
_MAX_HEADING_LEVEL = 6
_CAMEL_BOUNDARY = re.compile(r"(?<=.)(?=[A-Z])")


@dataclass(frozen=True)
class Scalar:
    text: str


@dataclass(frozen=True)
class BulletList:
    items: tuple[str, ...]


@dataclass(frozen=True)
class Table:
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]


@dataclass(frozen=True)
class LabeledValue:
    """A ``**Label:** value`` line inside a section."""

    label: str
    value: str


@dataclass(frozen=True)
class SubSection:
    """A headed nested block inside a section."""

    label: str
    level: int
    block: Block


@dataclass(frozen=True)
class Section:
    entries: tuple[LabeledValue | SubSection, ...]


Block = Union[Scalar, BulletList, Table, Section]


def humanize_key(key: Any) -> str:
    """Convert a camel-case key to title case: ``orderId`` → ``Order Id``."""
    spaced = _CAMEL_BOUNDARY.sub(" ", str(key))
    return spaced[:1].upper() + spaced[1:]


def scalar_text(value: Any) -> str:
    """String form of a scalar, following JSON spelling for null and booleans."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_container(value: Any) -> bool:
    return isinstance(value, (dict, list, tuple))


def cell_text(value: Any) -> str:
    """Flatten any value into a single table cell."""
    if isinstance(value, dict):
        return ", ".join(f"{k}: {cell_text(v)}" for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return ", ".join(cell_text(v) for v in value)
    return scalar_text(value)


def is_empty(block: Block) -> bool:
    if isinstance(block, BulletList):
        return not block.items
    if isinstance(block, Table):
        return not block.headers or not block.rows
    if isinstance(block, Section):
        return not block.entries
    return False


def _normalize_array(items: list[Any] | tuple[Any, ...]) -> Block:
    if not items:
        return BulletList(())

    if all(isinstance(item, dict) for item in items):
        headers: list[str] = []
        for item in items:
            for key in item:
                if key not in headers:
                    headers.append(key)
        rows = tuple(
            tuple(cell_text(item[key]) if key in item else "" for key in headers) for item in items
        )
        return Table(tuple(str(h) for h in headers), rows)

    if not any(_is_container(item) for item in items):
        return BulletList(tuple(scalar_text(item) for item in items))

    # Mixed arrays: one bullet per element, flattened
    return BulletList(tuple(cell_text(item) for item in items))


def _normalize_object(obj: dict[Any, Any], depth: int) -> Section:
    entries: list[LabeledValue | SubSection] = []
    level = min(_BASE_HEADING_LEVEL + depth, _MAX_HEADING_LEVEL)
    for key, value in obj.items():
        label = humanize_key(key)
        if _is_container(value):
            entries.append(SubSection(label, level, normalize(value, depth + 1)))
        else:
            entries.append(LabeledValue(label, scalar_text(value)))
    return Section(tuple(entries))


def normalize(value: Any, depth: int = 0) -> Block:
    """Decide the Markdown shape of a JSON-compatible value."""
    if isinstance(value, dict):
        return _normalize_object(value, depth)
    if isinstance(value, (list, tuple)):
        return _normalize_array(value)
    return Scalar(scalar_text(value))


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\r\n", " ").replace("\n", " ")


def _render_table(table: Table) -> str:
    lines = [
        "| " + " | ".join(_escape_cell(h) for h in table.headers) + " |",
        "| " + " | ".join("---" for _ in table.headers) + " |",
    ]
    for row in table.rows:
        lines.append("| " + " | ".join(_escape_cell(cell) for cell in row) + " |")
    return "\n".join(lines)


def _render_section(section: Section) -> str:
    chunks: list[str] = []
    previous: LabeledValue | SubSection | None = None
    for entry in section.entries:
        if isinstance(entry, LabeledValue):
            text = f"**{entry.label}:** {entry.value}"
        else:
            body = EMPTY_MARKER if is_empty(entry.block) else render(entry.block)
            text = f"{'#' * entry.level} {entry.label}\n\n{body}"
        if chunks:
            # Consecutive label lines stay together; blocks get a blank line
            both_labels = isinstance(previous, LabeledValue) and isinstance(entry, LabeledValue)
            chunks.append("\n" if both_labels else "\n\n")
        chunks.append(text)
        previous = entry
    return "".join(chunks)


def render(block: Block) -> str:
    """Emit Markdown text for a normalized block."""
    if isinstance(block, Scalar):
        return block.text
    if isinstance(block, BulletList):
        return "\n".join(f"- {item}" for item in block.items)
    if isinstance(block, Table):
        return "" if is_empty(block) else _render_table(block)
    if isinstance(block, Section):
        return _render_section(block)
    return str(block)


def render_markdown(value: Any) -> str:
    """Render a JSON-compatible value as Markdown. Never raises on JSON input."""
    return render(normalize(value))


__all__ = [
    "EMPTY_MARKER",
    "Block",
    "BulletList",
    "LabeledValue",
    "Scalar",
    "Section",
    "SubSection",
    "Table",
    "humanize_key",
    "normalize",
    "render",
    "render_markdown",
]
