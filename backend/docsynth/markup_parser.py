"""Line-oriented tokenizer for the small markup dialect produced by the generator."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Union

from .document_models import (
    Block,
    BulletItem,
    EmptyParagraph,
    Heading,
    Paragraph,
    Rule,
    TextRun,
)

_RULE_PATTERN = re.compile(r"^-{3,}$")
_BOLD_MARKER = "**"
_HEADING_PREFIXES: tuple[tuple[str, int], ...] = (("### ", 3), ("## ", 2), ("# ", 1))


@dataclass(slots=True)
class TableRows:
    """Raw rows of one table, separator row included, waiting for header inference."""

    rows: list[list[str]]


Token = Union[Block, TableRows]


def is_table_row(line: str) -> bool:
    return line.startswith("|") and line.endswith("|")


def split_cells(line: str) -> list[str]:
    """Split a ``|``-delimited row into trimmed cells, dropping empty fields."""

    return [cell.strip() for cell in line.split("|") if cell.strip()]


def split_emphasis(line: str) -> list[TextRun]:
    """Split ``line`` into runs, toggling bold at every ``**`` marker.

    An unmatched trailing marker leaves the remaining text in the state it
    toggled to. Empty segments between markers produce no run.
    """

    runs: list[TextRun] = []
    bold = False
    for index, segment in enumerate(line.split(_BOLD_MARKER)):
        if index:
            bold = not bold
        if segment:
            runs.append(TextRun(text=segment, bold=bold))
    return runs


def _classify(line: str) -> Block:
    for prefix, level in _HEADING_PREFIXES:
        if line.startswith(prefix):
            return Heading(level=level, text=line[len(prefix):].strip())

    if line.startswith(_BOLD_MARKER) and line.endswith(_BOLD_MARKER):
        return Heading(level=1, text=line[2:-2].strip(), centered=True)

    if line.startswith("* "):
        return BulletItem(text=line[2:].strip())

    if _BOLD_MARKER in line:
        return Paragraph(runs=split_emphasis(line))

    return Paragraph(runs=[TextRun(text=line)])


def tokenize(text: str, start: int = 0) -> Iterator[Token]:
    """Yield block tokens for ``text`` beginning at line ``start``.

    Consecutive table rows are buffered and yielded as one :class:`TableRows`
    token as soon as the following line is missing or is not a table row.
    Every call starts a fresh scan.
    """

    lines = [line.strip() for line in text.split("\n")]
    table_buffer: list[list[str]] = []

    for cursor in range(max(start, 0), len(lines)):
        line = lines[cursor]

        if not line:
            if not table_buffer:
                yield EmptyParagraph()
            continue

        if _RULE_PATTERN.match(line):
            yield Rule()
            continue

        if is_table_row(line):
            table_buffer.append(split_cells(line))
            following = lines[cursor + 1] if cursor + 1 < len(lines) else None
            if following is None or not is_table_row(following):
                yield TableRows(rows=table_buffer)
                table_buffer = []
            continue

        yield _classify(line)


__all__ = [
    "TableRows",
    "Token",
    "is_table_row",
    "split_cells",
    "split_emphasis",
    "tokenize",
]
