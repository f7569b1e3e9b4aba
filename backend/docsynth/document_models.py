"""Document tree definitions produced by the markup parser."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

HeadingLevel = Literal[1, 2, 3]


@dataclass(slots=True)
class TextRun:
    """A contiguous span of paragraph text sharing one emphasis state."""

    text: str
    bold: bool = False


@dataclass(slots=True)
class Heading:
    """Heading paragraph.

    Parameters
    ----------
    level:
        Heading depth, 1 to 3.
    text:
        Heading text with the markup prefix removed.
    centered:
        Whether the heading came from a whole-line ``**...**`` marker.
    """

    level: HeadingLevel
    text: str
    centered: bool = False


@dataclass(slots=True)
class Paragraph:
    runs: list[TextRun] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(slots=True)
class BulletItem:
    text: str


@dataclass(slots=True)
class Rule:
    """Horizontal divider."""


@dataclass(slots=True)
class EmptyParagraph:
    """Blank-line spacer."""


@dataclass(slots=True)
class Table:
    """Table block.

    ``rows`` holds every emitted row in order. When ``has_header`` is set the
    first row is the header and the separator row has already been dropped.
    Rows may have differing cell counts.
    """

    rows: list[list[str]]
    has_header: bool = False

    @property
    def header(self) -> list[str] | None:
        if self.has_header and self.rows:
            return self.rows[0]
        return None

    @property
    def body(self) -> list[list[str]]:
        return self.rows[1:] if self.has_header else self.rows

    @property
    def column_count(self) -> int:
        return max((len(row) for row in self.rows), default=0)


Block = Union[Heading, Paragraph, BulletItem, Rule, Table, EmptyParagraph]


@dataclass(slots=True)
class Document:
    """Ordered sequence of blocks in source line order."""

    blocks: list[Block] = field(default_factory=list)

    def __iter__(self):
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)


__all__ = [
    "Block",
    "BulletItem",
    "Document",
    "EmptyParagraph",
    "Heading",
    "HeadingLevel",
    "Paragraph",
    "Rule",
    "Table",
    "TextRun",
]
