"""Assemble tokenizer output into a :class:`Document` tree."""
from __future__ import annotations

import logging
from typing import Iterable

from .document_models import Document, Table
from .markup_parser import TableRows, Token, tokenize

logger = logging.getLogger(__name__)


def _looks_like_separator(row: list[str]) -> bool:
    return "-" in "".join(row)


def build_table(rows: list[list[str]]) -> Table:
    """Infer header presence for one buffered table.

    A header exists when there are at least two rows and the second one
    contains a dash anywhere. The separator row is then dropped. Ragged rows
    are kept as they are.
    """

    has_header = len(rows) >= 2 and _looks_like_separator(rows[1])
    if has_header:
        return Table(rows=[rows[0], *rows[2:]], has_header=True)
    return Table(rows=list(rows), has_header=False)


def build_from_tokens(tokens: Iterable[Token]) -> Document:
    document = Document()
    for token in tokens:
        if isinstance(token, TableRows):
            document.blocks.append(build_table(token.rows))
        else:
            document.blocks.append(token)
    return document


def build_document(text: str) -> Document:
    """Parse raw generator output into a document tree."""

    document = build_from_tokens(tokenize(text))
    logger.debug("Built document with %s blocks", len(document))
    return document


__all__ = ["build_document", "build_from_tokens", "build_table"]
