"""Render document trees into DOCX packages with python-docx."""
from __future__ import annotations

import logging
from io import BytesIO
from typing import Iterable

from docx import Document as DocxDocument
from docx.document import Document as _DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt
from docx.table import Table as DocxTable
from docx.text.paragraph import Paragraph as DocxParagraph

from .document_models import (
    BulletItem,
    Document,
    EmptyParagraph,
    Heading,
    Paragraph,
    Rule,
    Table,
)
from .errors import CodecError

logger = logging.getLogger(__name__)

_RULE_COLOR = "999999"
_TABLE_BORDER_COLOR = "AAAAAA"
_HEADER_FILL = "DDDDDD"
_TABLE_BORDER_EDGES = ("top", "left", "bottom", "right", "insideH", "insideV")
# tblPr children that must precede tblBorders
_TBL_BORDER_PREDECESSORS = ("w:tblW", "w:jc", "w:tblCellSpacing", "w:tblInd")


def _set_spacing(paragraph: DocxParagraph, before: float, after: float) -> None:
    paragraph.paragraph_format.space_before = Pt(before)
    paragraph.paragraph_format.space_after = Pt(after)


def _add_bottom_border(paragraph: DocxParagraph) -> None:
    p_pr = paragraph._p.get_or_add_pPr()  # type: ignore[attr-defined]
    borders = OxmlElement("w:pBdr")
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), "6")
    bottom.set(qn("w:space"), "1")
    bottom.set(qn("w:color"), _RULE_COLOR)
    borders.append(bottom)
    p_pr.append(borders)


def _shade_cell(cell, fill: str) -> None:
    tc_pr = cell._tc.get_or_add_tcPr()
    shading = OxmlElement("w:shd")
    shading.set(qn("w:val"), "clear")
    shading.set(qn("w:color"), "auto")
    shading.set(qn("w:fill"), fill)
    tc_pr.append(shading)


def _set_full_width(docx_table: DocxTable) -> None:
    tbl_pr = docx_table._tbl.tblPr
    width = tbl_pr.find(qn("w:tblW"))
    if width is None:
        width = OxmlElement("w:tblW")
        tbl_pr.append(width)
    width.set(qn("w:type"), "pct")
    width.set(qn("w:w"), "5000")


def _set_table_borders(docx_table: DocxTable) -> None:
    tbl_pr = docx_table._tbl.tblPr
    borders = OxmlElement("w:tblBorders")
    for edge in _TABLE_BORDER_EDGES:
        element = OxmlElement(f"w:{edge}")
        element.set(qn("w:val"), "single")
        element.set(qn("w:sz"), "4")
        element.set(qn("w:space"), "0")
        element.set(qn("w:color"), _TABLE_BORDER_COLOR)
        borders.append(element)

    anchor = None
    for tag in _TBL_BORDER_PREDECESSORS:
        found = tbl_pr.find(qn(tag))
        if found is not None:
            anchor = found
    if anchor is None:
        tbl_pr.insert(0, borders)
    else:
        anchor.addnext(borders)


def _table_column_count(rows: Iterable[list[str]]) -> int:
    return max((len(row) for row in rows), default=0)


def _append_heading(document: _DocxDocument, block: Heading) -> None:
    paragraph = document.add_heading(block.text, level=block.level)
    if block.centered:
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    _set_spacing(paragraph, 10, 5)


def _append_paragraph(document: _DocxDocument, block: Paragraph) -> None:
    paragraph = document.add_paragraph()
    for run in block.runs:
        docx_run = paragraph.add_run(run.text)
        docx_run.bold = run.bold
    _set_spacing(paragraph, 5, 5)


def _append_bullet(document: _DocxDocument, block: BulletItem) -> None:
    paragraph = document.add_paragraph(block.text, style="List Bullet")
    _set_spacing(paragraph, 5, 5)


def _append_rule(document: _DocxDocument) -> None:
    paragraph = document.add_paragraph()
    _add_bottom_border(paragraph)
    _set_spacing(paragraph, 10, 10)


def _append_table(document: _DocxDocument, table: Table) -> None:
    # tables without cells still render as one empty cell
    rows = table.rows or [[]]
    column_count = max(_table_column_count(rows), 1)

    docx_table = document.add_table(rows=len(rows), cols=column_count)
    docx_table.style = "Table Grid"
    _set_full_width(docx_table)
    _set_table_borders(docx_table)

    for row_index, row in enumerate(rows):
        is_header = table.has_header and row_index == 0
        for column_index in range(column_count):
            value = row[column_index] if column_index < len(row) else ""
            cell = docx_table.cell(row_index, column_index)
            if is_header:
                cell.paragraphs[0].add_run(value).bold = True
                _shade_cell(cell, _HEADER_FILL)
            else:
                cell.text = value


def render_document(document: Document) -> _DocxDocument:
    """Map every block of ``document`` onto a python-docx document."""

    docx_document = DocxDocument()

    for block in document:
        if isinstance(block, Heading):
            _append_heading(docx_document, block)
        elif isinstance(block, Paragraph):
            _append_paragraph(docx_document, block)
        elif isinstance(block, BulletItem):
            _append_bullet(docx_document, block)
        elif isinstance(block, Rule):
            _append_rule(docx_document)
        elif isinstance(block, Table):
            _append_table(docx_document, block)
        elif isinstance(block, EmptyParagraph):
            docx_document.add_paragraph("")
        else:
            raise CodecError(f"Unsupported block type: {type(block).__name__}")
    return docx_document


def pack_document(document: Document) -> bytes:
    """Serialize ``document`` into the bytes of a DOCX package."""

    try:
        docx_document = render_document(document)
        buffer = BytesIO()
        docx_document.save(buffer)
    except CodecError:
        raise
    except Exception as exc:
        raise CodecError(f"Failed to serialize document: {exc}") from exc

    payload = buffer.getvalue()
    logger.debug("Packed %s blocks into %s bytes", len(document), len(payload))
    return payload


__all__ = ["pack_document", "render_document"]
