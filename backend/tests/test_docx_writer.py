"""Tests for the python-docx based renderer."""

from __future__ import annotations

from io import BytesIO

import pytest
from docx import Document as open_docx
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml.ns import qn

from docsynth.document_builder import build_document
from docsynth.document_models import Document
from docsynth.docx_writer import pack_document
from docsynth.errors import CodecError


def _reopen(text: str):
    payload = pack_document(build_document(text))
    assert payload[:2] == b"PK"
    return open_docx(BytesIO(payload))


def test_headings_and_runs() -> None:
    docx_document = _reopen("# Title\n**Centered**\nSome **bold** text")
    title, centered, paragraph = docx_document.paragraphs

    assert title.style.name == "Heading 1"
    assert title.text == "Title"
    assert centered.style.name == "Heading 1"
    assert centered.alignment == WD_ALIGN_PARAGRAPH.CENTER
    assert [run.text for run in paragraph.runs] == ["Some ", "bold", " text"]
    assert [run.bold for run in paragraph.runs] == [False, True, False]


def test_bullets_rules_and_spacers() -> None:
    docx_document = _reopen("* item\n---\n")
    bullet, rule, spacer = docx_document.paragraphs

    assert bullet.style.name == "List Bullet"
    assert bullet.text == "item"
    border = rule._p.pPr.find(qn("w:pBdr"))
    assert border is not None
    assert border.find(qn("w:bottom")).get(qn("w:val")) == "single"
    assert spacer.text == ""


def test_header_row_is_bold_and_shaded() -> None:
    docx_document = _reopen("| A | B |\n|---|---|\n| 1 | 2 |")
    (table,) = docx_document.tables

    assert len(table.rows) == 2
    header_cell = table.cell(0, 0)
    assert header_cell.paragraphs[0].runs[0].bold is True
    shading = header_cell._tc.tcPr.find(qn("w:shd"))
    assert shading.get(qn("w:fill")) == "DDDDDD"
    assert table.cell(1, 1).text == "2"
    assert table.cell(1, 0)._tc.tcPr.find(qn("w:shd")) is None


def test_table_is_full_width_with_borders() -> None:
    docx_document = _reopen("| a |\n| b |")
    tbl_pr = docx_document.tables[0]._tbl.tblPr

    width = tbl_pr.find(qn("w:tblW"))
    assert width.get(qn("w:type")) == "pct"
    assert width.get(qn("w:w")) == "5000"
    borders = tbl_pr.find(qn("w:tblBorders"))
    assert [child.tag.split("}")[1] for child in borders] == ["top", "left", "bottom", "right", "insideH", "insideV"]


def test_table_without_header_has_no_styling() -> None:
    docx_document = _reopen("| a | b |\n| c | d |")
    table = docx_document.tables[0]

    assert len(table.rows) == 2
    assert table.cell(0, 0).paragraphs[0].runs[0].bold is None


def test_ragged_table_is_padded() -> None:
    docx_document = _reopen("| a | b | c |\n| d |")
    table = docx_document.tables[0]

    assert len(table.columns) == 3
    assert [cell.text for cell in table.rows[1].cells] == ["d", "", ""]


def test_unsupported_block_raises_codec_error() -> None:
    with pytest.raises(CodecError):
        pack_document(Document(blocks=[object()]))  # type: ignore[list-item]


def test_table_without_cells_renders_one_empty_cell() -> None:
    docx_document = _reopen("| |\nafter")

    (table,) = docx_document.tables
    assert len(table.rows) == 1
    assert len(table.columns) == 1
    assert table.cell(0, 0).text == ""
    assert docx_document.paragraphs[-1].text == "after"
