"""Tests for HTML -> DOCX block tree mapping."""

import logging

import pytest

from tenderdoc.core.document import TenderDocument
from tenderdoc.export import docx_builder
from tenderdoc.export.docx_ast import FULL_WIDTH_PCT, ParagraphBlock, ParagraphKind, TableBlock, split_width
from tenderdoc.export.docx_builder import (
    APPENDIX_TITLE,
    DocxAstBuilder,
    HEADING_STYLES,
    build_document_ast,
)
from tenderdoc.markup import Alignment


def _paragraphs(blocks):
    return [block for block in blocks if isinstance(block, ParagraphBlock)]


def test_sections_separated_by_page_breaks(tender_document):
    ast = build_document_ast(tender_document)

    summary = ["<break>" if b.is_page_break else b.text for b in ast.blocks]
    assert summary == ["Content A", "<break>", "Content B", "<break>", "Content C"]
    assert ast.page_break_count == len(tender_document.sections) - 1


def test_single_section_has_no_page_break(make_document):
    ast = build_document_ast(make_document("<p>only</p>"))
    assert ast.page_break_count == 0


def test_heading_sizes_strictly_decrease(make_document):
    ast = build_document_ast(make_document("<h1>a</h1><h2>b</h2><h3>c</h3><h4>d</h4>"))

    headings = _paragraphs(ast.blocks)
    assert [h.heading_level for h in headings] == [1, 2, 3, 4]
    sizes = [h.runs[0].size_pt for h in headings]
    assert sizes == sorted(sizes, reverse=True)
    assert len(set(sizes)) == 4
    assert all(h.runs[0].bold for h in headings)
    assert [h.space_before for h in headings] == [HEADING_STYLES[level].space_before for level in range(1, 5)]


def test_alignment_taken_from_block_style(make_document):
    ast = build_document_ast(
        make_document('<h2 style="text-align: center;">Title</h2><p style="text-align:right">r</p><p>l</p>')
    )

    assert [block.alignment for block in ast.blocks] == [Alignment.CENTER, Alignment.RIGHT, Alignment.LEFT]


def test_lists_emit_one_paragraph_per_direct_item(make_document):
    ast = build_document_ast(
        make_document("<ul><li>one</li><li>two<ul><li>nested</li></ul></li></ul><ol><li>first</li></ol>")
    )

    kinds = [block.kind for block in ast.blocks]
    assert kinds == [ParagraphKind.BULLET, ParagraphKind.BULLET, ParagraphKind.NUMBERED]
    assert ast.blocks[0].text == "one"
    assert ast.blocks[1].text.startswith("two")


def test_header_and_data_rows_become_table(make_document):
    markup = (
        "<table><thead><tr><th>Item</th><th>Qty</th><th>Price</th></tr></thead>"
        "<tbody><tr><td>Cement</td><td>10</td><td>500</td></tr></tbody></table>"
    )

    ast = build_document_ast(make_document(markup))

    table = ast.blocks[0]
    assert isinstance(table, TableBlock)
    assert [len(row) for row in table.rows] == [3, 3]
    assert all(cell.is_header and cell.runs[0].bold for cell in table.rows[0])
    assert not any(cell.is_header or cell.runs[0].bold for cell in table.rows[1])
    for row in table.rows:
        assert sum(cell.width_pct for cell in row) == FULL_WIDTH_PCT
        for cell in row:
            assert cell.width_pct / FULL_WIDTH_PCT * 100 == pytest.approx(33.33, abs=0.02)
    # spacer paragraph after the table
    assert isinstance(ast.blocks[1], ParagraphBlock)


def test_ragged_rows_use_their_own_width_split(make_document):
    ast = build_document_ast(
        make_document("<table><tr><td>a</td><td>b</td></tr><tr><td>c</td></tr><tr></tr></table>")
    )

    table = ast.blocks[0]
    assert [[cell.width_pct for cell in row] for row in table.rows] == [[2500, 2500], [5000]]


def test_split_width_sums_exactly():
    assert split_width(3) == (1667, 1667, 1666)
    assert split_width(7)[0] - split_width(7)[-1] <= 1
    assert sum(split_width(7)) == FULL_WIDTH_PCT
    assert split_width(0) == ()


def test_failing_table_is_skipped_but_section_kept(make_document, monkeypatch, caplog):
    def explode(*_args, **_kwargs):
        raise ValueError("bad row")

    monkeypatch.setattr(docx_builder, "extract_table_rows", explode)

    with caplog.at_level(logging.WARNING, logger="tenderdoc.export.docx_builder"):
        ast = build_document_ast(make_document("<p>before</p><table><tr><td>x</td></tr></table><p>after</p>"))

    assert not any(isinstance(block, TableBlock) for block in ast.blocks)
    assert [block.text for block in ast.blocks] == ["before", "after"]
    assert len(ast.warnings) == 1
    assert "Table parsing failed" in caplog.text


def test_br_becomes_empty_paragraph(make_document):
    ast = build_document_ast(make_document("<p>a</p><br><p>b</p>"))

    assert [block.text for block in ast.blocks] == ["a", "", "b"]


def test_unknown_containers_are_transparent(make_document):
    ast = build_document_ast(make_document("<div><p>inside</p><span>loose text</span></div>"))

    assert [block.text for block in ast.blocks] == ["inside", "loose text"]
    assert all(block.kind is ParagraphKind.BODY for block in ast.blocks)


@pytest.mark.parametrize("content", ["", "   \n  ", "<!-- nothing -->", "<div></div>"])
def test_empty_section_emits_one_empty_run(make_document, content):
    ast = build_document_ast(make_document(content))

    assert len(ast.blocks) == 1
    (paragraph,) = ast.blocks
    assert len(paragraph.runs) == 1
    assert paragraph.runs[0].text == ""


def test_appendix_only_when_attachments(tender_document, proposal_document, attachments):
    plain = build_document_ast(tender_document)
    with_appendix = build_document_ast(proposal_document)

    assert APPENDIX_TITLE not in [b.text for b in plain.blocks]
    assert with_appendix.page_break_count == len(proposal_document.sections)

    tail = with_appendix.blocks[-(len(attachments) + 3):]
    assert tail[0].is_page_break
    assert tail[1].text == APPENDIX_TITLE
    assert tail[1].kind is ParagraphKind.HEADING
    entries = tail[3:]
    assert [entry.text for entry in entries] == [f"{i}. {a.name}" for i, a in enumerate(attachments, start=1)]
    for entry in entries:
        name_run = entry.runs[-1]
        assert name_run.underline and name_run.color == "0563C1"


def test_builder_is_reusable_between_documents(make_document):
    builder = DocxAstBuilder()
    builder.build(make_document("<table><tr><td>x</td></tr></table>"))
    second = builder.build(TenderDocument.build(title="T", sections=[]))

    assert second.blocks == []
    assert second.warnings == []


def test_space_between_inline_elements_is_kept(make_document):
    ast = build_document_ast(make_document("<p><strong>Bold</strong> <em>italic</em></p>"))

    assert ast.blocks[0].text == "Bold italic"
