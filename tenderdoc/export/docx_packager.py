"""Write a :class:`DocumentAst` into a WordprocessingML package with python-docx."""

from __future__ import annotations

import logging
from io import BytesIO
from typing import List, Optional

from docx import Document
from docx.document import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Mm, Pt, RGBColor, Twips
from docx.table import Table, _Cell
from docx.text.paragraph import Paragraph

from tenderdoc.markup import Alignment, StyledRun

from .docx_ast import FULL_WIDTH_PCT, ParagraphBlock, ParagraphKind, TableBlock
from .docx_builder import DocumentAst
from .errors import PackagingError
from .settings import DocxExportSettings

logger = logging.getLogger(__name__)

ALIGNMENT_MAP = {
    Alignment.LEFT: WD_ALIGN_PARAGRAPH.LEFT,
    Alignment.CENTER: WD_ALIGN_PARAGRAPH.CENTER,
    Alignment.RIGHT: WD_ALIGN_PARAGRAPH.RIGHT,
}

PARAGRAPH_STYLES = {
    ParagraphKind.BULLET: "List Bullet",
    ParagraphKind.NUMBERED: "List Number",
}

TABLE_STYLE = "Table Grid"


class DocxPackager:
    """Serialise document blocks into ``.docx`` bytes.

    A single decimal numbering definition is registered per package and shared
    by every ordered-list paragraph, so numbering continues across lists.
    """

    def __init__(self, settings: Optional[DocxExportSettings] = None) -> None:
        self.settings = settings or DocxExportSettings()
        self.warnings: List[str] = []
        self._num_id: Optional[int] = None

    def package(self, ast: DocumentAst, title: str = "") -> bytes:
        try:
            document = self._new_document(title)
            for block in ast.blocks:
                if isinstance(block, TableBlock):
                    self._add_table_or_skip(document, block)
                else:
                    self._add_paragraph(document, block)
            prune_unused_numbering(document)
            buffer = BytesIO()
            document.save(buffer)
        except PackagingError:
            raise
        except Exception as exc:
            logger.error("DOCX packaging failed: %s", exc)
            raise PackagingError(f"DOCX packaging failed: {exc}") from exc

        payload = buffer.getvalue()
        logger.info("Packaged DOCX: blocks=%s bytes=%s", len(ast.blocks), len(payload))
        return payload

    # ------------------------------------------------------------------
    # Document setup
    # ------------------------------------------------------------------
    def _new_document(self, title: str) -> DocxDocument:
        document = Document()
        for paragraph in list(document.paragraphs):
            _delete_paragraph(paragraph)

        section = document.sections[0]
        section.page_width = Mm(self.settings.page_width_mm)
        section.page_height = Mm(self.settings.page_height_mm)
        margin = Inches(self.settings.margin_inches)
        section.top_margin = margin
        section.bottom_margin = margin
        section.left_margin = margin
        section.right_margin = margin

        if title:
            document.core_properties.title = title

        self._num_id = add_decimal_numbering(document)
        return document

    # ------------------------------------------------------------------
    # Paragraphs
    # ------------------------------------------------------------------
    def _add_paragraph(self, document: DocxDocument, block: ParagraphBlock) -> Paragraph:
        if block.kind is ParagraphKind.HEADING:
            paragraph = document.add_paragraph(style=f"Heading {block.heading_level or 1}")
        elif block.kind in PARAGRAPH_STYLES:
            paragraph = document.add_paragraph(style=PARAGRAPH_STYLES[block.kind])
        else:
            paragraph = document.add_paragraph()

        if block.is_page_break:
            paragraph.paragraph_format.page_break_before = True
            return paragraph

        if block.kind is ParagraphKind.NUMBERED:
            _apply_numbering(paragraph, self._num_id)

        paragraph.alignment = ALIGNMENT_MAP[block.alignment]
        if block.space_before is not None:
            paragraph.paragraph_format.space_before = Twips(block.space_before)
        if block.space_after is not None:
            paragraph.paragraph_format.space_after = Twips(block.space_after)

        for run in block.runs:
            _add_run(paragraph, run)
        return paragraph

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------
    def _add_table_or_skip(self, document: DocxDocument, block: TableBlock) -> None:
        table = None
        try:
            table = document.add_table(rows=0, cols=block.column_count)
            self._fill_table(table, block)
        except Exception as exc:
            if table is not None:
                parent = table._tbl.getparent()
                if parent is not None:
                    parent.remove(table._tbl)
            message = f"Table rendering failed, skipping: {exc}"
            logger.warning(message)
            self.warnings.append(message)

    def _fill_table(self, table: Table, block: TableBlock) -> None:
        table.style = TABLE_STYLE
        _set_width_pct(table._tbl.tblPr, "w:tblW", FULL_WIDTH_PCT)

        for row_block in block.rows:
            row = table.add_row()
            tr = row._tr
            # Rows keep their own cell count; drop grid cells this row does not use.
            for surplus in tr.tc_lst[len(row_block):]:
                tr.remove(surplus)
            for tc, cell_block in zip(tr.tc_lst, row_block):
                _set_width_pct(tc.get_or_add_tcPr(), "w:tcW", cell_block.width_pct)
                cell = _Cell(tc, table)
                paragraph = cell.paragraphs[0]
                for run in cell_block.runs:
                    _add_run(paragraph, run)


def add_decimal_numbering(document: DocxDocument) -> int:
    """Register a single-level ``%1.`` decimal list and return its ``numId``."""

    numbering = document.part.numbering_part.element
    existing = [int(node.get(qn("w:abstractNumId"))) for node in numbering.findall(qn("w:abstractNum"))]
    abstract_id = max(existing, default=-1) + 1

    abstract = OxmlElement("w:abstractNum")
    abstract.set(qn("w:abstractNumId"), str(abstract_id))
    abstract.append(_val_element("w:multiLevelType", "singleLevel"))

    level = OxmlElement("w:lvl")
    level.set(qn("w:ilvl"), "0")
    level.append(_val_element("w:start", "1"))
    level.append(_val_element("w:numFmt", "decimal"))
    level.append(_val_element("w:lvlText", "%1."))
    level.append(_val_element("w:lvlJc", "left"))
    p_pr = OxmlElement("w:pPr")
    indent = OxmlElement("w:ind")
    indent.set(qn("w:left"), "720")
    indent.set(qn("w:hanging"), "360")
    p_pr.append(indent)
    level.append(p_pr)
    abstract.append(level)

    # Schema order: every abstractNum precedes the first num.
    first_num = numbering.find(qn("w:num"))
    if first_num is not None:
        first_num.addprevious(abstract)
    else:
        numbering.append(abstract)

    num = numbering.add_num(abstract_id)
    return int(num.numId)


def prune_unused_numbering(document: DocxDocument) -> None:
    """Drop numbering definitions referenced by neither a style nor a body paragraph."""

    numbering = document.part.numbering_part.element
    used = {int(value) for value in document.styles.element.xpath(".//w:numPr/w:numId/@w:val")}
    used.update(int(value) for value in document.element.body.xpath(".//w:numPr/w:numId/@w:val"))

    for num in list(numbering.num_lst):
        if num.numId not in used:
            numbering.remove(num)

    live = {num.abstractNumId.val for num in numbering.num_lst}
    for abstract in numbering.findall(qn("w:abstractNum")):
        if int(abstract.get(qn("w:abstractNumId"))) not in live:
            numbering.remove(abstract)


def _apply_numbering(paragraph: Paragraph, num_id: Optional[int]) -> None:
    if num_id is None:
        return
    num_pr = paragraph._p.get_or_add_pPr().get_or_add_numPr()
    num_pr.get_or_add_ilvl().val = 0
    num_pr.get_or_add_numId().val = num_id


def _add_run(paragraph: Paragraph, spec: StyledRun) -> None:
    run = paragraph.add_run(spec.text)
    run.bold = spec.bold
    run.italic = spec.italic
    run.font.size = Pt(spec.size_pt)
    if spec.underline:
        run.underline = True
    if spec.color:
        run.font.color.rgb = RGBColor.from_string(spec.color)
        if spec.underline:
            underline = run._r.get_or_add_rPr().find(qn("w:u"))
            if underline is not None:
                underline.set(qn("w:color"), spec.color)


def _set_width_pct(parent, tag: str, value: int) -> None:
    width = parent.find(qn(tag))
    if width is None:
        width = OxmlElement(tag)
        style = parent.find(qn("w:tblStyle"))
        if style is not None:
            style.addnext(width)
        else:
            parent.insert(0, width)
    width.set(qn("w:type"), "pct")
    width.set(qn("w:w"), str(value))


def _val_element(tag: str, value: str):
    element = OxmlElement(tag)
    element.set(qn("w:val"), value)
    return element


def _delete_paragraph(paragraph: Paragraph) -> None:
    element = paragraph._element
    parent = element.getparent()
    if parent is not None:
        parent.remove(element)


def package_docx(
    ast: DocumentAst, settings: Optional[DocxExportSettings] = None, title: str = ""
) -> bytes:
    packager = DocxPackager(settings)
    payload = packager.package(ast, title=title)
    ast.warnings.extend(packager.warnings)
    return payload


__all__ = ["DocxPackager", "add_decimal_numbering", "package_docx", "prune_unused_numbering"]
