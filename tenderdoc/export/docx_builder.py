"""Map parsed section HTML onto the DOCX block tree.

Dispatch happens per top-level node of every section:

* ``h1``-``h4`` become heading paragraphs with bold runs,
* ``p`` becomes a body paragraph,
* ``ul`` / ``ol`` emit one paragraph per direct ``li`` child,
* ``table`` becomes a table (skipped as a whole if it cannot be extracted),
* ``br`` becomes an empty paragraph,
* anything else is a transparent container.

Problems local to one node are logged and collected in ``warnings``; they
never abort the document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from tenderdoc.core.document import AttachedDocument, Section, TenderDocument
from tenderdoc.markup import (
    Alignment,
    ElementNode,
    StyleContext,
    StyledRun,
    TextNode,
    collect_runs,
    parse_fragment,
    resolve_alignment,
)

from .docx_ast import (
    Block,
    ParagraphBlock,
    ParagraphKind,
    TableBlock,
    TableCellBlock,
    split_width,
)
from .settings import DocxExportSettings

logger = logging.getLogger(__name__)

APPENDIX_TITLE = "Appendix: Supporting Documents"
APPENDIX_INTRO = "The following supporting documents have been attached to this proposal:"


@dataclass(frozen=True)
class HeadingStyle:
    size_pt: float
    space_before: int
    space_after: int


HEADING_STYLES: Dict[int, HeadingStyle] = {
    1: HeadingStyle(size_pt=16.0, space_before=200, space_after=200),
    2: HeadingStyle(size_pt=14.0, space_before=200, space_after=160),
    3: HeadingStyle(size_pt=12.0, space_before=160, space_after=120),
    4: HeadingStyle(size_pt=11.0, space_before=120, space_after=100),
}

_HEADING_TAGS = {f"h{level}": level for level in HEADING_STYLES}
_CELL_TAGS = ("td", "th")

BODY_SPACE_AFTER = 100
LIST_SPACE_AFTER = 60
TABLE_SPACER_AFTER = 200


@dataclass
class DocumentAst:
    """Blocks of a whole document plus the warnings raised while building it."""

    blocks: List[Block] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def page_break_count(self) -> int:
        return sum(1 for block in self.blocks if isinstance(block, ParagraphBlock) and block.is_page_break)


class DocxAstBuilder:
    """Build :class:`DocumentAst` values from sections and attachments."""

    def __init__(self, settings: Optional[DocxExportSettings] = None) -> None:
        self.settings = settings or DocxExportSettings()
        self._warnings: List[str] = []

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def build(self, document: TenderDocument) -> DocumentAst:
        self._warnings = []
        blocks: List[Block] = []

        for index, section in enumerate(document.iter_sections()):
            if index > 0:
                blocks.append(ParagraphBlock.page_break())
            blocks.extend(self.build_section(section))

        if document.attachments:
            blocks.extend(self.build_appendix(document.attachments))

        logger.info(
            "Built DOCX tree: sections=%s blocks=%s attachments=%s warnings=%s",
            len(document.sections),
            len(blocks),
            len(document.attachments),
            len(self._warnings),
        )
        return DocumentAst(blocks=blocks, warnings=list(self._warnings))

    def build_section(self, section: Section) -> List[Block]:
        root = parse_fragment(section.content)
        blocks: List[Block] = []
        for child in root.children:
            self._emit(child, blocks, section)
        if not blocks:
            logger.debug("Section %r produced no blocks; emitting an empty paragraph", section.id)
            blocks.append(self._body_paragraph((StyledRun.empty(self.settings.body_font_size_pt),)))
        return blocks

    def build_appendix(self, attachments: Sequence[AttachedDocument]) -> List[Block]:
        size = self.settings.appendix_font_size_pt
        blocks: List[Block] = [
            ParagraphBlock.page_break(),
            ParagraphBlock(
                runs=(StyledRun(text=APPENDIX_TITLE, bold=True, size_pt=HEADING_STYLES[1].size_pt),),
                kind=ParagraphKind.HEADING,
                heading_level=1,
                space_before=400,
                space_after=200,
            ),
            ParagraphBlock(runs=(StyledRun(text=APPENDIX_INTRO, size_pt=size),), space_after=200),
        ]
        for index, attachment in enumerate(attachments, start=1):
            blocks.append(
                ParagraphBlock(
                    runs=(
                        StyledRun(text=f"{index}. ", size_pt=size),
                        StyledRun(
                            text=attachment.name,
                            underline=True,
                            size_pt=size,
                            color=self.settings.link_color,
                        ),
                    ),
                    space_after=120,
                )
            )
        return blocks

    # ------------------------------------------------------------------
    # Node dispatch
    # ------------------------------------------------------------------
    def _emit(self, node, blocks: List[Block], section: Section) -> None:
        if isinstance(node, TextNode):
            if node.text.strip():
                blocks.append(
                    self._body_paragraph((StyledRun(text=node.text, size_pt=self.settings.body_font_size_pt),))
                )
            return

        tag = node.tag
        if tag in _HEADING_TAGS:
            blocks.append(self._heading(node, _HEADING_TAGS[tag]))
        elif tag == "p":
            blocks.append(
                self._body_paragraph(
                    tuple(collect_runs(node, size_pt=self.settings.body_font_size_pt)),
                    node=node,
                )
            )
        elif tag in ("ul", "ol"):
            blocks.extend(self._list_items(node))
        elif tag == "table":
            table = self._table(node, section)
            if table is not None:
                blocks.append(table)
                blocks.append(ParagraphBlock(runs=(StyledRun.empty(),), space_after=TABLE_SPACER_AFTER))
        elif tag == "br":
            blocks.append(ParagraphBlock(runs=(StyledRun.empty(self.settings.body_font_size_pt),)))
        else:
            for child in node.children:
                self._emit(child, blocks, section)

    def _heading(self, node: ElementNode, level: int) -> ParagraphBlock:
        style = HEADING_STYLES[level]
        return ParagraphBlock(
            runs=tuple(collect_runs(node, StyleContext(bold=True), size_pt=style.size_pt)),
            kind=ParagraphKind.HEADING,
            heading_level=level,
            alignment=resolve_alignment(node),
            space_before=style.space_before,
            space_after=style.space_after,
        )

    def _body_paragraph(
        self, runs: Tuple[StyledRun, ...], node: Optional[ElementNode] = None
    ) -> ParagraphBlock:
        return ParagraphBlock(
            runs=runs,
            alignment=resolve_alignment(node) if node is not None else Alignment.LEFT,
            space_after=BODY_SPACE_AFTER,
        )

    def _list_items(self, node: ElementNode) -> List[ParagraphBlock]:
        kind = ParagraphKind.BULLET if node.tag == "ul" else ParagraphKind.NUMBERED
        return [
            ParagraphBlock(
                runs=tuple(collect_runs(item, size_pt=self.settings.body_font_size_pt)),
                kind=kind,
                space_after=LIST_SPACE_AFTER,
            )
            for item in node.child_elements("li")
        ]

    def _table(self, node: ElementNode, section: Section) -> Optional[TableBlock]:
        try:
            rows = extract_table_rows(node, self.settings.table_font_size_pt)
        except Exception as exc:
            message = f"Table parsing failed in section {section.id!r}, skipping: {exc}"
            logger.warning(message)
            self._warnings.append(message)
            return None
        if not rows:
            return None
        return TableBlock(rows=rows)


def extract_table_rows(table: ElementNode, size_pt: float) -> Tuple[Tuple[TableCellBlock, ...], ...]:
    """One row per ``tr`` (at any depth) with one cell per direct ``td``/``th``."""

    rows = []
    for row in table.find_all("tr"):
        cells = list(row.child_elements(*_CELL_TAGS))
        if not cells:
            continue
        widths = split_width(len(cells))
        rows.append(
            tuple(
                TableCellBlock(
                    runs=tuple(collect_runs(cell, StyleContext(bold=cell.tag == "th"), size_pt=size_pt)),
                    is_header=cell.tag == "th",
                    width_pct=width,
                )
                for cell, width in zip(cells, widths)
            )
        )
    return tuple(rows)


def build_document_ast(
    document: TenderDocument, settings: Optional[DocxExportSettings] = None
) -> DocumentAst:
    return DocxAstBuilder(settings).build(document)


__all__ = [
    "APPENDIX_INTRO",
    "APPENDIX_TITLE",
    "DocumentAst",
    "DocxAstBuilder",
    "HEADING_STYLES",
    "build_document_ast",
    "extract_table_rows",
]
