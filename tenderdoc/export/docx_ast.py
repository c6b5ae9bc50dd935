"""Format-neutral block tree handed to the DOCX packager."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from tenderdoc.markup import Alignment, StyledRun

# OOXML percentage widths are expressed in fiftieths of a percent.
FULL_WIDTH_PCT = 5000


class ParagraphKind(str, Enum):
    BODY = "body"
    HEADING = "heading"
    BULLET = "bullet"
    NUMBERED = "numbered"
    PAGE_BREAK = "page_break"


@dataclass(frozen=True, slots=True)
class ParagraphBlock:
    runs: Tuple[StyledRun, ...]
    kind: ParagraphKind = ParagraphKind.BODY
    heading_level: Optional[int] = None
    alignment: Alignment = Alignment.LEFT
    space_before: Optional[int] = None  # twips
    space_after: Optional[int] = None  # twips

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @classmethod
    def page_break(cls) -> "ParagraphBlock":
        return cls(runs=(), kind=ParagraphKind.PAGE_BREAK)

    @property
    def is_page_break(self) -> bool:
        return self.kind is ParagraphKind.PAGE_BREAK


@dataclass(frozen=True, slots=True)
class TableCellBlock:
    runs: Tuple[StyledRun, ...]
    is_header: bool = False
    width_pct: int = FULL_WIDTH_PCT


@dataclass(frozen=True, slots=True)
class TableBlock:
    rows: Tuple[Tuple[TableCellBlock, ...], ...]

    @property
    def column_count(self) -> int:
        return max((len(row) for row in self.rows), default=0)


Block = Union[ParagraphBlock, TableBlock]


def split_width(cell_count: int) -> Tuple[int, ...]:
    """Split 100% across ``cell_count`` cells so the parts sum exactly to 100%.

    Widths are integer fiftieths of a percent; the leading cells absorb the
    remainder (3 cells -> 1667, 1667, 1666).
    """

    if cell_count <= 0:
        return ()
    base, remainder = divmod(FULL_WIDTH_PCT, cell_count)
    return tuple(base + 1 if index < remainder else base for index in range(cell_count))


__all__ = [
    "Block",
    "FULL_WIDTH_PCT",
    "ParagraphBlock",
    "ParagraphKind",
    "TableBlock",
    "TableCellBlock",
    "split_width",
]
