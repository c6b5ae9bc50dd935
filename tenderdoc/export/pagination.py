"""Page geometry and bitmap slicing for image-based PDF pages.

All slicing happens in bitmap pixels.  The per-page pixel height is an
integer, so consecutive slices tile the bitmap exactly: no row is dropped or
repeated, and a bitmap whose height is an exact multiple of the page height
produces no trailing empty page.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

import fitz  # PyMuPDF

from .settings import PdfExportSettings


@dataclass(frozen=True)
class PageGeometry:
    """Output page layout expressed in PDF points and bitmap pixels."""

    page_width: float
    page_height: float
    margin: float
    bitmap_width: int

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def content_height(self) -> float:
        return self.page_height - 2 * self.margin

    @property
    def ratio(self) -> float:
        """PDF points per bitmap pixel."""

        return self.content_width / self.bitmap_width

    @property
    def page_height_px(self) -> int:
        """Bitmap rows that fit on one page (at least one)."""

        return max(1, int(math.floor(self.content_height / self.ratio)))


def compute_page_geometry(bitmap_width: int, settings: PdfExportSettings) -> PageGeometry:
    if bitmap_width <= 0:
        raise ValueError(f"Bitmap width must be positive, got {bitmap_width}")
    paper = fitz.paper_rect(settings.page_format)
    margin = settings.margin_pt
    if 2 * margin >= min(paper.width, paper.height):
        raise ValueError(f"Margin {settings.margin_mm}mm leaves no printable area on {settings.page_format}")
    return PageGeometry(
        page_width=paper.width,
        page_height=paper.height,
        margin=margin,
        bitmap_width=bitmap_width,
    )


def slice_ranges(bitmap_height: int, page_height_px: int) -> List[Tuple[int, int]]:
    """Half-open ``[top, bottom)`` pixel ranges, one per output page.

    >>> slice_ranges(3000, 1100)
    [(0, 1100), (1100, 2200), (2200, 3000)]
    """

    if page_height_px <= 0:
        raise ValueError(f"Page height must be positive, got {page_height_px}")
    if bitmap_height <= 0:
        return []
    return [
        (top, min(top + page_height_px, bitmap_height))
        for top in range(0, bitmap_height, page_height_px)
    ]


def page_count(bitmap_height: int, page_height_px: int) -> int:
    if bitmap_height <= 0:
        return 0
    return -(-bitmap_height // page_height_px)


__all__ = ["PageGeometry", "compute_page_geometry", "page_count", "slice_ranges"]
