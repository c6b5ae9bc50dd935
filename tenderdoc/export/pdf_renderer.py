"""Assemble image-based PDF pages from a captured bitmap."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import List, Optional, Tuple

import fitz  # PyMuPDF
from PIL import Image

from .errors import PackagingError, RasterizationError
from .pagination import compute_page_geometry, slice_ranges
from .settings import PdfExportSettings
from .surface import capture_bitmap

logger = logging.getLogger(__name__)


@dataclass
class RenderedPdf:
    data: bytes
    page_count: int
    slices: List[Tuple[int, int]]
    bitmap_size: Tuple[int, int]


def assemble_pdf(bitmap: Image.Image, settings: Optional[PdfExportSettings] = None) -> RenderedPdf:
    """Slice ``bitmap`` into page-height strips and place one strip per page.

    Each strip is drawn at ``(margin, margin)`` scaled to the content width;
    the final strip may be shorter than a full page.
    """

    settings = settings or PdfExportSettings()
    width, height = bitmap.size
    if width <= 0 or height <= 0:
        raise RasterizationError(f"Captured bitmap is empty ({width}x{height})")

    geometry = compute_page_geometry(width, settings)
    ranges = slice_ranges(height, geometry.page_height_px)
    logger.debug(
        "Page geometry: ratio=%.4f page_height_px=%s pages=%s",
        geometry.ratio,
        geometry.page_height_px,
        len(ranges),
    )

    pdf = fitz.open()
    try:
        for top, bottom in ranges:
            segment = bitmap.crop((0, top, width, bottom))
            if segment.mode != "RGB":
                converted = segment.convert("RGB")
                segment.close()
                segment = converted
            try:
                stream = BytesIO()
                segment.save(stream, format="JPEG", quality=settings.jpeg_quality)
            finally:
                segment.close()

            page = pdf.new_page(width=geometry.page_width, height=geometry.page_height)
            target = fitz.Rect(
                geometry.margin,
                geometry.margin,
                geometry.margin + geometry.content_width,
                geometry.margin + (bottom - top) * geometry.ratio,
            )
            page.insert_image(target, stream=stream.getvalue())
        data = pdf.tobytes(garbage=3, deflate=True)
    except RasterizationError:
        raise
    except Exception as exc:
        logger.error("PDF assembly failed: %s", exc)
        raise PackagingError(f"PDF assembly failed: {exc}") from exc
    finally:
        pdf.close()

    logger.info("Assembled PDF: pages=%s bytes=%s", len(ranges), len(data))
    return RenderedPdf(data=data, page_count=len(ranges), slices=ranges, bitmap_size=(width, height))


def render_pdf_bytes(inner_html: str, settings: Optional[PdfExportSettings] = None) -> RenderedPdf:
    """Render markup on the hermetic surface and return the paginated PDF."""

    settings = settings or PdfExportSettings()
    bitmap = capture_bitmap(inner_html, settings)
    try:
        return assemble_pdf(bitmap, settings)
    finally:
        bitmap.close()


__all__ = ["RenderedPdf", "assemble_pdf", "render_pdf_bytes"]
