"""
Export module for DOCX/PDF rendering.

Provides:
- DOCX block-tree builder and python-docx packager
- Rasterized PDF pipeline (headless Chromium capture, bitmap slicing, PyMuPDF assembly)
- Print-preview markup for the PDF path
"""

from .docx_ast import ParagraphBlock, ParagraphKind, TableBlock, TableCellBlock, split_width
from .docx_builder import DocumentAst, DocxAstBuilder, build_document_ast
from .docx_packager import DocxPackager, package_docx
from .errors import ExportError, PackagingError, RasterizationError
from .pagination import PageGeometry, compute_page_geometry, page_count, slice_ranges
from .pdf_renderer import RenderedPdf, assemble_pdf, render_pdf_bytes
from .pipeline import (
    ExportResult,
    build_docx_bytes,
    export_bid_proposal_to_docx,
    export_document_docx,
    export_to_docx,
    export_to_pdf,
)
from .preview import build_print_html
from .settings import DocxExportSettings, ExportSettings, PdfExportSettings, load_settings
from .surface import BASE_STYLESHEET, build_surface_html, capture_bitmap

__all__ = [
    "BASE_STYLESHEET",
    "DocumentAst",
    "DocxAstBuilder",
    "DocxExportSettings",
    "DocxPackager",
    "ExportError",
    "ExportResult",
    "ExportSettings",
    "PackagingError",
    "PageGeometry",
    "ParagraphBlock",
    "ParagraphKind",
    "PdfExportSettings",
    "RasterizationError",
    "RenderedPdf",
    "TableBlock",
    "TableCellBlock",
    "assemble_pdf",
    "build_document_ast",
    "build_docx_bytes",
    "build_print_html",
    "build_surface_html",
    "capture_bitmap",
    "compute_page_geometry",
    "export_bid_proposal_to_docx",
    "export_document_docx",
    "export_to_docx",
    "export_to_pdf",
    "load_settings",
    "package_docx",
    "page_count",
    "render_pdf_bytes",
    "slice_ranges",
    "split_width",
]
