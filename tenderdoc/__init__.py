"""Tender document and bid proposal export (DOCX / rasterized PDF)."""

from tenderdoc.core import AttachedDocument, DocumentKind, Section, TenderDocument
from tenderdoc.export import (
    ExportError,
    ExportResult,
    ExportSettings,
    export_bid_proposal_to_docx,
    export_to_docx,
    export_to_pdf,
)

__version__ = "0.1.0"

__all__ = [
    "AttachedDocument",
    "DocumentKind",
    "ExportError",
    "ExportResult",
    "ExportSettings",
    "Section",
    "TenderDocument",
    "export_bid_proposal_to_docx",
    "export_to_docx",
    "export_to_pdf",
]
