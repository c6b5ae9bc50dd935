"""Export entry points: build the artifact, then deliver it atomically.

Delivery writes ``<output_dir>/<filename>.<ext>`` through a temporary file in
the same directory followed by :func:`os.replace`, so a failed export never
leaves a partial or corrupt file behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from tenderdoc.core.document import (
    DocumentKind,
    SectionsInput,
    TenderDocument,
)

from .docx_builder import DocxAstBuilder
from .docx_packager import package_docx
from .pdf_renderer import render_pdf_bytes
from .settings import ExportSettings

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Metadata describing a delivered export."""

    fmt: str
    output_path: Path
    renderer: str
    warnings: List[str] = field(default_factory=list)
    page_count: Optional[int] = None

    @property
    def size(self) -> int:
        return self.output_path.stat().st_size


def safe_filename(filename: Optional[str], default: str) -> str:
    """Neutralise path separators; blank names fall back to ``default``."""

    name = (filename or "").strip()
    for separator in {os.sep, "/", "\\"}:
        name = name.replace(separator, "-")
    name = name.strip(". ")
    return name or default


def write_artifact(data: bytes, output_dir: Path, filename: str, extension: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / f"{filename}{extension}"
    fd, tmp_name = tempfile.mkstemp(prefix=".export-", suffix=extension, dir=output_dir)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return target


def build_docx_bytes(document: TenderDocument, settings: Optional[ExportSettings] = None) -> bytes:
    """Build and package ``document`` without writing it anywhere."""

    settings = settings or ExportSettings()
    ast = DocxAstBuilder(settings.docx).build(document)
    return package_docx(ast, settings.docx, title=document.title)


def export_document_docx(
    document: TenderDocument,
    output_dir: Path,
    filename: Optional[str] = None,
    settings: Optional[ExportSettings] = None,
) -> ExportResult:
    settings = settings or ExportSettings()
    name = safe_filename(filename, document.default_filename)

    ast = DocxAstBuilder(settings.docx).build(document)
    data = package_docx(ast, settings.docx, title=document.title)
    path = write_artifact(data, Path(output_dir), name, ".docx")
    logger.info("DOCX export written → %s", path)
    return ExportResult(fmt="docx", output_path=path, renderer="python-docx", warnings=list(ast.warnings))


def export_to_docx(
    sections: SectionsInput,
    filename: str = "tender-document",
    output_dir: Path = Path("."),
    *,
    title: str = "",
    settings: Optional[ExportSettings] = None,
) -> ExportResult:
    """Export tender sections to ``<filename>.docx``."""

    document = TenderDocument.build(title=title, sections=sections, kind=DocumentKind.TENDER)
    return export_document_docx(document, Path(output_dir), filename, settings)


def export_bid_proposal_to_docx(
    sections: SectionsInput,
    attachments: Optional[Iterable[object]],
    filename: str = "bid-proposal",
    output_dir: Path = Path("."),
    *,
    title: str = "",
    settings: Optional[ExportSettings] = None,
) -> ExportResult:
    """Export proposal sections plus the supporting-documents appendix."""

    document = TenderDocument.build(
        title=title,
        sections=sections,
        attachments=attachments,
        kind=DocumentKind.BID_PROPOSAL,
    )
    return export_document_docx(document, Path(output_dir), filename, settings)


def export_to_pdf(
    html_content: str,
    filename: str = "tender-document",
    output_dir: Path = Path("."),
    *,
    settings: Optional[ExportSettings] = None,
) -> ExportResult:
    """Rasterise already-rendered document markup into ``<filename>.pdf``."""

    if html_content is None:
        raise ValueError("No HTML content provided for PDF export")
    settings = settings or ExportSettings()
    name = safe_filename(filename, "tender-document")

    rendered = render_pdf_bytes(html_content, settings.pdf)
    path = write_artifact(rendered.data, Path(output_dir), name, ".pdf")
    logger.info("PDF export written → %s (%s pages)", path, rendered.page_count)
    return ExportResult(fmt="pdf", output_path=path, renderer="chromium-raster", page_count=rendered.page_count)


__all__ = [
    "ExportResult",
    "build_docx_bytes",
    "export_bid_proposal_to_docx",
    "export_document_docx",
    "export_to_docx",
    "export_to_pdf",
    "safe_filename",
    "write_artifact",
]
