"""Export settings with YAML overrides.

All values have working defaults; a YAML file only needs to list what it
changes, e.g.::

    pdf:
      settle_delay_ms: 500
      scale: 3
    docx:
      margin_inches: 0.75
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

MM_TO_PT = 72.0 / 25.4


@dataclass
class PdfExportSettings:
    """Rasterized PDF export configuration."""

    # Render surface: A4 at 96 dpi.
    viewport_width: int = 794
    viewport_height: int = 1123
    scale: float = 2.0
    settle_delay_ms: int = 300

    # Output page.
    page_format: str = "a4"
    margin_mm: float = 10.0
    jpeg_quality: int = 95

    @property
    def margin_pt(self) -> float:
        return self.margin_mm * MM_TO_PT

    def validate(self) -> List[str]:
        errors = []
        if self.viewport_width <= 0 or self.viewport_height <= 0:
            errors.append("viewport dimensions must be positive")
        if self.scale <= 0:
            errors.append("scale must be positive")
        if self.settle_delay_ms < 0:
            errors.append("settle_delay_ms cannot be negative")
        if self.margin_mm < 0:
            errors.append("margin_mm cannot be negative")
        if not 1 <= self.jpeg_quality <= 100:
            errors.append("jpeg_quality must be between 1 and 100")
        return errors


@dataclass
class DocxExportSettings:
    """DOCX packaging configuration."""

    margin_inches: float = 1.0
    page_width_mm: float = 210.0
    page_height_mm: float = 297.0
    body_font_size_pt: float = 11.0
    table_font_size_pt: float = 10.0
    appendix_font_size_pt: float = 12.0
    link_color: str = "0563C1"

    def validate(self) -> List[str]:
        errors = []
        if self.margin_inches < 0:
            errors.append("margin_inches cannot be negative")
        if self.page_width_mm <= 0 or self.page_height_mm <= 0:
            errors.append("page dimensions must be positive")
        if len(self.link_color) != 6:
            errors.append("link_color must be a 6-digit hex RGB value")
        return errors


@dataclass
class ExportSettings:
    pdf: PdfExportSettings = field(default_factory=PdfExportSettings)
    docx: DocxExportSettings = field(default_factory=DocxExportSettings)

    def validate(self) -> List[str]:
        return [f"pdf: {err}" for err in self.pdf.validate()] + [
            f"docx: {err}" for err in self.docx.validate()
        ]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ExportSettings":
        data = data or {}
        return cls(
            pdf=_build(PdfExportSettings, data.get("pdf")),
            docx=_build(DocxExportSettings, data.get("docx")),
        )


def _build(settings_cls, payload: Optional[Mapping[str, Any]]):
    known = {f.name for f in fields(settings_cls)}
    if payload is not None and not isinstance(payload, Mapping):
        raise ValueError(f"{settings_cls.__name__} expects a mapping, got {type(payload).__name__}")
    payload = dict(payload or {})
    unknown = sorted(set(payload) - known)
    if unknown:
        logger.warning("Ignoring unknown %s keys: %s", settings_cls.__name__, ", ".join(unknown))
    return settings_cls(**{key: value for key, value in payload.items() if key in known})


def load_settings(path: Optional[Path]) -> ExportSettings:
    """Load settings from YAML, falling back to defaults when ``path`` is None."""

    if path is None:
        return ExportSettings()
    if not path.exists():
        raise FileNotFoundError(f"Export settings not found: {path}")
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Export settings in {path} are not valid YAML: {exc}") from exc
    if payload is not None and not isinstance(payload, dict):
        raise ValueError(f"Export settings in {path} must be a mapping")
    settings = ExportSettings.from_dict(payload)
    errors = settings.validate()
    if errors:
        raise ValueError(f"Invalid export settings in {path}: " + "; ".join(errors))
    return settings


__all__ = [
    "DocxExportSettings",
    "ExportSettings",
    "PdfExportSettings",
    "load_settings",
]
