"""Tender document data model."""

from .document import (
    AttachedDocument,
    DocumentKind,
    Section,
    TenderDocument,
    ordered_sections,
)

__all__ = [
    "AttachedDocument",
    "DocumentKind",
    "Section",
    "TenderDocument",
    "ordered_sections",
]
