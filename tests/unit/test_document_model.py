"""Unit tests for the immutable document model."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from tenderdoc.core.document import (
    AttachedDocument,
    DocumentKind,
    Section,
    TenderDocument,
    ordered_sections,
)


def test_sections_sorted_by_order(sections_payload) -> None:
    ordered = ordered_sections(sections_payload)
    assert [section.title for section in ordered] == ["A", "B", "C"]


def test_order_ties_keep_input_position() -> None:
    ordered = ordered_sections(
        [
            {"id": "first", "title": "First", "order": 2},
            {"id": "second", "title": "Second", "order": 1},
            {"id": "third", "title": "Third", "order": 2},
        ]
    )
    assert [section.id for section in ordered] == ["second", "first", "third"]


def test_missing_order_counts_as_zero() -> None:
    ordered = ordered_sections({"b": {"title": "B", "order": 1}, "a": {"title": "A"}})
    assert [section.id for section in ordered] == ["a", "b"]


def test_mapping_key_used_as_fallback_id() -> None:
    (section,) = ordered_sections({"cover_page": {"title": "Cover", "content": None}})
    assert section.id == "cover_page"
    assert section.content == ""


def test_document_is_immutable(tender_document: TenderDocument) -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        tender_document.title = "changed"  # type: ignore[misc]
    assert isinstance(tender_document.sections, tuple)


def test_from_dict_detects_bid_proposal() -> None:
    document = TenderDocument.from_dict(
        {
            "title": "Proposal",
            "sections": [{"id": "s1", "title": "S1", "content": "<p>x</p>", "order": 1}],
            "attached_documents": [{"name": "cv.pdf", "url": "u", "type": "pdf", "size": "10"}],
        }
    )
    assert document.kind is DocumentKind.BID_PROPOSAL
    assert document.attachments == (AttachedDocument(name="cv.pdf", url="u", type="pdf", size=10),)
    assert document.has_appendix


def test_default_filename_falls_back_to_kind() -> None:
    assert TenderDocument.build(title="  ", sections=[]).default_filename == "tender-document"
    proposal = TenderDocument.build(title="", sections=[], kind=DocumentKind.BID_PROPOSAL)
    assert proposal.default_filename == "bid-proposal"
    assert TenderDocument.build(title="Bridge", sections=[]).default_filename == "Bridge"


def test_json_roundtrip(proposal_document: TenderDocument, tmp_path: Path) -> None:
    path = tmp_path / "document.json"
    proposal_document.save_json(path)
    restored = TenderDocument.load_json(path)

    assert restored == proposal_document
    assert [section.id for section in restored.sections] == ["cover_page", "scope", "pricing"]


def test_build_accepts_section_objects() -> None:
    sections = [Section(id="b", title="B", order=2), Section(id="a", title="A", order=1)]
    document = TenderDocument.build(title="T", sections=sections)
    assert [section.id for section in document.iter_sections()] == ["a", "b"]


def test_fractional_orders_are_compared_numerically() -> None:
    ordered = ordered_sections(
        [
            {"id": "late", "title": "Late", "order": 1.5},
            {"id": "early", "title": "Early", "order": 1.2},
            {"id": "first", "title": "First", "order": "1"},
        ]
    )

    assert [section.id for section in ordered] == ["first", "early", "late"]
    assert [section.order for section in ordered] == [1, 1.2, 1.5]
