"""Pytest fixtures for tenderdoc export tests."""

from io import BytesIO
from typing import Dict

import pytest
from docx import Document

from tenderdoc.core.document import AttachedDocument, DocumentKind, TenderDocument


@pytest.fixture
def sections_payload() -> Dict[str, dict]:
    """Editor-shaped section mapping, deliberately not in ``order``."""

    return {
        "pricing": {"id": "pricing", "title": "C", "content": "<p>Content C</p>", "order": 3},
        "cover_page": {"id": "cover_page", "title": "A", "content": "<p>Content A</p>", "order": 1},
        "scope": {"id": "scope", "title": "B", "content": "<p>Content B</p>", "order": 2},
    }


@pytest.fixture
def attachments():
    return [
        AttachedDocument(name="Company Registration.pdf", url="https://files.example/reg.pdf", type="pdf", size=1024),
        AttachedDocument(name="Tax Clearance.pdf", url="https://files.example/tax.pdf", type="pdf", size=2048),
    ]


@pytest.fixture
def tender_document(sections_payload) -> TenderDocument:
    return TenderDocument.build(title="Road Upgrade Tender", sections=sections_payload)


@pytest.fixture
def proposal_document(sections_payload, attachments) -> TenderDocument:
    return TenderDocument.build(
        title="Bid Proposal",
        sections=sections_payload,
        attachments=attachments,
        kind=DocumentKind.BID_PROPOSAL,
    )


def single_section(content: str) -> TenderDocument:
    return TenderDocument.build(
        title="Single",
        sections=[{"id": "only", "title": "Only", "content": content, "order": 1}],
    )


@pytest.fixture
def make_document():
    return single_section


@pytest.fixture
def open_docx():
    def _open(data: bytes):
        return Document(BytesIO(data))

    return _open
