"""Document model consumed by both exporters.

The editor hands over a title, the section payload and (for bid proposals) the
list of attached supporting documents.  Everything here is immutable: the
exporters read a :class:`TenderDocument` as a value and never write back to it.

Sections are always rendered in ascending ``order``.  Python's sort is stable,
so sections sharing the same ``order`` keep the order in which the editor
supplied them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union


class DocumentKind(str, Enum):
    """Which editor produced the document."""

    TENDER = "tender"
    BID_PROPOSAL = "bid_proposal"

    @property
    def default_filename(self) -> str:
        if self is DocumentKind.BID_PROPOSAL:
            return "bid-proposal"
        return "tender-document"


def _order_value(raw: Any) -> float:
    """Coerce ``order`` to a number; integral values stay ints."""

    if raw is None or raw == "":
        return 0
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return raw
    number = float(raw)
    return int(number) if number.is_integer() else number


@dataclass(frozen=True, slots=True)
class Section:
    """One titled block of HTML content within a document."""

    id: str
    title: str
    content: str = ""
    order: float = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], fallback_id: str = "") -> "Section":
        return cls(
            id=str(data.get("id") or fallback_id),
            title=str(data.get("title") or ""),
            content=data.get("content") or "",
            order=_order_value(data.get("order")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "content": self.content, "order": self.order}


@dataclass(frozen=True, slots=True)
class AttachedDocument:
    """A supporting file listed in the bid-proposal appendix."""

    name: str
    url: str = ""
    type: str = ""
    size: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AttachedDocument":
        return cls(
            name=str(data.get("name") or ""),
            url=str(data.get("url") or ""),
            type=str(data.get("type") or ""),
            size=int(data.get("size") or 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "url": self.url, "type": self.type, "size": self.size}


SectionsInput = Union[Mapping[str, Any], Iterable[Any]]


def ordered_sections(sections: SectionsInput) -> Tuple[Section, ...]:
    """Return sections sorted by ``order``, ties broken by input position.

    Accepts either the editor's native ``{id: {...}}`` mapping or any iterable
    of :class:`Section` objects / section dictionaries.
    """

    items: List[Section] = []
    if isinstance(sections, Mapping):
        for key, value in sections.items():
            items.append(value if isinstance(value, Section) else Section.from_dict(value, fallback_id=str(key)))
    else:
        for index, value in enumerate(sections):
            items.append(value if isinstance(value, Section) else Section.from_dict(value, fallback_id=str(index)))
    return tuple(sorted(items, key=lambda section: section.order))


@dataclass(frozen=True, slots=True)
class TenderDocument:
    """Title, ordered sections and optional attachments of one document."""

    title: str
    sections: Tuple[Section, ...] = ()
    attachments: Tuple[AttachedDocument, ...] = ()
    kind: DocumentKind = DocumentKind.TENDER

    @classmethod
    def build(
        cls,
        title: str,
        sections: SectionsInput,
        attachments: Optional[Iterable[Any]] = None,
        kind: DocumentKind = DocumentKind.TENDER,
    ) -> "TenderDocument":
        """Normalise raw editor input into an ordered, immutable document."""

        attached = tuple(
            item if isinstance(item, AttachedDocument) else AttachedDocument.from_dict(item)
            for item in (attachments or ())
        )
        return cls(title=title or "", sections=ordered_sections(sections), attachments=attached, kind=kind)

    def iter_sections(self) -> Iterator[Section]:
        yield from self.sections

    @property
    def has_appendix(self) -> bool:
        return bool(self.attachments)

    @property
    def default_filename(self) -> str:
        return self.title.strip() or self.kind.default_filename

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "kind": self.kind.value,
            "sections": [section.to_dict() for section in self.sections],
            "attached_documents": [doc.to_dict() for doc in self.attachments],
        }

    def save_json(self, path: Path) -> None:
        path.write_text(json.dumps(self.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TenderDocument":
        """Construct a document from an editor payload.

        ``attached_documents`` (or ``attachments``) is optional.  When ``kind``
        is absent, a payload with attachments is treated as a bid proposal.
        """

        attachments = data.get("attached_documents")
        if attachments is None:
            attachments = data.get("attachments") or []
        kind_value = data.get("kind")
        if kind_value:
            kind = DocumentKind(kind_value)
        else:
            kind = DocumentKind.BID_PROPOSAL if attachments else DocumentKind.TENDER
        return cls.build(
            title=str(data.get("title") or ""),
            sections=data.get("sections") or {},
            attachments=attachments,
            kind=kind,
        )

    @classmethod
    def load_json(cls, path: Path) -> "TenderDocument":
        return cls.from_dict(json.loads(path.read_text(encoding="utf-8")))


__all__ = [
    "AttachedDocument",
    "DocumentKind",
    "Section",
    "TenderDocument",
    "ordered_sections",
]
