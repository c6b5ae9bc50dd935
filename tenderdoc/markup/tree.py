"""Lenient HTML fragment parsing into a small element/text tree.

Editor content arrives as HTML fragments that are frequently incomplete
(unclosed tags, stray ``<br>``, tables without ``<tbody>``).  BeautifulSoup with
the lxml backend repairs them the way a browser would; the result is then
copied into plain :class:`ElementNode` / :class:`TextNode` values so the
exporters never depend on the parser library directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Tuple, Union

from bs4 import BeautifulSoup
from bs4.element import (
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Tag,
)

logger = logging.getLogger(__name__)

ROOT_TAG = "#fragment"

# Containers whose text must never reach the document.
_DROPPED_TAGS = frozenset({"script", "style", "template", "noscript", "head"})
_IGNORED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction, CData)


@dataclass(frozen=True, slots=True)
class TextNode:
    text: str


@dataclass(frozen=True, slots=True)
class ElementNode:
    tag: str
    attrs: Dict[str, str] = field(default_factory=dict)
    children: Tuple["Node", ...] = ()

    def get(self, name: str, default: str = "") -> str:
        return self.attrs.get(name, default)

    def child_elements(self, *tags: str) -> Iterator["ElementNode"]:
        """Yield direct element children, optionally restricted to ``tags``."""

        for child in self.children:
            if isinstance(child, ElementNode) and (not tags or child.tag in tags):
                yield child

    def iter_elements(self) -> Iterator["ElementNode"]:
        """Depth-first walk over all descendant elements (document order)."""

        stack = [iter(self.children)]
        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                continue
            if isinstance(child, ElementNode):
                yield child
                stack.append(iter(child.children))

    def find_all(self, *tags: str) -> Iterator["ElementNode"]:
        for element in self.iter_elements():
            if element.tag in tags:
                yield element

    def text_content(self) -> str:
        parts = []
        stack = [iter(self.children)]
        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
            elif isinstance(child, TextNode):
                parts.append(child.text)
            else:
                stack.append(iter(child.children))
        return "".join(parts)

    @property
    def is_empty(self) -> bool:
        return not self.children


Node = Union[ElementNode, TextNode]


def empty_fragment() -> ElementNode:
    return ElementNode(tag=ROOT_TAG)


def parse_fragment(markup: str) -> ElementNode:
    """Parse an HTML fragment into an :class:`ElementNode` rooted at ``#fragment``.

    Never raises: markup that cannot be turned into a tree yields an empty
    fragment and a warning, so one broken section degrades to "no content"
    instead of aborting an export.
    """

    if not markup or not markup.strip():
        return empty_fragment()

    try:
        soup = BeautifulSoup(markup, "lxml")
        body = soup.body
        if body is None:
            return empty_fragment()
        return ElementNode(tag=ROOT_TAG, children=_convert_children(body.children))
    except Exception as exc:  # parser or recursion failure on pathological input
        logger.warning("Unable to parse HTML fragment (%s chars): %s", len(markup), exc)
        return empty_fragment()


def _convert_children(children: Iterable[object]) -> Tuple[Node, ...]:
    nodes = []
    for child in children:
        if isinstance(child, Tag):
            name = (child.name or "").lower()
            if name in _DROPPED_TAGS:
                continue
            nodes.append(
                ElementNode(
                    tag=name,
                    attrs=_convert_attrs(child.attrs),
                    children=_convert_children(child.children),
                )
            )
        elif isinstance(child, NavigableString) and not isinstance(child, _IGNORED_STRINGS):
            text = str(child)
            if text:
                nodes.append(TextNode(text))
    return tuple(nodes)


def _convert_attrs(attrs: Dict[str, object]) -> Dict[str, str]:
    converted: Dict[str, str] = {}
    for key, value in (attrs or {}).items():
        if isinstance(value, (list, tuple)):
            converted[key.lower()] = " ".join(str(item) for item in value)
        else:
            converted[key.lower()] = "" if value is None else str(value)
    return converted


__all__ = [
    "ElementNode",
    "Node",
    "ROOT_TAG",
    "TextNode",
    "empty_fragment",
    "parse_fragment",
]
