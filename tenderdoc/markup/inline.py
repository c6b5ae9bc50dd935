"""Inline style resolution for block-level HTML nodes.

``collect_runs`` flattens the inline content of one block into styled runs.
The style context is an immutable value: each element derives a new context
for its own subtree, so ``<b>`` on one branch can never leak into a sibling.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional

from .tree import ElementNode, Node, TextNode

DEFAULT_FONT_SIZE_PT = 11.0

_BOLD_TAGS = frozenset({"strong", "b"})
_ITALIC_TAGS = frozenset({"em", "i"})
_UNDERLINE_TAGS = frozenset({"u"})


class Alignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True, slots=True)
class StyleContext:
    bold: bool = False
    italic: bool = False
    underline: bool = False

    def enter(self, tag: str) -> "StyleContext":
        """Context for the children of an element named ``tag``."""

        if tag in _BOLD_TAGS and not self.bold:
            return replace(self, bold=True)
        if tag in _ITALIC_TAGS and not self.italic:
            return replace(self, italic=True)
        if tag in _UNDERLINE_TAGS and not self.underline:
            return replace(self, underline=True)
        return self


@dataclass(frozen=True, slots=True)
class StyledRun:
    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    size_pt: float = DEFAULT_FONT_SIZE_PT
    color: Optional[str] = None

    @classmethod
    def empty(cls, size_pt: float = DEFAULT_FONT_SIZE_PT) -> "StyledRun":
        return cls(text="", size_pt=size_pt)


def collect_runs(
    block: ElementNode,
    base: StyleContext = StyleContext(),
    size_pt: float = DEFAULT_FONT_SIZE_PT,
) -> List[StyledRun]:
    """Return the styled text runs of ``block`` (never an empty list)."""

    runs: List[StyledRun] = []
    _walk_children(block, base, size_pt, runs)
    if not runs:
        runs.append(StyledRun(text="", bold=base.bold, italic=base.italic, underline=base.underline, size_pt=size_pt))
    return runs


def _walk_children(parent: ElementNode, style: StyleContext, size_pt: float, runs: List[StyledRun]) -> None:
    last = len(parent.children) - 1
    for index, child in enumerate(parent.children):
        _walk(child, style, size_pt, runs, _whitespace_mode(last, index))


def _whitespace_mode(last: int, index: int) -> str:
    if last == 0:
        return "keep"
    if 0 < index < last:
        return "collapse"
    return "drop"


def _walk(node: Node, style: StyleContext, size_pt: float, runs: List[StyledRun], whitespace: str) -> None:
    if isinstance(node, TextNode):
        text = node.text
        if text and not text.strip():
            # Blank text: kept as the sole content of its parent, one space between siblings.
            if whitespace == "drop":
                return
            if whitespace == "collapse":
                text = " "
        if text:
            runs.append(
                StyledRun(
                    text=text,
                    bold=style.bold,
                    italic=style.italic,
                    underline=style.underline,
                    size_pt=size_pt,
                )
            )
        return
    _walk_children(node, style.enter(node.tag), size_pt, runs)


def resolve_alignment(node: ElementNode) -> Alignment:
    """Map the ``text-align`` declaration of a block's ``style`` attribute."""

    for declaration in node.get("style").split(";"):
        name, _, value = declaration.partition(":")
        if name.strip().lower() != "text-align":
            continue
        value = value.replace("!important", "").strip().lower()
        if value == "center":
            return Alignment.CENTER
        if value == "right":
            return Alignment.RIGHT
        return Alignment.LEFT
    return Alignment.LEFT


__all__ = [
    "Alignment",
    "DEFAULT_FONT_SIZE_PT",
    "StyleContext",
    "StyledRun",
    "collect_runs",
    "resolve_alignment",
]
