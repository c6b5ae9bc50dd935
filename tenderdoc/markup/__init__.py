"""HTML fragment parsing and inline style resolution."""

from .inline import (
    Alignment,
    DEFAULT_FONT_SIZE_PT,
    StyleContext,
    StyledRun,
    collect_runs,
    resolve_alignment,
)
from .tree import ElementNode, Node, TextNode, empty_fragment, parse_fragment

__all__ = [
    "Alignment",
    "DEFAULT_FONT_SIZE_PT",
    "ElementNode",
    "Node",
    "StyleContext",
    "StyledRun",
    "TextNode",
    "collect_runs",
    "empty_fragment",
    "parse_fragment",
    "resolve_alignment",
]
