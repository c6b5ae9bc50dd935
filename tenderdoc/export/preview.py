"""Print-ready markup for the PDF path.

Mirrors what the editor shows in its preview pane: a centered title, the
sections in order with a page-break marker between consecutive sections, and
the supporting-documents appendix when attachments exist.
"""

from __future__ import annotations

import html
from typing import List

from tenderdoc.core.document import TenderDocument

from .docx_builder import APPENDIX_INTRO, APPENDIX_TITLE

PAGE_BREAK_MARKER = '<div class="page-break" style="page-break-after: always"></div>'


def build_print_html(document: TenderDocument) -> str:
    parts: List[str] = []
    if document.title:
        parts.append(
            '<h1 style="text-align: center; font-size: 22pt; margin-bottom: 20px">'
            f"{html.escape(document.title)}</h1>"
        )

    sections = document.sections
    for index, section in enumerate(sections):
        parts.append(f'<div class="section" data-section-id="{html.escape(section.id, quote=True)}">')
        parts.append(f"<div>{section.content or ''}</div>")
        if index < len(sections) - 1:
            parts.append(PAGE_BREAK_MARKER)
        parts.append("</div>")

    if document.attachments:
        parts.append('<div class="section-break appendix" style="page-break-before: always">')
        parts.append(f"<h2>{html.escape(APPENDIX_TITLE)}</h2>")
        parts.append(f"<p>{html.escape(APPENDIX_INTRO)}</p>")
        parts.append('<ul style="padding-left: 24px">')
        for attachment in document.attachments:
            parts.append(
                f'<li><a href="{html.escape(attachment.url, quote=True)}">'
                f"{html.escape(attachment.name)}</a></li>"
            )
        parts.append("</ul>")
        parts.append("</div>")

    return "\n".join(parts)


__all__ = ["PAGE_BREAK_MARKER", "build_print_html"]
