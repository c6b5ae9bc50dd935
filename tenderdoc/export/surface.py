"""Hermetic render surface backed by headless Chromium (Playwright).

The caller's markup is rendered inside a fresh browser context seeded only
with :data:`BASE_STYLESHEET`.  No host stylesheet, script or network resource
can reach the page: scripts are disabled and every request is aborted.  The
page is then captured as one tall PNG bitmap at ``scale`` device pixels per
CSS pixel.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Optional

from PIL import Image

from .errors import RasterizationError
from .settings import PdfExportSettings

logger = logging.getLogger(__name__)

BASE_STYLESHEET = """
* { margin: 0; padding: 0; box-sizing: border-box; }
body {
  font-family: Arial, Helvetica, sans-serif;
  font-size: 11pt;
  line-height: 1.6;
  color: #000000;
  background: #ffffff;
  padding: 40px 50px;
}
h1 { font-size: 22pt; font-weight: 700; margin-bottom: 12px; color: #111; }
h2 { font-size: 17pt; font-weight: 700; margin-bottom: 10px; margin-top: 18px; color: #111; }
h3 { font-size: 14pt; font-weight: 600; margin-bottom: 8px; margin-top: 14px; color: #222; }
h4 { font-size: 12pt; font-weight: 600; margin-bottom: 6px; margin-top: 10px; color: #333; }
p { margin-bottom: 8px; color: #222; }
ul, ol { padding-left: 28px; margin-bottom: 10px; }
li { margin-bottom: 4px; color: #222; }
u { text-decoration: underline; text-underline-offset: 2px; }
a { color: #2563eb; text-decoration: underline; }
table { width: 100%; border-collapse: collapse; margin: 12px 0; font-size: 10pt; }
th, td { border: 1px solid #888; padding: 6px 10px; text-align: left; }
th { background: #e5e5e5; font-weight: 600; }
tr:nth-child(even) td { background: #f5f5f5; }
strong, b { font-weight: 700; }
em, i { font-style: italic; }
.section-break { margin-top: 30px; padding-top: 20px; border-top: 1px solid #ccc; }
.page-break { break-after: page; height: 0; }
"""

_SURFACE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8" />
<style>
{css}
</style>
</head>
<body>
{body}
</body>
</html>
"""


def build_surface_html(inner_html: str, css_text: Optional[str] = None) -> str:
    """Wrap the caller's markup in a standalone page with the base stylesheet."""

    return _SURFACE_TEMPLATE.format(css=css_text or BASE_STYLESHEET, body=inner_html or "")


def capture_bitmap(inner_html: str, settings: Optional[PdfExportSettings] = None) -> Image.Image:
    """Render ``inner_html`` in an isolated page and return the full-page bitmap.

    The browser is closed on every path, including failures.
    """

    settings = settings or PdfExportSettings()
    png = _screenshot(build_surface_html(inner_html), settings)
    try:
        image = Image.open(BytesIO(png))
        image.load()
    except Exception as exc:
        raise RasterizationError(f"Captured bitmap could not be decoded: {exc}") from exc

    if image.mode != "RGB":
        converted = image.convert("RGB")
        image.close()
        image = converted
    logger.info("Captured bitmap %sx%s px (scale=%s)", image.width, image.height, settings.scale)
    return image


def _screenshot(document_html: str, settings: PdfExportSettings) -> bytes:
    try:
        from playwright.sync_api import Error as PlaywrightError, sync_playwright
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise RasterizationError(
            "Playwright is not installed. Install it via `pip install playwright` "
            "and run `playwright install chromium`."
        ) from exc

    try:
        with sync_playwright() as p:
            browser = p.chromium.launch()
            try:
                context = browser.new_context(
                    viewport={"width": settings.viewport_width, "height": settings.viewport_height},
                    device_scale_factor=settings.scale,
                    java_script_enabled=False,
                )
                try:
                    page = context.new_page()
                    page.route("**/*", lambda route: route.abort())
                    page.set_content(document_html, wait_until="load")
                    # Fixed settle delay; there is no reliable "painted" signal to wait on.
                    page.wait_for_timeout(settings.settle_delay_ms)
                    return page.screenshot(full_page=True, type="png")
                finally:
                    context.close()
            finally:
                browser.close()
    except PlaywrightError as exc:
        logger.error("Render surface failed: %s", exc)
        raise RasterizationError(f"Render surface failed: {exc}") from exc
    except Exception as exc:
        logger.error("Render surface failed unexpectedly: %s", exc)
        raise RasterizationError(f"Render surface failed: {exc}") from exc


__all__ = ["BASE_STYLESHEET", "build_surface_html", "capture_bitmap"]
