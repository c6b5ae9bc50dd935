"""Tests for the hermetic render surface."""

import pytest

from tenderdoc.export import surface
from tenderdoc.export.errors import RasterizationError
from tenderdoc.export.settings import PdfExportSettings
from tenderdoc.export.surface import BASE_STYLESHEET, build_surface_html, capture_bitmap


def test_surface_html_is_self_contained():
    page = build_surface_html("<h1>Title</h1>")

    assert BASE_STYLESHEET.strip() in page
    assert "<h1>Title</h1>" in page
    assert "<link" not in page
    assert "<script" not in page


def test_base_stylesheet_uses_plain_colors_only():
    assert "oklch" not in BASE_STYLESHEET
    assert "var(--" not in BASE_STYLESHEET


def test_undecodable_capture_is_a_rasterization_error(monkeypatch):
    monkeypatch.setattr(surface, "_screenshot", lambda html, settings: b"not an image")

    with pytest.raises(RasterizationError, match="could not be decoded"):
        capture_bitmap("<p>x</p>")


def test_unexpected_browser_failure_is_a_rasterization_error(monkeypatch):
    sync_api = pytest.importorskip("playwright.sync_api")

    def launch_fails():
        raise OSError("browser executable missing")

    monkeypatch.setattr(sync_api, "sync_playwright", launch_fails)

    with pytest.raises(RasterizationError, match="browser executable missing"):
        capture_bitmap("<p>x</p>")


@pytest.mark.slow
def test_capture_bitmap_in_headless_browser():
    settings = PdfExportSettings(settle_delay_ms=50)
    try:
        bitmap = capture_bitmap("<h1>Smoke</h1><p>PDF raster</p>", settings)
    except RasterizationError as exc:
        pytest.skip(f"Playwright/Chromium unavailable: {exc}")

    try:
        assert bitmap.mode == "RGB"
        assert bitmap.width == int(settings.viewport_width * settings.scale)
        assert bitmap.height >= int(settings.viewport_height * settings.scale)
    finally:
        bitmap.close()
