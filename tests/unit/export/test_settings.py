"""Tests for export settings loading."""

import logging
from pathlib import Path

import pytest

from tenderdoc.export.settings import ExportSettings, PdfExportSettings, load_settings


def test_defaults_match_a4_print_surface():
    settings = load_settings(None)

    assert settings.pdf.viewport_width == 794
    assert settings.pdf.scale == 2.0
    assert settings.pdf.margin_pt == pytest.approx(28.35, abs=0.01)
    assert settings.docx.margin_inches == 1.0
    assert settings.validate() == []


def test_yaml_overrides_only_listed_values(tmp_path: Path):
    path = tmp_path / "export.yaml"
    path.write_text("pdf:\n  settle_delay_ms: 800\ndocx:\n  margin_inches: 0.5\n", encoding="utf-8")

    settings = load_settings(path)

    assert settings.pdf.settle_delay_ms == 800
    assert settings.pdf.jpeg_quality == 95
    assert settings.docx.margin_inches == 0.5


def test_unknown_keys_are_ignored_with_warning(tmp_path: Path, caplog):
    path = tmp_path / "export.yaml"
    path.write_text("pdf:\n  dpi: 300\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="tenderdoc.export.settings"):
        settings = load_settings(path)

    assert settings.pdf == PdfExportSettings()
    assert "dpi" in caplog.text


def test_invalid_values_rejected(tmp_path: Path):
    path = tmp_path / "export.yaml"
    path.write_text("pdf:\n  jpeg_quality: 0\n  scale: -1\n", encoding="utf-8")

    with pytest.raises(ValueError, match="jpeg_quality"):
        load_settings(path)


def test_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "absent.yaml")


def test_empty_yaml_gives_defaults(tmp_path: Path):
    path = tmp_path / "export.yaml"
    path.write_text("", encoding="utf-8")

    assert load_settings(path) == ExportSettings()


def test_malformed_yaml_is_a_value_error(tmp_path: Path):
    path = tmp_path / "export.yaml"
    path.write_text("pdf: [unclosed\n", encoding="utf-8")

    with pytest.raises(ValueError, match="not valid YAML"):
        load_settings(path)


@pytest.mark.parametrize("content", ["- a\n- b\n", "pdf: 5\n"])
def test_non_mapping_settings_rejected(tmp_path: Path, content):
    path = tmp_path / "export.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        load_settings(path)
