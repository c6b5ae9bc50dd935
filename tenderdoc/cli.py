"""
Tenderdoc Command Line Interface.

Exports editor documents (JSON payloads) to DOCX or rasterized PDF.
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from tenderdoc.core import TenderDocument
from tenderdoc.export import (
    ExportError,
    build_print_html,
    build_surface_html,
    export_document_docx,
    export_to_pdf,
    load_settings,
)

app = typer.Typer(
    name="tenderdoc",
    help="Tender document / bid proposal export (DOCX, PDF)",
    add_completion=False,
)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _load_document(path: Path) -> TenderDocument:
    if not path.exists():
        typer.secho(f"✗ Document not found: {path}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    try:
        return TenderDocument.load_json(path)
    except (ValueError, TypeError, KeyError) as e:
        typer.secho(f"✗ Invalid document payload: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _fail(label: str, error: Exception, verbose: bool) -> None:
    typer.secho(f"✗ Failed to export {label}: {error}", fg=typer.colors.RED, err=True)
    if verbose:
        import traceback

        traceback.print_exc()
    raise typer.Exit(code=1)


@app.command()
def docx(
    document_file: Path = typer.Argument(..., help="Document JSON (title, sections, attached_documents)"),
    output_dir: Path = typer.Option(Path("."), "--output-dir", "-o", help="Directory for the exported file"),
    filename: Optional[str] = typer.Option(
        None, "--filename", "-n", help="Output name without extension (defaults to the title)"
    ),
    settings_file: Optional[Path] = typer.Option(None, "--settings", "-s", help="Export settings YAML"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Export a document to Word (.docx).

    Example:
        tenderdoc docx proposal.json --output-dir ./out
    """
    _setup_logging(verbose)
    document = _load_document(document_file)

    try:
        settings = load_settings(settings_file)
        result = export_document_docx(document, output_dir, filename, settings)
    except (ExportError, ValueError, OSError) as e:
        _fail("Word document", e, verbose)

    typer.secho(f"✓ Word document written: {result.output_path}", fg=typer.colors.GREEN, bold=True)
    for warning in result.warnings:
        typer.secho(f"  ⚠ {warning}", fg=typer.colors.YELLOW)


@app.command()
def pdf(
    document_file: Path = typer.Argument(..., help="Document JSON (title, sections, attached_documents)"),
    output_dir: Path = typer.Option(Path("."), "--output-dir", "-o", help="Directory for the exported file"),
    filename: Optional[str] = typer.Option(
        None, "--filename", "-n", help="Output name without extension (defaults to the title)"
    ),
    settings_file: Optional[Path] = typer.Option(None, "--settings", "-s", help="Export settings YAML"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Export a document to an image-based PDF.

    Requires Chromium for Playwright (`playwright install chromium`).
    """
    _setup_logging(verbose)
    document = _load_document(document_file)

    try:
        settings = load_settings(settings_file)
        result = export_to_pdf(
            build_print_html(document),
            filename or document.default_filename,
            output_dir,
            settings=settings,
        )
    except (ExportError, ValueError, OSError) as e:
        _fail("PDF", e, verbose)

    typer.secho(
        f"✓ PDF written: {result.output_path} ({result.page_count} pages)",
        fg=typer.colors.GREEN,
        bold=True,
    )


@app.command()
def preview(
    document_file: Path = typer.Argument(..., help="Document JSON (title, sections, attached_documents)"),
    output: Path = typer.Option(Path("preview.html"), "--output", "-o", help="HTML file to write"),
):
    """Write the print-ready HTML that the PDF export rasterises."""
    document = _load_document(document_file)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(build_surface_html(build_print_html(document)), encoding="utf-8")
    typer.echo(f"Preview written: {output}")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
