"""
CLI Interface
=============
Command-line interface for the PDF composer.

Usage:
    python -m pdfcomposer render <input.md> <output.pdf> [options]
    python -m pdfcomposer check <file.pdf>
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .engine import ComposerConfig, ComposerEngine
from .exceptions import ComposerError
from .models import PageSize, ValidationReport

console = Console()

PAGE_SIZES = {size.name.lower(): size for size in PageSize}


@click.group()
@click.version_option(version=__version__, prog_name="pdfcomposer")
def cli():
    """PDF Composer: build PDF documents from block-structured text."""
    pass


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("output_path", type=click.Path(dir_okay=False))
@click.option(
    "--page-size", "-s",
    default="letter",
    type=click.Choice(sorted(PAGE_SIZES)),
    help="Named page size",
)
@click.option(
    "--margin", "-m",
    default=72.0,
    type=float,
    help="Page margin in points",
)
@click.option("--title", default=None, help="Document title")
@click.option("--author", default=None, help="Document author")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.option(
    "--log-file",
    default=None,
    help="Path to log file",
)
def render(
    input_path: str,
    output_path: str,
    page_size: str,
    margin: float,
    title: str,
    author: str,
    log_level: str,
    log_file: str,
):
    """Render a Markdown-style text file to PDF."""
    config = ComposerConfig.for_page_size(
        PAGE_SIZES[page_size],
        margin=margin,
        title=title,
        author=author,
        log_level=log_level,
        log_file=log_file,
    )

    text = Path(input_path).read_text(encoding="utf-8")

    try:
        engine = ComposerEngine(config)
        data = engine.render(text)
    except ComposerError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(data)

    report = engine.validate(data)
    console.print(
        Panel.fit(
            f"[bold cyan]PDF Composer v{__version__}[/]\n"
            f"[dim]Wrote {out}: {report.page_count} pages, "
            f"{len(data):,} bytes[/]",
            border_style="cyan",
        )
    )


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True, dir_okay=False))
def check(pdf_path: str):
    """Validate the structure of a PDF produced by this tool."""
    data = Path(pdf_path).read_bytes()
    engine = ComposerEngine(ComposerConfig(log_level="WARNING"))
    report = engine.validate(data)

    _display_validation_table(report)
    if not report.is_valid:
        sys.exit(1)


# ─── Display Helpers ──────────────────────────────────────────────────────────


def _display_validation_table(report: ValidationReport):
    """Display a validation report as a rich table."""
    table = Table(title="Validation Report", border_style="green")
    table.add_column("Check", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("Status", justify="center")

    def status_icon(ok: bool) -> str:
        return "[green]✓[/]" if ok else "[red]✗[/]"

    table.add_row("Header", "%PDF-", status_icon(report.header_ok))
    table.add_row("End marker", "%%EOF", status_icon(report.eof_ok))
    table.add_row("startxref", "", status_icon(report.startxref_ok))
    table.add_row(
        "Objects",
        str(report.object_count),
        status_icon(report.xref_entries == report.object_count + 1),
    )
    table.add_row(
        "Trailer /Size",
        str(report.trailer_size),
        status_icon(report.trailer_size == report.xref_entries),
    )
    table.add_row(
        "Bad Offsets",
        str(len(report.bad_offsets)),
        status_icon(not report.bad_offsets),
    )
    table.add_row("Pages", str(report.page_count), "")
    table.add_row("Images", str(report.image_count), "")
    table.add_row("Links", str(report.annotation_count), "")

    console.print()
    console.print(table)
    console.print(
        "[green]Document is structurally valid[/]"
        if report.is_valid
        else "[red]Document failed validation[/]"
    )
    console.print()


# ─── Entry point (for python -m pdfcomposer.cli) ──────────────────────────────


if __name__ == "__main__":
    cli()
