#!/usr/bin/env python3
"""
HTML to PDF Rendering CLI

Renders HTML files to PDF with wkhtmltopdf using the rendering context.

Commands:
    render         - Render an HTML file to a PDF file
    help-renderer  - Show the renderer's extended help
    presets        - List available render presets

Examples:\n

    render_pdf.py render page.html -o page.pdf --title "Quarterly Report"

    render_pdf.py render page.html -o page.pdf --title Draft --preset print_draft

    render_pdf.py render page.html -o page.pdf --title Notes --orientation Landscape --toc

    render_pdf.py help-renderer
"""

import os
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from wkpdf.contexts.delivery import OutputMode, deliver
from wkpdf.contexts.rendering import RenderPipeline, WkpdfError
from wkpdf.contexts.rendering.config import DEFAULT_BINPATH
from wkpdf.contexts.rendering.logger import setup_rendering_logger
from wkpdf.contexts.rendering.presets import apply_presets, load_render_presets
from wkpdf.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
SCRATCH_DIR = os.getenv("WKPDF_SCRATCH_DIR")


app = typer.Typer(
    help="Render HTML files to PDF with wkhtmltopdf",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("render")
def render_command(
    html_file: Annotated[
        Path,
        typer.Argument(help="HTML file to render", exists=True, dir_okay=False, readable=True),
    ],
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Where to save the PDF"),
    ],
    title: Annotated[
        Optional[str],
        typer.Option("--title", "-t", help="PDF document title (default: HTML file stem)"),
    ] = None,
    orientation: Annotated[
        Optional[str],
        typer.Option("--orientation", help="Portrait or Landscape"),
    ] = None,
    page_size: Annotated[
        Optional[str],
        typer.Option("--page-size", help="Page size, e.g. A4 or Letter"),
    ] = None,
    copies: Annotated[
        Optional[int],
        typer.Option("--copies", help="Number of copies", min=1),
    ] = None,
    toc: Annotated[
        Optional[bool],
        typer.Option("--toc/--no-toc", help="Generate a table of contents"),
    ] = None,
    grayscale: Annotated[
        Optional[bool],
        typer.Option("--grayscale/--color", help="Render in grayscale"),
    ] = None,
    binpath: Annotated[
        Optional[str],
        typer.Option("--binpath", help=f"Renderer executable (default: {DEFAULT_BINPATH})"),
    ] = None,
    scratch_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--scratch-dir", help="Absolute directory for the scratch HTML file (default: output dir)"
        ),
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", help="Seconds before the renderer is killed"),
    ] = None,
    preset: Annotated[
        Optional[List[str]],
        typer.Option("--preset", "-p", help="Render preset to apply (repeatable)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Write a session log with renderer diagnostics"),
    ] = False,
):
    """
    Render an HTML file to PDF.

    Explicit options override presets; presets are applied in the order given.

    Examples:\n

        $ render_pdf.py render report.html -o report.pdf --title "Report"

        $ render_pdf.py render report.html -o report.pdf -p layout_letter_landscape -p print_draft
    """
    output = output.resolve()
    if scratch_dir is None:
        scratch_dir = Path(SCRATCH_DIR) if SCRATCH_DIR else output.parent

    options = {
        "html": html_file.read_text(encoding="utf-8"),
        "title": title or html_file.stem,
        "path": scratch_dir,
    }
    explicit = {
        "orientation": orientation,
        "page_size": page_size,
        "copies": copies,
        "toc": toc,
        "grayscale": grayscale,
        "binpath": binpath,
        "timeout": timeout,
    }
    options.update({key: value for key, value in explicit.items() if value is not None})

    typer.secho(f"\nRendering: {html_file}", fg=typer.colors.BLUE, bold=True)

    try:
        options = apply_presets(options, preset or [])
        pipeline = RenderPipeline.from_options(options)
        if verbose:
            log_file = setup_rendering_logger(LOGS_PATH / f"render_{now()}", pipeline.config.binpath)
            typer.echo(f"  Log: {log_file}")
        result = deliver(pipeline, OutputMode.SAVE, output)
    except WkpdfError as e:
        typer.secho(f"✗ Render failed: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho("✓ Render succeeded", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  PDF: {result.saved_to}\n")


@app.command("help-renderer")
def help_renderer_command(
    binpath: Annotated[
        Optional[str],
        typer.Option("--binpath", help=f"Renderer executable (default: {DEFAULT_BINPATH})"),
    ] = None,
):
    """Print the renderer's --extended-help output."""
    options = {"path": Path.cwd().resolve()}
    if binpath:
        options["binpath"] = binpath

    try:
        typer.echo(RenderPipeline.from_options(options).get_help())
    except WkpdfError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("presets")
def presets_command():
    """List available render presets."""
    try:
        presets = load_render_presets()
    except WkpdfError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    for name, options in presets.items():
        settings = ", ".join(f"{key}={value}" for key, value in options.items())
        typer.echo(f"  {name:<24} {settings}")


if __name__ == "__main__":
    app()
