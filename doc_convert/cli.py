"""
CLI entry point: convert documents from the shell.

    doc-convert convert report.docx -o out/report.md
    doc-convert batch a.docx b.html -d out -f txt
    doc-convert validate report.docx
    doc-convert formats
    doc-convert render page.html -f txt          # core renderer only, prints to stdout
    doc-convert config show
    doc-convert config set pdf_max_lines 2000
"""

import json
import logging
from pathlib import Path

import typer

from doc_convert.api import batch_convert, convert_document, get_supported_formats, validate_document
from doc_convert.config import get_config_path, load_settings, update_setting
from doc_convert.converters.base import image_store_for
from doc_convert.models import ConversionOptions, DocumentMetadata, RenderWarning
from doc_convert.render import render_to_markdown, render_to_plain_text

app = typer.Typer(
    name="doc-convert",
    help="Convert Word, HTML, Markdown, text and PDF documents between formats.",
)
config_app = typer.Typer(help="Show or change settings in .doc_convert.json.")
app.add_typer(config_app, name="config")


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(message)s")


@app.command("convert")
def convert(
    input_path: Path = typer.Argument(..., help="Document to convert", path_type=Path),
    output: Path = typer.Option(..., "-o", "--output", help="Output file", path_type=Path),
    output_format: str | None = typer.Option(
        None,
        "-f",
        "--format",
        help="md, html, txt or pdf (default: from the output suffix)",
    ),
    no_images: bool = typer.Option(False, "--no-images", help="Drop images instead of saving them"),
    title: str | None = typer.Option(None, "--title", help="Title for HTML/PDF output"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Print progress"),
) -> None:
    """Convert one document."""
    _setup_logging(verbose)
    options = ConversionOptions(
        include_images=not no_images,
        metadata=DocumentMetadata(title=title) if title else None,
    )
    result = convert_document(input_path, output, output_format, options=options)
    for w in result.warnings:
        typer.echo(f"Warning: {w}", err=True)
    if not result.success:
        typer.echo(f"Error: {result.error}", err=True)
        raise typer.Exit(1)
    typer.echo(f"{result.message}: {result.output_path} ({result.output_size} bytes, {result.duration_ms} ms)")


@app.command("batch")
def batch(
    inputs: list[Path] = typer.Argument(..., help="Documents to convert", path_type=Path),
    output_dir: Path = typer.Option(..., "-d", "--output-dir", help="Directory for outputs", path_type=Path),
    output_format: str = typer.Option(..., "-f", "--format", help="md, html, txt or pdf"),
    jobs: int = typer.Option(1, "-j", "--jobs", min=1, help="Documents converted in parallel"),
    no_images: bool = typer.Option(False, "--no-images", help="Drop images instead of saving them"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Print progress"),
) -> None:
    """Convert several documents into one directory."""
    _setup_logging(verbose)
    result = batch_convert(
        inputs,
        output_dir,
        output_format,
        options=ConversionOptions(include_images=not no_images),
        max_workers=jobs,
    )
    for r in result.results:
        if r.success:
            typer.echo(f"  ok    {r.input_path} → {r.output_path}")
        else:
            typer.echo(f"  FAIL  {r.input_path}: {r.error}", err=True)
    typer.echo(
        f"{result.success_count}/{result.total_files} converted in {result.total_duration_ms} ms"
    )
    if result.failure_count:
        raise typer.Exit(1)


@app.command("validate")
def validate(
    path: Path = typer.Argument(..., help="Document to check", path_type=Path),
) -> None:
    """Check that a document exists and has a supported format."""
    v = validate_document(path)
    if not v.is_valid:
        typer.echo(f"Invalid: {v.error}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Valid {v.format} document ({v.size} bytes)")


@app.command("formats")
def formats() -> None:
    """List supported input and output formats."""
    f = get_supported_formats()
    typer.echo(f"Input:  {', '.join(f.input)}")
    typer.echo(f"Output: {', '.join(f.output)}")


@app.command("render")
def render(
    html_file: Path = typer.Argument(..., help="HTML file to render", path_type=Path),
    output_format: str = typer.Option("md", "-f", "--format", help="md or txt"),
    output: Path | None = typer.Option(
        None,
        "-o",
        "--output",
        help="Write here instead of stdout (Markdown images are saved next to it)",
        path_type=Path,
    ),
) -> None:
    """Run the HTML renderer (pagination repair, code merging, tables) on an HTML file."""
    if not html_file.is_file():
        typer.echo(f"Error: file not found: {html_file}", err=True)
        raise typer.Exit(1)
    if output_format not in ("md", "txt"):
        typer.echo(f"Error: unknown render format '{output_format}'. Choose: md, txt", err=True)
        raise typer.Exit(1)

    settings = load_settings()
    html = html_file.read_text(encoding="utf-8", errors="replace")
    warnings: list[RenderWarning] = []
    if output_format == "md":
        images = image_store_for(output, settings) if output is not None else None
        text = render_to_markdown(
            html,
            images=images,
            default_alt=settings.default_image_alt,
            limits=settings.render_limits(),
            warnings=warnings,
        )
    else:
        text = render_to_plain_text(
            html,
            default_alt=settings.default_image_alt,
            limits=settings.render_limits(),
            warnings=warnings,
        )
    for w in warnings:
        typer.echo(f"Warning: {w}", err=True)

    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    typer.echo(f"Wrote {output}")


@config_app.command("show")
def config_show() -> None:
    """Print the settings in effect and where they are read from."""
    path = get_config_path()
    typer.echo(f"# {path}{'' if path.is_file() else ' (not created yet, defaults)'}")
    typer.echo(json.dumps(load_settings().model_dump(), indent=2))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Setting name (see 'config show')"),
    value: str = typer.Argument(..., help="New value; 'null' clears an optional ceiling"),
) -> None:
    """Change one setting and save it."""
    try:
        settings = update_setting(key, value)
    except KeyError as e:
        typer.echo(f"Error: {e.args[0]}", err=True)
        raise typer.Exit(1)
    except ValueError as e:
        typer.echo(f"Error: invalid value for {key}: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"{key} = {json.dumps(getattr(settings, key))}")


def main() -> None:
    """Entry point for the doc-convert console script."""
    app()


if __name__ == "__main__":
    main()
