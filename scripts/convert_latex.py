#!/usr/bin/env python3
"""
LaTeX to HTML Conversion CLI

Converts LaTeX resumes to styled standalone HTML pages using the conversion
and publishing contexts.

Commands:
    convert - Convert every .tex file in a directory and write the manifest
    single  - Convert a single LaTeX file
    site    - Write the site index page from the manifest
    history - Show recorded conversion attempts for a document

Examples:\n

    convert_latex.py convert                              # Convert the configured latex directory

    convert_latex.py convert --latex-dir latex --no-db    # Skip the audit database

    convert_latex.py single latex/resume.tex              # Convert one file

    convert_latex.py site                                 # Write public/index.html

    convert_latex.py history resume.tex                   # Show conversion attempts
"""

import json
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from vitae.contexts.conversion import convert_latex_to_html
from vitae.contexts.conversion.logger import setup_conversion_logger
from vitae.contexts.publishing import (
    ConversionAuditDatabase,
    convert_directory,
    write_site_index,
)
from vitae.contexts.publishing.logger import setup_publishing_logger
from vitae.utils.config import load_converter_config
from vitae.utils.timestamp import now

load_dotenv()
PROJECT_ROOT = Path(os.getenv("PROJECT_ROOT", os.getcwd()))
LOGS_PATH = Path(os.getenv("LOGS_PATH", str(PROJECT_ROOT / "outs" / "logs")))


def display_path(path: Path) -> str:
    """Return path relative to PROJECT_ROOT for cleaner display."""
    try:
        return str(path.resolve().relative_to(PROJECT_ROOT.resolve()))
    except ValueError:
        return str(path)


def configured_path(config: dict, key: str) -> Path:
    """Resolve a configured path (relative entries are relative to PROJECT_ROOT)."""
    path = Path(config["paths"][key])
    return path if path.is_absolute() else PROJECT_ROOT / path


app = typer.Typer(
    help="Convert LaTeX resumes to styled HTML pages with a manifest and audit log",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("convert")
def convert_command(
    latex_dir: Annotated[
        Optional[Path],
        typer.Option("--latex-dir", "-l", help="Directory of LaTeX sources (default: config)"),
    ] = None,
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Directory for HTML output (default: config)"),
    ] = None,
    manifest_file: Annotated[
        Optional[Path],
        typer.Option("--manifest", "-m", help="Manifest JSON path (default: config)"),
    ] = None,
    no_db: Annotated[
        bool,
        typer.Option("--no-db", help="Don't record attempts in the audit database"),
    ] = False,
):
    """
    Convert every .tex file in a directory.

    Writes one HTML file per document and a JSON manifest of the converted
    documents. Any failed document fails the whole run (exit code 1) so a
    partial output set is never deployed.

    Examples:\n

        $ convert_latex.py convert                            # Use configured paths

        $ convert_latex.py convert -l latex -o public/docs    # Custom directories
    """
    config = load_converter_config()
    latex_dir = latex_dir or configured_path(config, "latex_dir")
    output_dir = output_dir or configured_path(config, "output_dir")
    manifest_file = manifest_file or configured_path(config, "manifest_file")

    log_dir = LOGS_PATH / f"convert_{now()}"
    setup_publishing_logger(log_dir, latex_dir=latex_dir)

    typer.secho(f"\nConverting: {display_path(latex_dir)}", fg=typer.colors.BLUE, bold=True)
    typer.echo("")

    database = None
    if not no_db:
        database = ConversionAuditDatabase.open_or_create(configured_path(config, "audit_database"))

    try:
        result = convert_directory(
            latex_dir,
            output_dir,
            manifest_file,
            database=database,
            html_path_prefix=config["paths"]["html_path_prefix"],
        )
    except FileNotFoundError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    finally:
        if database is not None:
            database.close()

    typer.echo("")
    total = len(result.converted) + len(result.failed)
    if result.success:
        typer.secho(
            f"✓ Converted {len(result.converted)}/{total} files", fg=typer.colors.GREEN, bold=True
        )
    else:
        typer.secho(f"✗ {len(result.failed)}/{total} files failed", fg=typer.colors.RED, bold=True)
        for filename, error in result.failed.items():
            typer.secho(f"  - {filename}: {error}", fg=typer.colors.RED)

    typer.echo(f"  Manifest: {display_path(result.manifest_file)}")
    typer.echo(f"  Log: {display_path(log_dir / 'publish.log')}")
    typer.echo("")

    raise typer.Exit(code=0 if result.success else 1)


@app.command("single")
def single_command(
    tex_file: Annotated[Path, typer.Argument(help="LaTeX file to convert")],
    output_file: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output HTML path (default: <stem>.html beside input)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show conversion warnings"),
    ] = False,
):
    """
    Convert a single LaTeX file to HTML.

    Examples:\n

        $ convert_latex.py single latex/resume.tex                 # Writes latex/resume.html

        $ convert_latex.py single latex/resume.tex -o out.html     # Custom output path
    """
    if not tex_file.exists():
        typer.secho(f"Error: File not found: {tex_file}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    output_file = output_file or tex_file.with_suffix(".html")
    log_dir = LOGS_PATH / f"convert_{now()}"
    setup_conversion_logger(log_dir, source_file=tex_file)

    typer.secho(f"\nConverting: {display_path(tex_file)}", fg=typer.colors.BLUE, bold=True)
    typer.echo("")

    result = convert_latex_to_html(tex_file.read_text(encoding="utf-8"), tex_file.stem)

    if result.success:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(result.html, encoding="utf-8")
        typer.secho("✓ Conversion succeeded", fg=typer.colors.GREEN, bold=True)
        typer.echo(f"  Title: {result.metadata.title}")
        typer.echo(f"  Time: {result.time_s:.2f}s")
        typer.echo(f"  Warnings: {len(result.warnings)}")
        if verbose:
            for warning in result.warnings:
                typer.echo(f"  - {warning}")
        typer.echo(f"  HTML: {display_path(output_file)}")
    else:
        typer.secho("✗ Conversion failed", fg=typer.colors.RED, bold=True)
        typer.secho(f"  {result.error}", fg=typer.colors.RED)

    typer.echo(f"  Log: {display_path(log_dir / 'convert.log')}")
    typer.echo("")

    raise typer.Exit(code=0 if result.success else 1)


@app.command("site")
def site_command(
    manifest_file: Annotated[
        Optional[Path],
        typer.Option("--manifest", "-m", help="Manifest JSON path (default: config)"),
    ] = None,
    index_file: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Index page path (default: config)"),
    ] = None,
    drive_link: Annotated[
        Optional[str],
        typer.Option(
            "--drive-link",
            "-d",
            help="Google Drive share link for the download button (default: GOOGLE_DRIVE_RESUME_LINK)",
        ),
    ] = None,
):
    """
    Write the site index page embedding the first converted document.

    Examples:\n

        $ convert_latex.py site                                  # Use configured paths

        $ convert_latex.py site -d "https://drive.google.com/file/d/abc123/view"
    """
    config = load_converter_config()
    manifest_file = manifest_file or configured_path(config, "manifest_file")
    index_file = index_file or configured_path(config, "site_index")
    drive_link = drive_link if drive_link is not None else config["site"]["drive_link"]

    if not manifest_file.exists():
        typer.secho(
            f"Error: Manifest not found: {manifest_file}\nRun 'convert' first.\n",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    entries = json.loads(manifest_file.read_text(encoding="utf-8"))
    write_site_index(
        index_file,
        entries,
        drive_link=drive_link,
        page_title=config["site"]["page_title"],
        download_label=config["site"]["download_label"],
    )

    typer.secho("\n✓ Site index written", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Documents in manifest: {len(entries)}")
    typer.echo(f"  Index: {display_path(index_file)}")
    typer.echo("")


@app.command("history")
def history_command(
    filename: Annotated[str, typer.Argument(help="Document filename (e.g. resume.tex)")],
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Maximum number of attempts to show", min=1),
    ] = 20,
):
    """
    Show recorded conversion attempts for a document, newest first.

    Examples:\n

        $ convert_latex.py history resume.tex             # Last 20 attempts

        $ convert_latex.py history resume.tex -n 5        # Last 5 attempts
    """
    config = load_converter_config()
    db_path = configured_path(config, "audit_database")

    try:
        database = ConversionAuditDatabase(db_path)
    except FileNotFoundError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    try:
        document = database.get_document(filename)
        if document is None:
            typer.secho(f"Error: No document recorded for {filename}\n", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        logs = database.get_conversion_logs(filename, limit=limit)
    finally:
        database.close()

    typer.secho(f"\n{document['title']} ({filename})", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"  Author: {document['author']}")
    typer.echo(f"  Updated: {document['updated_at']}")
    typer.echo("")

    if not logs:
        typer.echo("No conversion attempts recorded.")
        raise typer.Exit()

    status_colors = {
        "success": typer.colors.GREEN,
        "failure": typer.colors.RED,
        "in_progress": typer.colors.YELLOW,
    }
    for log in logs:
        duration = log["conversion_duration_ms"]
        duration_text = f"{duration}ms" if duration is not None else "-"
        typer.secho(
            f"  {log['created_at']}  {log['status']:<11}  {duration_text}",
            fg=status_colors.get(log["status"]),
        )
        if log["error_message"]:
            typer.echo(f"      {log['error_message']}")
    typer.echo("")


if __name__ == "__main__":
    app()
