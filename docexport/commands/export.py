"""Export commands for docexport.

This module provides the export command, which fetches documents from the
store and writes them as JSON or CSV, and the query command, which shows
the query an export would run.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn

from docexport.commands._helpers import build_request, get_store_client
from docexport.config.constants import (
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_MAX_DOCUMENTS,
    DEFAULT_REFERENCE_DEPTH,
    MAX_REFERENCE_DEPTH,
    MESSAGE_NO_DOCUMENTS,
    MESSAGE_NO_SELECTION,
)
from docexport.config.settings import get_output_dir
from docexport.models.export_request import ExportResult
from docexport.models.progress import ProgressState
from docexport.query.builder import build_export_query
from docexport.services.export_destinations import FileDestination, get_destination
from docexport.services.orchestrator import resolve_filename, run_export
from docexport.utils.output import console, err_console, print_json

logger = logging.getLogger(__name__)

TONE_STYLES = {"positive": "green", "critical": "red"}

app = typer.Typer(help="Export documents")

TYPES_OPTION = typer.Option(None, "--type", "-t", help="Document type to export (repeatable)")
SINCE_OPTION = typer.Option(
    "", "--since", help="Only documents created on or after this date (YYYY-MM-DD or RFC3339)"
)
REQUIRE_OPTION = typer.Option(
    None, "--require", "-r", help="Comma-separated fields; documents must define at least one"
)
QUERY_OPTION = typer.Option(None, "--query", help="Custom GROQ query; replaces all filters")
FORMAT_OPTION = typer.Option(DEFAULT_EXPORT_FORMAT, "--format", "-f", help="Output format: json, csv")
REFERENCES_OPTION = typer.Option(
    False, "--references/--no-references", help="Include documents referencing each result"
)
DEPTH_OPTION = typer.Option(
    DEFAULT_REFERENCE_DEPTH, "--depth", min=0, max=MAX_REFERENCE_DEPTH, help="Reference expansion depth"
)
MAX_OPTION = typer.Option(DEFAULT_MAX_DOCUMENTS, "--max", "-m", min=1, help="Maximum number of documents")


@app.command("export")
def export_documents(
    types: Optional[list[str]] = TYPES_OPTION,
    since: str = SINCE_OPTION,
    require: Optional[list[str]] = REQUIRE_OPTION,
    query: Optional[str] = QUERY_OPTION,
    format_name: str = FORMAT_OPTION,
    references: bool = REFERENCES_OPTION,
    depth: int = DEPTH_OPTION,
    max_documents: int = MAX_OPTION,
    output: str = typer.Option("", "--output", "-o", help="Output filename without extension"),
    output_dir: Optional[Path] = typer.Option(
        None, "--dir", help="Output directory (default: DOCEXPORT_OUTPUT_DIR)"
    ),
    to_stdout: bool = typer.Option(False, "--stdout", help="Print content instead of writing a file"),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace an existing output file"),
    preview: bool = typer.Option(
        False, "--preview", help="Show the query and filename without exporting"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the export result as JSON"),
):
    """Export documents as JSON or CSV.

    Examples:

        # All posts as JSON
        docexport export -t post

        # Posts and pages created this year, as CSV
        docexport export -t post -t page --since 2024-01-01 -f csv

        # Include referencing documents two levels deep
        docexport export -t author --references --depth 2

        # Custom query straight to stdout
        docexport export --query '*[_type == "post" && defined(slug)]' --stdout
    """
    request = build_request(
        types, since, require, query, format_name, references, depth, max_documents, output
    )
    out = err_console if to_stdout else console

    if not request.has_selection:
        out.print(f"[yellow]{MESSAGE_NO_SELECTION}[/yellow]")
        raise typer.Exit(1)

    if preview:
        console.print(
            Panel(
                f"[bold]Query:[/bold]\n{escape(build_export_query(request))}\n\n"
                f"[bold]Format:[/bold] {request.format.value}\n"
                f"[bold]Filename:[/bold] {escape(resolve_filename(request))}",
                title="Export Preview",
            )
        )
        return

    if to_stdout and as_json:
        err_console.print("[red]Error: --stdout and --json cannot be combined[/red]")
        raise typer.Exit(1)

    if to_stdout:
        destination = get_destination("stdout")
    else:
        destination = get_destination(
            "file", output_dir=output_dir or get_output_dir(), overwrite=overwrite
        )

    errors: list[str] = []
    results: list[ExportResult] = []

    with get_store_client() as client, Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        console=err_console,
        transient=True,
        redirect_stdout=False,
    ) as progress:
        task = progress.add_task("Starting export...", total=100)

        def show_progress(state: ProgressState) -> None:
            description = escape(state.message)
            if not state.is_active:
                style = TONE_STYLES[state.tone]
                description = f"[{style}]{description}[/{style}]"
            progress.update(task, completed=state.percent, description=description)

        run_export(
            request,
            fetch=client.fetch,
            emit=destination.emit,
            on_complete=results.append,
            on_error=errors.append,
            on_progress=show_progress,
        )

    if errors:
        out.print(f"[red]✗ Export error: {escape(errors[0])}[/red]")
        raise typer.Exit(1)

    result = results[0]
    if as_json:
        print_json(result.to_dict())
        return

    if result.exported == 0:
        out.print(f"[yellow]{MESSAGE_NO_DOCUMENTS}[/yellow]")
        return

    out.print(
        f"[green]✓ Successfully exported {result.exported} documents as {result.filename}[/green]"
    )
    if isinstance(destination, FileDestination) and destination.last_path:
        out.print(f"[blue]Path: {destination.last_path.resolve()}[/blue]")


@app.command("query")
def show_query(
    types: Optional[list[str]] = TYPES_OPTION,
    since: str = SINCE_OPTION,
    require: Optional[list[str]] = REQUIRE_OPTION,
    query: Optional[str] = QUERY_OPTION,
    references: bool = REFERENCES_OPTION,
    depth: int = DEPTH_OPTION,
    max_documents: int = MAX_OPTION,
):
    """Print the GROQ query an export with these options would run."""
    request = build_request(
        types, since, require, query, DEFAULT_EXPORT_FORMAT, references, depth, max_documents
    )
    typer.echo(build_export_query(request))
