"""Document type listing for docexport."""

import logging

import typer
from rich.table import Table

from docexport.commands._helpers import get_store_client
from docexport.config.settings import get_configured_types
from docexport.exceptions import TypeEnumerationError
from docexport.services.type_catalog import default_selection, load_available_types
from docexport.utils.output import console, err_console, print_json

logger = logging.getLogger(__name__)

app = typer.Typer(help="Inspect document types")


@app.command("types")
def list_types(
    as_json: bool = typer.Option(False, "--json", help="Print the types as a JSON list"),
):
    """List document types available for export.

    Types come from DOCEXPORT_DOCUMENT_TYPES when set, otherwise from the store.
    The first type is the one an interactive selection starts with.
    """
    configured = get_configured_types()

    try:
        if configured:
            types = load_available_types(lambda query: [], configured)
        else:
            with get_store_client() as client:
                types = load_available_types(client.fetch)
    except TypeEnumerationError as e:
        err_console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)

    if as_json:
        print_json(types)
        return

    if not types:
        console.print("[yellow]No document types found[/yellow]")
        return

    selected = set(default_selection(types))
    source = "configured" if configured else "store"

    table = Table(title=f"Document Types ({source})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Default", style="green")

    for i, type_name in enumerate(types, 1):
        table.add_row(str(i), type_name, "✓" if type_name in selected else "")

    console.print(table)
