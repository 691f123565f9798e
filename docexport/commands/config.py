"""Configuration display for docexport."""

import typer
from rich.table import Table

from docexport.config.settings import get_env_info
from docexport.utils.output import console

app = typer.Typer(help="Show configuration")


@app.command("config")
def show_config():
    """Show docexport environment variables and whether they are valid."""
    info = get_env_info()

    table = Table(title="docexport Configuration")
    table.add_column("Variable", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_column("Default", style="dim")
    table.add_column("Description", style="white")

    invalid = []
    for name, entry in info.items():
        if entry["is_set"]:
            value = entry["value"] if entry["valid"] else f"[red]{entry['value']} (invalid)[/red]"
        else:
            value = "[dim]not set[/dim]"
        if not entry["valid"]:
            invalid.append(name)

        table.add_row(name, value, str(entry["default"] or ""), entry["description"])

    console.print(table)

    if invalid:
        console.print(f"[red]Invalid values: {', '.join(invalid)}[/red]")
        raise typer.Exit(1)
