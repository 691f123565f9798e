#!/usr/bin/env python3
"""
Main CLI entry point for docexport
"""

import typer

from docexport import __version__
from docexport.commands.config import app as config_app
from docexport.commands.export import app as export_app
from docexport.commands.types import app as types_app
from docexport.utils.logging_utils import configure_cli_logging


def version():
    """Show docexport version"""
    typer.echo(f"docexport version {__version__}")


def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-error output"),
):
    """
    docexport - export documents from a GROQ document store

    [bold]Examples:[/bold]

    List document types:
        [cyan]docexport types[/cyan]

    Export posts as CSV:
        [cyan]docexport export -t post -f csv[/cyan]

    Show the query without running it:
        [cyan]docexport query -t post --since 2024-01-01[/cyan]
    """
    if verbose and quiet:
        typer.echo("Error: --verbose and --quiet are mutually exclusive", err=True)
        raise typer.Exit(1)

    configure_cli_logging(verbose=verbose, quiet=quiet)


def create_app() -> typer.Typer:
    """Create and configure the main CLI application"""
    app = typer.Typer(rich_markup_mode="rich", no_args_is_help=True)

    for module_app in (export_app, types_app, config_app):
        app.registered_commands.extend(module_app.registered_commands)

    app.command("version")(version)
    app.callback()(main)

    return app


app = create_app()


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()
