"""Shared helpers for docexport commands."""

from typing import Optional

import typer

from docexport.config.settings import get_store_settings
from docexport.exceptions import ConfigurationError, ValidationError
from docexport.models.export_request import ExportRequest
from docexport.store.client import DocumentStoreClient
from docexport.utils.output import err_console


def get_store_client() -> DocumentStoreClient:
    """Build the store client from the environment or exit with a message."""
    try:
        return DocumentStoreClient.from_settings(get_store_settings())
    except ConfigurationError as e:
        err_console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)


def build_request(
    types: Optional[list[str]],
    since: str,
    require: Optional[list[str]],
    custom_query: Optional[str],
    format_name: str,
    references: bool,
    depth: int,
    max_documents: int,
    filename: str = "",
) -> ExportRequest:
    """Turn command options into an ExportRequest or exit with a message."""
    try:
        return ExportRequest(
            types=tuple(types or ()),
            date_filter=since,
            required_fields=tuple(require or ()),
            custom_query=custom_query or "",
            use_custom_query=custom_query is not None,
            format=format_name,
            include_references=references,
            reference_depth=depth,
            max_documents=max_documents,
            filename=filename,
        )
    except ValidationError as e:
        err_console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)
