"""Query construction for document exports."""

from docexport.query.builder import build_export_query, parse_field_names
from docexport.query.relations import REFERENCE_MARKER, build_reference_expansion

__all__ = [
    "build_export_query",
    "parse_field_names",
    "build_reference_expansion",
    "REFERENCE_MARKER",
]
