"""GROQ query construction for exports.

Filters combine with ``&&`` in a fixed order: document type, created-after
date, then required fields. A range clause always bounds the result and an
optional projection appends referencing documents.
"""

import json
import re
from typing import Iterable, List

from docexport.models.export_request import ExportRequest
from docexport.query.relations import build_reference_expansion

__all__ = [
    "build_export_query",
    "build_type_condition",
    "build_date_condition",
    "normalize_date_filter",
    "build_field_condition",
    "parse_field_names",
]

_BARE_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_field_names(values: Iterable[str]) -> List[str]:
    """Split comma-separated field lists into trimmed, non-empty names."""
    names = []
    for value in values:
        names.extend(name.strip() for name in value.split(","))
    return [name for name in names if name]


def build_type_condition(types: Iterable[str]) -> str:
    """``_type in ["post", "page"]``, or empty when no types are given."""
    literals = [json.dumps(type_name) for type_name in types]
    if not literals:
        return ""
    return f"_type in [{', '.join(literals)}]"


def normalize_date_filter(date_filter: str) -> str:
    """Expand a bare ``YYYY-MM-DD`` date to midnight UTC.

    ``dateTime()`` only parses full RFC3339 timestamps; other values pass
    through trimmed.
    """
    date_filter = (date_filter or "").strip()
    if _BARE_DATE.match(date_filter):
        return f"{date_filter}T00:00:00Z"
    return date_filter


def build_date_condition(date_filter: str) -> str:
    """Lower bound on ``_createdAt``, or empty for a blank filter."""
    date_filter = normalize_date_filter(date_filter)
    if not date_filter:
        return ""
    return f"dateTime(_createdAt) >= dateTime({json.dumps(date_filter)})"


def build_field_condition(required_fields: Iterable[str]) -> str:
    """Match documents where at least one required field is defined."""
    fields = parse_field_names(required_fields)
    if not fields:
        return ""
    return "(" + " || ".join(f"defined({field})" for field in fields) + ")"


def build_export_query(request: ExportRequest) -> str:
    """Build the query an export request runs.

    A non-blank custom query with the override enabled is returned verbatim
    and every other parameter is ignored.

    Args:
        request: The export request

    Returns:
        GROQ query string
    """
    if request.custom_query_active:
        return request.custom_query

    conditions = [
        build_type_condition(request.types),
        build_date_condition(request.date_filter),
        build_field_condition(request.required_fields),
    ]
    filter_expr = " && ".join(condition for condition in conditions if condition)

    query = f"*[{filter_expr}][0...{request.max_documents}]"

    if request.include_references and request.reference_depth > 0:
        query += f" {{\n  ...,\n  {build_reference_expansion(request.reference_depth)}\n}}"

    return query
