"""Conversion of fetched documents into export file content.

Formats:
- json: pretty-printed list, every field preserved as fetched
- csv: one header row plus one row per document; nested values are
  serialized inline as compact JSON
"""

import json
import logging
from typing import Any, Sequence, Union

from docexport.exceptions import ProcessingError
from docexport.models.export_request import ExportFormat

logger = logging.getLogger(__name__)

Document = dict[str, Any]


def is_nested(value: Any) -> bool:
    """True for mappings and for lists holding mappings or lists.

    Lists of scalars count as flat so they still earn a column.
    """
    if isinstance(value, dict):
        return True
    if isinstance(value, (list, tuple)):
        return any(isinstance(item, (dict, list, tuple)) for item in value)
    return False


def collect_headers(records: Sequence[Document]) -> list[str]:
    """Union of non-nested top-level field names in first-seen order."""
    headers: dict[str, None] = {}
    for record in records:
        for key, value in record.items():
            if not is_nested(value):
                headers.setdefault(key, None)
    return list(headers)


def _format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list, tuple)):
        text = json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    elif isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, float) and value.is_integer():
        text = str(int(value))
    else:
        text = str(value)

    if "," in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def convert_to_csv(records: Sequence[Document]) -> str:
    """Render documents as comma-separated text. Empty input gives "".

    Raises:
        ProcessingError: If a record is not a document object
    """
    if not records:
        return ""

    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise ProcessingError(
                f"CSV export needs document objects, got {type(record).__name__}",
                phase="processing",
                record_index=index,
            )

    headers = collect_headers(records)
    rows = [",".join(headers)]
    for record in records:
        rows.append(",".join(_format_cell(record.get(header)) for header in headers))

    return "\n".join(rows)


def convert_to_json(records: Sequence[Document]) -> str:
    """Render documents as an indented JSON array."""
    return json.dumps(list(records), indent=2, ensure_ascii=False, default=str)


def convert_documents(
    records: Sequence[Document], export_format: Union[ExportFormat, str]
) -> str:
    """Convert documents to the content of an export file.

    Args:
        records: Documents as returned by the store
        export_format: Target format ('json'/'structured' or 'csv'/'tabular')

    Returns:
        Serialized content
    """
    export_format = ExportFormat.parse(export_format)
    logger.debug("Converting %d documents to %s", len(records), export_format.value)

    if export_format is ExportFormat.CSV:
        return convert_to_csv(records)
    return convert_to_json(records)
