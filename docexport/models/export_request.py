"""Export request and result value types."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Union

from docexport.config.constants import (
    DEFAULT_MAX_DOCUMENTS,
    DEFAULT_REFERENCE_DEPTH,
)
from docexport.exceptions import ValidationError


class ExportFormat(str, Enum):
    """Supported output formats."""

    JSON = "json"
    CSV = "csv"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self]

    @classmethod
    def parse(cls, value: Union[str, "ExportFormat"]) -> "ExportFormat":
        """Parse a format name, accepting 'structured' and 'tabular' aliases."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        normalized = _FORMAT_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            raise ValidationError(
                f"Unsupported export format: {value}. "
                f"Supported formats: {', '.join(f.value for f in cls)}",
                field="format",
            ) from None


_CONTENT_TYPES = {
    ExportFormat.JSON: "application/json",
    ExportFormat.CSV: "text/csv",
}

_FORMAT_ALIASES = {
    "structured": "json",
    "tabular": "csv",
}


def _as_tuple(values: Union[str, Iterable[str], None]) -> tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(values)


def _clean_types(types: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for type_name in types:
        type_name = (type_name or "").strip()
        if type_name:
            seen.setdefault(type_name, None)
    return tuple(seen)


@dataclass(frozen=True)
class ExportRequest:
    """Everything one export run needs to know.

    Instances are immutable; build a new request to change a parameter.
    Sequences are normalized to tuples so a request can be shared safely
    between the orchestrator and observers.
    """

    types: tuple[str, ...] = ()
    date_filter: str = ""
    required_fields: tuple[str, ...] = ()
    custom_query: str = ""
    use_custom_query: bool = False
    format: ExportFormat = ExportFormat.JSON
    include_references: bool = False
    reference_depth: int = DEFAULT_REFERENCE_DEPTH
    max_documents: int = DEFAULT_MAX_DOCUMENTS
    filename: str = ""

    def __post_init__(self):
        object.__setattr__(self, "types", _clean_types(_as_tuple(self.types)))
        object.__setattr__(self, "required_fields", _as_tuple(self.required_fields))
        object.__setattr__(self, "date_filter", self.date_filter or "")
        object.__setattr__(self, "custom_query", self.custom_query or "")
        object.__setattr__(self, "filename", self.filename or "")
        object.__setattr__(self, "format", ExportFormat.parse(self.format))

        if self.reference_depth < 0:
            raise ValidationError(
                "Reference depth cannot be negative",
                field="reference_depth",
                value=self.reference_depth,
            )
        if self.max_documents <= 0:
            raise ValidationError(
                "Maximum document count must be positive",
                field="max_documents",
                value=self.max_documents,
            )

    @property
    def has_selection(self) -> bool:
        """True when the request can be run at all."""
        return bool(self.types) or self.use_custom_query

    @property
    def custom_query_active(self) -> bool:
        """True when the custom query replaces the generated one."""
        return self.use_custom_query and bool(self.custom_query.strip())


@dataclass(frozen=True)
class ExportResult:
    """Outcome of a successful export run."""

    exported: int
    format: ExportFormat
    filename: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "exported": self.exported,
            "format": self.format.value,
            "filename": self.filename,
        }
