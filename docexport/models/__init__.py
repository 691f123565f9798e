"""Data models for docexport.

This package defines the value types that flow through an export run:

- export_request: ExportRequest, ExportFormat and ExportResult
- progress: ExportPhase and ProgressState snapshots
"""

from docexport.models.export_request import ExportFormat, ExportRequest, ExportResult
from docexport.models.progress import ExportPhase, ProgressState

__all__ = [
    "ExportFormat",
    "ExportRequest",
    "ExportResult",
    "ExportPhase",
    "ProgressState",
]
