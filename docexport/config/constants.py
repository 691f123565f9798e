"""
Centralized constants for docexport.

Defaults for export requests, the store transport and the CLI live here so
that the query builder, orchestrator and commands agree on them.
"""

from pathlib import Path

# =============================================================================
# EXPORT REQUEST DEFAULTS
# =============================================================================

DEFAULT_MAX_DOCUMENTS = 1000  # Upper bound of the range clause
DEFAULT_REFERENCE_DEPTH = 2  # Levels of referencing documents to expand
MAX_REFERENCE_DEPTH = 3  # Cap applied by callers, not by the expander
DEFAULT_EXPORT_FORMAT = "json"

# =============================================================================
# FILE NAMING
# =============================================================================

EXPORT_FILENAME_PREFIX = "sanity-export"
CUSTOM_QUERY_PLACEHOLDER = "custom"

# =============================================================================
# ORCHESTRATOR
# =============================================================================

PROGRESS_RESET_DELAY_SECONDS = 2.0  # Cosmetic reset to idle after a run

MESSAGE_NO_SELECTION = "Please select at least one document type or use a custom query"
MESSAGE_PREPARING = "Preparing export..."
MESSAGE_FETCHING = "Fetching documents..."
MESSAGE_NO_DOCUMENTS = "No documents found matching the criteria"
MESSAGE_DOWNLOADING = "Downloading file..."
MESSAGE_CANCELLED = "Export cancelled"
DEFAULT_FAILURE_MESSAGE = "Export failed"

# =============================================================================
# DOCUMENT STORE TRANSPORT
# =============================================================================

DEFAULT_DATASET = "production"
DEFAULT_API_VERSION = "2023-05-03"
API_HOST = "api.sanity.io"
CDN_HOST = "apicdn.sanity.io"
REQUEST_TIMEOUT_SECONDS = 30
MAX_REQUEST_RETRIES = 3
RETRY_MIN_BACKOFF_SECONDS = 1.0
RETRY_MAX_BACKOFF_SECONDS = 10.0

TYPE_ENUMERATION_QUERY = "array::unique(*[]._type)"

# =============================================================================
# LOCAL PATHS
# =============================================================================

DOCEXPORT_CONFIG_DIR = Path.home() / ".config" / "docexport"

# =============================================================================
# ENVIRONMENT VARIABLES
# =============================================================================

ENV_VAR_DEFINITIONS = {
    "DOCEXPORT_PROJECT_ID": {
        "description": "Project identifier of the document store",
        "default": None,
        "valid_values": None,
    },
    "DOCEXPORT_DATASET": {
        "description": "Dataset to query",
        "default": DEFAULT_DATASET,
        "valid_values": None,
    },
    "DOCEXPORT_API_VERSION": {
        "description": "Query API version date (YYYY-MM-DD)",
        "default": DEFAULT_API_VERSION,
        "valid_values": None,
    },
    "DOCEXPORT_TOKEN": {
        "description": "Read token sent as a bearer token",
        "default": None,
        "valid_values": None,
        "sensitive": True,
    },
    "DOCEXPORT_USE_CDN": {
        "description": "Query the CDN host instead of the live API",
        "default": "false",
        "valid_values": ["true", "false"],
    },
    "DOCEXPORT_OUTPUT_DIR": {
        "description": "Directory export files are written to",
        "default": ".",
        "valid_values": None,
    },
    "DOCEXPORT_DOCUMENT_TYPES": {
        "description": "Comma-separated document types offered instead of asking the store",
        "default": None,
        "valid_values": None,
    },
    "DOCEXPORT_LOG_LEVEL": {
        "description": "Log level for CLI output",
        "default": "WARNING",
        "valid_values": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    },
}
