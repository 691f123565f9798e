"""Custom exception hierarchy for docexport.

Exception Hierarchy:
    DocexportError (base)
    ├── ValidationError - request rejected before any side effect
    ├── ExportError - a run failed or was refused
    │   ├── FetchError
    │   ├── ProcessingError
    │   ├── ExportBusyError
    │   └── ExportCancelledError
    ├── StoreError - document store transport
    │   ├── StoreConnectionError (retryable)
    │   ├── StoreQueryError
    │   ├── ApiAuthenticationError
    │   └── ApiRateLimitError (retryable)
    ├── TypeEnumerationError
    ├── FileWriteError
    └── ConfigurationError

Usage:
    from docexport.exceptions import FetchError

    try:
        documents = client.fetch(query)
    except StoreError as e:
        raise FetchError(str(e), query=query) from e
"""

from typing import Any, Optional


def _truncate(value: str, limit: int) -> str:
    return value[:limit] + "..." if len(value) > limit else value


class DocexportError(Exception):
    """Base exception for all docexport errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., query, path)
        retryable: Whether this error might succeed on retry
    """

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        **context: Any,
    ) -> None:
        self.message = message
        self.context = context
        self.retryable = retryable
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ValidationError(DocexportError):
    """An export request is invalid or selects nothing."""

    def __init__(
        self,
        message: str = "Invalid export request",
        *,
        field: Optional[str] = None,
        **context: Any,
    ) -> None:
        if field:
            context["field"] = field
        super().__init__(message, **context)


# =============================================================================
# Export Run Errors
# =============================================================================


class ExportError(DocexportError):
    """Base exception for export run failures."""

    pass


class FetchError(ExportError):
    """The fetch capability failed or raised."""

    def __init__(
        self,
        message: str = "Failed to fetch documents",
        *,
        query: Optional[str] = None,
        **context: Any,
    ) -> None:
        if query:
            context["query"] = _truncate(query, 100)
        super().__init__(message, **context)


class ProcessingError(ExportError):
    """Conversion or emission of the export failed."""

    def __init__(
        self,
        message: str = "Failed to process export",
        *,
        phase: Optional[str] = None,
        **context: Any,
    ) -> None:
        if phase:
            context["phase"] = phase
        super().__init__(message, **context)


class ExportBusyError(ExportError):
    """An export was requested while another run is still active."""

    def __init__(self, message: str = "An export is already in progress", **context: Any) -> None:
        super().__init__(message, retryable=True, **context)


class ExportCancelledError(ExportError):
    """The run was cancelled through its cancellation signal."""

    def __init__(
        self,
        message: str = "Export cancelled",
        *,
        phase: Optional[str] = None,
        **context: Any,
    ) -> None:
        if phase:
            context["phase"] = phase
        super().__init__(message, **context)


# =============================================================================
# Store Errors
# =============================================================================


class StoreError(DocexportError):
    """Base exception for document store transport errors."""

    pass


class StoreConnectionError(StoreError):
    """Failed to reach the document store - typically retryable."""

    def __init__(
        self,
        message: str = "Document store connection failed",
        *,
        url: Optional[str] = None,
        **context: Any,
    ) -> None:
        if url:
            context["url"] = url
        super().__init__(message, retryable=True, **context)


class StoreQueryError(StoreError):
    """The store rejected a query or returned an unusable response."""

    def __init__(
        self,
        message: str = "Document store query failed",
        *,
        status_code: Optional[int] = None,
        query: Optional[str] = None,
        **context: Any,
    ) -> None:
        if status_code is not None:
            context["status_code"] = status_code
        if query:
            context["query"] = _truncate(query, 100)
        super().__init__(message, **context)


class ApiAuthenticationError(StoreError):
    """The store refused the supplied credentials."""

    def __init__(
        self,
        message: str = "Document store authentication failed",
        *,
        status_code: Optional[int] = None,
        **context: Any,
    ) -> None:
        if status_code is not None:
            context["status_code"] = status_code
        super().__init__(message, retryable=False, **context)


class ApiRateLimitError(StoreError):
    """Hit the store's rate limit - retryable with backoff."""

    def __init__(
        self,
        message: str = "Document store rate limit exceeded",
        *,
        retry_after: Optional[float] = None,
        **context: Any,
    ) -> None:
        if retry_after is not None:
            context["retry_after"] = retry_after
        super().__init__(message, retryable=True, **context)


# =============================================================================
# Catalog, File and Configuration Errors
# =============================================================================


class TypeEnumerationError(DocexportError):
    """Listing the distinct document types failed."""

    def __init__(self, message: str = "Failed to load document types", **context: Any) -> None:
        super().__init__(message, **context)


class FileWriteError(DocexportError):
    """Failed to write an export file."""

    def __init__(
        self,
        message: str = "Failed to write file",
        *,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        if path:
            context["path"] = path
        super().__init__(message, **context)


class ConfigurationError(DocexportError):
    """Configuration or settings error."""

    def __init__(
        self,
        message: str = "Configuration error",
        *,
        setting: Optional[str] = None,
        **context: Any,
    ) -> None:
        if setting:
            context["setting"] = setting
        super().__init__(message, **context)
