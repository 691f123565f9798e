"""Tests for the docexport exception hierarchy."""

import pytest

from docexport.exceptions import (
    ApiAuthenticationError,
    ApiRateLimitError,
    ConfigurationError,
    DocexportError,
    ExportBusyError,
    ExportCancelledError,
    ExportError,
    FetchError,
    FileWriteError,
    ProcessingError,
    StoreConnectionError,
    StoreError,
    StoreQueryError,
    TypeEnumerationError,
    ValidationError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc_class,parent",
        [
            (FetchError, ExportError),
            (ProcessingError, ExportError),
            (ExportBusyError, ExportError),
            (ExportCancelledError, ExportError),
            (StoreConnectionError, StoreError),
            (StoreQueryError, StoreError),
            (ApiAuthenticationError, StoreError),
            (ApiRateLimitError, StoreError),
            (ValidationError, DocexportError),
            (TypeEnumerationError, DocexportError),
            (FileWriteError, DocexportError),
            (ConfigurationError, DocexportError),
        ],
    )
    def test_subclass(self, exc_class, parent):
        assert issubclass(exc_class, parent)

    def test_catchable_as_base(self):
        with pytest.raises(DocexportError):
            raise FetchError("boom")


class TestMessages:
    def test_context_appended(self):
        error = ProcessingError("disk full", phase="downloading")
        assert error.message == "disk full"
        assert str(error) == "disk full (phase='downloading')"

    def test_no_context(self):
        assert str(DocexportError("plain")) == "plain"

    def test_long_query_truncated(self):
        error = FetchError("boom", query="x" * 150)
        assert error.context["query"] == "x" * 100 + "..."

    def test_validation_field(self):
        error = ValidationError("bad", field="max_documents", value=0)
        assert error.context == {"field": "max_documents", "value": 0}

    def test_defaults(self):
        assert TypeEnumerationError().message == "Failed to load document types"
        assert ExportBusyError().message == "An export is already in progress"


class TestRetryable:
    @pytest.mark.parametrize(
        "error,expected",
        [
            (StoreConnectionError(), True),
            (ApiRateLimitError(retry_after=2), True),
            (ExportBusyError(), True),
            (ApiAuthenticationError(status_code=401), False),
            (StoreQueryError(status_code=400), False),
            (FetchError(), False),
        ],
    )
    def test_flag(self, error, expected):
        assert error.retryable is expected

    def test_rate_limit_context(self):
        assert ApiRateLimitError(retry_after=2.5).context["retry_after"] == 2.5
