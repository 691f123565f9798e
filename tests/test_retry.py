"""Tests for the retry decorator."""

import pytest

from docexport.exceptions import ApiRateLimitError, StoreConnectionError, StoreQueryError
from docexport.utils.retry import retry


class Flaky:
    """Fails with the given errors before returning 'ok'."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


class TestRetry:
    def test_success_without_retry(self):
        sleeps = []
        func = Flaky()
        assert retry(sleep=sleeps.append)(func)() == "ok"
        assert func.calls == 1
        assert sleeps == []

    def test_retries_transient_builtin_errors(self):
        sleeps = []
        func = Flaky(ConnectionError("a"), TimeoutError("b"))
        assert retry(max_retries=3, sleep=sleeps.append)(func)() == "ok"
        assert func.calls == 3
        assert len(sleeps) == 2

    def test_retries_retryable_docexport_errors(self):
        func = Flaky(StoreConnectionError())
        assert retry(sleep=lambda s: None)(func)() == "ok"
        assert func.calls == 2

    def test_non_retryable_raised_immediately(self):
        func = Flaky(StoreQueryError("bad query"))
        with pytest.raises(StoreQueryError):
            retry(sleep=lambda s: None)(func)()
        assert func.calls == 1

    def test_unlisted_exception_not_retried(self):
        func = Flaky(ValueError("nope"))
        with pytest.raises(ValueError):
            retry(sleep=lambda s: None)(func)()
        assert func.calls == 1

    def test_custom_exception_tuple(self):
        func = Flaky(ValueError("once"))
        assert retry(exceptions=(ValueError,), sleep=lambda s: None)(func)() == "ok"

    def test_gives_up_after_max_retries(self):
        func = Flaky(*[ConnectionError("down")] * 5)
        with pytest.raises(ConnectionError):
            retry(max_retries=2, sleep=lambda s: None)(func)()
        assert func.calls == 3

    def test_exponential_backoff_capped(self):
        sleeps = []
        func = Flaky(*[ConnectionError("down")] * 4)
        retry(max_retries=4, min_backoff=1.0, max_backoff=3.0, sleep=sleeps.append)(func)()

        for actual, base in zip(sleeps, [1.0, 2.0, 3.0, 3.0]):
            assert base <= actual <= base * 1.1

    def test_retry_after_respected(self):
        sleeps = []
        func = Flaky(ApiRateLimitError(retry_after=5))
        retry(min_backoff=1.0, sleep=sleeps.append)(func)()
        assert sleeps[0] >= 5

    def test_on_retry_callback(self):
        seen = []
        func = Flaky(ConnectionError("a"))
        retry(on_retry=lambda e, attempt: seen.append((str(e), attempt)), sleep=lambda s: None)(func)()
        assert seen == [("a", 1)]

    def test_preserves_function_name(self):
        @retry()
        def query_store():
            return 1

        assert query_store.__name__ == "query_store"
