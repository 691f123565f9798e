"""HTTP query client for the document store.

Queries go to the store's GROQ endpoint:

    GET https://<project>.api.sanity.io/v<api_version>/data/query/<dataset>?query=...

and the documents come back under ``result``. Transient transport failures
are retried with exponential backoff; authentication and query errors are
raised immediately.
"""

import logging
from typing import Any, Optional

import requests

from docexport.config.constants import (
    API_HOST,
    CDN_HOST,
    DEFAULT_API_VERSION,
    DEFAULT_DATASET,
    MAX_REQUEST_RETRIES,
    REQUEST_TIMEOUT_SECONDS,
    RETRY_MAX_BACKOFF_SECONDS,
    RETRY_MIN_BACKOFF_SECONDS,
    TYPE_ENUMERATION_QUERY,
)
from docexport.config.settings import StoreSettings, get_store_settings
from docexport.exceptions import (
    ApiAuthenticationError,
    ApiRateLimitError,
    StoreConnectionError,
    StoreQueryError,
)
from docexport.utils.retry import retry

logger = logging.getLogger(__name__)


def _error_description(response: requests.Response) -> str:
    """Pull the store's error description out of a failed response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip()[:200] or response.reason or "Unknown error"

    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        return error.get("description") or error.get("message") or str(error)
    if isinstance(error, str):
        return payload.get("message") or error
    return response.reason or "Unknown error"


def _retry_after(response: requests.Response) -> Optional[float]:
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class DocumentStoreClient:
    """Read-only GROQ client. Usable as the export fetch capability."""

    def __init__(
        self,
        project_id: str,
        dataset: str = DEFAULT_DATASET,
        api_version: str = DEFAULT_API_VERSION,
        token: Optional[str] = None,
        use_cdn: bool = False,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        max_retries: int = MAX_REQUEST_RETRIES,
        session: Optional[requests.Session] = None,
    ):
        self.project_id = project_id
        self.dataset = dataset
        self.api_version = api_version.lstrip("v")
        self.token = token
        self.use_cdn = use_cdn
        self.timeout = timeout
        self.max_retries = max_retries
        self._session = session or requests.Session()
        self._owns_session = session is None

        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    @classmethod
    def from_settings(
        cls, settings: Optional[StoreSettings] = None, **kwargs: Any
    ) -> "DocumentStoreClient":
        """Build a client from StoreSettings (read from the environment by default)."""
        settings = settings or get_store_settings()
        return cls(
            project_id=settings.project_id,
            dataset=settings.dataset,
            api_version=settings.api_version,
            token=settings.token,
            use_cdn=settings.use_cdn,
            **kwargs,
        )

    @property
    def query_url(self) -> str:
        host = CDN_HOST if self.use_cdn else API_HOST
        return f"https://{self.project_id}.{host}/v{self.api_version}/data/query/{self.dataset}"

    def fetch(self, query: str) -> Any:
        """Run a GROQ query and return its ``result``.

        Raises:
            StoreConnectionError: If the store stays unreachable after retries
            ApiAuthenticationError: If the token is missing or rejected
            ApiRateLimitError: If the store keeps rate limiting after retries
            StoreQueryError: If the query is rejected or the response is malformed
        """
        if not query or not query.strip():
            raise StoreQueryError("Query cannot be empty")

        fetch_with_retry = retry(
            max_retries=self.max_retries,
            min_backoff=RETRY_MIN_BACKOFF_SECONDS,
            max_backoff=RETRY_MAX_BACKOFF_SECONDS,
        )(self._fetch_once)
        return fetch_with_retry(query)

    __call__ = fetch

    def list_types(self) -> list[str]:
        """Distinct document types present in the dataset."""
        result = self.fetch(TYPE_ENUMERATION_QUERY)
        if not isinstance(result, list):
            raise StoreQueryError(
                "Unexpected response when listing document types",
                query=TYPE_ENUMERATION_QUERY,
            )
        return result

    def _fetch_once(self, query: str) -> Any:
        logger.debug("GET %s query=%s", self.query_url, query)
        try:
            response = self._session.get(
                self.query_url, params={"query": query}, timeout=self.timeout
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            raise StoreConnectionError(
                f"Could not reach document store: {e}", url=self.query_url
            ) from e

        self._raise_for_status(response, query)

        try:
            payload = response.json()
        except ValueError as e:
            raise StoreQueryError(
                "Document store returned invalid JSON",
                status_code=response.status_code,
                query=query,
            ) from e

        if not isinstance(payload, dict) or "result" not in payload:
            raise StoreQueryError(
                "Document store response missing 'result' field",
                status_code=response.status_code,
                query=query,
            )

        if "ms" in payload:
            logger.debug("Query answered in %sms", payload["ms"])

        return payload["result"]

    def _raise_for_status(self, response: requests.Response, query: str) -> None:
        status = response.status_code
        if status < 400:
            return

        description = _error_description(response)

        if status in (401, 403):
            raise ApiAuthenticationError(
                f"Document store rejected credentials: {description}", status_code=status
            )
        if status == 429:
            raise ApiRateLimitError(
                "Document store rate limit exceeded", retry_after=_retry_after(response)
            )
        if status >= 500:
            raise StoreConnectionError(
                f"Document store error (HTTP {status}): {description}", url=self.query_url
            )
        raise StoreQueryError(
            f"Query failed: {description}", status_code=status, query=query
        )

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "DocumentStoreClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
