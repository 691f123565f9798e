"""Export orchestration.

The orchestrator sequences one export run:

    idle → preparing → fetching → processing → downloading → complete
                          (any phase) → error

Fetching is the only step that suspends; query building, conversion and
emission run synchronously on the event loop. After ``complete`` or
``error`` the state drops back to ``idle`` after a short cosmetic delay.

Failures inside a run never escape ``export()``: they end in the ``error``
phase and are reported through ``on_error``. A request that selects nothing
is refused locally with a status message and no callback.
"""

import asyncio
import inspect
import logging
from datetime import date
from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence, Union

from docexport.config.constants import (
    CUSTOM_QUERY_PLACEHOLDER,
    DEFAULT_FAILURE_MESSAGE,
    EXPORT_FILENAME_PREFIX,
    MESSAGE_CANCELLED,
    MESSAGE_DOWNLOADING,
    MESSAGE_FETCHING,
    MESSAGE_NO_DOCUMENTS,
    MESSAGE_NO_SELECTION,
    MESSAGE_PREPARING,
    PROGRESS_RESET_DELAY_SECONDS,
)
from docexport.exceptions import (
    ExportBusyError,
    ExportCancelledError,
    FetchError,
    ProcessingError,
)
from docexport.models.export_request import ExportRequest, ExportResult
from docexport.models.progress import ExportPhase, ProgressState
from docexport.query.builder import build_export_query
from docexport.services.export_destinations import sanitize_filename
from docexport.services.format_converter import convert_documents

logger = logging.getLogger(__name__)

Document = dict[str, Any]
FetchCapability = Callable[[str], Union[Sequence[Document], Awaitable[Sequence[Document]]]]
EmitCapability = Callable[[str, str, str], Any]


def _failure_message(error: Exception) -> str:
    return getattr(error, "message", None) or str(error) or DEFAULT_FAILURE_MESSAGE


def _as_documents(result: Any) -> list[Document]:
    """Normalize a fetch result; a single-document query yields one mapping."""
    if result is None:
        return []
    if isinstance(result, dict):
        return [result]
    if isinstance(result, (list, tuple)):
        return list(result)
    raise TypeError(f"Expected a list of documents, got {type(result).__name__}")


def resolve_filename(
    request: ExportRequest,
    prefix: str = EXPORT_FILENAME_PREFIX,
    today: Optional[date] = None,
) -> str:
    """Resolve the output filename for a request.

    An explicit name wins; otherwise the name is built from the prefix, the
    selected types (or a placeholder for custom queries) and the date.
    Invalid characters are replaced and long stems shortened, extension kept.
    """
    base = request.filename.strip()
    if not base:
        if request.custom_query_active or not request.types:
            type_part = CUSTOM_QUERY_PLACEHOLDER
        else:
            type_part = "-".join(request.types)
        base = f"{prefix}-{type_part}-{(today or date.today()).isoformat()}"
    return sanitize_filename(base, request.format.extension)


class CancelSignal(Protocol):
    """Anything with an ``is_set()`` method, e.g. ``asyncio.Event``."""

    def is_set(self) -> bool:
        ...


class ExportOrchestrator:
    """Run exports against injected fetch and emit capabilities."""

    def __init__(
        self,
        fetch: FetchCapability,
        emit: EmitCapability,
        on_complete: Optional[Callable[[ExportResult], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
        on_progress: Optional[Callable[[ProgressState], None]] = None,
        *,
        reset_delay: float = PROGRESS_RESET_DELAY_SECONDS,
        filename_prefix: str = EXPORT_FILENAME_PREFIX,
        today: Callable[[], date] = date.today,
    ):
        """Initialize the orchestrator.

        Args:
            fetch: Runs a query and returns documents (sync or async)
            emit: Persists content as ``emit(content, filename, content_type)``
            on_complete: Called once per successful run, including empty ones
            on_error: Called with a message when a run fails
            on_progress: Called with every new ProgressState
            reset_delay: Seconds before a finished run drops back to idle
            filename_prefix: Leading part of generated filenames
            today: Clock used for generated filenames
        """
        self._fetch = fetch
        self._emit = emit
        self._on_complete = on_complete
        self._on_error = on_error
        self._on_progress = on_progress
        self.reset_delay = reset_delay
        self.filename_prefix = filename_prefix
        self._today = today

        self._state = ProgressState()
        self._exported_count = 0
        self._running = False
        self._reset_handle: Optional[asyncio.TimerHandle] = None

    @property
    def state(self) -> ProgressState:
        return self._state

    @property
    def exported_count(self) -> int:
        """Number of documents the last run fetched."""
        return self._exported_count

    @property
    def is_running(self) -> bool:
        return self._running

    def resolve_filename(self, request: ExportRequest) -> str:
        """Final output name for ``request``, extension included."""
        return resolve_filename(request, self.filename_prefix, self._today())

    async def export(
        self, request: ExportRequest, cancel_event: Optional[CancelSignal] = None
    ) -> Optional[ExportResult]:
        """Run one export.

        Returns:
            The ExportResult on success (including an empty result), None when
            the request was refused, cancelled or failed.

        Raises:
            ExportBusyError: If another run is still active.
        """
        if self._running:
            raise ExportBusyError(phase=self._state.phase.value)

        if not request.has_selection:
            logger.info("Export refused: nothing selected")
            self._set_state(ExportPhase.IDLE, 0, MESSAGE_NO_SELECTION)
            return None

        self._running = True
        self._cancel_pending_reset()
        try:
            result = await self._run(request, cancel_event)
        except ExportCancelledError as e:
            logger.info("Export cancelled before %s", e.context.get("phase"))
            self._set_state(ExportPhase.IDLE, 0, MESSAGE_CANCELLED)
            return None
        except Exception as e:
            message = _failure_message(e)
            logger.warning("Export failed: %s", message, exc_info=True)
            self._set_state(ExportPhase.ERROR, 0, f"Export error: {message}")
            self._notify(self._on_error, message)
            return None
        finally:
            self._running = False
            self._schedule_reset()

        self._notify(self._on_complete, result)
        return result

    async def _run(
        self, request: ExportRequest, cancel_event: Optional[CancelSignal]
    ) -> ExportResult:
        self._check_cancelled(cancel_event, ExportPhase.PREPARING)
        self._exported_count = 0
        self._set_state(ExportPhase.PREPARING, 0, MESSAGE_PREPARING)
        query = build_export_query(request)
        logger.info("Executing export query: %s", query)

        self._check_cancelled(cancel_event, ExportPhase.FETCHING)
        self._set_state(ExportPhase.FETCHING, 25, MESSAGE_FETCHING)
        try:
            documents = _as_documents(await self._call_fetch(query))
        except Exception as e:
            raise FetchError(_failure_message(e), query=query) from e

        self._exported_count = len(documents)
        self._set_state(ExportPhase.FETCHING, 50, f"Fetched {len(documents)} documents")

        if not documents:
            self._set_state(ExportPhase.COMPLETE, 100, MESSAGE_NO_DOCUMENTS)
            return ExportResult(exported=0, format=request.format, filename=None)

        self._check_cancelled(cancel_event, ExportPhase.PROCESSING)
        self._set_state(
            ExportPhase.PROCESSING, 75, f"Processing {len(documents)} documents..."
        )
        try:
            content = convert_documents(documents, request.format)
            filename = self.resolve_filename(request)
        except Exception as e:
            raise ProcessingError(_failure_message(e), phase="processing") from e

        self._check_cancelled(cancel_event, ExportPhase.DOWNLOADING)
        self._set_state(ExportPhase.DOWNLOADING, 90, MESSAGE_DOWNLOADING)
        try:
            emitted = self._emit(content, filename, request.format.content_type)
            if inspect.isawaitable(emitted):
                await emitted
        except Exception as e:
            raise ProcessingError(_failure_message(e), phase="downloading") from e

        self._set_state(
            ExportPhase.COMPLETE,
            100,
            f"Successfully exported {len(documents)} documents as {filename}",
        )
        return ExportResult(exported=len(documents), format=request.format, filename=filename)

    async def _call_fetch(self, query: str) -> Sequence[Document]:
        if inspect.iscoroutinefunction(self._fetch):
            return await self._fetch(query)

        result = await asyncio.to_thread(self._fetch, query)
        if inspect.isawaitable(result):
            result = await result
        return result

    def _check_cancelled(self, cancel_event: Optional[CancelSignal], phase: ExportPhase) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise ExportCancelledError(phase=phase.value)

    def _set_state(self, phase: ExportPhase, percent: int, message: str) -> None:
        logger.debug("Export state %s -> %s (%d%%)", self._state.phase.value, phase.value, percent)
        self._state = ProgressState(phase=phase, percent=percent, message=message)
        self._notify(self._on_progress, self._state)

    def _notify(self, callback: Optional[Callable[[Any], None]], payload: Any) -> None:
        if callback is None:
            return
        try:
            callback(payload)
        except Exception as e:
            logger.warning("Export callback %r failed: %s", callback, e, exc_info=True)

    def _schedule_reset(self) -> None:
        if not self._state.is_terminal:
            return
        self._cancel_pending_reset()
        loop = asyncio.get_running_loop()
        self._reset_handle = loop.call_later(self.reset_delay, self._reset_to_idle)

    def close(self) -> None:
        """Drop any pending cosmetic reset."""
        self._cancel_pending_reset()

    def _cancel_pending_reset(self) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None

    def _reset_to_idle(self) -> None:
        self._reset_handle = None
        if self._running or not self._state.is_terminal:
            return
        self._set_state(ExportPhase.IDLE, 0, self._state.message)


def run_export(
    request: ExportRequest,
    fetch: FetchCapability,
    emit: EmitCapability,
    on_complete: Optional[Callable[[ExportResult], None]] = None,
    on_error: Optional[Callable[[str], None]] = None,
    on_progress: Optional[Callable[[ProgressState], None]] = None,
) -> Optional[ExportResult]:
    """Run a single export to completion outside of an event loop.

    The cosmetic reset is skipped because the loop closes with the run.
    """
    orchestrator = ExportOrchestrator(
        fetch,
        emit,
        on_complete=on_complete,
        on_error=on_error,
        on_progress=on_progress,
    )

    async def _main() -> Optional[ExportResult]:
        result = await orchestrator.export(request)
        orchestrator.close()
        return result

    return asyncio.run(_main())
