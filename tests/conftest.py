"""Shared pytest fixtures for docexport tests."""

import logging
from datetime import date

import pytest

from docexport.models.export_request import ExportRequest
from docexport.services.orchestrator import ExportOrchestrator


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path_factory, monkeypatch):
    """Keep log files and config lookups out of the real home directory."""
    config_dir = tmp_path_factory.mktemp("docexport-config")
    monkeypatch.setenv("DOCEXPORT_CONFIG_DIR", str(config_dir))
    for name in (
        "DOCEXPORT_PROJECT_ID",
        "DOCEXPORT_DATASET",
        "DOCEXPORT_API_VERSION",
        "DOCEXPORT_TOKEN",
        "DOCEXPORT_USE_CDN",
        "DOCEXPORT_OUTPUT_DIR",
        "DOCEXPORT_DOCUMENT_TYPES",
        "DOCEXPORT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return config_dir


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Drop handlers the CLI callback attaches to captured streams."""
    logger = logging.getLogger("docexport")
    handlers, level = list(logger.handlers), logger.level
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def sample_documents():
    """A small fetch result with mixed field shapes."""
    return [
        {
            "_id": "post-1",
            "_type": "post",
            "_createdAt": "2023-02-01T10:00:00Z",
            "title": "Hello, world",
            "views": 10,
            "author": {"_ref": "author-1", "_type": "reference"},
        },
        {
            "_id": "post-2",
            "_type": "post",
            "_createdAt": "2023-03-01T10:00:00Z",
            "title": "Second",
            "tags": ["news", "tech"],
            "published": True,
        },
    ]


class Recorder:
    """Collects orchestrator callbacks."""

    def __init__(self):
        self.completed = []
        self.errors = []
        self.states = []

    def on_complete(self, result):
        self.completed.append(result)

    def on_error(self, message):
        self.errors.append(message)

    def on_progress(self, state):
        self.states.append(state)

    @property
    def phases(self):
        return [state.phase.value for state in self.states]


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def make_orchestrator(recorder):
    """Build an orchestrator wired to the recorder with a fixed date."""

    def _make(fetch, emit=None, **kwargs):
        kwargs.setdefault("reset_delay", 60)
        kwargs.setdefault("today", lambda: date(2024, 5, 17))
        return ExportOrchestrator(
            fetch,
            emit or (lambda content, name, content_type: None),
            on_complete=recorder.on_complete,
            on_error=recorder.on_error,
            on_progress=recorder.on_progress,
            **kwargs,
        )

    return _make


@pytest.fixture
def post_request():
    return ExportRequest(types=("post",))
