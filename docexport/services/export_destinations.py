"""Export destination handlers.

Each destination is the emit capability of an export run:
``emit(content, filename, content_type)``.

- File: Write content into an output directory
- Stdout: Print raw content for piping
"""

import logging
import sys
from pathlib import Path
from typing import Any, Optional, Protocol, TextIO, Tuple, Union

from docexport.exceptions import FileWriteError

logger = logging.getLogger(__name__)


class ExportDestination(Protocol):
    """Protocol for export destination handlers."""

    def emit(self, content: str, filename: str, content_type: str) -> None:
        """Persist export content.

        Args:
            content: Serialized export content
            filename: Resolved output name, extension included
            content_type: MIME type of the content
        """
        ...


MAX_FILENAME_LENGTH = 200

_INVALID_FILENAME_CHARS = '<>:"/\\|?*'


def _replace_invalid(text: str) -> str:
    for char in _INVALID_FILENAME_CHARS:
        text = text.replace(char, "-")
    return text


def sanitize_filename(filename: str, extension: str = "") -> str:
    """Sanitize a string for use as a filename.

    With ``extension``, ``filename`` is treated as the stem and shortened so
    that ``<stem>.<extension>`` stays within MAX_FILENAME_LENGTH.
    """
    suffix = f".{_replace_invalid(extension)}" if extension else ""
    stem = _replace_invalid(filename).strip().strip(".")
    stem = stem[: MAX_FILENAME_LENGTH - len(suffix)].rstrip(". ") or "export"
    return stem + suffix


def split_extension(filename: str) -> Tuple[str, str]:
    """Split ``name.ext`` into ``("name", "ext")``; no dot gives an empty extension."""
    stem, dot, extension = filename.rpartition(".")
    if not dot or not stem.strip():
        return filename, ""
    return stem, extension


class FileDestination:
    """Export to a file inside ``output_dir``."""

    def __init__(self, output_dir: Union[str, Path] = ".", overwrite: bool = False):
        self.output_dir = Path(output_dir).expanduser()
        self.overwrite = overwrite
        self.last_path: Optional[Path] = None

    def emit(self, content: str, filename: str, content_type: str) -> None:
        """Write content to ``output_dir/filename``."""
        path = self.output_dir / sanitize_filename(*split_extension(filename))

        if path.exists() and not self.overwrite:
            raise FileWriteError(
                f"Refusing to overwrite existing file {path}", path=str(path)
            )

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise FileWriteError(f"Failed to write file: {e}", path=str(path)) from e

        self.last_path = path
        logger.info("Wrote %d characters of %s to %s", len(content), content_type, path)

    __call__ = emit


class StdoutDestination:
    """Export raw content to a stream, stdout by default."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def emit(self, content: str, filename: str, content_type: str) -> None:
        stream = self.stream or sys.stdout
        stream.write(content)
        if content and not content.endswith("\n"):
            stream.write("\n")
        stream.flush()
        logger.debug("Printed %s (%s) to stdout", filename, content_type)

    __call__ = emit


def get_destination(dest_type: str, **options: Any) -> ExportDestination:
    """Get the appropriate destination handler.

    Args:
        dest_type: Destination type (file, stdout)
        **options: Handler options (output_dir/overwrite for file, stream for stdout)

    Returns:
        ExportDestination handler

    Raises:
        ValueError: If destination type is not supported
    """
    destinations = {
        "file": FileDestination,
        "stdout": StdoutDestination,
    }

    if dest_type not in destinations:
        raise ValueError(
            f"Unsupported destination type: {dest_type}. "
            f"Supported types: {', '.join(destinations.keys())}"
        )

    return destinations[dest_type](**options)
