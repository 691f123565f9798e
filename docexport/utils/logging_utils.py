"""Logging setup for the docexport CLI.

Modules use the standard pattern:

    import logging
    logger = logging.getLogger(__name__)

The CLI calls `configure_cli_logging()` once from its global callback. It
sends records to stderr at the level the flags ask for and keeps an INFO
log of every run in the config directory.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from docexport.config.settings import get_config_dir, get_env_var

# Max log file size: 5MB, keep 2 backups
_MAX_LOG_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 2

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILENAME = "docexport.log"


def resolve_log_level(verbose: bool = False, quiet: bool = False) -> int:
    """Pick the CLI log level from flags, falling back to DOCEXPORT_LOG_LEVEL."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR

    level_name = (get_env_var("DOCEXPORT_LOG_LEVEL", validate=False) or "WARNING").upper()
    return getattr(logging, level_name, logging.WARNING)


def _file_handler() -> RotatingFileHandler:
    handler = RotatingFileHandler(
        get_config_dir() / LOG_FILENAME, maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT
    )
    handler.setLevel(logging.INFO)
    return handler


def configure_cli_logging(
    verbose: bool = False,
    quiet: bool = False,
    stream: Optional[object] = None,
    log_file: bool = True,
) -> int:
    """Route docexport.* log records to stderr and the rotating log file.

    Args:
        verbose: Log DEBUG and above to stderr
        quiet: Log only errors to stderr
        stream: Stream to use instead of stderr
        log_file: Also write INFO and above to the config directory's log file

    Returns:
        The level applied to the stderr handler.
    """
    level = resolve_log_level(verbose, quiet)

    package_logger = logging.getLogger("docexport")

    # Replace previous CLI handlers; stderr may have been swapped since
    for handler in list(package_logger.handlers):
        if getattr(handler, "_docexport_cli", False):
            package_logger.removeHandler(handler)
            handler.close()

    stream_handler = logging.StreamHandler(stream or sys.stderr)
    stream_handler.setLevel(level)
    handlers = [stream_handler]
    if log_file:
        handlers.append(_file_handler())

    for handler in handlers:
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
        handler._docexport_cli = True
        package_logger.addHandler(handler)

    package_logger.setLevel(min(level, logging.INFO) if log_file else level)

    return level
