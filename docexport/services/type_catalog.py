"""Document type catalog.

Lists the types an export can select and picks the default selection.
Explicitly configured types take precedence over asking the store.
"""

import logging
from typing import Any, Callable, Optional, Sequence

from docexport.config.constants import TYPE_ENUMERATION_QUERY
from docexport.exceptions import TypeEnumerationError

logger = logging.getLogger(__name__)


def load_available_types(
    fetch: Callable[[str], Any], document_types: Optional[Sequence[str]] = None
) -> list[str]:
    """Return the document types an export can choose from.

    Args:
        fetch: Query capability used when no explicit types are given
        document_types: Explicit types; skips the store when non-empty

    Raises:
        TypeEnumerationError: If the store cannot be asked
    """
    if document_types:
        types = list(document_types)
    else:
        try:
            types = fetch(TYPE_ENUMERATION_QUERY)
        except Exception as e:
            logger.warning("Error loading document types: %s", e, exc_info=True)
            raise TypeEnumerationError(cause=str(e)) from e
        if not isinstance(types, list):
            raise TypeEnumerationError(
                f"Expected a list of types, got {type(types).__name__}"
            )

    return [t for t in types if t]


def default_selection(types: Sequence[str]) -> list[str]:
    """Initial selection: the first available type."""
    return [types[0]] if types else []
