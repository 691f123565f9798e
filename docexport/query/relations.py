"""Reference expansion fragments for export queries.

Each level selects the documents that reference the record one level up
and projects a small set of display fields. Deeper levels nest inside the
parent's projection, so ``^._id`` always points at the referencing record's
parent.
"""

REFERENCE_MARKER = '"references": *[references(^._id)]'

REFERENCE_FIELDS = ("_id", "_type", "title", "name", "slug")


def build_reference_expansion(depth: int) -> str:
    """Build the projection fragment for ``depth`` levels of referencing documents.

    Returns an empty string for ``depth <= 0``. Depth is not capped here;
    callers decide how deep an export may go.

    Example:
        >>> build_reference_expansion(1)
        '"references": *[references(^._id)] { _id, _type, title, name, slug }'
    """
    if depth <= 0:
        return ""

    fields = ", ".join(REFERENCE_FIELDS)
    if depth > 1:
        return f"{REFERENCE_MARKER} {{ {fields}, {build_reference_expansion(depth - 1)} }}"

    return f"{REFERENCE_MARKER} {{ {fields} }}"
