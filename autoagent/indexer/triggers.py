"""User-facing trigger syntax for indexing requests."""

import re
from typing import Optional

INDEX_TRIGGER_PREFIXES = ("index this:", "analyze this:")

_TRIGGER_RE = re.compile(
    r"^(?:" + "|".join(re.escape(p) for p in INDEX_TRIGGER_PREFIXES) + r")",
    re.IGNORECASE,
)


def parse_index_trigger(message: str) -> Optional[str]:
    """Return the content to index if ``message`` is an index request, else None.

    >>> parse_index_trigger("Index this:  some notes ")
    'some notes'
    >>> parse_index_trigger("what is this?") is None
    True
    """
    match = _TRIGGER_RE.match(message or "")
    if not match:
        return None
    return message[match.end():].strip()


def is_index_request(message: str) -> bool:
    return parse_index_trigger(message) is not None
