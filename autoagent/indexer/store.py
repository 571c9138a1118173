"""
Index Store

The session's single in-memory collection of index records.
Insertion order is preserved; the only removal is a whole-collection clear.
"""

import logging
import threading
from typing import Iterator, List, Tuple

from ..common.schemas import IndexRecord

logger = logging.getLogger("autoagent.indexer.store")


class IndexStore:
    """Ordered, append-only collection of IndexRecord owned by one session."""

    def __init__(self):
        self._records: List[IndexRecord] = []
        self._lock = threading.Lock()

    def add(self, record: IndexRecord) -> None:
        with self._lock:
            self._records.append(record)
        logger.debug("Added %s (%d keywords)", record.id, len(record.keywords))

    def clear(self) -> int:
        """Empty the collection atomically. Returns the number of records removed."""
        with self._lock:
            removed = len(self._records)
            self._records = []
        logger.info("Index cleared (%d records removed)", removed)
        return removed

    @property
    def records(self) -> Tuple[IndexRecord, ...]:
        """Snapshot in insertion order"""
        with self._lock:
            return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[IndexRecord]:
        return iter(self.records)
