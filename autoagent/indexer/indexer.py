"""
Indexer

Turns a block of text into an IndexRecord and appends it to the session's
IndexStore. Never raises: analysis failures of any kind fall back to the
local keyword extractor.

Pipeline:
1. LLM analysis (keywords, themes, entities, summary), if available
2. On any failure, local frequency-based extraction
3. Build the record and append it to the store
4. Report what happened as an outcome event; the caller decides whether to notify
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from ..common.schemas import ExtractionSource, IndexRecord, generate_record_id
from .extractor import ContentAnalyzer
from .fallback import extract_keywords_locally
from .store import IndexStore

logger = logging.getLogger("autoagent.indexer.indexer")


@dataclass(frozen=True)
class IndexingSucceeded:
    """LLM analysis produced the record"""
    record: IndexRecord
    summary: str = ""

    @property
    def used_fallback(self) -> bool:
        return False


@dataclass(frozen=True)
class IndexingFailedSoftly:
    """Analysis was unavailable or failed; the local extractor produced the record"""
    record: IndexRecord
    reason: str = ""

    @property
    def used_fallback(self) -> bool:
        return True


IndexingOutcome = Union[IndexingSucceeded, IndexingFailedSoftly]


class Indexer:
    """Builds index records, preferring LLM analysis over local extraction."""

    def __init__(self, analyzer: Optional[ContentAnalyzer] = None):
        self._analyzer = analyzer

    @property
    def has_analyzer(self) -> bool:
        return self._analyzer is not None and self._analyzer.is_available

    def index(self, content: str, store: IndexStore) -> IndexingOutcome:
        """
        Index ``content`` into ``store``.

        Args:
            content: Text to index (may be empty; the record is still stored)
            store: The session's index

        Returns:
            IndexingSucceeded or IndexingFailedSoftly, both carrying the stored record
        """
        outcome = self._build(content)
        store.add(outcome.record)
        return outcome

    def _build(self, content: str) -> IndexingOutcome:
        if not self.has_analyzer:
            return self._fallback(content, "analysis unavailable")

        try:
            analysis = self._analyzer.analyze(content)
        except Exception as e:
            logger.warning("Content analysis failed, using local extraction: %s", e)
            return self._fallback(content, str(e) or type(e).__name__)

        record = IndexRecord(
            id=generate_record_id(),
            content=content,
            keywords=analysis.combined_keywords,
            summary=analysis.summary or None,
            source=ExtractionSource.LLM,
        )
        logger.info("Indexed %s via analysis (%d keywords)", record.id, len(record.keywords))
        return IndexingSucceeded(record=record, summary=analysis.summary)

    def _fallback(self, content: str, reason: str) -> IndexingFailedSoftly:
        record = IndexRecord(
            id=generate_record_id(),
            content=content,
            keywords=extract_keywords_locally(content),
            source=ExtractionSource.FALLBACK,
        )
        logger.info("Indexed %s via local extraction (%d keywords)", record.id, len(record.keywords))
        return IndexingFailedSoftly(record=record, reason=reason)


def describe_outcome(outcome: IndexingOutcome, notify_on_fallback: bool = False) -> Optional[str]:
    """Notification text for an outcome, or None when nothing should be shown.

    Fallback outcomes are silent unless ``notify_on_fallback`` is set.
    """
    count = len(outcome.record.keywords)
    if isinstance(outcome, IndexingSucceeded):
        if outcome.summary:
            return f"Indexed content with {count} keywords. Summary: {outcome.summary}"
        return f"Indexed content with {count} keywords. Content indexed successfully."
    if notify_on_fallback:
        return f"Indexed content with {count} keywords using local keyword extraction."
    return None
