"""
Searcher

Keyword relevance ranking over the in-memory index.

Scoring: for every (keyword, query token) pair, +1 when the lowercased
keyword contains the token and +1 when the token contains the lowercased
keyword. An exact match therefore scores 2. Records scoring 0 are dropped,
the rest are ranked by score with insertion order breaking ties.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from ..common.schemas import IndexRecord

DEFAULT_LIMIT = 5


@dataclass(frozen=True)
class RankedRecord:
    """An index record with its per-query relevance score"""
    record: IndexRecord
    relevance_score: int

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def content(self) -> str:
        return self.record.content

    @property
    def keywords(self) -> List[str]:
        return self.record.keywords

    @property
    def created_at(self) -> datetime:
        return self.record.created_at


def tokenize_query(query: str) -> List[str]:
    """Lowercase and split on whitespace. Punctuation is kept."""
    return (query or "").lower().split()


def score_record(tokens: Sequence[str], record: IndexRecord) -> int:
    score = 0
    for keyword in record.keywords:
        kw = keyword.lower()
        if not kw:
            continue
        for token in tokens:
            if token in kw:
                score += 1
            if kw in token:
                score += 1
    return score


def find_relevant(
    query: str,
    records: Iterable[IndexRecord],
    limit: Optional[int] = DEFAULT_LIMIT,
) -> List[RankedRecord]:
    """
    Rank ``records`` against ``query``.

    Pure: the same (query, records) always gives the same ordered result.

    Args:
        query: Raw user query
        records: Index records in insertion order
        limit: Maximum results (default 5)

    Returns:
        At most ``limit`` RankedRecord, best first
    """
    tokens = tokenize_query(query)
    if not tokens:
        return []

    ranked = []
    for record in records:
        score = score_record(tokens, record)
        if score > 0:
            ranked.append(RankedRecord(record=record, relevance_score=score))

    # sorted() is stable, so equal scores keep insertion order
    ranked = sorted(ranked, key=lambda r: r.relevance_score, reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return ranked
