"""
Indexer - Content Capture

Turns user-supplied text into keyworded index records.

Key Components:
- Indexer: LLM analysis with local fallback, appends to the store
- ContentAnalyzer: analysis prompt + strict JSON parsing
- IndexStore: the session's ordered in-memory index
- parse_index_trigger: "index this:" / "analyze this:" detection
"""

from .extractor import ContentAnalyzer, ContentAnalysis, AnalysisError, parse_analysis
from .fallback import extract_keywords_locally
from .indexer import (
    Indexer,
    IndexingOutcome,
    IndexingSucceeded,
    IndexingFailedSoftly,
    describe_outcome,
)
from .store import IndexStore
from .triggers import parse_index_trigger, is_index_request, INDEX_TRIGGER_PREFIXES

__all__ = [
    "ContentAnalyzer",
    "ContentAnalysis",
    "AnalysisError",
    "parse_analysis",
    "extract_keywords_locally",
    "Indexer",
    "IndexingOutcome",
    "IndexingSucceeded",
    "IndexingFailedSoftly",
    "describe_outcome",
    "IndexStore",
    "parse_index_trigger",
    "is_index_request",
    "INDEX_TRIGGER_PREFIXES",
]
