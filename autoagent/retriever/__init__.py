"""
Retriever - Indexed Context Retrieval

Scores indexed content against a query and builds the enriched prompt.

Key Components:
- find_relevant: keyword substring scoring, top 5, stable ranking
- build_context: system prompt with relevant indexed content

Pipeline:
1. Tokenize query (lowercase, whitespace split)
2. Score every record's keywords against the tokens
3. Keep the top 5 positive scores
4. Compose the system prompt around them
"""

from .searcher import RankedRecord, find_relevant, score_record, tokenize_query
from .context_builder import build_context, format_record_line

__all__ = [
    "RankedRecord",
    "find_relevant",
    "score_record",
    "tokenize_query",
    "build_context",
    "format_record_line",
]
