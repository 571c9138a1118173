"""
Context Builder

Composes the system prompt sent ahead of the user's message: capabilities,
index state, relevant indexed content, processing instructions, and the
query itself.
"""

from typing import List, Optional, Sequence

from ..common.schemas import IndexRecord
from .searcher import DEFAULT_LIMIT, RankedRecord, find_relevant

SNIPPET_CHARS = 200

PREAMBLE = """You are Auto Agent, a helpful assistant with a content indexing capability.

Capabilities:
- Answer questions and hold a conversation
- Remember content the user asks you to index (messages starting with "index this:" or "analyze this:")
- Use previously indexed content to give better-informed answers"""

INSTRUCTIONS = """Instructions:
- Use the relevant indexed content above when it helps answer the query
- Refer to indexed content by its ID in brackets when you rely on it
- If the indexed content does not cover the query, answer from general knowledge
- Be concise but complete"""


def format_record_line(ranked: RankedRecord, snippet_chars: int = SNIPPET_CHARS) -> str:
    """``[id] <first N chars>... (Keywords: a, b)``"""
    snippet = ranked.content[:snippet_chars]
    keywords = ", ".join(ranked.keywords)
    return f"[{ranked.id}] {snippet}... (Keywords: {keywords})"


def build_context(
    query: str,
    records: Sequence[IndexRecord],
    limit: int = DEFAULT_LIMIT,
    snippet_chars: int = SNIPPET_CHARS,
    relevant: Optional[List[RankedRecord]] = None,
) -> str:
    """
    Build the system prompt for ``query``.

    Args:
        query: The user's message
        records: Current index, in insertion order
        limit: Maximum relevant records to include
        snippet_chars: Characters of content shown per record
        relevant: Precomputed ranking (computed from ``records`` when omitted)

    Returns:
        The system prompt text
    """
    if relevant is None:
        relevant = find_relevant(query, records, limit=limit)

    sections = [
        PREAMBLE,
        f"Current session state:\n- Indexed items: {len(records)}",
    ]

    if relevant:
        lines = [format_record_line(r, snippet_chars) for r in relevant]
        sections.append("Relevant indexed content:\n" + "\n".join(lines))

    sections.append(INSTRUCTIONS)
    sections.append(f"User query: {query}")

    return "\n\n".join(sections)
