"""
Auto Agent

Chat assistant with a lightweight in-memory content index.

Philosophy:
- Index entries are created once and never mutated
- Retrieval is keyword based and deterministic
- Analysis failures degrade to a local extractor, never to an error
- All mutable state lives in one ChatSession

Usage:
    from autoagent.common import load_config, LLMClient
    from autoagent.indexer import Indexer, IndexStore
    from autoagent.retriever import find_relevant, build_context
    from autoagent.chat import ChatSession
"""

__version__ = "0.1.0"
