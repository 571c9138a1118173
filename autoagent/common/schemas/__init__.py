"""
Auto Agent Schemas

Index records and chat messages.
"""

from .index_record import (
    IndexRecord,
    ExtractionSource,
    ChatMessage,
    ChatMessageKind,
    generate_record_id,
)

__all__ = [
    "IndexRecord",
    "ExtractionSource",
    "ChatMessage",
    "ChatMessageKind",
    "generate_record_id",
]
