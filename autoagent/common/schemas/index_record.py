"""
Index Record Schema

An index record is created exactly once, when the user asks for a block of
text to be indexed, and is never mutated afterwards. Relevance scores are
per-query and live on RankedRecord, not on the stored record.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExtractionSource(str, Enum):
    """Which path produced the record's keywords"""
    LLM = "llm"
    FALLBACK = "fallback"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IndexRecord(BaseModel):
    """A block of previously submitted text with its extracted keywords."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique ID: idx_<timestamp>_<random>")
    content: str = Field(..., description="Original indexed text")
    keywords: List[str] = Field(
        default_factory=list,
        description="keywords + themes + entities, in that order, not deduplicated",
    )
    created_at: datetime = Field(default_factory=_utcnow)
    summary: Optional[str] = None
    source: ExtractionSource = ExtractionSource.FALLBACK


class ChatMessageKind(str, Enum):
    CHAT = "chat"
    NOTIFICATION = "notification"
    ERROR = "error"


class ChatMessage(BaseModel):
    """One entry in the session's message history"""
    id: int
    text: str
    is_user: bool = False
    timestamp: datetime = Field(default_factory=_utcnow)
    kind: ChatMessageKind = ChatMessageKind.CHAT


def generate_record_id(timestamp: Optional[datetime] = None) -> str:
    """Generate a unique ID for an index record"""
    timestamp = timestamp or _utcnow()
    return f"idx_{timestamp.strftime('%Y%m%d%H%M%S%f')}_{uuid.uuid4().hex[:8]}"
