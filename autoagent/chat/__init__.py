"""
Chat - Conversation Surface

Key Components:
- ChatSession: owns messages, the index and the in-flight flag
- server: FastAPI app over one session
- cli: terminal chat and server runner
"""

from .session import ChatSession, COMPLETION_ERROR_MESSAGE, EMPTY_REPLY_MESSAGE

__all__ = [
    "ChatSession",
    "COMPLETION_ERROR_MESSAGE",
    "EMPTY_REPLY_MESSAGE",
]
