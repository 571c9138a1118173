"""
Chat Session

Owns every piece of mutable conversation state: the message history, the
index and the in-flight indexing flag. The indexer, retriever and context
builder receive that state explicitly and never touch the session.

Pipeline for a user message:
1. Refuse if no API key is configured
2. "index this:" / "analyze this:" → Indexer, optional notification
3. Anything else → build context from the index, stream the LLM reply
"""

import logging
import threading
from typing import Iterator, List, Optional

from ..common.config import AppConfig
from ..common.credentials import ConfigCredentialProvider, CredentialProvider
from ..common.errors import CompletionError, IndexingInProgress, MissingCredential
from ..common.llm_client import LLMClient
from ..common.schemas import ChatMessage, ChatMessageKind
from ..indexer import ContentAnalyzer, Indexer, IndexingOutcome, IndexStore, describe_outcome, parse_index_trigger
from ..retriever import build_context, find_relevant

logger = logging.getLogger("autoagent.chat.session")

COMPLETION_ERROR_MESSAGE = (
    "Error communicating with the language model. Please check your API key or try again."
)
EMPTY_REPLY_MESSAGE = "No response received from the language model."


class ChatSession:
    """
    One conversation with its own index.

    Only one indexing operation may run at a time; a second request while
    one is in flight raises IndexingInProgress.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        credentials: Optional[CredentialProvider] = None,
        llm_client: Optional[LLMClient] = None,
        store: Optional[IndexStore] = None,
    ):
        self.config = config or AppConfig()
        self.credentials = credentials or ConfigCredentialProvider(self.config)
        self.store = store or IndexStore()
        self._messages: List[ChatMessage] = []
        self._indexing_lock = threading.Lock()
        self._messages_lock = threading.Lock()

        self._attach_llm(llm_client)
        self._append(self.config.chat.welcome_message, kind=ChatMessageKind.CHAT)

    # ------------------------------------------------------------------ #
    # State
    # ------------------------------------------------------------------ #

    def _attach_llm(self, llm_client: Optional[LLMClient]) -> None:
        if llm_client is None:
            llm_client = LLMClient.from_config(self.config.llm, self.credentials.get_api_key())
        self.llm = llm_client
        analyzer = ContentAnalyzer(
            llm_client=llm_client,
            max_tokens=self.config.index.analysis_max_tokens,
            temperature=self.config.index.analysis_temperature,
            timeout=self.config.index.analysis_timeout,
        )
        self.indexer = Indexer(analyzer=analyzer)

    def set_credentials(self, credentials: CredentialProvider) -> None:
        """Swap the credential provider and rebuild the LLM client."""
        self.credentials = credentials
        self._attach_llm(None)
        logger.info("Credentials updated (LLM available: %s)", self.llm.is_available)

    @property
    def can_operate(self) -> bool:
        """A key is present and the client could be built"""
        return self.credentials.has_key and self.llm.is_available

    @property
    def is_indexing(self) -> bool:
        return self._indexing_lock.locked()

    @property
    def messages(self) -> List[ChatMessage]:
        with self._messages_lock:
            return list(self._messages)

    def _append(
        self,
        text: str,
        is_user: bool = False,
        kind: ChatMessageKind = ChatMessageKind.CHAT,
    ) -> ChatMessage:
        with self._messages_lock:
            message = ChatMessage(id=len(self._messages) + 1, text=text, is_user=is_user, kind=kind)
            self._messages.append(message)
        return message

    def _require_credentials(self) -> None:
        if not self.can_operate:
            raise MissingCredential("No API key configured for provider %r" % self.config.llm.provider)

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #

    def send(self, text: str) -> List[ChatMessage]:
        """
        Handle one user message.

        Returns:
            The messages produced in response (the user's own message excluded).
            Empty input produces nothing.

        Raises:
            MissingCredential: no API key is configured
            IndexingInProgress: an index request is already running
        """
        start = len(self._messages)
        for _ in self.stream(text):
            pass
        return [m for m in self._messages[start:] if not m.is_user]

    def stream(self, text: str) -> Iterator[str]:
        """Like send(), but returns an iterator of reply text as it arrives.

        Credential and in-flight checks run before the iterator is returned.
        """
        if not text or not text.strip():
            return iter(())
        self._require_credentials()

        content = parse_index_trigger(text)
        if content is not None:
            if self._indexing_lock.locked():
                raise IndexingInProgress("An indexing request is already running")
            return self._stream_index(text, content)
        return self._stream_reply(text)

    def _stream_index(self, text: str, content: str) -> Iterator[str]:
        self._begin_indexing()
        try:
            self._append(text, is_user=True)
            _, notice = self._index_and_notify(content)
        finally:
            self._indexing_lock.release()
        if notice is not None:
            yield notice.text

    def _stream_reply(self, text: str) -> Iterator[str]:
        self._append(text, is_user=True)
        chunks = []
        try:
            for chunk in self._iter_completion(text):
                chunks.append(chunk)
                yield chunk
        except CompletionError:
            self._append(COMPLETION_ERROR_MESSAGE, kind=ChatMessageKind.ERROR)
            yield COMPLETION_ERROR_MESSAGE if not chunks else "\n\n" + COMPLETION_ERROR_MESSAGE
            return

        reply = "".join(chunks)
        if not reply:
            yield EMPTY_REPLY_MESSAGE
        self._append(reply or EMPTY_REPLY_MESSAGE)

    def index_content(self, content: str):
        """
        Index ``content`` into this session's store.

        Returns:
            (IndexingOutcome, notification ChatMessage or None)

        Raises:
            IndexingInProgress: another index request holds the session
        """
        self._begin_indexing()
        try:
            return self._index_and_notify(content)
        finally:
            self._indexing_lock.release()

    def _begin_indexing(self) -> None:
        if not self._indexing_lock.acquire(blocking=False):
            raise IndexingInProgress("An indexing request is already running")

    def _index_and_notify(self, content: str):
        outcome: IndexingOutcome = self.indexer.index(content, self.store)
        text = describe_outcome(outcome, notify_on_fallback=self.config.index.notify_on_fallback)
        notice = None
        if text is not None:
            notice = self._append(text, kind=ChatMessageKind.NOTIFICATION)
        return outcome, notice

    def clear_index(self) -> ChatMessage:
        """Empty the index and post a single confirmation."""
        removed = self.store.clear()
        return self._append(
            f"Index cleared. Removed {removed} item(s).",
            kind=ChatMessageKind.NOTIFICATION,
        )

    def build_context(self, query: str) -> str:
        records = self.store.records
        relevant = find_relevant(query, records, limit=self.config.index.max_results)
        return build_context(
            query,
            records,
            limit=self.config.index.max_results,
            snippet_chars=self.config.index.snippet_chars,
            relevant=relevant,
        )

    def _iter_completion(self, query: str) -> Iterator[str]:
        messages = [
            {"role": "system", "content": self.build_context(query)},
            {"role": "user", "content": query},
        ]
        chat = self.config.chat
        try:
            for chunk in self.llm.stream_chat(
                messages,
                max_tokens=chat.max_tokens,
                temperature=chat.temperature,
                top_p=chat.top_p,
                timeout=chat.timeout,
            ):
                yield chunk
        except Exception as e:
            logger.error("Completion call failed: %s", e)
            raise CompletionError(str(e)) from e
