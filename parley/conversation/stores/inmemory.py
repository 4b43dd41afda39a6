"""In-memory implementation of ThreadStore."""

import asyncio
from datetime import timedelta

from parley.addressing import normalize_address, thread_id_for
from parley.config.models.pipeline import ThreadConfig
from parley.conversation.models import (
    ConversationThread,
    MessageMetadata,
    MessageRole,
    ThreadMessage,
    ThreadStats,
    ThreadSummary,
    utc_now,
)
from parley.conversation.store import ThreadStore
from parley.conversation.topics import extract_keywords, merge_topics
from parley.observability.logging import get_logger
from parley.observability.metrics import ACTIVE_THREADS

logger = get_logger(__name__)

NO_HISTORY = "No previous conversation history."


class InMemoryThreadStore(ThreadStore):
    """Process-scoped thread map guarded by one coarse asyncio lock.

    Threads are keyed by normalized address. Callers receive copies so that
    nothing outside the lock can mutate stored state.
    """

    def __init__(self, config: ThreadConfig | None = None) -> None:
        """Initialize empty storage."""
        self._config = config or ThreadConfig()
        self._threads: dict[str, ConversationThread] = {}
        self._lock = asyncio.Lock()

    def _get_or_create_locked(
        self, address: str, display_name: str | None
    ) -> ConversationThread:
        key = normalize_address(address)
        thread = self._threads.get(key)

        if thread is None:
            thread = ConversationThread(
                thread_id=thread_id_for(key),
                address=key,
                display_name=display_name,
            )
            self._threads[key] = thread
            ACTIVE_THREADS.set(len(self._threads))
            logger.info("thread_created", thread_id=thread.thread_id, address=key)
        elif display_name and not thread.display_name:
            thread.display_name = display_name
            thread.updated_at = utc_now()

        return thread

    async def get_or_create(
        self, address: str, display_name: str | None = None
    ) -> ConversationThread:
        """Return the thread for an address, creating it on first sight."""
        async with self._lock:
            thread = self._get_or_create_locked(address, display_name)
            return thread.model_copy(deep=True)

    async def append(
        self,
        address: str,
        content: str,
        role: MessageRole,
        metadata: MessageMetadata | None = None,
    ) -> ThreadMessage:
        """Append an entry, refresh topics and enforce the history cap."""
        message = ThreadMessage(content=content, role=role, metadata=metadata)

        async with self._lock:
            thread = self._get_or_create_locked(address, None)
            messages = [*thread.messages, message]
            if len(messages) > self._config.max_messages:
                messages = messages[-self._config.max_messages :]

            thread.messages = messages
            thread.last_interaction_at = message.timestamp
            thread.updated_at = message.timestamp
            thread.topics = merge_topics(
                thread.topics,
                extract_keywords(content, self._config.keywords_per_message),
                self._config.max_topics,
            )

        return message

    async def history(
        self, address: str, limit: int | None = None
    ) -> list[ThreadMessage]:
        """Return the last ``limit`` entries in chronological order."""
        async with self._lock:
            thread = self._threads.get(normalize_address(address))
            if thread is None:
                return []
            messages = list(thread.messages)

        if limit is not None:
            messages = messages[-limit:] if limit > 0 else []
        return messages

    async def formatted_history(self, address: str, limit: int = 10) -> str:
        """Render recent history as ``User:``/``Assistant:`` lines."""
        messages = await self.history(address, limit)
        if not messages:
            return NO_HISTORY

        lines = []
        for message in messages:
            speaker = "User" if message.role == MessageRole.COUNTERPARTY else "Assistant"
            lines.append(f"{speaker}: {message.content}")
        return "\n".join(lines)

    async def stats(self, address: str) -> ThreadStats | None:
        """Summary statistics for a thread."""
        async with self._lock:
            thread = self._threads.get(normalize_address(address))
            if thread is None:
                return None
            age = utc_now() - thread.created_at
            return ThreadStats(
                message_count=len(thread.messages),
                last_interaction_at=thread.last_interaction_at,
                topics=list(thread.topics),
                sentiment=thread.sentiment,
                thread_age_days=max(age.days, 0),
            )

    async def clear(self, address: str) -> bool:
        """Drop all entries and topics while keeping the thread."""
        async with self._lock:
            thread = self._threads.get(normalize_address(address))
            if thread is None:
                return False
            thread.messages = []
            thread.topics = []
            thread.updated_at = utc_now()

        logger.info("thread_cleared", thread_id=thread.thread_id)
        return True

    async def delete(self, address: str) -> bool:
        """Remove the thread entirely."""
        async with self._lock:
            thread = self._threads.pop(normalize_address(address), None)
            ACTIVE_THREADS.set(len(self._threads))

        if thread is None:
            return False
        logger.info("thread_deleted", thread_id=thread.thread_id)
        return True

    async def get_by_id(self, thread_id: str) -> ConversationThread | None:
        """Look a thread up by its thread id."""
        async with self._lock:
            for thread in self._threads.values():
                if thread.thread_id == thread_id:
                    return thread.model_copy(deep=True)
        return None

    async def list_threads(self) -> list[ThreadSummary]:
        """List all threads, most recent interaction first."""
        async with self._lock:
            summaries = [
                ThreadSummary(
                    thread_id=thread.thread_id,
                    address=thread.address,
                    display_name=thread.display_name,
                    message_count=len(thread.messages),
                    last_interaction_at=thread.last_interaction_at,
                    topics=list(thread.topics),
                    sentiment=thread.sentiment,
                )
                for thread in self._threads.values()
            ]
        summaries.sort(key=lambda s: s.last_interaction_at, reverse=True)
        return summaries

    async def active_since(self, hours: int = 24) -> list[ConversationThread]:
        """Threads with an interaction in the last ``hours``."""
        cutoff = utc_now() - timedelta(hours=hours)
        async with self._lock:
            results = [
                thread.model_copy(deep=True)
                for thread in self._threads.values()
                if thread.last_interaction_at > cutoff
            ]
        results.sort(key=lambda t: t.last_interaction_at, reverse=True)
        return results

    async def search(self, query: str) -> list[ConversationThread]:
        """Threads whose display name or any entry matches ``query``."""
        needle = query.lower()
        async with self._lock:
            return [
                thread.model_copy(deep=True)
                for thread in self._threads.values()
                if needle in (thread.display_name or "").lower()
                or any(needle in m.content.lower() for m in thread.messages)
            ]
