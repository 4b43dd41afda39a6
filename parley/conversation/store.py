"""ThreadStore abstract interface."""

from abc import ABC, abstractmethod

from parley.conversation.models import (
    ConversationThread,
    MessageMetadata,
    MessageRole,
    ThreadMessage,
    ThreadStats,
    ThreadSummary,
)


class ThreadStore(ABC):
    """Abstract interface for per-address conversation threads.

    Every operation is total: unknown addresses yield None, False or an
    empty result rather than raising.
    """

    @abstractmethod
    async def get_or_create(
        self, address: str, display_name: str | None = None
    ) -> ConversationThread:
        """Return the thread for an address, creating it on first sight."""
        pass

    @abstractmethod
    async def append(
        self,
        address: str,
        content: str,
        role: MessageRole,
        metadata: MessageMetadata | None = None,
    ) -> ThreadMessage:
        """Append an entry, refresh topics and enforce the history cap."""
        pass

    @abstractmethod
    async def history(
        self, address: str, limit: int | None = None
    ) -> list[ThreadMessage]:
        """Return the last ``limit`` entries in chronological order."""
        pass

    @abstractmethod
    async def formatted_history(self, address: str, limit: int = 10) -> str:
        """Render recent history as ``User:``/``Assistant:`` lines."""
        pass

    @abstractmethod
    async def stats(self, address: str) -> ThreadStats | None:
        """Summary statistics for a thread."""
        pass

    @abstractmethod
    async def clear(self, address: str) -> bool:
        """Drop all entries and topics while keeping the thread."""
        pass

    @abstractmethod
    async def delete(self, address: str) -> bool:
        """Remove the thread entirely."""
        pass

    @abstractmethod
    async def get_by_id(self, thread_id: str) -> ConversationThread | None:
        """Look a thread up by its thread id."""
        pass

    @abstractmethod
    async def list_threads(self) -> list[ThreadSummary]:
        """List all threads, most recent interaction first."""
        pass

    @abstractmethod
    async def active_since(self, hours: int = 24) -> list[ConversationThread]:
        """Threads with an interaction in the last ``hours``."""
        pass

    @abstractmethod
    async def search(self, query: str) -> list[ConversationThread]:
        """Threads whose display name or any entry matches ``query``."""
        pass
