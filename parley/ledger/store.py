"""MessageLedger abstract interface."""

from abc import ABC, abstractmethod

from parley.ledger.models import ConversationStats, LedgerStats, StoredMessage


class MessageLedger(ABC):
    """Abstract interface for the durable message log.

    Appends are idempotent on ``message_id``: a repeated id is rejected,
    never silently ignored.
    """

    @abstractmethod
    async def append(self, message: StoredMessage) -> StoredMessage:
        """Record a message.

        Raises:
            DuplicateMessageError: If the message id is already recorded
        """
        pass

    @abstractmethod
    async def get(self, message_id: str) -> StoredMessage | None:
        """Get a message by id."""
        pass

    @abstractmethod
    async def query(
        self, address: str, limit: int = 50, offset: int = 0
    ) -> list[StoredMessage]:
        """Messages for an address, newest first."""
        pass

    @abstractmethod
    async def by_thread(self, thread_id: str, limit: int = 50) -> list[StoredMessage]:
        """Messages for a thread id, newest first."""
        pass

    @abstractmethod
    async def recent(self, limit: int = 20) -> list[StoredMessage]:
        """Most recent messages across all addresses."""
        pass

    @abstractmethod
    async def search(self, query: str, limit: int = 50) -> list[StoredMessage]:
        """Messages whose content or AI response matches ``query``."""
        pass

    @abstractmethod
    async def aggregate_stats(self) -> LedgerStats:
        """Counts across the whole ledger."""
        pass

    @abstractmethod
    async def conversation_stats(self, address: str) -> ConversationStats:
        """Counts and response timing for one address."""
        pass

    @abstractmethod
    async def delete_older_than(self, days: int = 90) -> int:
        """Remove messages older than ``days``; returns the number removed."""
        pass
