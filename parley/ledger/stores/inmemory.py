"""In-memory implementation of MessageLedger."""

import asyncio
from collections import Counter
from datetime import timedelta

from parley.addressing import normalize_address
from parley.conversation.models import utc_now
from parley.errors import DuplicateMessageError
from parley.ledger.models import (
    ConversationStats,
    Direction,
    LedgerStats,
    StoredMessage,
)
from parley.ledger.store import MessageLedger
from parley.observability.logging import get_logger

logger = get_logger(__name__)


class InMemoryMessageLedger(MessageLedger):
    """In-memory ledger for testing and development.

    Keeps records keyed by message id with linear scans for queries.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._messages: dict[str, StoredMessage] = {}
        self._lock = asyncio.Lock()

    async def append(self, message: StoredMessage) -> StoredMessage:
        """Record a message."""
        async with self._lock:
            if message.message_id in self._messages:
                raise DuplicateMessageError(message.message_id, address=message.address)
            self._messages[message.message_id] = message

        logger.debug(
            "ledger_message_saved",
            message_id=message.message_id,
            direction=message.direction.value,
            address=message.address,
        )
        return message

    async def get(self, message_id: str) -> StoredMessage | None:
        """Get a message by id."""
        return self._messages.get(message_id)

    def _newest_first(self, messages: list[StoredMessage]) -> list[StoredMessage]:
        return sorted(messages, key=lambda m: m.timestamp, reverse=True)

    async def query(
        self, address: str, limit: int = 50, offset: int = 0
    ) -> list[StoredMessage]:
        """Messages for an address, newest first."""
        key = normalize_address(address)
        async with self._lock:
            matches = [m for m in self._messages.values() if m.address == key]
        return self._newest_first(matches)[offset : offset + limit]

    async def by_thread(self, thread_id: str, limit: int = 50) -> list[StoredMessage]:
        """Messages for a thread id, newest first."""
        async with self._lock:
            matches = [m for m in self._messages.values() if m.thread_id == thread_id]
        return self._newest_first(matches)[:limit]

    async def recent(self, limit: int = 20) -> list[StoredMessage]:
        """Most recent messages across all addresses."""
        async with self._lock:
            messages = list(self._messages.values())
        return self._newest_first(messages)[:limit]

    async def search(self, query: str, limit: int = 50) -> list[StoredMessage]:
        """Messages whose content or AI response matches ``query``."""
        needle = query.lower()
        async with self._lock:
            matches = [
                m
                for m in self._messages.values()
                if needle in m.content.lower()
                or (m.ai_response is not None and needle in m.ai_response.lower())
            ]
        return self._newest_first(matches)[:limit]

    async def aggregate_stats(self) -> LedgerStats:
        """Counts across the whole ledger."""
        async with self._lock:
            messages = list(self._messages.values())

        by_direction = Counter(m.direction.value for m in messages)
        return LedgerStats(
            total=len(messages),
            inbound=by_direction.get(Direction.INBOUND.value, 0),
            outbound=by_direction.get(Direction.OUTBOUND.value, 0),
            ai_processed=sum(1 for m in messages if m.processed_by_ai),
            by_type=dict(Counter(m.message_type.value for m in messages)),
            by_direction=dict(by_direction),
        )

    async def conversation_stats(self, address: str) -> ConversationStats:
        """Counts and response timing for one address."""
        key = normalize_address(address)
        async with self._lock:
            messages = sorted(
                (m for m in self._messages.values() if m.address == key),
                key=lambda m: m.timestamp,
            )

        if not messages:
            return ConversationStats()

        gaps = [
            (following.timestamp - current.timestamp).total_seconds() * 1000
            for current, following in zip(messages, messages[1:])
            if current.direction == Direction.INBOUND
            and following.direction == Direction.OUTBOUND
        ]

        return ConversationStats(
            total=len(messages),
            inbound=sum(1 for m in messages if m.direction == Direction.INBOUND),
            outbound=sum(1 for m in messages if m.direction == Direction.OUTBOUND),
            ai_processed=sum(1 for m in messages if m.processed_by_ai),
            first_message_at=messages[0].timestamp,
            last_message_at=messages[-1].timestamp,
            average_response_time_ms=sum(gaps) / len(gaps) if gaps else None,
        )

    async def delete_older_than(self, days: int = 90) -> int:
        """Remove messages older than ``days``; returns the number removed."""
        cutoff = utc_now() - timedelta(days=days)
        async with self._lock:
            stale = [mid for mid, m in self._messages.items() if m.timestamp < cutoff]
            for message_id in stale:
                del self._messages[message_id]

        logger.info("ledger_messages_pruned", count=len(stale), older_than_days=days)
        return len(stale)
