"""Message ledger: durable record of every inbound and outbound message."""

from parley.ledger.models import (
    ConversationStats,
    Direction,
    LedgerMessageType,
    LedgerStats,
    StoredMessage,
)
from parley.ledger.store import MessageLedger
from parley.ledger.stores import InMemoryMessageLedger

__all__ = [
    "ConversationStats",
    "Direction",
    "LedgerMessageType",
    "LedgerStats",
    "StoredMessage",
    "MessageLedger",
    "InMemoryMessageLedger",
]
