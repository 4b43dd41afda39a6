"""Message ledger stores."""

from parley.ledger.store import MessageLedger
from parley.ledger.stores.inmemory import InMemoryMessageLedger

__all__ = [
    "MessageLedger",
    "InMemoryMessageLedger",
]
