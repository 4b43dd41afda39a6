"""Thread stores for conversation memory."""

from parley.conversation.store import ThreadStore
from parley.conversation.stores.inmemory import InMemoryThreadStore

__all__ = [
    "ThreadStore",
    "InMemoryThreadStore",
]
