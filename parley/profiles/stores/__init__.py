"""Context profile stores."""

from parley.profiles.store import ContextProfileStore
from parley.profiles.stores.inmemory import InMemoryContextProfileStore

__all__ = [
    "ContextProfileStore",
    "InMemoryContextProfileStore",
]
