"""Contact directory stores."""

from parley.contacts.store import ContactDirectory
from parley.contacts.stores.inmemory import InMemoryContactDirectory

__all__ = [
    "ContactDirectory",
    "InMemoryContactDirectory",
]
