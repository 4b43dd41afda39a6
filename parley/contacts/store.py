"""ContactDirectory abstract interface."""

from abc import ABC, abstractmethod
from typing import Any

from parley.contacts.models import Contact, ContactFilters, ContactStats


class ContactDirectory(ABC):
    """Abstract interface for contact storage.

    Contacts are unique per normalized address.
    """

    @abstractmethod
    async def find_by_address(self, address: str) -> Contact | None:
        """Get contact by counterparty address."""
        pass

    @abstractmethod
    async def get(self, contact_id: str) -> Contact | None:
        """Get contact by id."""
        pass

    @abstractmethod
    async def add(self, contact: Contact) -> Contact:
        """Add a contact.

        Raises:
            ContactError: If the address is taken or the profile is unknown
        """
        pass

    @abstractmethod
    async def update(self, contact_id: str, updates: dict[str, Any]) -> Contact:
        """Apply field updates by id.

        Raises:
            ContactError: If the contact or referenced profile is unknown
        """
        pass

    @abstractmethod
    async def update_by_address(
        self, address: str, updates: dict[str, Any]
    ) -> Contact:
        """Apply field updates by address.

        Raises:
            ContactError: If the contact or referenced profile is unknown
        """
        pass

    @abstractmethod
    async def delete(self, contact_id: str) -> bool:
        """Remove a contact."""
        pass

    @abstractmethod
    async def list_contacts(
        self, filters: ContactFilters | None = None
    ) -> list[Contact]:
        """List contacts, newest first."""
        pass

    @abstractmethod
    async def search(self, query: str) -> list[Contact]:
        """Contacts whose name, address or label matches ``query``."""
        pass

    @abstractmethod
    async def record_interaction(self, address: str, count: int = 1) -> bool:
        """Bump message counters; False if no contact has the address."""
        pass

    @abstractmethod
    async def recent(self, limit: int = 10) -> list[Contact]:
        """Contacts with an interaction, most recent first."""
        pass

    @abstractmethod
    async def stats(self) -> ContactStats:
        """Aggregate counts across all contacts."""
        pass
