"""In-memory implementation of ContactDirectory."""

import asyncio
from collections import Counter
from typing import Any

from parley.addressing import normalize_address
from parley.contacts.models import Contact, ContactFilters, ContactStats
from parley.contacts.store import ContactDirectory
from parley.conversation.models import utc_now
from parley.errors import ContactError
from parley.observability.logging import get_logger
from parley.profiles.store import ContextProfileStore

logger = get_logger(__name__)

_IMMUTABLE_FIELDS = frozenset({"id", "address", "created_at"})


class InMemoryContactDirectory(ContactDirectory):
    """In-memory contact directory for testing and development.

    Contacts are keyed by id; address lookups scan. When a profile store is
    supplied, profile references are checked against active profiles.
    """

    def __init__(self, profile_store: ContextProfileStore | None = None) -> None:
        """Initialize empty storage."""
        self._contacts: dict[str, Contact] = {}
        self._profile_store = profile_store
        self._lock = asyncio.Lock()

    async def _validate_profile(self, profile_id: str | None) -> None:
        if not profile_id or self._profile_store is None:
            return
        if await self._profile_store.find_by_id(profile_id) is None:
            raise ContactError(f"Context with ID {profile_id} not found or inactive")

    def _find_by_address_locked(self, address: str) -> Contact | None:
        key = normalize_address(address)
        for contact in self._contacts.values():
            if contact.address == key:
                return contact
        return None

    def _apply_locked(self, contact: Contact, updates: dict[str, Any]) -> Contact:
        changes = {k: v for k, v in updates.items() if k not in _IMMUTABLE_FIELDS}
        data = contact.model_dump()
        data.update(changes)
        data["updated_at"] = utc_now()
        updated = Contact.model_validate(data)
        self._contacts[updated.id] = updated
        return updated

    async def find_by_address(self, address: str) -> Contact | None:
        """Get contact by counterparty address."""
        async with self._lock:
            contact = self._find_by_address_locked(address)
            return contact.model_copy(deep=True) if contact else None

    async def get(self, contact_id: str) -> Contact | None:
        """Get contact by id."""
        async with self._lock:
            contact = self._contacts.get(contact_id)
            return contact.model_copy(deep=True) if contact else None

    async def add(self, contact: Contact) -> Contact:
        """Add a contact."""
        await self._validate_profile(contact.context_profile_id)

        async with self._lock:
            if self._find_by_address_locked(contact.address) is not None:
                raise ContactError(
                    f"Contact with number {contact.address} already exists",
                    address=contact.address,
                )
            stored = contact.model_copy(deep=True)
            self._contacts[stored.id] = stored

        logger.info(
            "contact_added",
            contact_id=stored.id,
            relationship_category=stored.relationship_category.value,
        )
        return stored.model_copy(deep=True)

    async def update(self, contact_id: str, updates: dict[str, Any]) -> Contact:
        """Apply field updates by id."""
        await self._validate_profile(updates.get("context_profile_id"))

        async with self._lock:
            contact = self._contacts.get(contact_id)
            if contact is None:
                raise ContactError(f"Contact with ID {contact_id} not found")
            updated = self._apply_locked(contact, updates)

        logger.info("contact_updated", contact_id=contact_id)
        return updated.model_copy(deep=True)

    async def update_by_address(
        self, address: str, updates: dict[str, Any]
    ) -> Contact:
        """Apply field updates by address."""
        await self._validate_profile(updates.get("context_profile_id"))

        async with self._lock:
            contact = self._find_by_address_locked(address)
            if contact is None:
                key = normalize_address(address)
                raise ContactError(f"Contact with number {key} not found", address=key)
            updated = self._apply_locked(contact, updates)

        logger.info("contact_updated", contact_id=updated.id)
        return updated.model_copy(deep=True)

    async def delete(self, contact_id: str) -> bool:
        """Remove a contact."""
        async with self._lock:
            removed = self._contacts.pop(contact_id, None)
        if removed is not None:
            logger.info("contact_deleted", contact_id=contact_id)
        return removed is not None

    async def list_contacts(
        self, filters: ContactFilters | None = None
    ) -> list[Contact]:
        """List contacts, newest first."""
        filters = filters or ContactFilters()
        async with self._lock:
            results = []
            for contact in self._contacts.values():
                if (
                    filters.relationship_category is not None
                    and contact.relationship_category != filters.relationship_category
                ):
                    continue
                if filters.priority is not None and contact.priority != filters.priority:
                    continue
                if filters.is_active is not None and contact.is_active != filters.is_active:
                    continue
                if (
                    filters.context_profile_id is not None
                    and contact.context_profile_id != filters.context_profile_id
                ):
                    continue
                results.append(contact.model_copy(deep=True))
        results.sort(key=lambda c: c.created_at, reverse=True)
        return results

    async def search(self, query: str) -> list[Contact]:
        """Contacts whose name, address or label matches ``query``."""
        needle = query.lower()
        async with self._lock:
            results = [
                c.model_copy(deep=True)
                for c in self._contacts.values()
                if needle in c.name.lower()
                or needle in c.address.lower()
                or needle in c.relationship_label.lower()
            ]
        results.sort(key=lambda c: c.created_at, reverse=True)
        return results

    async def record_interaction(self, address: str, count: int = 1) -> bool:
        """Bump message counters; False if no contact has the address."""
        now = utc_now()
        async with self._lock:
            contact = self._find_by_address_locked(address)
            if contact is None:
                return False
            contact.message_count += count
            contact.last_interaction_at = now
            contact.metadata.total_messages_received += count
            contact.metadata.last_message_at = now
            if contact.metadata.first_message_at is None:
                contact.metadata.first_message_at = now
        return True

    async def recent(self, limit: int = 10) -> list[Contact]:
        """Contacts with an interaction, most recent first."""
        async with self._lock:
            results = [
                c.model_copy(deep=True)
                for c in self._contacts.values()
                if c.last_interaction_at is not None
            ]
        results.sort(key=lambda c: c.last_interaction_at, reverse=True)
        return results[:limit]

    async def stats(self) -> ContactStats:
        """Aggregate counts across all contacts."""
        async with self._lock:
            contacts = list(self._contacts.values())
            active = sum(1 for c in contacts if c.is_active)
            return ContactStats(
                total=len(contacts),
                active=active,
                inactive=len(contacts) - active,
                by_relationship=dict(
                    Counter(c.relationship_category.value for c in contacts)
                ),
                by_priority=dict(Counter(c.priority.value for c in contacts)),
            )
