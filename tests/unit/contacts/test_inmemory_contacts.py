"""Tests for InMemoryContactDirectory and contact models."""

import pytest
import pytest_asyncio

from parley.contacts.models import (
    Contact,
    ContactFilters,
    Priority,
    RelationshipCategory,
)
from parley.contacts.stores import InMemoryContactDirectory
from parley.errors import ContactError
from tests.factories import ContactFactory


@pytest_asyncio.fixture
async def directory(profile_store) -> InMemoryContactDirectory:
    """Directory backed by a profile store holding the default profile."""
    await profile_store.ensure_default()
    return InMemoryContactDirectory(profile_store=profile_store)


class TestContactModel:
    """Tests for Contact validation."""

    def test_normalizes_address_and_derives_id(self) -> None:
        """Should strip the transport suffix and derive the id."""
        contact = ContactFactory.create(address="919876543210@c.us")

        assert contact.address == "919876543210"
        assert contact.id == "contact_919876543210"

    def test_maps_legacy_categories(self) -> None:
        """Should map legacy category names to current ones."""
        contact = Contact(
            address="1",
            name="Jo",
            relationship_category="girlfriend",
            relationship_label="partner",
        )
        assert contact.relationship_category == RelationshipCategory.PARTNER


class TestAdd:
    """Tests for adding contacts."""

    @pytest.mark.asyncio
    async def test_add_and_find_by_address(self, directory):
        """Should find a contact by either address form."""
        await directory.add(ContactFactory.create())

        found = await directory.find_by_address("919876543210@c.us")
        assert found is not None
        assert found.name == "Alex"

    @pytest.mark.asyncio
    async def test_plus_prefixed_address_matches(self, directory):
        """Should treat a '+'-prefixed spelling as the same contact."""
        await directory.add(ContactFactory.create())

        found = await directory.find_by_address("+91 98765 43210")
        assert found is not None
        with pytest.raises(ContactError, match="already exists"):
            await directory.add(ContactFactory.create(address="+919876543210"))

    @pytest.mark.asyncio
    async def test_duplicate_address_rejected(self, directory):
        """Should reject a second contact for the same address."""
        await directory.add(ContactFactory.create())

        with pytest.raises(ContactError, match="already exists"):
            await directory.add(ContactFactory.create(name="Other"))

    @pytest.mark.asyncio
    async def test_unknown_profile_rejected(self, directory):
        """Should reject a reference to a missing profile."""
        with pytest.raises(ContactError, match="not found or inactive"):
            await directory.add(ContactFactory.create(context_profile_id="missing"))


class TestUpdate:
    """Tests for updating contacts."""

    @pytest.mark.asyncio
    async def test_update_by_address(self, directory):
        """Should apply changes and keep the id."""
        await directory.add(ContactFactory.create())

        updated = await directory.update_by_address(
            "919876543210", {"priority": Priority.HIGH, "id": "hijack"}
        )

        assert updated.priority == Priority.HIGH
        assert updated.id == "contact_919876543210"

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, directory):
        """Should raise for an unknown contact."""
        with pytest.raises(ContactError, match="not found"):
            await directory.update("contact_missing", {"name": "x"})


class TestInteractions:
    """Tests for interaction counters."""

    @pytest.mark.asyncio
    async def test_record_interaction(self, directory):
        """Should bump counters and timestamps."""
        await directory.add(ContactFactory.create())

        assert await directory.record_interaction("919876543210") is True
        await directory.record_interaction("919876543210")

        contact = await directory.find_by_address("919876543210")
        assert contact.message_count == 2
        assert contact.metadata.total_messages_received == 2
        assert contact.metadata.first_message_at is not None
        assert [c.id for c in await directory.recent()] == [contact.id]

    @pytest.mark.asyncio
    async def test_record_interaction_unknown(self, directory):
        """Should report False when no contact has the address."""
        assert await directory.record_interaction("000") is False


class TestQueries:
    """Tests for listing, searching and stats."""

    @pytest.mark.asyncio
    async def test_filters_and_stats(self, directory):
        """Should filter by category and count by relationship."""
        await directory.add(ContactFactory.create())
        await directory.add(
            ContactFactory.create(
                address="911111111111",
                name="Dana",
                relationship_category=RelationshipCategory.CLIENT,
                relationship_label="client",
            )
        )

        clients = await directory.list_contacts(
            ContactFilters(relationship_category=RelationshipCategory.CLIENT)
        )
        assert [c.name for c in clients] == ["Dana"]

        stats = await directory.stats()
        assert stats.total == 2
        assert stats.by_relationship == {"friend": 1, "client": 1}

    @pytest.mark.asyncio
    async def test_search_and_delete(self, directory):
        """Should search by label and delete by id."""
        contact = await directory.add(ContactFactory.create())

        assert len(await directory.search("best")) == 1
        assert await directory.delete(contact.id) is True
        assert await directory.find_by_address("919876543210") is None
