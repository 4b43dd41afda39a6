"""Tests for InMemoryContextProfileStore."""

import pytest

from parley.errors import ProfileError
from parley.profiles.defaults import DEFAULT_PROFILE_ID
from parley.profiles.stores import InMemoryContextProfileStore
from tests.factories import ProfileFactory


@pytest.fixture
def store() -> InMemoryContextProfileStore:
    """Create a fresh store for each test."""
    return InMemoryContextProfileStore()


class TestEnsureDefault:
    """Tests for seeding the default profile."""

    @pytest.mark.asyncio
    async def test_seeds_builtin_default(self, store):
        """Should create the built-in default when none exists."""
        profile = await store.ensure_default()

        assert profile.profile_id == DEFAULT_PROFILE_ID
        assert profile.is_default is True
        assert (await store.find_default()).profile_id == DEFAULT_PROFILE_ID

    @pytest.mark.asyncio
    async def test_idempotent(self, store):
        """Should not create a second default."""
        await store.ensure_default()
        await store.ensure_default()

        assert (await store.stats()).total == 1


class TestSingleDefault:
    """Tests for the single-default invariant."""

    @pytest.mark.asyncio
    async def test_create_default_clears_previous(self, store):
        """Should leave exactly one default after creating another."""
        await store.ensure_default()
        await store.create(ProfileFactory.create(is_default=True))

        stats = await store.stats()
        assert stats.default == 1
        assert (await store.find_default()).profile_id == "business"

    @pytest.mark.asyncio
    async def test_set_default_moves_flag(self, store):
        """Should move the default flag to the chosen profile."""
        await store.ensure_default()
        await store.create(ProfileFactory.create())

        result = await store.set_default("business")

        assert result is not None and result.is_default
        assert (await store.stats()).default == 1
        assert (await store.find_by_id(DEFAULT_PROFILE_ID)).is_default is False

    @pytest.mark.asyncio
    async def test_set_default_unknown_returns_none(self, store):
        """Should return None for a missing profile."""
        assert await store.set_default("missing") is None

    @pytest.mark.asyncio
    async def test_update_to_default_clears_others(self, store):
        """Should clear other defaults when an update sets is_default."""
        await store.ensure_default()
        await store.create(ProfileFactory.create())

        await store.update("business", {"is_default": True})
        assert (await store.stats()).default == 1

    @pytest.mark.asyncio
    async def test_update_cannot_unset_default(self, store):
        """Should refuse to clear the flag on the current default."""
        await store.ensure_default()

        with pytest.raises(ProfileError, match="Cannot unset default"):
            await store.update(DEFAULT_PROFILE_ID, {"is_default": False})

        assert (await store.stats()).default == 1
        assert (await store.ensure_default()).profile_id == DEFAULT_PROFILE_ID

    @pytest.mark.asyncio
    async def test_update_cannot_default_inactive_profile(self, store):
        """Should refuse to make an inactive profile the default."""
        await store.ensure_default()
        await store.create(ProfileFactory.create())
        await store.delete("business")

        with pytest.raises(ProfileError, match="inactive"):
            await store.update("business", {"is_default": True})

        assert (await store.find_default()).profile_id == DEFAULT_PROFILE_ID


class TestDeletion:
    """Tests for soft deletion."""

    @pytest.mark.asyncio
    async def test_cannot_delete_default(self, store):
        """Should refuse to delete the default profile."""
        await store.ensure_default()

        with pytest.raises(ProfileError, match="Cannot delete default context"):
            await store.delete(DEFAULT_PROFILE_ID)

    @pytest.mark.asyncio
    async def test_cannot_deactivate_default(self, store):
        """Should refuse to deactivate the default through update."""
        await store.ensure_default()

        with pytest.raises(ProfileError):
            await store.update(DEFAULT_PROFILE_ID, {"is_active": False})

    @pytest.mark.asyncio
    async def test_soft_delete_hides_profile(self, store):
        """Should hide deleted profiles from lookups but keep them counted."""
        await store.create(ProfileFactory.create())

        assert await store.delete("business") is True
        assert await store.find_by_id("business") is None
        assert (await store.stats()).inactive == 1

    @pytest.mark.asyncio
    async def test_delete_missing_raises(self, store):
        """Should raise for an unknown profile."""
        with pytest.raises(ProfileError, match="not found"):
            await store.delete("missing")


class TestWrites:
    """Tests for create, update and clone."""

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, store):
        """Should reject a second profile with the same id."""
        await store.create(ProfileFactory.create())

        with pytest.raises(ProfileError, match="already exists"):
            await store.create(ProfileFactory.create())

    @pytest.mark.asyncio
    async def test_update_ignores_immutable_fields(self, store):
        """Should not change id or usage count through update."""
        await store.create(ProfileFactory.create())

        updated = await store.update(
            "business", {"name": "Renamed", "usage_count": 99, "profile_id": "other"}
        )

        assert updated.name == "Renamed"
        assert updated.usage_count == 0
        assert updated.profile_id == "business"

    @pytest.mark.asyncio
    async def test_update_unknown_returns_none(self, store):
        """Should return None for an unknown profile."""
        assert await store.update("missing", {"name": "x"}) is None

    @pytest.mark.asyncio
    async def test_clone(self, store):
        """Should copy a profile with reset usage and cloned metadata."""
        await store.create(ProfileFactory.create())
        await store.increment_usage("business")

        clone = await store.clone("business", "business-2", "Business Copy")

        assert clone.usage_count == 0
        assert clone.is_default is False
        assert clone.metadata.created_by == "cloned"
        assert clone.description.endswith("(Cloned from Business Context)")


class TestUsage:
    """Tests for usage tracking and analytics."""

    @pytest.mark.asyncio
    async def test_increment_usage(self, store):
        """Should bump usage and last-used time."""
        await store.create(ProfileFactory.create())
        await store.increment_usage("business")

        profile = await store.find_by_id("business")
        assert profile.usage_count == 1
        assert profile.last_used_at is not None

    @pytest.mark.asyncio
    async def test_usage_analytics(self, store):
        """Should report used profiles with a per-day average."""
        await store.create(ProfileFactory.create())
        await store.ensure_default()
        for _ in range(3):
            await store.increment_usage("business")

        rows = await store.usage_analytics(days=30)

        assert [r.profile_id for r in rows] == ["business"]
        assert rows[0].average_usage_per_day == pytest.approx(0.1)

    @pytest.mark.asyncio
    async def test_search_and_list(self, store):
        """Should search by organization name and list by name."""
        await store.ensure_default()
        await store.create(ProfileFactory.create())

        assert [p.profile_id for p in await store.search("bakery")] == ["business"]
        names = [p.name for p in await store.list_active()]
        assert names == sorted(names)
