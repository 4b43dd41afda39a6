"""ContextProfileStore abstract interface."""

from abc import ABC, abstractmethod
from typing import Any

from parley.profiles.models import ContextProfile, ProfileStats, ProfileUsage


class ContextProfileStore(ABC):
    """Abstract interface for context profile storage.

    Lookups only see active profiles. Deletion is soft and the default
    profile can never be deleted.
    """

    @abstractmethod
    async def find_by_id(self, profile_id: str) -> ContextProfile | None:
        """Get an active profile by id."""
        pass

    @abstractmethod
    async def find_default(self) -> ContextProfile | None:
        """Get the active default profile."""
        pass

    @abstractmethod
    async def create(self, profile: ContextProfile) -> ContextProfile:
        """Create a profile.

        Raises:
            ProfileError: If the profile id already exists
        """
        pass

    @abstractmethod
    async def update(
        self, profile_id: str, updates: dict[str, Any]
    ) -> ContextProfile | None:
        """Apply field updates; returns None if the profile is unknown."""
        pass

    @abstractmethod
    async def delete(self, profile_id: str) -> bool:
        """Soft-delete a profile.

        Raises:
            ProfileError: If the profile is unknown or is the default
        """
        pass

    @abstractmethod
    async def set_default(self, profile_id: str) -> ContextProfile | None:
        """Make an active profile the single default."""
        pass

    @abstractmethod
    async def list_active(self) -> list[ContextProfile]:
        """Active profiles ordered by name."""
        pass

    @abstractmethod
    async def search(self, query: str) -> list[ContextProfile]:
        """Active profiles matching name, description, person or org name."""
        pass

    @abstractmethod
    async def increment_usage(self, profile_id: str) -> None:
        """Bump the usage counter and last-used time."""
        pass

    @abstractmethod
    async def clone(
        self, profile_id: str, new_profile_id: str, new_name: str
    ) -> ContextProfile:
        """Copy an active profile under a new id.

        Raises:
            ProfileError: If the source is unknown or the new id is taken
        """
        pass

    @abstractmethod
    async def stats(self) -> ProfileStats:
        """Aggregate counts across all profiles."""
        pass

    @abstractmethod
    async def usage_analytics(self, days: int = 30) -> list[ProfileUsage]:
        """Per-profile usage over the last ``days``."""
        pass

    @abstractmethod
    async def ensure_default(self) -> ContextProfile:
        """Return the default profile, seeding the built-in one if absent."""
        pass
