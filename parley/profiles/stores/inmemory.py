"""In-memory implementation of ContextProfileStore."""

import asyncio
from datetime import timedelta
from typing import Any

from parley.conversation.models import utc_now
from parley.errors import ProfileError
from parley.observability.logging import get_logger
from parley.profiles.defaults import builtin_default_profile
from parley.profiles.models import ContextProfile, ProfileStats, ProfileUsage
from parley.profiles.store import ContextProfileStore

logger = get_logger(__name__)

_IMMUTABLE_FIELDS = frozenset({"profile_id", "created_at", "usage_count"})


class InMemoryContextProfileStore(ContextProfileStore):
    """In-memory profile store for testing and development.

    Uses simple dict storage with linear scan for queries. The single-default
    invariant is enforced on every write that sets ``is_default``.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._profiles: dict[str, ContextProfile] = {}
        self._lock = asyncio.Lock()

    def _clear_default_locked(self, except_id: str | None = None) -> None:
        for profile in self._profiles.values():
            if profile.is_default and profile.profile_id != except_id:
                profile.is_default = False

    def _find_default_locked(self) -> ContextProfile | None:
        for profile in self._profiles.values():
            if profile.is_default and profile.is_active:
                return profile
        return None

    async def find_by_id(self, profile_id: str) -> ContextProfile | None:
        """Get an active profile by id."""
        async with self._lock:
            profile = self._profiles.get(profile_id)
            if profile is None or not profile.is_active:
                return None
            return profile.model_copy(deep=True)

    async def find_default(self) -> ContextProfile | None:
        """Get the active default profile."""
        async with self._lock:
            profile = self._find_default_locked()
            return profile.model_copy(deep=True) if profile else None

    async def create(self, profile: ContextProfile) -> ContextProfile:
        """Create a profile."""
        async with self._lock:
            if profile.profile_id in self._profiles:
                raise ProfileError(
                    f"Context with ID {profile.profile_id} already exists"
                )
            stored = profile.model_copy(deep=True)
            stored.is_active = True
            if stored.is_default:
                self._clear_default_locked()
            self._profiles[stored.profile_id] = stored

        logger.info("profile_created", profile_id=stored.profile_id, name=stored.name)
        return stored.model_copy(deep=True)

    async def update(
        self, profile_id: str, updates: dict[str, Any]
    ) -> ContextProfile | None:
        """Apply field updates; returns None if the profile is unknown."""
        changes = {k: v for k, v in updates.items() if k not in _IMMUTABLE_FIELDS}

        async with self._lock:
            current = self._profiles.get(profile_id)
            if current is None:
                return None
            if current.is_default and changes.get("is_active") is False:
                raise ProfileError("Cannot deactivate default context")
            if current.is_default and changes.get("is_default") is False:
                raise ProfileError(
                    "Cannot unset default context; set another default instead"
                )

            data = current.model_dump()
            data.update(changes)
            data["updated_at"] = utc_now()
            updated = ContextProfile.model_validate(data)
            if updated.is_default and not updated.is_active:
                raise ProfileError("Cannot make an inactive context the default")

            if updated.is_default:
                self._clear_default_locked(except_id=profile_id)
            self._profiles[profile_id] = updated

        logger.info("profile_updated", profile_id=profile_id, fields=sorted(changes))
        return updated.model_copy(deep=True)

    async def delete(self, profile_id: str) -> bool:
        """Soft-delete a profile."""
        async with self._lock:
            profile = self._profiles.get(profile_id)
            if profile is None:
                raise ProfileError(f"Context with ID {profile_id} not found")
            if profile.is_default:
                raise ProfileError("Cannot delete default context")
            profile.is_active = False
            profile.updated_at = utc_now()

        logger.info("profile_deleted", profile_id=profile_id)
        return True

    async def set_default(self, profile_id: str) -> ContextProfile | None:
        """Make an active profile the single default."""
        async with self._lock:
            profile = self._profiles.get(profile_id)
            if profile is None or not profile.is_active:
                return None
            self._clear_default_locked(except_id=profile_id)
            profile.is_default = True
            profile.updated_at = utc_now()
            result = profile.model_copy(deep=True)

        logger.info("profile_default_set", profile_id=profile_id)
        return result

    async def list_active(self) -> list[ContextProfile]:
        """Active profiles ordered by name."""
        async with self._lock:
            results = [
                p.model_copy(deep=True) for p in self._profiles.values() if p.is_active
            ]
        results.sort(key=lambda p: p.name)
        return results

    async def search(self, query: str) -> list[ContextProfile]:
        """Active profiles matching name, description, person or org name."""
        needle = query.lower()

        def matches(profile: ContextProfile) -> bool:
            haystacks = [
                profile.name,
                profile.description or "",
                profile.personal_info.name,
                profile.organization_info.name if profile.organization_info else "",
            ]
            return any(needle in h.lower() for h in haystacks)

        async with self._lock:
            results = [
                p.model_copy(deep=True)
                for p in self._profiles.values()
                if p.is_active and matches(p)
            ]
        results.sort(key=lambda p: p.name)
        return results

    async def increment_usage(self, profile_id: str) -> None:
        """Bump the usage counter and last-used time."""
        async with self._lock:
            profile = self._profiles.get(profile_id)
            if profile is None:
                return
            profile.usage_count += 1
            profile.last_used_at = utc_now()

    async def clone(
        self, profile_id: str, new_profile_id: str, new_name: str
    ) -> ContextProfile:
        """Copy an active profile under a new id."""
        async with self._lock:
            source = self._profiles.get(profile_id)
            if source is None or not source.is_active:
                raise ProfileError(f"Context with ID {profile_id} not found")
            if new_profile_id in self._profiles:
                raise ProfileError(f"Context with ID {new_profile_id} already exists")

            now = utc_now()
            clone = source.model_copy(
                deep=True,
                update={
                    "profile_id": new_profile_id,
                    "name": new_name,
                    "description": f"{source.description or ''} (Cloned from {source.name})",
                    "is_default": False,
                    "is_active": True,
                    "usage_count": 0,
                    "last_used_at": None,
                    "created_at": now,
                    "updated_at": now,
                },
            )
            clone.metadata.created_by = "cloned"
            clone.metadata.version = "1.0.0"
            self._profiles[new_profile_id] = clone

        logger.info("profile_cloned", profile_id=new_profile_id, source_id=profile_id)
        return clone.model_copy(deep=True)

    async def stats(self) -> ProfileStats:
        """Aggregate counts across all profiles."""
        async with self._lock:
            profiles = [p.model_copy(deep=True) for p in self._profiles.values()]

        active = [p for p in profiles if p.is_active]
        most_used = sorted(active, key=lambda p: p.usage_count, reverse=True)[:5]
        recently_used = sorted(
            (p for p in active if p.last_used_at is not None),
            key=lambda p: p.last_used_at,
            reverse=True,
        )[:5]

        return ProfileStats(
            total=len(profiles),
            active=len(active),
            inactive=len(profiles) - len(active),
            default=sum(1 for p in profiles if p.is_default),
            most_used=most_used,
            recently_used=recently_used,
        )

    async def usage_analytics(self, days: int = 30) -> list[ProfileUsage]:
        """Per-profile usage over the last ``days``."""
        cutoff = utc_now() - timedelta(days=days)
        async with self._lock:
            used = [
                p
                for p in self._profiles.values()
                if p.is_active
                and (
                    p.usage_count > 0
                    or (p.last_used_at is not None and p.last_used_at >= cutoff)
                )
            ]
            rows = [
                ProfileUsage(
                    profile_id=p.profile_id,
                    name=p.name,
                    usage_count=p.usage_count,
                    last_used_at=p.last_used_at,
                    average_usage_per_day=p.usage_count / days if days > 0 else 0.0,
                )
                for p in used
            ]
        rows.sort(key=lambda r: r.usage_count, reverse=True)
        return rows

    async def ensure_default(self) -> ContextProfile:
        """Return the default profile, seeding the built-in one if absent."""
        existing = await self.find_default()
        if existing is not None:
            return existing

        logger.info("profile_default_seeded")
        return await self.create(builtin_default_profile())
