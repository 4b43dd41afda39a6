"""Context profiles: reusable descriptions of who the assistant speaks for."""

from parley.profiles.defaults import DEFAULT_PROFILE_ID, builtin_default_profile
from parley.profiles.models import (
    AIInstructions,
    ContactInfo,
    ContextProfile,
    OrganizationInfo,
    PersonalInfo,
    ProfileMetadata,
    ProfileStats,
    ProfileUsage,
    Tone,
)
from parley.profiles.store import ContextProfileStore
from parley.profiles.stores import InMemoryContextProfileStore

__all__ = [
    "AIInstructions",
    "ContactInfo",
    "ContextProfile",
    "OrganizationInfo",
    "PersonalInfo",
    "ProfileMetadata",
    "ProfileStats",
    "ProfileUsage",
    "Tone",
    "ContextProfileStore",
    "InMemoryContextProfileStore",
    "DEFAULT_PROFILE_ID",
    "builtin_default_profile",
]
