"""Contacts: known counterparties and their relationship to the owner."""

from parley.contacts.models import (
    Contact,
    ContactFilters,
    ContactMetadata,
    ContactStats,
    PersonaOverride,
    Priority,
    RelationshipCategory,
    contact_id_for,
)
from parley.contacts.store import ContactDirectory
from parley.contacts.stores import InMemoryContactDirectory

__all__ = [
    "Contact",
    "ContactFilters",
    "ContactMetadata",
    "ContactStats",
    "PersonaOverride",
    "Priority",
    "RelationshipCategory",
    "contact_id_for",
    "ContactDirectory",
    "InMemoryContactDirectory",
]
