"""Persona models and the tagged union of persona sources."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from parley.contacts.models import Contact, PersonaOverride
from parley.profiles.models import ContextProfile


class RelationshipPersona(BaseModel):
    """Default persona for one relationship category."""

    model_config = ConfigDict(frozen=True)

    personality: str
    communication_style: str
    topics: tuple[str, ...] = ()
    avoid_topics: tuple[str, ...] = ()
    response_tone: str
    special_instructions: str


@dataclass(frozen=True)
class ContactOverride:
    """Known contact whose own persona replaces the category default."""

    contact: Contact
    override: PersonaOverride


@dataclass(frozen=True)
class RelationshipDefault:
    """Known contact using the category default (None if the table has none)."""

    contact: Contact
    persona: RelationshipPersona | None


@dataclass(frozen=True)
class NamedProfile:
    """No usable contact; a stored context profile applies."""

    profile: ContextProfile


@dataclass(frozen=True)
class BuiltinFallback:
    """Nothing stored applies; the built-in description is used."""

    profile_id: str


PersonaSource = ContactOverride | RelationshipDefault | NamedProfile | BuiltinFallback


class PersonaSourceKind(str, Enum):
    """Which branch produced a resolved persona."""

    CONTACT_OVERRIDE = "contact_override"
    RELATIONSHIP_DEFAULT = "relationship_default"
    NAMED_PROFILE = "named_profile"
    BUILTIN_FALLBACK = "builtin_fallback"


class ResolvedPersona(BaseModel):
    """Prompt-ready persona text plus where it came from."""

    text: str = Field(..., min_length=1)
    context_used: str = Field(..., description="contact_<category> or a profile id")
    source: PersonaSourceKind
    contact: Contact | None = None
