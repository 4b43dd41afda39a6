"""Contact models.

A contact ties a counterparty address to a relationship category and,
optionally, a persona override that replaces the category default.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from parley.addressing import normalize_address
from parley.conversation.models import utc_now

_CATEGORY_ALIASES = {
    "girlfriend": "partner",
    "boyfriend": "partner",
    "potential_customer": "prospect",
}


class RelationshipCategory(str, Enum):
    """Coarse relationship class used to pick a default persona."""

    PARTNER = "partner"
    FAMILY = "family"
    FRIEND = "friend"
    COLLEAGUE = "colleague"
    CLIENT = "client"
    PROSPECT = "prospect"
    OTHER = "other"


class Priority(str, Enum):
    """Contact priority."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PersonaOverride(BaseModel):
    """Per-contact persona replacing the relationship default.

    Any field may be absent; the renderer substitutes neutral text.
    """

    personality: str | None = None
    communication_style: str | None = None
    topics: list[str] | None = None
    avoid_topics: list[str] | None = None
    response_tone: str | None = None
    special_instructions: str | None = None


class ContactMetadata(BaseModel):
    """Interaction counters."""

    first_message_at: datetime | None = None
    last_message_at: datetime | None = None
    total_messages_received: int = Field(default=0, ge=0)
    total_messages_sent: int = Field(default=0, ge=0)


def contact_id_for(address: str) -> str:
    """Derive the contact id for an address."""
    return f"contact_{normalize_address(address)}"


class Contact(BaseModel):
    """A known counterparty."""

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    id: str = Field(default="", description="Contact id, derived from address")
    address: str = Field(..., min_length=1, description="Normalized address")
    name: str = Field(..., min_length=1)
    relationship_category: RelationshipCategory
    relationship_label: str = Field(
        ..., min_length=1, description="Free-text label, e.g. 'best friend'"
    )
    context_profile_id: str = Field(default="default")
    priority: Priority = Priority.MEDIUM
    notes: str | None = None
    persona_override: PersonaOverride | None = None
    message_count: int = Field(default=0, ge=0)
    last_interaction_at: datetime | None = None
    metadata: ContactMetadata = Field(default_factory=ContactMetadata)
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("address", mode="before")
    @classmethod
    def _normalize_address(cls, value: str) -> str:
        return normalize_address(value) if isinstance(value, str) else value

    @field_validator("relationship_category", mode="before")
    @classmethod
    def _map_legacy_category(cls, value: object) -> object:
        if isinstance(value, str):
            return _CATEGORY_ALIASES.get(value.lower(), value.lower())
        return value

    def model_post_init(self, __context: object) -> None:
        if not self.id:
            self.id = contact_id_for(self.address)


class ContactFilters(BaseModel):
    """Optional filters for listing contacts."""

    relationship_category: RelationshipCategory | None = None
    priority: Priority | None = None
    is_active: bool | None = None
    context_profile_id: str | None = None


class ContactStats(BaseModel):
    """Aggregate counts across all contacts."""

    total: int = 0
    active: int = 0
    inactive: int = 0
    by_relationship: dict[str, int] = Field(default_factory=dict)
    by_priority: dict[str, int] = Field(default_factory=dict)
