"""Context profile models.

A context profile is a named, reusable description of the owner (person or
organization) the assistant speaks for. Exactly one active profile is the
default.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from parley.conversation.models import utc_now


class Tone(str, Enum):
    """Response tone requested from the AI."""

    PROFESSIONAL = "professional"
    CASUAL = "casual"
    FRIENDLY = "friendly"
    FORMAL = "formal"
    ROMANTIC = "romantic"
    CARING = "caring"


class PersonalInfo(BaseModel):
    """Who the assistant represents."""

    name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    expertise: list[str] = Field(default_factory=list)
    personality: str = Field(..., min_length=1)
    communication_style: str = Field(..., min_length=1)
    availability: str = Field(..., min_length=1)


class ContactInfo(BaseModel):
    """Public contact details of an organization."""

    email: str | None = None
    phone: str | None = None
    website: str | None = None


class OrganizationInfo(BaseModel):
    """Organization the represented person belongs to."""

    name: str
    industry: str | None = None
    services: list[str] = Field(default_factory=list)
    values: list[str] = Field(default_factory=list)
    contact_info: ContactInfo = Field(default_factory=ContactInfo)


class AIInstructions(BaseModel):
    """How replies should be written."""

    response_style: str = Field(..., min_length=1)
    topics_to_avoid: list[str] = Field(default_factory=list)
    preferred_language: str = Field(default="English")
    tone: Tone = Field(default=Tone.PROFESSIONAL)


class ProfileMetadata(BaseModel):
    """Bookkeeping attached to a profile."""

    created_by: str | None = None
    version: str | None = None
    tags: list[str] = Field(default_factory=list)


class ContextProfile(BaseModel):
    """Named persona description used when no contact matches."""

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    profile_id: str = Field(..., min_length=1, description="Unique identifier")
    name: str = Field(..., min_length=1, description="Display name")
    description: str | None = Field(default=None)
    personal_info: PersonalInfo
    organization_info: OrganizationInfo | None = None
    ai_instructions: AIInstructions
    is_default: bool = False
    is_active: bool = True
    usage_count: int = Field(default=0, ge=0)
    last_used_at: datetime | None = None
    metadata: ProfileMetadata = Field(default_factory=ProfileMetadata)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ProfileStats(BaseModel):
    """Aggregate counts across all profiles."""

    total: int
    active: int
    inactive: int
    default: int
    most_used: list[ContextProfile] = Field(default_factory=list)
    recently_used: list[ContextProfile] = Field(default_factory=list)


class ProfileUsage(BaseModel):
    """Usage analytics row for one profile."""

    profile_id: str
    name: str
    usage_count: int
    last_used_at: datetime | None = None
    average_usage_per_day: float
