"""Message ledger models."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from parley.addressing import normalize_address
from parley.conversation.models import utc_now


class Direction(str, Enum):
    """Which way a message travelled."""

    INBOUND = "inbound"
    OUTBOUND = "outbound"


class LedgerMessageType(str, Enum):
    """Transport-level message kind."""

    TEXT = "text"
    MEDIA = "media"
    DOCUMENT = "document"
    AUDIO = "audio"
    VIDEO = "video"
    LOCATION = "location"
    CONTACT = "contact"


class StoredMessage(BaseModel):
    """Durable record of one inbound or outbound message."""

    model_config = ConfigDict(frozen=True)

    message_id: str = Field(..., min_length=1, description="Caller-supplied unique id")
    address: str = Field(..., min_length=1, description="Normalized address")
    contact_id: str | None = None
    direction: Direction
    message_type: LedgerMessageType = LedgerMessageType.TEXT
    content: str
    timestamp: datetime = Field(default_factory=utc_now)
    processed_by_ai: bool = False
    ai_response: str | None = None
    ai_processing_time_ms: float | None = Field(default=None, ge=0)
    ai_confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    context_used: str | None = None
    thread_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("address", mode="before")
    @classmethod
    def _normalize_address(cls, value: str) -> str:
        return normalize_address(value) if isinstance(value, str) else value


class LedgerStats(BaseModel):
    """Counts across the whole ledger."""

    total: int = 0
    inbound: int = 0
    outbound: int = 0
    ai_processed: int = 0
    by_type: dict[str, int] = Field(default_factory=dict)
    by_direction: dict[str, int] = Field(default_factory=dict)


class ConversationStats(BaseModel):
    """Counts and timing for one address."""

    total: int = 0
    inbound: int = 0
    outbound: int = 0
    ai_processed: int = 0
    first_message_at: datetime | None = None
    last_message_at: datetime | None = None
    average_response_time_ms: float | None = Field(
        default=None, description="Mean inbound-to-next-outbound gap"
    )
