"""Thread models for the conversation domain."""

import secrets
import string
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from parley.conversation.models.enums import MessageRole, MessageType, Sentiment

_ID_ALPHABET = string.ascii_lowercase + string.digits


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


def generate_message_id(prefix: str = "msg") -> str:
    """Generate a ``<prefix>_<epoch ms>_<random>`` message id."""
    millis = int(utc_now().timestamp() * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}_{millis}_{suffix}"


class MessageMetadata(BaseModel):
    """Optional attachment details on a thread entry."""

    model_config = ConfigDict(frozen=True)

    message_type: MessageType = Field(
        default=MessageType.TEXT, description="Content kind"
    )
    file_name: str | None = Field(default=None, description="Attachment name")
    file_size: int | None = Field(default=None, ge=0, description="Attachment bytes")


class ThreadMessage(BaseModel):
    """One entry in a conversation thread. Immutable once appended."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_message_id, description="Entry id")
    content: str = Field(..., description="Message text")
    role: MessageRole = Field(..., description="Author")
    timestamp: datetime = Field(default_factory=utc_now, description="Append time")
    metadata: MessageMetadata | None = Field(
        default=None, description="Attachment details"
    )


class ConversationThread(BaseModel):
    """Rolling in-memory memory of the exchange with one counterparty."""

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    thread_id: str = Field(..., description="Deterministic id derived from address")
    address: str = Field(..., description="Normalized counterparty address")
    display_name: str | None = Field(default=None, description="Counterparty name")
    messages: list[ThreadMessage] = Field(
        default_factory=list, description="Chronological entries"
    )
    last_interaction_at: datetime = Field(
        default_factory=utc_now, description="Last append time"
    )
    topics: list[str] = Field(
        default_factory=list, description="Ordered extracted keywords"
    )
    sentiment: Sentiment = Field(
        default=Sentiment.NEUTRAL, description="Overall sentiment"
    )
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")
    updated_at: datetime = Field(default_factory=utc_now, description="Last update")


class ThreadStats(BaseModel):
    """Summary statistics for one thread."""

    message_count: int = Field(..., ge=0)
    last_interaction_at: datetime
    topics: list[str] = Field(default_factory=list)
    sentiment: Sentiment = Sentiment.NEUTRAL
    thread_age_days: int = Field(..., ge=0, description="Whole days since creation")


class ThreadSummary(BaseModel):
    """Listing view of a thread."""

    thread_id: str
    address: str
    display_name: str | None = None
    message_count: int = Field(..., ge=0)
    last_interaction_at: datetime
    topics: list[str] = Field(default_factory=list)
    sentiment: Sentiment = Sentiment.NEUTRAL
