"""Pipeline models: options, step timings and results."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from parley.contacts.models import Contact, Priority, RelationshipCategory
from parley.conversation.models import Sentiment
from parley.ledger.models import ConversationStats, LedgerStats
from parley.profiles.models import ProfileStats


class PipelineStep(str, Enum):
    """Ordered steps of one pipeline invocation."""

    RECEIVED = "received"
    PERSISTED_INBOUND = "persisted_inbound"
    THREADED_INBOUND = "threaded_inbound"
    CONTEXT_RESOLVED = "context_resolved"
    AI_INVOKED = "ai_invoked"
    PERSISTED_OUTBOUND = "persisted_outbound"
    THREADED_OUTBOUND = "threaded_outbound"
    COMPLETE = "complete"


class PipelineStepTiming(BaseModel):
    """Timing information for a single pipeline step."""

    step: PipelineStep
    started_at: datetime
    ended_at: datetime
    duration_ms: float = Field(ge=0)


class ProcessingOptions(BaseModel):
    """Per-call knobs for the pipeline."""

    profile_id: str | None = Field(
        default=None, description="Profile to use when no contact applies"
    )
    max_response_length: int | None = Field(
        default=None, gt=0, description="Overrides the configured ceiling"
    )
    use_contact_context: bool = Field(
        default=True, description="Prefer the personalized contact branch"
    )


class ContactSummary(BaseModel):
    """Contact fields echoed back with a processed exchange."""

    id: str
    name: str
    relationship_category: RelationshipCategory
    relationship_label: str
    priority: Priority

    @classmethod
    def from_contact(cls, contact: Contact) -> "ContactSummary":
        return cls(
            id=contact.id,
            name=contact.name,
            relationship_category=contact.relationship_category,
            relationship_label=contact.relationship_label,
            priority=contact.priority,
        )


class ProcessedExchange(BaseModel):
    """Result of turning one inbound message into one reply."""

    original_message: str
    address: str
    display_name: str | None = None
    ai_response: str = Field(..., min_length=1)
    confidence: float = Field(ge=0.0, le=1.0)
    processing_time_ms: float = Field(ge=0)
    context_used: str
    thread_id: str
    contact: ContactSummary | None = None
    inbound_message_id: str
    outbound_message_id: str
    step_timings: list[PipelineStepTiming] = Field(default_factory=list)


class ProcessingStats(BaseModel):
    """Aggregate view of the pipeline and its stores."""

    is_ready: bool
    model: str | None = None
    active_threads: int
    total_threads: int
    in_flight: int
    profiles: ProfileStats
    messages: LedgerStats


class ThreadInfo(BaseModel):
    """Per-address thread and ledger statistics."""

    thread_id: str
    message_count: int = 0
    last_interaction_at: datetime | None = None
    topics: list[str] = Field(default_factory=list)
    sentiment: Sentiment = Sentiment.NEUTRAL
    thread_age_days: int = 0
    conversation_stats: ConversationStats
