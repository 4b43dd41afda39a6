"""Pipeline and thread memory configuration models."""

from pydantic import BaseModel, Field

DEFAULT_FALLBACK_NOTICE = (
    "Sorry, I'm having trouble processing your message right now. "
    "Please try again later."
)


class ThreadConfig(BaseModel):
    """Bounds for in-memory conversation threads."""

    max_messages: int = Field(
        default=50,
        gt=0,
        description="Messages retained per thread (oldest evicted first)",
    )
    max_topics: int = Field(
        default=10,
        gt=0,
        description="Topics retained per thread",
    )
    keywords_per_message: int = Field(
        default=5,
        gt=0,
        description="Keywords extracted from a single message",
    )


class PipelineConfig(BaseModel):
    """Message processing pipeline configuration."""

    default_profile_id: str = Field(
        default="default",
        description="Context profile used when no contact matches",
    )
    history_window: int = Field(
        default=10,
        gt=0,
        description="Thread entries included in the prompt",
    )
    max_response_length: int = Field(
        default=1000,
        gt=0,
        description="Default response-length ceiling passed to the AI",
    )
    ai_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Upper bound on one AI completion call",
    )
    persistence_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound on one ledger write",
    )
    fallback_notice: str = Field(
        default=DEFAULT_FALLBACK_NOTICE,
        description="Sent to the counterparty when processing fails",
    )
