"""AI provider configuration models."""

from pydantic import BaseModel, Field


class LLMProviderConfig(BaseModel):
    """Configuration for the completion model behind the pipeline.

    Model strings carry their provider as a prefix, e.g.
    ``gemini/gemini-2.5-flash`` or ``openrouter/anthropic/claude-3-haiku``.
    """

    model: str = Field(
        default="gemini/gemini-2.5-flash",
        description="Primary model string",
    )
    fallback_models: list[str] = Field(
        default_factory=list,
        description="Models tried in order when the primary fails",
    )
    timeout: float = Field(
        default=60.0,
        gt=0,
        description="Request timeout in seconds",
    )
    confidence: float = Field(
        default=0.9,
        ge=0.0,
        le=1.0,
        description="Confidence reported for completions (providers expose none)",
    )
    ping_prompt: str = Field(
        default="Hello",
        description="Prompt used by the startup liveness probe",
    )


class ProvidersConfig(BaseModel):
    """Configuration for AI providers."""

    llm: LLMProviderConfig = Field(
        default_factory=LLMProviderConfig,
        description="Completion model settings",
    )
