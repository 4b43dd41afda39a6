"""LLM data models, collaborator interface and error types.

This module provides the core types used by the pipeline:
- LLMMessage: Input message format
- LLMResponse: Raw provider response
- Completion: Text plus confidence handed back to the pipeline
- AICollaborator: Interface the pipeline calls
- Error types for different failure modes
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class LLMMessage(BaseModel):
    """A message in a conversation."""

    role: str = Field(..., description="Role: system, user, or assistant")
    content: str = Field(..., description="Message content")


class TokenUsage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int = Field(..., description="Tokens in prompt")
    completion_tokens: int = Field(..., description="Tokens in completion")
    total_tokens: int = Field(..., description="Total tokens used")


class LLMResponse(BaseModel):
    """Response from an LLM call."""

    content: str = Field(..., description="Generated text")
    model: str = Field(..., description="Model used")
    finish_reason: str | None = Field(
        default=None, description="Why generation stopped"
    )
    usage: TokenUsage | None = Field(
        default=None, description="Token usage stats"
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Execution metadata"
    )


class Completion(BaseModel):
    """Completion result consumed by the message pipeline."""

    text: str = Field(..., description="Reply text, stripped")
    confidence: float = Field(default=0.9, ge=0.0, le=1.0)
    model: str | None = Field(default=None, description="Model that answered")


class AICollaborator(ABC):
    """Opaque text-completion collaborator used by the pipeline."""

    @abstractmethod
    async def complete(self, prompt: str, max_length: int = 1000) -> Completion:
        """Complete a fully assembled prompt.

        Raises:
            ProviderError: On any transport, quota or model failure
        """
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Liveness probe run once before the pipeline accepts messages."""
        pass


# ============================================================================
# Error Types
# ============================================================================


class ProviderError(Exception):
    """Base exception for LLM provider errors."""

    pass


class AuthenticationError(ProviderError):
    """Invalid or missing API key."""

    pass


class RateLimitError(ProviderError):
    """Rate limit exceeded."""

    pass


class EmptyCompletionError(ProviderError):
    """Model returned no usable text."""

    pass
