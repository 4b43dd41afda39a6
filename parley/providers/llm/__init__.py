"""LLM providers for text generation.

The primary interface is LLMExecutor, which:
- Takes a model string (e.g., "gemini/gemini-2.5-flash")
- Routes to the appropriate API via Agno model classes
- Supports fallback chains
- Exposes the AICollaborator interface (complete + ping) to the pipeline

Model string formats:
- gemini/{model} -> Agno Gemini
- openrouter/{provider}/{model} -> Agno OpenRouter
- anthropic/{model} -> Agno Claude
- openai/{model} -> Agno OpenAIChat
- groq/{model} -> Agno Groq
- mock/{name} -> Mock response for testing
"""

from parley.providers.llm.base import (
    AICollaborator,
    AuthenticationError,
    Completion,
    EmptyCompletionError,
    LLMMessage,
    LLMResponse,
    ProviderError,
    RateLimitError,
    TokenUsage,
)
from parley.providers.llm.executor import (
    LLMExecutor,
    clip_text,
    create_executor_from_config,
)
from parley.providers.llm.mock import MockAICollaborator

__all__ = [
    # Data models
    "LLMMessage",
    "LLMResponse",
    "TokenUsage",
    "Completion",
    # Errors
    "ProviderError",
    "AuthenticationError",
    "RateLimitError",
    "EmptyCompletionError",
    # Interface and executor
    "AICollaborator",
    "LLMExecutor",
    "clip_text",
    "create_executor_from_config",
    # Testing
    "MockAICollaborator",
]
