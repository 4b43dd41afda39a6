"""LLM Executor - runs completions for the message pipeline using Agno.

The executor is configured with:
- A primary model string (from config)
- Fallback models (optional)
- A request timeout

It handles:
- Model selection and API routing based on model string prefix
- Fallback chain on failure (Agno doesn't have this natively)
- Observability (latency, request tracking)

Uses Agno model classes internally:
- Gemini for gemini/* models
- OpenRouter for openrouter/* models
- Claude for anthropic/* models
- OpenAIChat for openai/* models
- Groq for groq/* models
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from parley.observability.logging import get_logger
from parley.observability.metrics import AI_LATENCY
from parley.providers.llm.base import (
    AICollaborator,
    Completion,
    EmptyCompletionError,
    LLMMessage,
    LLMResponse,
    ProviderError,
    RateLimitError,
    TokenUsage,
)

if TYPE_CHECKING:
    from agno.agent import Agent

    from parley.config.models.providers import LLMProviderConfig

logger = get_logger(__name__)


class LLMExecutor(AICollaborator):
    """Executes completions through Agno with a fallback chain.

    Model string format:
        gemini/gemini-2.5-flash -> Gemini(id="gemini-2.5-flash")
        openrouter/anthropic/claude-3-haiku -> OpenRouter(id="anthropic/claude-3-haiku")
        anthropic/claude-3-haiku -> Claude(id="claude-3-haiku")
        openai/gpt-4o -> OpenAIChat(id="gpt-4o")
        groq/llama-3.1-70b -> Groq(id="llama-3.1-70b")
        mock/test -> Mock response (for testing)

    Example:
        executor = LLMExecutor(
            model="gemini/gemini-2.5-flash",
            fallback_models=["openrouter/anthropic/claude-3-haiku"],
        )

        completion = await executor.complete("Hello", max_length=500)
    """

    def __init__(
        self,
        model: str,
        fallback_models: list[str] | None = None,
        timeout: float = 60.0,
        confidence: float = 0.9,
        ping_prompt: str = "Hello",
    ) -> None:
        """Initialize the executor.

        Args:
            model: Primary model string (e.g., 'gemini/gemini-2.5-flash')
            fallback_models: Models to try if primary fails
            timeout: Request timeout in seconds
            confidence: Confidence reported with each completion
            ping_prompt: Prompt sent by the liveness probe
        """
        self._model = model
        self._fallback_models = fallback_models or []
        self._timeout = timeout
        self._confidence = confidence
        self._ping_prompt = ping_prompt

        # Cache for Agno agents (one per model string)
        self._agents: dict[str, Agent] = {}

    @property
    def model(self) -> str:
        """Primary model for this executor."""
        return self._model

    async def complete(self, prompt: str, max_length: int = 1000) -> Completion:
        """Complete a prompt and clip the reply to max_length characters."""
        response = await self.generate(
            messages=[LLMMessage(role="user", content=prompt)],
            max_tokens=max_length,
        )
        text = clip_text(response.content.strip(), max_length)
        if not text:
            raise EmptyCompletionError(f"Model {response.model} returned an empty reply")

        return Completion(
            text=text,
            confidence=self._confidence,
            model=response.model,
        )

    async def ping(self) -> bool:
        """Send a short prompt and report whether any model answered."""
        try:
            await self.generate(
                messages=[LLMMessage(role="user", content=self._ping_prompt)],
                max_tokens=16,
            )
        except ProviderError as e:
            logger.error("executor_ping_failed", model=self._model, error=str(e))
            return False
        logger.info("executor_ping_ok", model=self._model)
        return True

    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate text from messages.

        Uses primary model, falls back to fallback_models on failure.

        Args:
            messages: Conversation messages
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **kwargs: Additional provider-specific options

        Returns:
            LLMResponse with generated content and metadata
        """
        models_to_try = [self._model] + self._fallback_models
        last_error: Exception | None = None

        for model in models_to_try:
            try:
                return await self._generate_with_model(
                    model=model,
                    messages=messages,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    **kwargs,
                )

            except RateLimitError as e:
                logger.warning("executor_rate_limited", model=model, error=str(e))
                last_error = e
                continue

            except ProviderError as e:
                logger.warning("executor_provider_error", model=model, error=str(e))
                last_error = e
                continue

            except Exception as e:
                logger.warning(
                    "executor_unexpected_error",
                    model=model,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                last_error = e
                continue

        raise ProviderError(
            f"All models failed. Tried: {models_to_try}. Last error: {last_error}"
        )

    # ========================================================================
    # Internal: Agno-based execution
    # ========================================================================

    def _get_or_create_agent(self, model: str) -> Agent | None:
        """Get cached Agno agent or create new one for model."""
        if model in self._agents:
            return self._agents[model]

        agno_model = self._create_agno_model(model)
        if agno_model is None:
            return None

        from agno.agent import Agent

        agent = Agent(
            model=agno_model,
            num_history_messages=0,  # Thread history is part of the prompt
            markdown=False,
        )
        self._agents[model] = agent
        return agent

    def _create_agno_model(self, model: str) -> Any:
        """Create Agno model class from model string.

        Returns None for mock models.
        """
        provider_type, api_model = self._parse_model(model)

        if provider_type == "mock":
            return None

        if provider_type == "gemini":
            from agno.models.google import Gemini

            return Gemini(id=api_model, timeout=self._timeout)

        elif provider_type == "openrouter":
            from agno.models.openrouter import OpenRouter

            return OpenRouter(id=api_model, timeout=self._timeout)

        elif provider_type == "anthropic":
            from agno.models.anthropic import Claude

            return Claude(id=api_model, timeout=self._timeout)

        elif provider_type == "openai":
            from agno.models.openai import OpenAIChat

            return OpenAIChat(id=api_model, timeout=self._timeout)

        elif provider_type == "groq":
            from agno.models.groq import Groq

            return Groq(id=api_model, timeout=self._timeout)

        # Default to OpenRouter for unknown prefixes
        from agno.models.openrouter import OpenRouter

        logger.warning(
            "unknown_provider_defaulting_to_openrouter",
            model=model,
            provider_type=provider_type,
        )
        return OpenRouter(id=model, timeout=self._timeout)

    def _format_messages_for_agno(self, messages: list[LLMMessage]) -> str:
        """Convert our messages to Agno input format.

        Agno agents take a string input. For multi-turn, we format as conversation.
        """
        user_messages = [m for m in messages if m.role != "system"]

        if len(user_messages) == 1:
            return user_messages[0].content

        parts = []
        for msg in user_messages:
            if msg.role == "user":
                parts.append(f"User: {msg.content}")
            elif msg.role == "assistant":
                parts.append(f"Assistant: {msg.content}")
        return "\n\n".join(parts)

    def _get_system_prompt(self, messages: list[LLMMessage]) -> str | None:
        """Extract system prompt from messages."""
        for msg in messages:
            if msg.role == "system":
                return msg.content
        return None

    async def _generate_with_model(
        self,
        model: str,
        messages: list[LLMMessage],
        max_tokens: int,  # noqa: ARG002
        temperature: float,  # noqa: ARG002
        **kwargs: Any,  # noqa: ARG002
    ) -> LLMResponse:
        """Execute generation with a specific model using Agno.

        Note: max_tokens, temperature, kwargs are part of the interface but
        not passed to Agno (which configures these at model creation time).
        """
        provider_type, _ = self._parse_model(model)

        if provider_type == "mock":
            return self._mock_response(model, messages)

        agent = self._get_or_create_agent(model)
        if agent is None:
            return self._mock_response(model, messages)

        input_text = self._format_messages_for_agno(messages)
        system_prompt = self._get_system_prompt(messages)

        if system_prompt:
            agent.instructions = [system_prompt]

        start_time = time.perf_counter()

        try:
            run_response = await agent.arun(input_text)
            content = run_response.content if run_response.content else ""

        except Exception as e:
            error_msg = str(e).lower()
            if "rate" in error_msg and "limit" in error_msg:
                raise RateLimitError(f"Rate limited: {e}") from e
            raise ProviderError(f"Agno execution failed: {e}") from e

        latency_s = time.perf_counter() - start_time
        AI_LATENCY.labels(model=model).observe(latency_s)

        logger.debug(
            "executor_generate_complete",
            model=model,
            latency_ms=round(latency_s * 1000, 2),
            content_length=len(content),
        )

        return LLMResponse(
            content=str(content),
            model=model,
            finish_reason="stop",
            metadata={
                "latency_ms": latency_s * 1000,
                "provider": provider_type,
            },
        )

    def _mock_response(self, model: str, messages: list[LLMMessage]) -> LLMResponse:  # noqa: ARG002
        """Generate mock response for testing."""
        return LLMResponse(
            content=f"Mock response for {model}",
            model=model,
            finish_reason="stop",
            usage=TokenUsage(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        )

    def _parse_model(self, model: str) -> tuple[str, str]:
        """Parse model string into (provider_type, api_model).

        Examples:
            "gemini/gemini-2.5-flash" -> ("gemini", "gemini-2.5-flash")
            "openrouter/anthropic/claude-3-haiku" -> ("openrouter", "anthropic/claude-3-haiku")
            "mock/test" -> ("mock", "test")
        """
        parts = model.split("/")

        if len(parts) >= 3 and parts[0] == "openrouter":
            return "openrouter", "/".join(parts[1:])
        elif len(parts) >= 2:
            return parts[0], "/".join(parts[1:])
        else:
            return "mock", model


def clip_text(text: str, max_length: int) -> str:
    """Clip text to max_length characters, preferring a word boundary."""
    if len(text) <= max_length:
        return text
    clipped = text[:max_length]
    boundary = clipped.rfind(" ")
    if boundary > max_length // 2:
        clipped = clipped[:boundary]
    return clipped.rstrip()


def create_executor_from_config(config: LLMProviderConfig) -> LLMExecutor:
    """Create an LLMExecutor from provider configuration."""
    return LLMExecutor(
        model=config.model,
        fallback_models=config.fallback_models,
        timeout=config.timeout,
        confidence=config.confidence,
        ping_prompt=config.ping_prompt,
    )
