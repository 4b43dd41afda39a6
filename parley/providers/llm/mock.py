"""Mock AI collaborator for testing."""

import asyncio
from typing import Any

from parley.providers.llm.base import AICollaborator, Completion


class MockAICollaborator(AICollaborator):
    """Mock AI collaborator for testing.

    Returns configurable replies without making actual API calls.
    Useful for unit testing and development.
    """

    def __init__(
        self,
        default_response: str = "Mock response",
        default_model: str = "mock-model",
        responses: dict[str, str] | None = None,
        confidence: float = 0.9,
        delay: float = 0.0,
        ping_result: bool = True,
    ):
        """Initialize mock collaborator.

        Args:
            default_response: Reply to return when no trigger matches
            default_model: Model name to report
            responses: Dict mapping a substring of the prompt to a reply
            confidence: Confidence to report
            delay: Seconds to sleep before answering
            ping_result: Value returned by ping()
        """
        self._default_response = default_response
        self._default_model = default_model
        self._responses = responses or {}
        self._confidence = confidence
        self._delay = delay
        self._ping_result = ping_result
        self._failure: Exception | None = None
        self._call_history: list[dict[str, Any]] = []

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Return history of calls for testing assertions."""
        return self._call_history

    def clear_history(self) -> None:
        """Clear call history."""
        self._call_history.clear()

    def set_response(self, trigger: str, response: str) -> None:
        """Set a reply for prompts containing trigger."""
        self._responses[trigger] = response

    def fail_with(self, error: Exception | None) -> None:
        """Make subsequent complete() calls raise error (None to stop)."""
        self._failure = error

    async def complete(self, prompt: str, max_length: int = 1000) -> Completion:
        """Return the configured reply."""
        self._call_history.append({"prompt": prompt, "max_length": max_length})

        if self._delay:
            await asyncio.sleep(self._delay)

        if self._failure is not None:
            raise self._failure

        content = self._default_response
        for trigger, response in self._responses.items():
            if trigger in prompt:
                content = response
                break

        return Completion(
            text=content[:max_length].strip(),
            confidence=self._confidence,
            model=self._default_model,
        )

    async def ping(self) -> bool:
        """Return the configured probe result."""
        return self._ping_result
