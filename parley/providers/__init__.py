"""External AI services.

Only text completion is used by the engine; see parley.providers.llm.
"""

from parley.providers.llm import AICollaborator, LLMExecutor, MockAICollaborator

__all__ = [
    "AICollaborator",
    "LLMExecutor",
    "MockAICollaborator",
]
