"""Conversation domain models.

Contains the Pydantic models for per-counterparty thread state:
- ConversationThread for the rolling history with one address
- ThreadMessage for individual immutable entries
- ThreadStats and ThreadSummary for read views
"""

from parley.conversation.models.enums import MessageRole, MessageType, Sentiment
from parley.conversation.models.thread import (
    ConversationThread,
    MessageMetadata,
    ThreadMessage,
    ThreadStats,
    ThreadSummary,
    generate_message_id,
    utc_now,
)

__all__ = [
    # Enums
    "MessageRole",
    "MessageType",
    "Sentiment",
    # Thread models
    "ConversationThread",
    "MessageMetadata",
    "ThreadMessage",
    "ThreadStats",
    "ThreadSummary",
    # Helpers
    "generate_message_id",
    "utc_now",
]
