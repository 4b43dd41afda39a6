"""Conversation domain: per-counterparty thread memory.

Threads hold the rolling history, extracted topics and sentiment for one
normalized address. The store is the only writer.
"""

from parley.conversation.models import (
    ConversationThread,
    MessageMetadata,
    MessageRole,
    MessageType,
    Sentiment,
    ThreadMessage,
    ThreadStats,
    ThreadSummary,
)
from parley.conversation.store import ThreadStore
from parley.conversation.stores import InMemoryThreadStore

__all__ = [
    "ConversationThread",
    "MessageMetadata",
    "MessageRole",
    "MessageType",
    "Sentiment",
    "ThreadMessage",
    "ThreadStats",
    "ThreadSummary",
    "ThreadStore",
    "InMemoryThreadStore",
]
