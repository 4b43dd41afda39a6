"""Enums for the conversation domain."""

from enum import Enum


class MessageRole(str, Enum):
    """Who authored a thread entry.

    - COUNTERPARTY: The person on the other end of the transport
    - ASSISTANT: The AI reply sent on the owner's behalf
    """

    COUNTERPARTY = "counterparty"
    ASSISTANT = "assistant"


class Sentiment(str, Enum):
    """Overall thread sentiment.

    Carried on every thread; nothing computes it yet, so it stays NEUTRAL.
    """

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class MessageType(str, Enum):
    """Kind of content carried by a thread entry."""

    TEXT = "text"
    IMAGE = "image"
    DOCUMENT = "document"
    AUDIO = "audio"
