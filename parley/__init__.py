"""Parley - conversation orchestration engine for messaging assistants.

Routes inbound chat messages to a generative-AI backend and returns replies
shaped by a resolved persona, while keeping bounded per-conversation memory
and a self-healing transport session.
"""

__version__ = "0.1.0"
