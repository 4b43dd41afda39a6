"""Prompt building for reply generation.

Assembles the resolved persona, recent thread history and the current
message into the single prompt handed to the AI collaborator.
"""

DEFAULT_TEMPLATE = """You are an AI assistant representing a person/organization. \
Please respond to WhatsApp messages based on the following context:

PERSONAL/ORGANIZATION CONTEXT:
{persona}

CONVERSATION HISTORY:
{history}

CURRENT MESSAGE:
{message}

INSTRUCTIONS:
1. Respond naturally as if you are the person/organization
2. Use the provided context to personalize your responses
3. Keep responses concise and WhatsApp-appropriate, under {max_length} characters
4. Be helpful, professional, and friendly
5. If you don't have enough context, ask for clarification politely

Please provide a response:"""


class PromptBuilder:
    """Build prompts for reply generation."""

    def __init__(self, template: str | None = None) -> None:
        """Initialize the prompt builder.

        Args:
            template: Optional custom template with ``{persona}``,
                ``{history}``, ``{message}`` and ``{max_length}`` fields
        """
        self._template = template or DEFAULT_TEMPLATE

    def build(
        self,
        persona: str,
        history: str,
        message: str,
        max_length: int = 1000,
    ) -> str:
        """Fill the template."""
        return self._template.format(
            persona=persona.strip(),
            history=history.strip(),
            message=message.strip(),
            max_length=max_length,
        )
