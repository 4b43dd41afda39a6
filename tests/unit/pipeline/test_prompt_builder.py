"""Tests for PromptBuilder."""

from parley.pipeline.prompt_builder import PromptBuilder


class TestPromptBuilder:
    """Tests for prompt assembly."""

    def test_includes_all_sections(self) -> None:
        """Should place persona, history and message in order."""
        prompt = PromptBuilder().build(
            persona="PERSONALITY:\nCheerful",
            history="User: Hi",
            message="How are you?",
            max_length=500,
        )

        persona_at = prompt.index("PERSONAL/ORGANIZATION CONTEXT:\nPERSONALITY:\nCheerful")
        history_at = prompt.index("CONVERSATION HISTORY:\nUser: Hi")
        message_at = prompt.index("CURRENT MESSAGE:\nHow are you?")
        assert persona_at < history_at < message_at
        assert "under 500 characters" in prompt
        assert prompt.endswith("Please provide a response:")

    def test_custom_template(self) -> None:
        """Should fill a caller-supplied template."""
        builder = PromptBuilder(template="{persona}|{history}|{message}|{max_length}")
        assert builder.build(" p ", "h", "m", 10) == "p|h|m|10"
