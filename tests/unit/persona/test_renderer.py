"""Tests for persona rendering and the relationship table."""

import pytest

from parley.contacts.models import PersonaOverride, RelationshipCategory
from parley.persona.relationship_table import RELATIONSHIP_PERSONAS, persona_for
from parley.persona.renderer import (
    BUILTIN_PERSONA_TEXT,
    NO_RELATIONSHIP_CONTEXT,
    render_contact_persona,
    render_profile,
)
from tests.factories import ContactFactory, ProfileFactory


class TestRelationshipTable:
    """Tests for the static persona table."""

    def test_covers_all_but_other(self) -> None:
        """Should define a persona for every category except 'other'."""
        expected = set(RelationshipCategory) - {RelationshipCategory.OTHER}
        assert set(RELATIONSHIP_PERSONAS) == expected
        assert persona_for(RelationshipCategory.OTHER) is None

    def test_read_only(self) -> None:
        """Should reject mutation."""
        with pytest.raises(TypeError):
            RELATIONSHIP_PERSONAS[RelationshipCategory.OTHER] = persona_for(  # type: ignore[index]
                RelationshipCategory.FRIEND
            )

    def test_friend_tone(self) -> None:
        """Should give friends a friendly tone."""
        assert persona_for(RelationshipCategory.FRIEND).response_tone == "friendly"


class TestRenderContactPersona:
    """Tests for render_contact_persona."""

    def test_blocks_in_order(self) -> None:
        """Should render every block in the fixed order."""
        contact = ContactFactory.create(notes="Met at university")
        text = render_contact_persona(contact, persona_for(RelationshipCategory.FRIEND))

        headers = [
            "RELATIONSHIP CONTEXT:",
            "PERSONALITY:",
            "COMMUNICATION STYLE:",
            "APPROPRIATE TOPICS:",
            "AVOID THESE TOPICS:",
            "RESPONSE TONE:",
            "SPECIAL INSTRUCTIONS:",
            "PRIORITY:",
            "NOTES:",
        ]
        positions = [text.index(h) for h in headers]
        assert positions == sorted(positions)
        assert "- Contact Name: Alex" in text
        assert "- Relationship: best friend" in text
        assert "RESPONSE TONE:\nfriendly" in text
        assert "NOTES: Met at university" in text

    def test_override_defaults_for_missing_fields(self) -> None:
        """Should fill gaps in a partial override with placeholders."""
        contact = ContactFactory.create()
        text = render_contact_persona(contact, PersonaOverride(response_tone="playful"))

        assert "RESPONSE TONE:\nplayful" in text
        assert "APPROPRIATE TOPICS:\nGeneral conversation" in text
        assert "AVOID THESE TOPICS:\nNone specified" in text
        assert "PERSONALITY:\nNot specified" in text

    def test_no_persona_still_names_contact(self) -> None:
        """Should degrade to the no-context text without becoming empty."""
        contact = ContactFactory.create(relationship_category=RelationshipCategory.OTHER)
        text = render_contact_persona(contact, None)

        assert text.startswith(NO_RELATIONSHIP_CONTEXT)
        assert "- Contact Name: Alex" in text
        assert "PRIORITY: medium" in text


class TestRenderProfile:
    """Tests for render_profile."""

    def test_with_organization(self) -> None:
        """Should include organization details and contact info."""
        text = render_profile(ProfileFactory.create())

        assert "PERSONAL INFORMATION:" in text
        assert "- Name: Rivera Bakery" in text
        assert "- Contact: hello@example.com | +10000000000" in text
        assert "- Tone: friendly" in text

    def test_without_organization(self) -> None:
        """Should omit the organization block."""
        text = render_profile(ProfileFactory.create(organization=None))
        assert "ORGANIZATION INFORMATION:" not in text

    def test_builtin_text_not_empty(self) -> None:
        """Should render the built-in default persona."""
        assert "AI Assistant" in BUILTIN_PERSONA_TEXT
        assert "AI INSTRUCTIONS:" in BUILTIN_PERSONA_TEXT
