"""Pure renderers turning persona sources into prompt text blocks."""

from collections.abc import Sequence

from parley.contacts.models import Contact, PersonaOverride
from parley.persona.models import RelationshipPersona
from parley.profiles.defaults import builtin_default_profile
from parley.profiles.models import ContextProfile

NO_RELATIONSHIP_CONTEXT = "No specific relationship context available."
NOT_SPECIFIED = "Not specified"


def _join(items: Sequence[str] | None, empty: str) -> str:
    return ", ".join(items) if items else empty


def _relationship_header(contact: Contact) -> str:
    return (
        "RELATIONSHIP CONTEXT:\n"
        f"- Contact Name: {contact.name}\n"
        f"- Relationship: {contact.relationship_label}\n"
        f"- Relationship Category: {contact.relationship_category.value}"
    )


def _contact_footer(contact: Contact) -> str:
    return f"PRIORITY: {contact.priority.value}\nNOTES: {contact.notes or 'None'}"


def render_contact_persona(
    contact: Contact,
    persona: RelationshipPersona | PersonaOverride | None,
) -> str:
    """Render the personalized block for a known contact.

    Blocks appear in a fixed order: relationship metadata, personality,
    communication style, topics, topics to avoid, tone, special instructions,
    priority and notes. A missing persona degrades to explicit
    "no specific context" text that still names the contact.
    """
    if persona is None:
        return "\n\n".join(
            [NO_RELATIONSHIP_CONTEXT, _relationship_header(contact), _contact_footer(contact)]
        )

    blocks = [
        _relationship_header(contact),
        f"PERSONALITY:\n{persona.personality or NOT_SPECIFIED}",
        f"COMMUNICATION STYLE:\n{persona.communication_style or NOT_SPECIFIED}",
        f"APPROPRIATE TOPICS:\n{_join(persona.topics, 'General conversation')}",
        f"AVOID THESE TOPICS:\n{_join(persona.avoid_topics, 'None specified')}",
        f"RESPONSE TONE:\n{persona.response_tone or NOT_SPECIFIED}",
        f"SPECIAL INSTRUCTIONS:\n{persona.special_instructions or 'None'}",
        _contact_footer(contact),
    ]
    return "\n\n".join(blocks)


def render_profile(profile: ContextProfile) -> str:
    """Render a context profile as personal, organization and AI-instruction blocks."""
    personal = profile.personal_info
    blocks = [
        "PERSONAL INFORMATION:\n"
        f"- Name: {personal.name}\n"
        f"- Role: {personal.role}\n"
        f"- Expertise: {_join(personal.expertise, NOT_SPECIFIED)}\n"
        f"- Personality: {personal.personality}\n"
        f"- Communication Style: {personal.communication_style}\n"
        f"- Availability: {personal.availability}"
    ]

    org = profile.organization_info
    if org is not None:
        contact_parts = [p for p in (org.contact_info.email, org.contact_info.phone) if p]
        blocks.append(
            "ORGANIZATION INFORMATION:\n"
            f"- Name: {org.name}\n"
            f"- Industry: {org.industry or NOT_SPECIFIED}\n"
            f"- Services: {_join(org.services, NOT_SPECIFIED)}\n"
            f"- Values: {_join(org.values, NOT_SPECIFIED)}\n"
            f"- Contact: {' | '.join(contact_parts) or NOT_SPECIFIED}"
        )

    ai = profile.ai_instructions
    blocks.append(
        "AI INSTRUCTIONS:\n"
        f"- Response Style: {ai.response_style}\n"
        f"- Preferred Language: {ai.preferred_language}\n"
        f"- Tone: {ai.tone.value}\n"
        f"- Topics to Avoid: {_join(ai.topics_to_avoid, 'None specified')}"
    )
    return "\n\n".join(blocks)


BUILTIN_PERSONA_TEXT = render_profile(builtin_default_profile())
