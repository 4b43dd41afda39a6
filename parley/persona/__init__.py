"""Persona resolution: turns contacts and profiles into prompt-ready text."""

from parley.persona.models import (
    BuiltinFallback,
    ContactOverride,
    NamedProfile,
    PersonaSource,
    PersonaSourceKind,
    RelationshipDefault,
    RelationshipPersona,
    ResolvedPersona,
)
from parley.persona.relationship_table import RELATIONSHIP_PERSONAS, persona_for
from parley.persona.renderer import (
    BUILTIN_PERSONA_TEXT,
    NO_RELATIONSHIP_CONTEXT,
    render_contact_persona,
    render_profile,
)
from parley.persona.resolver import ContextResolver

__all__ = [
    "BuiltinFallback",
    "ContactOverride",
    "NamedProfile",
    "PersonaSource",
    "PersonaSourceKind",
    "RelationshipDefault",
    "RelationshipPersona",
    "ResolvedPersona",
    "RELATIONSHIP_PERSONAS",
    "persona_for",
    "BUILTIN_PERSONA_TEXT",
    "NO_RELATIONSHIP_CONTEXT",
    "render_contact_persona",
    "render_profile",
    "ContextResolver",
]
