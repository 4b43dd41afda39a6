"""Context resolver: picks the persona source for an address and renders it.

Precedence, highest first:
1. Contact with a persona override
2. Contact with the relationship-table default for its category
3. Stored context profile (explicit id or the configured default id)
4. Built-in default persona

Resolution never raises. A failing collaborator is logged, counted and the
next source down is tried.
"""

from collections.abc import Mapping

from parley.contacts.models import Contact, RelationshipCategory
from parley.contacts.store import ContactDirectory
from parley.observability.logging import get_logger
from parley.observability.metrics import PERSONA_DEGRADED, PERSONA_RESOLUTIONS
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
from parley.persona.relationship_table import RELATIONSHIP_PERSONAS
from parley.persona.renderer import (
    BUILTIN_PERSONA_TEXT,
    render_contact_persona,
    render_profile,
)
from parley.profiles.defaults import DEFAULT_PROFILE_ID
from parley.profiles.store import ContextProfileStore

logger = get_logger(__name__)


class ContextResolver:
    """Resolves the persona text injected into every prompt."""

    def __init__(
        self,
        contact_directory: ContactDirectory,
        profile_store: ContextProfileStore,
        persona_table: Mapping[RelationshipCategory, RelationshipPersona] | None = None,
        default_profile_id: str = DEFAULT_PROFILE_ID,
    ) -> None:
        self._contacts = contact_directory
        self._profiles = profile_store
        self._table = persona_table if persona_table is not None else RELATIONSHIP_PERSONAS
        self._default_profile_id = default_profile_id

    async def resolve(
        self,
        address: str,
        profile_id: str | None = None,
        use_contact_context: bool = True,
    ) -> ResolvedPersona:
        """Resolve the persona for an address.

        Args:
            address: Counterparty address (normalized or transport form)
            profile_id: Profile to use when no contact applies
            use_contact_context: Skip contact lookup when False

        Returns:
            ResolvedPersona with non-empty text
        """
        source = await self._select_source(address, profile_id, use_contact_context)

        match source:
            case ContactOverride(contact=contact, override=override):
                resolved = ResolvedPersona(
                    text=render_contact_persona(contact, override),
                    context_used=f"contact_{contact.relationship_category.value}",
                    source=PersonaSourceKind.CONTACT_OVERRIDE,
                    contact=contact,
                )
            case RelationshipDefault(contact=contact, persona=persona):
                resolved = ResolvedPersona(
                    text=render_contact_persona(contact, persona),
                    context_used=f"contact_{contact.relationship_category.value}",
                    source=PersonaSourceKind.RELATIONSHIP_DEFAULT,
                    contact=contact,
                )
            case NamedProfile(profile=profile):
                await self._record_usage(profile.profile_id)
                resolved = ResolvedPersona(
                    text=render_profile(profile),
                    context_used=profile.profile_id,
                    source=PersonaSourceKind.NAMED_PROFILE,
                )
            case BuiltinFallback(profile_id=fallback_id):
                resolved = ResolvedPersona(
                    text=BUILTIN_PERSONA_TEXT,
                    context_used=fallback_id,
                    source=PersonaSourceKind.BUILTIN_FALLBACK,
                )

        PERSONA_RESOLUTIONS.labels(source=resolved.source.value).inc()
        logger.debug(
            "context_resolved",
            address=address,
            source=resolved.source.value,
            context_used=resolved.context_used,
        )
        return resolved

    async def _select_source(
        self,
        address: str,
        profile_id: str | None,
        use_contact_context: bool,
    ) -> PersonaSource:
        if use_contact_context:
            contact = await self._lookup_contact(address)
            if contact is not None:
                if contact.persona_override is not None:
                    return ContactOverride(contact=contact, override=contact.persona_override)
                return RelationshipDefault(
                    contact=contact,
                    persona=self._table.get(contact.relationship_category),
                )

        requested = profile_id or self._default_profile_id
        try:
            profile = await self._profiles.find_by_id(requested)
        except Exception as e:
            self._degraded("profile_lookup", address, e)
            profile = None

        if profile is not None:
            return NamedProfile(profile=profile)
        return BuiltinFallback(profile_id=requested)

    async def _lookup_contact(self, address: str) -> Contact | None:
        try:
            return await self._contacts.find_by_address(address)
        except Exception as e:
            self._degraded("contact_lookup", address, e)
            return None

    async def _record_usage(self, profile_id: str) -> None:
        try:
            await self._profiles.increment_usage(profile_id)
        except Exception as e:
            self._degraded("usage_increment", None, e)

    def _degraded(self, stage: str, address: str | None, error: Exception) -> None:
        PERSONA_DEGRADED.labels(stage=stage).inc()
        logger.warning(
            "context_resolution_degraded",
            stage=stage,
            address=address,
            error=str(error),
            error_type=type(error).__name__,
        )
