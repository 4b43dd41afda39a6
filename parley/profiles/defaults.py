"""Built-in default context profile.

Used to seed the store on startup and as the last-resort persona when no
stored profile can be found.
"""

from parley.profiles.models import (
    AIInstructions,
    ContextProfile,
    PersonalInfo,
    ProfileMetadata,
    Tone,
)

DEFAULT_PROFILE_ID = "default"


def builtin_default_profile(profile_id: str = DEFAULT_PROFILE_ID) -> ContextProfile:
    """Build a fresh copy of the built-in default profile."""
    return ContextProfile(
        profile_id=profile_id,
        name="AI Assistant (Default Context)",
        description="Built-in default context for the personal assistant",
        personal_info=PersonalInfo(
            name="AI Assistant",
            role="Personal Assistant",
            expertise=["general assistance", "communication"],
            personality="Helpful and professional",
            communication_style="Clear and concise",
            availability="24/7",
        ),
        ai_instructions=AIInstructions(
            response_style="Professional yet friendly",
            topics_to_avoid=["sensitive personal information", "confidential data"],
            preferred_language="English",
            tone=Tone.PROFESSIONAL,
        ),
        is_default=True,
        metadata=ProfileMetadata(created_by="system", version="1.0.0"),
    )
