"""Transport session configuration models."""

from pydantic import BaseModel, Field


class SessionConfig(BaseModel):
    """Transport session lifecycle configuration."""

    enabled: bool = Field(
        default=False,
        description="Start the transport session at all",
    )
    max_reconnect_attempts: int = Field(
        default=3,
        ge=0,
        description="Reconnects allowed before the session stays down",
    )
    disconnect_delay_seconds: float = Field(
        default=5.0,
        ge=0,
        description="Backoff before rebuilding after a disconnect",
    )
    error_delay_seconds: float = Field(
        default=3.0,
        ge=0,
        description="Backoff before rebuilding after a transport error",
    )
    qr_validity_seconds: float = Field(
        default=300.0,
        gt=0,
        description="How long an unscanned QR credential stays valid",
    )
    default_country_code: str = Field(
        default="91",
        pattern=r"^\d{1,4}$",
        description="Country code applied to bare local numbers on send",
    )
    recoverable_error_markers: list[str] = Field(
        default_factory=lambda: ["Execution context was destroyed"],
        description="Error fragments that trigger a client rebuild",
    )
    recoverable_init_markers: list[str] = Field(
        default_factory=lambda: ["Execution context was destroyed", "navigation"],
        description="Initialization error fragments that trigger a rebuild",
    )
