"""Session models: connection states, transport events and status view."""

from enum import Enum

from pydantic import BaseModel, Field


class SessionState(str, Enum):
    """Transport session lifecycle states.

    - DISABLED: Transport turned off, or initialization failed for good
    - INITIALIZING: Client constructed, not yet authenticated
    - AWAITING_SCAN: QR credential issued and not yet scanned
    - AUTHENTICATED: Credential accepted, client still loading
    - READY: Fully operational
    - DISCONNECTED: Session lost; reconnect pending or permanently stopped
    """

    DISABLED = "disabled"
    INITIALIZING = "initializing"
    AWAITING_SCAN = "awaiting_scan"
    AUTHENTICATED = "authenticated"
    READY = "ready"
    DISCONNECTED = "disconnected"


class EventKind(str, Enum):
    """Kinds of events pushed by the transport client."""

    QR = "qr"
    AUTHENTICATED = "authenticated"
    AUTH_FAILURE = "auth_failure"
    READY = "ready"
    DISCONNECTED = "disconnected"
    ERROR = "error"
    MESSAGE = "message"


LOGOUT_REASON = "LOGOUT"


class TransportEvent(BaseModel):
    """One event from the transport client.

    Lifecycle events use ``qr``, ``reason`` or ``error``; inbound messages use
    the address/body fields.
    """

    kind: EventKind
    qr: str | None = Field(default=None, description="QR credential payload")
    reason: str | None = Field(default=None, description="Disconnect reason")
    error: str | None = Field(default=None, description="Error or auth failure text")
    address: str | None = Field(default=None, description="Sender address")
    body: str | None = Field(default=None, description="Message text")
    from_self: bool = Field(default=False, description="Sent by the owner's account")
    display_name: str | None = Field(default=None, description="Sender display name")
    message_id: str | None = Field(default=None, description="Transport message id")


class SessionStatus(BaseModel):
    """Side-effect-free projection of the session."""

    state: SessionState
    is_ready: bool
    has_client: bool
    qr_pending: bool
    reconnect_attempts: int = Field(ge=0)
    degraded: bool
    ai_ready: bool
