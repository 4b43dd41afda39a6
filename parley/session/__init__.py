"""Transport session: connection state machine and inbound dispatcher."""

from parley.session.dispatcher import InboundDispatcher
from parley.session.machine import SessionStateMachine
from parley.session.models import (
    LOGOUT_REASON,
    EventKind,
    SessionState,
    SessionStatus,
    TransportEvent,
)
from parley.session.transport import ClientFactory, TransportClient

__all__ = [
    "InboundDispatcher",
    "SessionStateMachine",
    "LOGOUT_REASON",
    "EventKind",
    "SessionState",
    "SessionStatus",
    "TransportEvent",
    "ClientFactory",
    "TransportClient",
]
