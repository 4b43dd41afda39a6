"""Session connection state machine.

Tracks the transport session's authentication lifecycle and rebuilds the
client after transient failures, bounded by a reconnect ceiling:

    DISABLED
    INITIALIZING -> AWAITING_SCAN -> AUTHENTICATED -> READY
                                                   -> DISCONNECTED -> (rebuild) INITIALIZING

A disconnect with reason LOGOUT is terminal. Once the ceiling is reached the
session stays DISCONNECTED and reports degraded mode; nothing is raised.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable

from parley.config.models.session import SessionConfig
from parley.observability.logging import get_logger
from parley.observability.metrics import (
    SESSION_RECONNECTS,
    SESSION_RECONNECTS_EXHAUSTED,
    SESSION_TRANSITIONS,
)
from parley.session.models import (
    LOGOUT_REASON,
    EventKind,
    SessionState,
    SessionStatus,
    TransportEvent,
)
from parley.session.transport import ClientFactory, TransportClient

logger = get_logger(__name__)


class SessionStateMachine:
    """Owns the current transport client and its connection state.

    Clock and sleep are injectable so expiry and backoff can be driven from
    tests without waiting.
    """

    def __init__(
        self,
        client_factory: ClientFactory,
        config: SessionConfig | None = None,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        ai_ready: Callable[[], bool] | None = None,
    ) -> None:
        """Initialize the state machine.

        Args:
            client_factory: Builds a fresh transport client
            config: Session configuration
            clock: Monotonic clock in seconds
            sleep: Awaitable sleep used for backoff and QR expiry
            ai_ready: Reports whether the AI pipeline is initialized
        """
        self._factory = client_factory
        self._config = config or SessionConfig()
        self._clock = clock or time.monotonic
        self._sleep = sleep or asyncio.sleep
        self._ai_ready = ai_ready or (lambda: False)

        self._state = SessionState.DISABLED
        self._client: TransportClient | None = None
        self._qr: str | None = None
        self._qr_issued_at: float | None = None
        self._qr_timer: asyncio.Task | None = None
        self._reconnect_task: asyncio.Task | None = None
        self._reconnect_attempts = 0
        self._degraded = False
        self._logged_out = False
        self._stopped = False

    @property
    def state(self) -> SessionState:
        """Raw current state (no QR-expiry projection)."""
        return self._state

    @property
    def client(self) -> TransportClient | None:
        """Current transport client, if one is alive."""
        return self._client

    @property
    def is_ready(self) -> bool:
        """Whether inbound messages may be processed."""
        return self._state == SessionState.READY and self._client is not None

    @property
    def reconnect_task(self) -> asyncio.Task | None:
        """Pending reconnect, if one is scheduled."""
        return self._reconnect_task

    # ========================================================================
    # Lifecycle
    # ========================================================================

    async def start(self) -> None:
        """Build the first client, unless the transport is disabled."""
        if not self._config.enabled:
            logger.info("session_disabled_by_config")
            self._transition(SessionState.DISABLED)
            return

        self._stopped = False
        await self._build_client()

    async def stop(self) -> None:
        """Cancel timers and destroy the client."""
        self._stopped = True
        self._cancel_qr_timer()
        self._clear_qr()

        if self._reconnect_task is not None and not self._reconnect_task.done():
            self._reconnect_task.cancel()
            try:
                await self._reconnect_task
            except asyncio.CancelledError:
                pass
        self._reconnect_task = None

        await self._discard_client()
        if self._state != SessionState.DISABLED:
            self._transition(SessionState.DISCONNECTED)
        logger.info("session_stopped")

    def status(self) -> SessionStatus:
        """Project the current state without side effects.

        A QR credential past its validity window reports INITIALIZING even if
        the expiry timer has not fired yet.
        """
        qr_pending = self._qr is not None and not self._qr_expired()
        state = self._state
        if state == SessionState.AWAITING_SCAN and not qr_pending:
            state = SessionState.INITIALIZING

        return SessionStatus(
            state=state,
            is_ready=state == SessionState.READY and self._client is not None,
            has_client=self._client is not None,
            qr_pending=qr_pending,
            reconnect_attempts=self._reconnect_attempts,
            degraded=self._degraded,
            ai_ready=self._ai_ready(),
        )

    # ========================================================================
    # Events
    # ========================================================================

    async def handle_event(self, event: TransportEvent) -> None:
        """Apply one lifecycle event. Inbound messages are ignored here."""
        match event.kind:
            case EventKind.QR:
                self._on_qr(event.qr or "")
            case EventKind.AUTHENTICATED:
                self._cancel_qr_timer()
                self._clear_qr()
                self._reconnect_attempts = 0
                self._transition(SessionState.AUTHENTICATED)
            case EventKind.READY:
                self._reconnect_attempts = 0
                self._transition(SessionState.READY)
            case EventKind.AUTH_FAILURE:
                logger.error("session_auth_failure", error=event.error)
                self._cancel_qr_timer()
                self._clear_qr()
                self._reconnect_attempts = 0
                self._transition(SessionState.INITIALIZING)
            case EventKind.DISCONNECTED:
                await self._on_disconnected(event.reason or "UNKNOWN")
            case EventKind.ERROR:
                await self._on_error(event.error or "")
            case EventKind.MESSAGE:
                pass

    def _on_qr(self, credential: str) -> None:
        self._cancel_qr_timer()
        self._qr = credential
        self._qr_issued_at = self._clock()
        self._reconnect_attempts = 0
        self._transition(SessionState.AWAITING_SCAN)
        self._qr_timer = asyncio.create_task(self._expire_qr_after(credential))
        logger.info(
            "session_qr_issued", validity_seconds=self._config.qr_validity_seconds
        )

    async def _expire_qr_after(self, credential: str) -> None:
        await self._sleep(self._config.qr_validity_seconds)
        if self._qr != credential:
            return
        self._clear_qr()
        self._qr_timer = None
        if self._state == SessionState.AWAITING_SCAN:
            self._transition(SessionState.INITIALIZING)
        logger.info("session_qr_expired")

    async def _on_disconnected(self, reason: str) -> None:
        logger.warning("session_disconnected", reason=reason)
        self._cancel_qr_timer()
        self._clear_qr()
        self._transition(SessionState.DISCONNECTED)

        if reason == LOGOUT_REASON:
            self._logged_out = True
            await self._discard_client(logout=True)
            logger.info("session_logged_out")
            return

        await self._discard_client()
        self._schedule_reconnect(self._config.disconnect_delay_seconds, "disconnect")

    async def _on_error(self, message: str) -> None:
        if not any(m in message for m in self._config.recoverable_error_markers):
            logger.error("session_transport_error", error=message)
            return

        logger.warning("session_context_destroyed", error=message)
        self._cancel_qr_timer()
        self._clear_qr()
        self._transition(SessionState.DISCONNECTED)
        await self._discard_client()
        self._schedule_reconnect(self._config.error_delay_seconds, "error")

    # ========================================================================
    # Reconnect
    # ========================================================================

    def _schedule_reconnect(self, delay: float, trigger: str) -> None:
        if self._stopped or self._logged_out:
            return
        if self._reconnect_task is not None and not self._reconnect_task.done():
            logger.debug("session_reconnect_already_pending", trigger=trigger)
            return

        if self._reconnect_attempts >= self._config.max_reconnect_attempts:
            self._degraded = True
            SESSION_RECONNECTS_EXHAUSTED.inc()
            logger.error(
                "session_reconnect_exhausted",
                attempts=self._reconnect_attempts,
                max_attempts=self._config.max_reconnect_attempts,
            )
            return

        self._reconnect_attempts += 1
        SESSION_RECONNECTS.labels(trigger=trigger).inc()
        logger.info(
            "session_reconnect_scheduled",
            attempt=self._reconnect_attempts,
            max_attempts=self._config.max_reconnect_attempts,
            delay_seconds=delay,
            trigger=trigger,
        )
        self._reconnect_task = asyncio.create_task(self._reconnect_after(delay))

    async def _reconnect_after(self, delay: float) -> None:
        await self._sleep(delay)
        if self._stopped or self._logged_out:
            return
        self._reconnect_task = None
        await self._build_client()

    async def _build_client(self) -> None:
        self._client = self._factory()
        self._transition(SessionState.INITIALIZING)

        try:
            await self._client.initialize()
        except Exception as e:
            message = str(e)
            if any(m in message for m in self._config.recoverable_init_markers):
                logger.warning("session_initialize_recoverable_failure", error=message)
                await self._discard_client()
                self._transition(SessionState.DISCONNECTED)
                self._schedule_reconnect(self._config.error_delay_seconds, "initialize")
                return

            logger.error("session_initialize_failed", error=message)
            await self._discard_client()
            self._transition(SessionState.DISABLED)
            return

        logger.info("session_client_initialized")

    # ========================================================================
    # Helpers
    # ========================================================================

    def _transition(self, new_state: SessionState) -> None:
        if new_state == self._state:
            return
        SESSION_TRANSITIONS.labels(
            from_state=self._state.value, to_state=new_state.value
        ).inc()
        logger.info(
            "session_state_changed",
            from_state=self._state.value,
            to_state=new_state.value,
        )
        self._state = new_state

    def _qr_expired(self) -> bool:
        if self._qr_issued_at is None:
            return True
        return self._clock() - self._qr_issued_at >= self._config.qr_validity_seconds

    def _clear_qr(self) -> None:
        self._qr = None
        self._qr_issued_at = None

    def _cancel_qr_timer(self) -> None:
        if self._qr_timer is not None and not self._qr_timer.done():
            self._qr_timer.cancel()
        self._qr_timer = None

    async def _discard_client(self, logout: bool = False) -> None:
        client, self._client = self._client, None
        if client is None:
            return
        try:
            if logout:
                await client.logout()
            await client.destroy()
        except Exception as e:
            logger.warning("session_client_teardown_failed", error=str(e))
