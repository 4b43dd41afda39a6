"""Inbound dispatcher - the single consumer of transport events.

Lifecycle events are applied to the session state machine. Inbound messages
go through the readiness gate and then the message processor, one event at a
time, so per-event ordering is preserved.
"""

import asyncio

from parley.addressing import format_transport_address
from parley.config.models.pipeline import DEFAULT_FALLBACK_NOTICE
from parley.errors import DuplicateMessageError
from parley.observability.logging import get_logger
from parley.observability.metrics import FALLBACK_NOTICES
from parley.pipeline.models import ProcessedExchange
from parley.pipeline.processor import MessageProcessor
from parley.session.machine import SessionStateMachine
from parley.session.models import EventKind, TransportEvent

logger = get_logger(__name__)


class InboundDispatcher:
    """Consumes an asyncio queue of TransportEvents."""

    def __init__(
        self,
        session: SessionStateMachine,
        processor: MessageProcessor,
        queue: asyncio.Queue[TransportEvent],
        fallback_notice: str = DEFAULT_FALLBACK_NOTICE,
        default_country_code: str = "91",
    ) -> None:
        """Initialize the dispatcher.

        Args:
            session: Session state machine (readiness gate and current client)
            processor: Message processor
            queue: Events pushed by the transport client
            fallback_notice: Sent when processing an inbound message fails
            default_country_code: Applied when formatting reply addresses
        """
        self._session = session
        self._processor = processor
        self._queue = queue
        self._fallback_notice = fallback_notice
        self._country_code = default_country_code
        self._running = False
        self._loop_task: asyncio.Task | None = None

    async def start(self) -> None:
        """Start the consumer loop in the background."""
        if self._running:
            logger.warning("dispatcher_already_running")
            return

        self._running = True
        self._loop_task = asyncio.create_task(self._run_loop())
        logger.info("dispatcher_started")

    async def stop(self) -> None:
        """Stop the consumer loop."""
        if not self._running:
            return

        self._running = False
        if self._loop_task:
            self._loop_task.cancel()
            try:
                await self._loop_task
            except asyncio.CancelledError:
                pass
        self._loop_task = None
        logger.info("dispatcher_stopped")

    async def _run_loop(self) -> None:
        while self._running:
            event = await self._queue.get()
            try:
                await self.dispatch(event)
            except Exception as e:
                logger.error(
                    "dispatcher_event_failed",
                    kind=event.kind.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )
            finally:
                self._queue.task_done()

    async def dispatch(self, event: TransportEvent) -> ProcessedExchange | None:
        """Handle one event.

        Returns:
            The processed exchange for an answered inbound message, else None
        """
        if event.kind != EventKind.MESSAGE:
            await self._session.handle_event(event)
            return None

        if event.from_self:
            logger.debug("inbound_skipped_from_self")
            return None
        if not event.address or not event.body or not event.body.strip():
            logger.debug("inbound_skipped_empty", address=event.address)
            return None
        if not self._session.is_ready:
            logger.warning(
                "inbound_dropped_session_not_ready",
                address=event.address,
                state=self._session.state.value,
            )
            return None
        if not self._processor.is_ready:
            logger.warning("inbound_dropped_processor_not_ready", address=event.address)
            return None

        try:
            exchange = await self._processor.process(
                event.body,
                event.address,
                display_name=event.display_name,
                message_id=event.message_id,
            )
        except DuplicateMessageError:
            logger.info("inbound_redelivery_ignored", message_id=event.message_id)
            return None
        except Exception as e:
            logger.error(
                "inbound_processing_failed",
                address=event.address,
                error=str(e),
                error_type=type(e).__name__,
            )
            delivered = await self._send(event.address, self._fallback_notice)
            FALLBACK_NOTICES.labels(delivered=str(delivered).lower()).inc()
            return None

        await self._send(event.address, exchange.ai_response)
        return exchange

    async def _send(self, address: str, text: str) -> bool:
        client = self._session.client
        if client is None:
            logger.warning("outbound_dropped_no_client", address=address)
            return False

        target = format_transport_address(address, self._country_code)
        try:
            sent = await client.send(target, text)
        except Exception as e:
            logger.error("outbound_send_failed", address=address, error=str(e))
            return False

        if not sent:
            logger.warning("outbound_send_refused", address=address)
        return bool(sent)
