"""Bootstrap module for wiring the Parley engine from settings.

Builds the process-scoped object graph once and hands collaborators to each
other by reference:
- In-memory stores (threads, contacts, profiles, ledger)
- The AI collaborator (LLMExecutor from provider config)
- Context resolver and message processor
- Session state machine and inbound dispatcher sharing one event queue

Example usage:

    from parley.bootstrap import bootstrap

    engine = bootstrap(client_factory=my_transport_factory)
    await engine.start()
    ...
    await engine.stop()
"""

import asyncio
from dataclasses import dataclass, field

from prometheus_client import start_http_server

from parley.config import Settings, get_settings
from parley.contacts.stores import InMemoryContactDirectory
from parley.conversation.stores import InMemoryThreadStore
from parley.ledger.stores import InMemoryMessageLedger
from parley.observability.logging import get_logger, setup_logging
from parley.persona.resolver import ContextResolver
from parley.pipeline.processor import MessageProcessor
from parley.profiles.stores import InMemoryContextProfileStore
from parley.providers.llm import AICollaborator, create_executor_from_config
from parley.session.dispatcher import InboundDispatcher
from parley.session.machine import SessionStateMachine
from parley.session.models import TransportEvent
from parley.session.transport import ClientFactory

logger = get_logger(__name__)


@dataclass
class Engine:
    """The wired object graph plus start/stop helpers."""

    settings: Settings
    thread_store: InMemoryThreadStore
    contact_directory: InMemoryContactDirectory
    profile_store: InMemoryContextProfileStore
    ledger: InMemoryMessageLedger
    executor: AICollaborator
    resolver: ContextResolver
    processor: MessageProcessor
    session: SessionStateMachine
    dispatcher: InboundDispatcher
    events: asyncio.Queue[TransportEvent] = field(default_factory=asyncio.Queue)

    async def start(self) -> bool:
        """Initialize the processor, start the session and the dispatcher.

        Returns:
            Whether the AI pipeline passed its liveness probe
        """
        metrics = self.settings.observability.metrics
        if metrics.enabled:
            start_http_server(metrics.port)
            logger.info("metrics_server_started", port=metrics.port)

        ai_ready = await self.processor.initialize()
        if not ai_ready:
            logger.warning("engine_started_without_ai")

        await self.dispatcher.start()
        await self.session.start()
        logger.info("engine_started", session_state=self.session.status().state.value)
        return ai_ready

    async def stop(self) -> None:
        """Stop the dispatcher and tear the session down."""
        await self.dispatcher.stop()
        await self.session.stop()
        logger.info("engine_stopped")


def bootstrap(
    settings: Settings | None = None,
    client_factory: ClientFactory | None = None,
    executor: AICollaborator | None = None,
    configure_logging: bool = True,
) -> Engine:
    """Build a fully wired Engine.

    Args:
        settings: Settings to use (default: get_settings())
        client_factory: Builds transport clients; without one the session
            stays disabled whatever the config says
        executor: AI collaborator override (default: LLMExecutor from config)
        configure_logging: Whether to call setup_logging from settings

    Returns:
        Engine with nothing started yet
    """
    settings = settings or get_settings()

    if configure_logging:
        log_config = settings.observability.logging
        setup_logging(
            level=log_config.level,
            format=log_config.format,
            redact_pii=log_config.redact_pii,
        )

    thread_store = InMemoryThreadStore(settings.threads)
    profile_store = InMemoryContextProfileStore()
    contact_directory = InMemoryContactDirectory(profile_store=profile_store)
    ledger = InMemoryMessageLedger()
    executor = executor or create_executor_from_config(settings.providers.llm)

    resolver = ContextResolver(
        contact_directory,
        profile_store,
        default_profile_id=settings.pipeline.default_profile_id,
    )
    processor = MessageProcessor(
        thread_store=thread_store,
        resolver=resolver,
        ledger=ledger,
        contact_directory=contact_directory,
        profile_store=profile_store,
        executor=executor,
        config=settings.pipeline,
    )

    session_config = settings.session
    if client_factory is None:
        if session_config.enabled:
            logger.warning("session_enabled_without_transport_client")
        session_config = session_config.model_copy(update={"enabled": False})
        client_factory = _missing_transport

    session = SessionStateMachine(
        client_factory,
        session_config,
        ai_ready=lambda: processor.is_ready,
    )

    events: asyncio.Queue[TransportEvent] = asyncio.Queue()
    dispatcher = InboundDispatcher(
        session,
        processor,
        events,
        fallback_notice=settings.pipeline.fallback_notice,
        default_country_code=session_config.default_country_code,
    )

    logger.info(
        "engine_bootstrapped",
        model=settings.providers.llm.model,
        session_enabled=session_config.enabled,
    )

    return Engine(
        settings=settings,
        thread_store=thread_store,
        contact_directory=contact_directory,
        profile_store=profile_store,
        ledger=ledger,
        executor=executor,
        resolver=resolver,
        processor=processor,
        session=session,
        dispatcher=dispatcher,
        events=events,
    )


def _missing_transport():
    raise RuntimeError("No transport client factory configured")
