"""Message processor - orchestrates one inbound message into one reply.

Steps, in order:
1. Persist the inbound message to the ledger (rejects duplicate ids)
2. Append it to the thread store and record the contact interaction
3. Resolve the persona (or take caller-supplied persona text)
4. Build the prompt and invoke the AI collaborator
5. Persist the outbound reply
6. Append the reply to the thread store

Completed steps are never rolled back: an inbound message stays recorded
even if the AI call fails. At most one invocation runs per normalized
address; a second one is rejected rather than queued.
"""

import asyncio
import time
from datetime import UTC, datetime

from parley.addressing import normalize_address, thread_id_for
from parley.config.models.pipeline import PipelineConfig
from parley.contacts.models import Contact
from parley.contacts.store import ContactDirectory
from parley.conversation.models import (
    ConversationThread,
    MessageRole,
    generate_message_id,
)
from parley.conversation.store import ThreadStore
from parley.errors import (
    AICollaboratorError,
    AlreadyProcessingError,
    MissingRequiredFieldError,
    NotReadyError,
    ParleyError,
    PersistenceError,
)
from parley.ledger.models import Direction, StoredMessage
from parley.ledger.store import MessageLedger
from parley.observability.logging import get_logger
from parley.observability.metrics import (
    ERRORS,
    MESSAGES_PROCESSED,
    PIPELINE_STEP_LATENCY,
)
from parley.persona.resolver import ContextResolver
from parley.pipeline.models import (
    ContactSummary,
    PipelineStep,
    PipelineStepTiming,
    ProcessedExchange,
    ProcessingOptions,
    ProcessingStats,
    ThreadInfo,
)
from parley.pipeline.prompt_builder import PromptBuilder
from parley.profiles.store import ContextProfileStore
from parley.providers.llm.base import AICollaborator, Completion, ProviderError

logger = get_logger(__name__)

CUSTOM_CONTEXT = "custom"


class _StepRecorder:
    """Collects per-step timings for one invocation."""

    def __init__(self) -> None:
        self.timings: list[PipelineStepTiming] = []
        self._step_start = datetime.now(UTC)
        self._perf_start = time.perf_counter()

    def mark(self, step: PipelineStep) -> None:
        ended_at = datetime.now(UTC)
        now = time.perf_counter()
        elapsed = now - self._perf_start
        self.timings.append(
            PipelineStepTiming(
                step=step,
                started_at=self._step_start,
                ended_at=ended_at,
                duration_ms=elapsed * 1000,
            )
        )
        PIPELINE_STEP_LATENCY.labels(step=step.value).observe(elapsed)
        self._step_start = ended_at
        self._perf_start = now


class MessageProcessor:
    """Sole orchestrator turning inbound messages into replies.

    Collaborators are passed in and held by reference; the processor owns only
    its readiness flag and the in-flight address set.
    """

    def __init__(
        self,
        thread_store: ThreadStore,
        resolver: ContextResolver,
        ledger: MessageLedger,
        contact_directory: ContactDirectory,
        profile_store: ContextProfileStore,
        executor: AICollaborator,
        config: PipelineConfig | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        """Initialize the processor.

        Args:
            thread_store: In-memory conversation threads
            resolver: Persona resolver
            ledger: Durable message log
            contact_directory: Contact lookups and interaction counters
            profile_store: Context profiles (default seeded on initialize)
            executor: AI collaborator
            config: Pipeline configuration
            prompt_builder: Prompt assembly (default template if omitted)
        """
        self._threads = thread_store
        self._resolver = resolver
        self._ledger = ledger
        self._contacts = contact_directory
        self._profiles = profile_store
        self._executor = executor
        self._config = config or PipelineConfig()
        self._prompt_builder = prompt_builder or PromptBuilder()

        self._ready = False
        self._in_flight: set[str] = set()
        self._guard_lock = asyncio.Lock()

    @property
    def is_ready(self) -> bool:
        """Whether the startup liveness probe has passed."""
        return self._ready

    async def initialize(self) -> bool:
        """Probe the AI collaborator and seed the default profile.

        Returns:
            True if the pipeline is ready to accept messages
        """
        try:
            alive = await self._executor.ping()
        except ProviderError as e:
            logger.error("processor_ping_failed", error=str(e))
            alive = False

        if not alive:
            logger.error("processor_initialize_failed", reason="ai_unavailable")
            self._ready = False
            return False

        await self._profiles.ensure_default()
        self._ready = True
        logger.info("processor_initialized")
        return True

    async def process(
        self,
        content: str,
        address: str,
        display_name: str | None = None,
        options: ProcessingOptions | None = None,
        message_id: str | None = None,
    ) -> ProcessedExchange:
        """Process an inbound message using the resolved persona.

        Args:
            content: Message body
            address: Counterparty address
            display_name: Counterparty display name, if known
            options: Per-call options
            message_id: Caller-supplied id; generated if omitted

        Raises:
            NotReadyError: Pipeline not initialized
            MissingRequiredFieldError: Blank content or address
            DuplicateMessageError: message_id already recorded
            AlreadyProcessingError: Same address already in flight
            AICollaboratorError: AI call failed or timed out
            PersistenceError: Ledger write failed or timed out
        """
        return await self._run(
            content, address, display_name, options, message_id, persona_text=None
        )

    async def process_with_override(
        self,
        content: str,
        address: str,
        persona_text: str,
        display_name: str | None = None,
        options: ProcessingOptions | None = None,
        message_id: str | None = None,
    ) -> ProcessedExchange:
        """Process an inbound message with caller-supplied persona text.

        Context resolution is skipped and ``context_used`` is ``"custom"``.
        Raises the same errors as process().
        """
        if not persona_text or not persona_text.strip():
            raise MissingRequiredFieldError("persona_text", address=address)
        return await self._run(
            content, address, display_name, options, message_id, persona_text=persona_text
        )

    async def _run(
        self,
        content: str,
        address: str,
        display_name: str | None,
        options: ProcessingOptions | None,
        message_id: str | None,
        persona_text: str | None,
    ) -> ProcessedExchange:
        mode = "override" if persona_text is not None else "resolved"

        try:
            if not self._ready:
                raise NotReadyError("Message processor not initialized", address=address)
            if not address or not address.strip():
                raise MissingRequiredFieldError("address")
            if not content or not content.strip():
                raise MissingRequiredFieldError("content", address=address)

            key = normalize_address(address)
            await self._acquire(key)
        except ParleyError as e:
            self._count_failure(mode, e)
            raise

        try:
            exchange = await self._execute(
                content=content,
                key=key,
                display_name=display_name,
                options=options or ProcessingOptions(),
                message_id=message_id,
                persona_text=persona_text,
            )
        except ParleyError as e:
            self._count_failure(mode, e)
            logger.error(
                "message_processing_failed",
                address=key,
                error_code=e.error_code.value,
                error=e.message,
            )
            raise
        finally:
            await self._release(key)

        MESSAGES_PROCESSED.labels(mode=mode, outcome="success").inc()
        logger.info(
            "message_processed",
            address=key,
            thread_id=exchange.thread_id,
            context_used=exchange.context_used,
            processing_time_ms=round(exchange.processing_time_ms, 2),
        )
        return exchange

    async def _execute(
        self,
        content: str,
        key: str,
        display_name: str | None,
        options: ProcessingOptions,
        message_id: str | None,
        persona_text: str | None,
    ) -> ProcessedExchange:
        start_time = time.perf_counter()
        steps = _StepRecorder()
        steps.mark(PipelineStep.RECEIVED)

        thread_id = thread_id_for(key)
        inbound_id = message_id or generate_message_id("msg")
        max_length = options.max_response_length or self._config.max_response_length

        # Inbound persistence
        known_contact = await self._find_contact(key)
        await self._persist(
            StoredMessage(
                message_id=inbound_id,
                address=key,
                contact_id=known_contact.id if known_contact else None,
                direction=Direction.INBOUND,
                content=content,
                thread_id=thread_id,
            )
        )
        steps.mark(PipelineStep.PERSISTED_INBOUND)

        # Thread memory and interaction counters
        thread = await self._threads.get_or_create(key, display_name)
        await self._threads.append(key, content, MessageRole.COUNTERPARTY)
        await self._record_interaction(key)
        steps.mark(PipelineStep.THREADED_INBOUND)

        # Persona
        contact: Contact | None = None
        if persona_text is not None:
            persona = persona_text
            context_used = CUSTOM_CONTEXT
        else:
            resolved = await self._resolver.resolve(
                key,
                profile_id=options.profile_id,
                use_contact_context=options.use_contact_context,
            )
            persona = resolved.text
            context_used = resolved.context_used
            contact = resolved.contact
        steps.mark(PipelineStep.CONTEXT_RESOLVED)

        # AI
        history = await self._threads.formatted_history(key, self._config.history_window)
        prompt = self._prompt_builder.build(persona, history, content, max_length)
        completion = await self._complete(prompt, max_length, key)
        steps.mark(PipelineStep.AI_INVOKED)

        # Outbound persistence
        outbound_id = generate_message_id("ai")
        outbound_contact = contact or known_contact
        await self._persist(
            StoredMessage(
                message_id=outbound_id,
                address=key,
                contact_id=outbound_contact.id if outbound_contact else None,
                direction=Direction.OUTBOUND,
                content=completion.text,
                processed_by_ai=True,
                ai_response=completion.text,
                ai_processing_time_ms=(time.perf_counter() - start_time) * 1000,
                ai_confidence=completion.confidence,
                context_used=context_used,
                thread_id=thread_id,
            )
        )
        steps.mark(PipelineStep.PERSISTED_OUTBOUND)

        await self._threads.append(key, completion.text, MessageRole.ASSISTANT)
        steps.mark(PipelineStep.THREADED_OUTBOUND)
        steps.mark(PipelineStep.COMPLETE)

        return ProcessedExchange(
            original_message=content,
            address=key,
            display_name=display_name or thread.display_name,
            ai_response=completion.text,
            confidence=completion.confidence,
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
            context_used=context_used,
            thread_id=thread.thread_id,
            contact=ContactSummary.from_contact(contact) if contact else None,
            inbound_message_id=inbound_id,
            outbound_message_id=outbound_id,
            step_timings=steps.timings,
        )

    # ========================================================================
    # In-flight guard
    # ========================================================================

    async def _acquire(self, key: str) -> None:
        async with self._guard_lock:
            if key in self._in_flight:
                raise AlreadyProcessingError(
                    "Message already being processed for this address", address=key
                )
            self._in_flight.add(key)

    async def _release(self, key: str) -> None:
        async with self._guard_lock:
            self._in_flight.discard(key)

    # ========================================================================
    # Collaborator calls
    # ========================================================================

    async def _persist(self, message: StoredMessage) -> None:
        timeout = self._config.persistence_timeout_seconds
        try:
            async with asyncio.timeout(timeout):
                await self._ledger.append(message)
        except ParleyError:
            raise
        except TimeoutError as e:
            raise PersistenceError(
                f"Ledger write timed out after {timeout}s", address=message.address
            ) from e
        except Exception as e:
            raise PersistenceError(
                f"Ledger write failed: {e}", address=message.address
            ) from e

    async def _complete(self, prompt: str, max_length: int, key: str) -> Completion:
        timeout = self._config.ai_timeout_seconds
        try:
            async with asyncio.timeout(timeout):
                completion = await self._executor.complete(prompt, max_length)
        except TimeoutError as e:
            raise AICollaboratorError(
                f"AI completion timed out after {timeout}s", address=key
            ) from e
        except Exception as e:
            raise AICollaboratorError(f"AI completion failed: {e}", address=key) from e

        if not completion.text.strip():
            raise AICollaboratorError("AI completion returned no text", address=key)
        return completion

    async def _find_contact(self, key: str) -> Contact | None:
        try:
            return await self._contacts.find_by_address(key)
        except Exception as e:
            logger.warning("contact_lookup_failed", address=key, error=str(e))
            return None

    async def _record_interaction(self, key: str) -> None:
        try:
            await self._contacts.record_interaction(key)
        except Exception as e:
            logger.warning("contact_interaction_update_failed", address=key, error=str(e))

    def _count_failure(self, mode: str, error: ParleyError) -> None:
        MESSAGES_PROCESSED.labels(mode=mode, outcome=error.error_code.value).inc()
        ERRORS.labels(error_type=error.error_code.value).inc()

    # ========================================================================
    # Auxiliary reads
    # ========================================================================

    async def processing_stats(self) -> ProcessingStats:
        """Aggregate statistics across threads, profiles and the ledger."""
        active = await self._threads.active_since(24)
        threads = await self._threads.list_threads()
        return ProcessingStats(
            is_ready=self._ready,
            model=getattr(self._executor, "model", None),
            active_threads=len(active),
            total_threads=len(threads),
            in_flight=len(self._in_flight),
            profiles=await self._profiles.stats(),
            messages=await self._ledger.aggregate_stats(),
        )

    async def thread_info(self, address: str) -> ThreadInfo:
        """Thread statistics plus ledger conversation statistics for an address."""
        key = normalize_address(address)
        stats = await self._threads.stats(key)
        conversation_stats = await self._ledger.conversation_stats(key)

        if stats is None:
            return ThreadInfo(
                thread_id=thread_id_for(key),
                conversation_stats=conversation_stats,
            )
        return ThreadInfo(
            thread_id=thread_id_for(key),
            message_count=stats.message_count,
            last_interaction_at=stats.last_interaction_at,
            topics=stats.topics,
            sentiment=stats.sentiment,
            thread_age_days=stats.thread_age_days,
            conversation_stats=conversation_stats,
        )

    async def conversation_history(
        self, address: str, limit: int = 50, offset: int = 0
    ) -> list[StoredMessage]:
        """Ledger history for an address, newest first."""
        return await self._ledger.query(address, limit=limit, offset=offset)

    async def search_conversations(
        self, query: str, limit: int = 50
    ) -> list[StoredMessage]:
        """Full-text search over message content and AI responses."""
        return await self._ledger.search(query, limit=limit)

    async def active_threads(self, hours: int = 24) -> list[ConversationThread]:
        """Threads with an interaction in the last ``hours``."""
        return await self._threads.active_since(hours)

    async def clear_conversation(self, address: str) -> bool:
        """Clear the in-memory thread for an address (the ledger is kept)."""
        cleared = await self._threads.clear(address)
        if cleared:
            logger.info("conversation_cleared", address=normalize_address(address))
        return cleared
