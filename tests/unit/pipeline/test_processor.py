"""Tests for MessageProcessor."""

import asyncio
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from parley.errors import (
    AICollaboratorError,
    AlreadyProcessingError,
    DuplicateMessageError,
    MissingRequiredFieldError,
    NotReadyError,
    PersistenceError,
)
from parley.ledger.models import Direction
from parley.pipeline.models import PipelineStep, ProcessingOptions
from parley.pipeline.processor import CUSTOM_CONTEXT, MessageProcessor
from parley.profiles.defaults import DEFAULT_PROFILE_ID
from parley.providers.llm import MockAICollaborator, ProviderError
from tests.factories import ContactFactory

ADDRESS = "919876543210@c.us"


@pytest_asyncio.fixture
async def ready(processor) -> MessageProcessor:
    """Initialized processor."""
    assert await processor.initialize() is True
    return processor


def build_processor(
    thread_store, resolver, ledger, contact_directory, profile_store, executor
) -> MessageProcessor:
    return MessageProcessor(
        thread_store=thread_store,
        resolver=resolver,
        ledger=ledger,
        contact_directory=contact_directory,
        profile_store=profile_store,
        executor=executor,
    )


class TestInitialize:
    """Tests for startup."""

    @pytest.mark.asyncio
    async def test_initialize_seeds_default_profile(self, processor, profile_store):
        """Should become ready and seed the default profile."""
        assert processor.is_ready is False
        assert await processor.initialize() is True

        assert processor.is_ready is True
        assert await profile_store.find_default() is not None

    @pytest.mark.asyncio
    async def test_failed_ping_keeps_not_ready(
        self, thread_store, resolver, ledger, contact_directory, profile_store
    ):
        """Should stay not ready when the AI probe fails."""
        processor = build_processor(
            thread_store, resolver, ledger, contact_directory, profile_store,
            MockAICollaborator(ping_result=False),
        )

        assert await processor.initialize() is False
        with pytest.raises(NotReadyError):
            await processor.process("Hello", ADDRESS)


class TestProcess:
    """Tests for the happy path."""

    @pytest.mark.asyncio
    async def test_unknown_address_uses_default_profile(self, ready, ledger, profile_store):
        """Should answer with the default profile and record both messages."""
        exchange = await ready.process("Hello", ADDRESS, display_name="Alex")

        assert exchange.ai_response == "Hi there!"
        assert exchange.context_used == DEFAULT_PROFILE_ID
        assert exchange.address == "919876543210"
        assert exchange.thread_id == "thread_919876543210"
        assert exchange.contact is None
        assert exchange.step_timings[-1].step == PipelineStep.COMPLETE

        stats = await ledger.aggregate_stats()
        assert (stats.inbound, stats.outbound) == (1, 1)
        assert (await profile_store.find_by_id(DEFAULT_PROFILE_ID)).usage_count == 1

    @pytest.mark.asyncio
    async def test_known_friend(self, ready, contact_directory, collaborator, ledger):
        """Should use the friend persona and attribute the reply to the contact."""
        await contact_directory.add(ContactFactory.create())

        exchange = await ready.process("Movie tonight?", ADDRESS)

        assert exchange.context_used == "contact_friend"
        assert exchange.contact is not None
        assert "friendly" in collaborator.call_history[0]["prompt"]

        outbound = await ledger.get(exchange.outbound_message_id)
        assert outbound.direction == Direction.OUTBOUND
        assert outbound.processed_by_ai is True
        assert outbound.context_used == "contact_friend"
        assert outbound.contact_id == "contact_919876543210"

        contact = await contact_directory.find_by_address(ADDRESS)
        assert contact.message_count == 1

    @pytest.mark.asyncio
    async def test_thread_history_in_prompt(self, ready, collaborator, thread_store):
        """Should include earlier turns in later prompts."""
        await ready.process("First message", ADDRESS)
        await ready.process("Second message", ADDRESS)

        prompt = collaborator.call_history[1]["prompt"]
        assert "User: First message\nAssistant: Hi there!" in prompt
        assert len(await thread_store.history(ADDRESS)) == 4

    @pytest.mark.asyncio
    async def test_max_response_length_option(self, ready, collaborator):
        """Should pass the per-call length ceiling to the collaborator."""
        exchange = await ready.process(
            "Hello", ADDRESS, options=ProcessingOptions(max_response_length=5)
        )

        assert collaborator.call_history[0]["max_length"] == 5
        assert "under 5 characters" in collaborator.call_history[0]["prompt"]
        assert exchange.ai_response == "Hi th"

    @pytest.mark.asyncio
    async def test_override_persona(self, ready, collaborator, ledger):
        """Should use caller-supplied persona text and report 'custom'."""
        exchange = await ready.process_with_override(
            "Hello", ADDRESS, persona_text="You are a pirate."
        )

        assert exchange.context_used == CUSTOM_CONTEXT
        assert "You are a pirate." in collaborator.call_history[0]["prompt"]
        outbound = await ledger.get(exchange.outbound_message_id)
        assert outbound.context_used == CUSTOM_CONTEXT


class TestValidation:
    """Tests for rejected inputs."""

    @pytest.mark.asyncio
    async def test_blank_content(self, ready):
        """Should reject whitespace-only content."""
        with pytest.raises(MissingRequiredFieldError):
            await ready.process("   ", ADDRESS)

    @pytest.mark.asyncio
    async def test_blank_address(self, ready):
        """Should reject an empty address."""
        with pytest.raises(MissingRequiredFieldError):
            await ready.process("Hello", "")

    @pytest.mark.asyncio
    async def test_blank_override(self, ready):
        """Should reject empty persona text."""
        with pytest.raises(MissingRequiredFieldError):
            await ready.process_with_override("Hello", ADDRESS, persona_text=" ")

    @pytest.mark.asyncio
    async def test_duplicate_message_id(self, ready, ledger):
        """Should reject a redelivered message id and record it once."""
        await ready.process("Hello", ADDRESS, message_id="wamid-1")

        with pytest.raises(DuplicateMessageError):
            await ready.process("Hello", ADDRESS, message_id="wamid-1")

        assert (await ledger.aggregate_stats()).inbound == 1


class TestConcurrency:
    """Tests for the per-address in-flight guard."""

    @pytest.mark.asyncio
    async def test_same_address_rejected(
        self, thread_store, resolver, ledger, contact_directory, profile_store
    ):
        """Should let one invocation through and reject the concurrent one."""
        processor = build_processor(
            thread_store, resolver, ledger, contact_directory, profile_store,
            MockAICollaborator(default_response="Hi", delay=0.05),
        )
        await processor.initialize()

        results = await asyncio.gather(
            processor.process("one", ADDRESS),
            processor.process("two", "919876543210"),
            return_exceptions=True,
        )

        errors = [r for r in results if isinstance(r, Exception)]
        assert len(errors) == 1
        assert isinstance(errors[0], AlreadyProcessingError)
        assert (await ledger.aggregate_stats()).inbound == 1

    @pytest.mark.asyncio
    async def test_plus_prefixed_and_suffixed_forms_share_guard(
        self, thread_store, resolver, ledger, contact_directory, profile_store
    ):
        """Should treat '+'-prefixed and suffixed spellings as one conversation."""
        processor = build_processor(
            thread_store, resolver, ledger, contact_directory, profile_store,
            MockAICollaborator(default_response="Hi", delay=0.05),
        )
        await processor.initialize()

        results = await asyncio.gather(
            processor.process("one", "+15550001"),
            processor.process("two", "15550001@c.us"),
            return_exceptions=True,
        )

        errors = [r for r in results if isinstance(r, Exception)]
        assert len(errors) == 1
        assert isinstance(errors[0], AlreadyProcessingError)
        assert len(await thread_store.list_threads()) == 1

    @pytest.mark.asyncio
    async def test_different_addresses_run_together(
        self, thread_store, resolver, ledger, contact_directory, profile_store
    ):
        """Should process different addresses concurrently."""
        processor = build_processor(
            thread_store, resolver, ledger, contact_directory, profile_store,
            MockAICollaborator(default_response="Hi", delay=0.05),
        )
        await processor.initialize()

        results = await asyncio.gather(
            processor.process("one", "911111111111"),
            processor.process("two", "922222222222"),
        )

        assert [r.ai_response for r in results] == ["Hi", "Hi"]

    @pytest.mark.asyncio
    async def test_guard_released_after_failure(self, ready, collaborator):
        """Should accept the address again after a failed run."""
        collaborator.fail_with(ProviderError("down"))
        with pytest.raises(AICollaboratorError):
            await ready.process("Hello", ADDRESS)

        collaborator.fail_with(None)
        exchange = await ready.process("Hello again", ADDRESS)
        assert exchange.ai_response == "Hi there!"


class TestFailures:
    """Tests for collaborator failures."""

    @pytest.mark.asyncio
    async def test_ai_failure_keeps_inbound(self, ready, collaborator, ledger, thread_store):
        """Should leave the inbound message recorded when the AI fails."""
        collaborator.fail_with(ProviderError("down"))

        with pytest.raises(AICollaboratorError):
            await ready.process("Hello", ADDRESS)

        stats = await ledger.aggregate_stats()
        assert (stats.inbound, stats.outbound) == (1, 0)
        assert len(await thread_store.history(ADDRESS)) == 1

    @pytest.mark.asyncio
    async def test_ledger_failure(
        self, thread_store, resolver, contact_directory, profile_store, collaborator
    ):
        """Should wrap ledger failures as PersistenceError."""
        ledger = AsyncMock()
        ledger.append.side_effect = RuntimeError("disk full")
        processor = build_processor(
            thread_store, resolver, ledger, contact_directory, profile_store, collaborator
        )
        await processor.initialize()

        with pytest.raises(PersistenceError):
            await processor.process("Hello", ADDRESS)
        assert collaborator.call_history == []

    @pytest.mark.asyncio
    async def test_contact_directory_failure_tolerated(
        self, thread_store, ledger, profile_store, collaborator
    ):
        """Should still answer when the contact directory is down."""
        from parley.persona.resolver import ContextResolver

        contacts = AsyncMock()
        contacts.find_by_address.side_effect = RuntimeError("down")
        contacts.record_interaction.side_effect = RuntimeError("down")
        processor = build_processor(
            thread_store, ContextResolver(contacts, profile_store), ledger,
            contacts, profile_store, collaborator,
        )
        await processor.initialize()

        exchange = await processor.process("Hello", ADDRESS)
        assert exchange.context_used == DEFAULT_PROFILE_ID


class TestAuxiliaryReads:
    """Tests for stats and history helpers."""

    @pytest.mark.asyncio
    async def test_thread_info(self, ready):
        """Should combine thread and ledger statistics."""
        await ready.process("Pizza tonight?", ADDRESS)

        info = await ready.thread_info(ADDRESS)
        assert info.message_count == 2
        assert "pizza" in info.topics
        assert info.conversation_stats.total == 2

    @pytest.mark.asyncio
    async def test_thread_info_unknown(self, ready):
        """Should report an empty thread for an unseen address."""
        info = await ready.thread_info("900000000000")
        assert info.message_count == 0
        assert info.thread_id == "thread_900000000000"

    @pytest.mark.asyncio
    async def test_processing_stats(self, ready):
        """Should aggregate across stores."""
        await ready.process("Hello", ADDRESS)

        stats = await ready.processing_stats()
        assert stats.is_ready is True
        assert stats.total_threads == 1
        assert stats.in_flight == 0
        assert stats.messages.total == 2

    @pytest.mark.asyncio
    async def test_history_search_and_clear(self, ready, thread_store):
        """Should read the ledger and clear only the thread."""
        await ready.process("Beach on Sunday?", ADDRESS)

        assert len(await ready.conversation_history(ADDRESS)) == 2
        assert len(await ready.search_conversations("beach")) == 1
        assert len(await ready.active_threads()) == 1

        assert await ready.clear_conversation(ADDRESS) is True
        assert await thread_store.history(ADDRESS) == []
        assert len(await ready.conversation_history(ADDRESS)) == 2
