"""Tests for engine bootstrap."""

from pathlib import Path

import pytest

from parley.bootstrap import bootstrap
from parley.config.models import SessionConfig
from parley.config.settings import Settings
from parley.providers.llm import LLMExecutor, MockAICollaborator
from parley.session.models import EventKind, SessionState, TransportEvent
from tests.factories import FakeClientFactory


@pytest.fixture(autouse=True)
def isolated_config(test_config_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the TOML source at an empty config directory."""
    monkeypatch.setenv("PARLEY_CONFIG_DIR", str(test_config_dir))
    monkeypatch.setenv("PARLEY_ENV", "test")


@pytest.fixture
def settings() -> Settings:
    return Settings(session=SessionConfig(enabled=True))


class TestBootstrap:
    """Tests for bootstrap wiring."""

    def test_builds_executor_from_config(self, mock_toml_files) -> None:
        """Should build an LLMExecutor from provider settings."""
        mock_toml_files({"default.toml": '[providers.llm]\nmodel = "mock/dev"'})
        engine = bootstrap(Settings(), configure_logging=False)

        assert isinstance(engine.executor, LLMExecutor)
        assert engine.executor.model == "mock/dev"

    @pytest.mark.asyncio
    async def test_without_transport_session_disabled(self, settings) -> None:
        """Should keep the session disabled when no client factory is given."""
        engine = bootstrap(settings, executor=MockAICollaborator(), configure_logging=False)

        assert await engine.start() is True
        assert engine.session.state == SessionState.DISABLED
        await engine.stop()

    @pytest.mark.asyncio
    async def test_end_to_end_reply(self, settings) -> None:
        """Should answer an inbound message through the queue."""
        factory = FakeClientFactory()
        engine = bootstrap(
            settings,
            client_factory=factory,
            executor=MockAICollaborator(default_response="On my way"),
            configure_logging=False,
        )

        await engine.start()
        await engine.events.put(TransportEvent(kind=EventKind.AUTHENTICATED))
        await engine.events.put(TransportEvent(kind=EventKind.READY))
        await engine.events.put(
            TransportEvent(
                kind=EventKind.MESSAGE,
                address="919876543210@c.us",
                body="Where are you?",
                message_id="wamid-1",
            )
        )
        await engine.events.join()

        assert engine.session.status().ai_ready is True
        factory.clients[0].send.assert_awaited_once_with("919876543210@c.us", "On my way")
        assert (await engine.ledger.aggregate_stats()).total == 2
        await engine.stop()
