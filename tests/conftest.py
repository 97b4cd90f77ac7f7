"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - agent_config: Valid AgentConfig with a fake API key
    - store: Empty ConversationStore
    - fake_transport: Scripted stand-in for CompletionTransport
    - response_client: ResponseClient wired to the store and fake transport
    - app / async_client: FastAPI app and HTTPX client for API testing
    - mock_session_id: Consistent session ID for tests
"""

from collections.abc import AsyncGenerator, AsyncIterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from chat_assistant.agent.chat_agent import ResponseClient
from chat_assistant.agent.config import AgentConfig
from chat_assistant.agent.transport import CompletionError
from chat_assistant.api.app import create_app
from chat_assistant.memory.store import ConversationStore

SYSTEM_PROMPT = "You are a test assistant."


class FakeTransport:
    """Scripted transport recording every request it receives.

    ``fragments`` are streamed first; ``error`` is raised afterwards (or
    immediately from ``complete``) when set.
    """

    def __init__(self) -> None:
        self.reply = "Hello there"
        self.fragments: list[str] = ["Hel", "lo"]
        self.error: CompletionError | None = None
        self.requests: list[list[dict[str, str]]] = []

    async def complete(self, messages: list[dict[str, str]]) -> str:
        self.requests.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply

    async def stream(self, messages: list[dict[str, str]]) -> AsyncIterator[str]:
        self.requests.append(messages)
        for fragment in self.fragments:
            yield fragment
        if self.error is not None:
            raise self.error


@pytest.fixture
def agent_config() -> AgentConfig:
    """Return a valid configuration that never touches the environment's key."""
    return AgentConfig(
        api_key="sk-test-key",
        model_name="gpt-4o-mini",
        temperature=0.7,
        max_tokens=2000,
        history_window=20,
        max_conversations=None,
        system_instructions=SYSTEM_PROMPT,
    )


@pytest.fixture
def store() -> ConversationStore:
    """Return an empty store seeded with the test system prompt."""
    return ConversationStore(system_instructions=SYSTEM_PROMPT)


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def response_client(
    store: ConversationStore,
    fake_transport: FakeTransport,
    agent_config: AgentConfig,
) -> ResponseClient:
    return ResponseClient(store=store, transport=fake_transport, config=agent_config)


@pytest.fixture
def mock_session_id() -> str:
    """Generate consistent session ID for testing.

    Returns:
        Predictable session ID for test assertions.
    """
    return "test-session-12345"


@pytest.fixture
def app(agent_config: AgentConfig, fake_transport: FakeTransport) -> FastAPI:
    """Create an application backed by the fake transport."""
    return create_app(config=agent_config, transport=fake_transport)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
