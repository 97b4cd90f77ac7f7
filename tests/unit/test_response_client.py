"""Unit tests for ResponseClient.

Uses the scripted FakeTransport from conftest in place of the OpenAI client.
"""

import pytest

from chat_assistant.agent.chat_agent import APOLOGIES, ResponseClient, apology_for
from chat_assistant.agent.config import AgentConfig
from chat_assistant.agent.transport import CompletionError, ErrorKind
from chat_assistant.memory.store import ConversationStore
from chat_assistant.models.schemas import ContextUpdate
from tests.conftest import SYSTEM_PROMPT, FakeTransport


class TestComplete:
    """Tests for the blocking path."""

    async def test_reply_is_returned_and_stored(
        self,
        response_client: ResponseClient,
        fake_transport: FakeTransport,
        mock_session_id: str,
    ) -> None:
        reply = await response_client.complete("Hi", mock_session_id)

        assert reply == "Hello there"
        history = response_client.history(mock_session_id)
        assert [(m.role, m.content) for m in history] == [
            ("user", "Hi"),
            ("assistant", "Hello there"),
        ]

    async def test_request_includes_system_and_user_message(
        self,
        response_client: ResponseClient,
        fake_transport: FakeTransport,
        mock_session_id: str,
    ) -> None:
        await response_client.complete("Hi", mock_session_id)

        assert fake_transport.requests == [
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": "Hi"},
            ]
        ]

    async def test_request_is_trimmed_to_window(
        self,
        store: ConversationStore,
        fake_transport: FakeTransport,
        agent_config: AgentConfig,
    ) -> None:
        config = agent_config.model_copy(update={"history_window": 4})
        client = ResponseClient(store=store, transport=fake_transport, config=config)

        for i in range(5):
            await client.complete(f"q{i}", "c1")

        last_request = fake_transport.requests[-1]
        assert len(last_request) == 4
        assert last_request[0]["role"] == "system"
        assert last_request[-1] == {"role": "user", "content": "q4"}
        assert len(client.history("c1")) == 10

    async def test_user_name_recorded(
        self, response_client: ResponseClient, store: ConversationStore
    ) -> None:
        await response_client.complete("Hi", "c1", user_name="Ada")

        assert store.get_or_create("c1").context.user_name == "Ada"

    async def test_rate_limit_failure_returns_apology(
        self,
        response_client: ResponseClient,
        fake_transport: FakeTransport,
        mock_session_id: str,
    ) -> None:
        """A 'rate limit' failure is answered with the rate-limit apology verbatim."""
        fake_transport.error = CompletionError(ErrorKind.RATE_LIMITED, "rate limit reached")

        reply = await response_client.complete("Hi", mock_session_id)

        assert reply == (
            "I apologize, but I'm currently experiencing high demand. "
            "Please try again in a moment."
        )

    async def test_failure_keeps_user_message_only(
        self,
        response_client: ResponseClient,
        fake_transport: FakeTransport,
        mock_session_id: str,
    ) -> None:
        fake_transport.error = CompletionError(ErrorKind.UNKNOWN, "boom")

        await response_client.complete("Hi", mock_session_id)

        assert [m.role for m in response_client.history(mock_session_id)] == ["user"]

    @pytest.mark.parametrize("kind", list(ErrorKind))
    async def test_each_error_kind_has_apology(
        self,
        kind: ErrorKind,
        response_client: ResponseClient,
        fake_transport: FakeTransport,
    ) -> None:
        fake_transport.error = CompletionError(kind, "failure")

        assert await response_client.complete("Hi", "c1") == APOLOGIES[kind]


class TestStreaming:
    """Tests for the streaming path."""

    async def test_chunks_forwarded_and_concatenated(
        self,
        response_client: ResponseClient,
        mock_session_id: str,
    ) -> None:
        """Chunks ["Hel", "lo"] are forwarded twice and stored as "Hello"."""
        received: list[str] = []

        await response_client.complete_streaming("Hi", mock_session_id, received.append)

        assert received == ["Hel", "lo"]
        assert response_client.history(mock_session_id)[-1].content == "Hello"
        assert response_client.history(mock_session_id)[-1].role == "assistant"

    async def test_failure_pushes_single_apology_chunk(
        self,
        response_client: ResponseClient,
        fake_transport: FakeTransport,
        mock_session_id: str,
    ) -> None:
        fake_transport.fragments = []
        fake_transport.error = CompletionError(ErrorKind.QUOTA_EXCEEDED, "quota")
        received: list[str] = []

        await response_client.complete_streaming("Hi", mock_session_id, received.append)

        assert received == [apology_for(ErrorKind.QUOTA_EXCEEDED)]
        assert [m.role for m in response_client.history(mock_session_id)] == ["user"]

    async def test_mid_stream_failure_stores_nothing(
        self,
        response_client: ResponseClient,
        fake_transport: FakeTransport,
        mock_session_id: str,
    ) -> None:
        """Fragments already sent stay sent; no partial reply is stored."""
        fake_transport.error = CompletionError(ErrorKind.UNKNOWN, "dropped")
        received: list[str] = []

        await response_client.complete_streaming("Hi", mock_session_id, received.append)

        assert received == ["Hel", "lo", apology_for(ErrorKind.UNKNOWN)]
        assert [m.role for m in response_client.history(mock_session_id)] == ["user"]

    async def test_abandoned_stream_stores_nothing(
        self,
        response_client: ResponseClient,
        mock_session_id: str,
    ) -> None:
        stream = response_client.stream_response("Hi", mock_session_id)

        assert await anext(stream) == "Hel"
        await stream.aclose()

        assert [m.role for m in response_client.history(mock_session_id)] == ["user"]


class TestConversationManagement:
    """Tests for the store-delegating helpers."""

    async def test_clear_conversation(
        self, response_client: ResponseClient, store: ConversationStore
    ) -> None:
        await response_client.complete("Hi", "c1")

        response_client.clear_conversation("c1")

        assert "c1" not in store
        assert response_client.history("c1") == []

    def test_set_user_context(self, response_client: ResponseClient) -> None:
        context = response_client.set_user_context(
            "c1", ContextUpdate(user_name="Ada", preferences={"tone": "casual"})
        )

        assert context.user_name == "Ada"
        assert context.preferences == {"tone": "casual"}

    async def test_update_system_instructions(
        self,
        response_client: ResponseClient,
        fake_transport: FakeTransport,
    ) -> None:
        await response_client.complete("Hi", "c1")

        assert response_client.update_system_instructions("c1", "Answer in French.")
        await response_client.complete("Again", "c1")

        assert fake_transport.requests[-1][0] == {
            "role": "system",
            "content": "Answer in French.",
        }


class TestConversationRemovedMidCall:
    """A conversation cleared or evicted during a call stays gone."""

    async def test_clear_between_fragments_drops_reply(
        self,
        response_client: ResponseClient,
        store: ConversationStore,
    ) -> None:
        stream = response_client.stream_response("Hi", "c1")

        assert await anext(stream) == "Hel"
        response_client.clear_conversation("c1")
        remaining = [fragment async for fragment in stream]

        assert remaining == ["lo"]
        assert "c1" not in store
        assert response_client.history("c1") == []

    async def test_clear_during_blocking_call_drops_reply(
        self,
        store: ConversationStore,
        agent_config: AgentConfig,
    ) -> None:
        class ClearingTransport(FakeTransport):
            async def complete(self, messages: list[dict[str, str]]) -> str:
                store.clear("c1")
                return await super().complete(messages)

        client = ResponseClient(store=store, transport=ClearingTransport(), config=agent_config)

        reply = await client.complete("Hi", "c1")

        assert reply == "Hello there"
        assert "c1" not in store

    async def test_eviction_during_stream_drops_reply(
        self,
        fake_transport: FakeTransport,
        agent_config: AgentConfig,
    ) -> None:
        store = ConversationStore(system_instructions=SYSTEM_PROMPT, max_conversations=1)
        client = ResponseClient(store=store, transport=fake_transport, config=agent_config)
        stream = client.stream_response("Hi", "c1")

        await anext(stream)
        store.get_or_create("c2")
        async for _ in stream:
            pass

        assert "c1" not in store
        assert "c2" in store

    async def test_recreated_conversation_does_not_receive_stale_reply(
        self,
        response_client: ResponseClient,
        store: ConversationStore,
    ) -> None:
        stream = response_client.stream_response("Hi", "c1")

        await anext(stream)
        response_client.clear_conversation("c1")
        store.get_or_create("c1")
        async for _ in stream:
            pass

        assert response_client.history("c1") == []
