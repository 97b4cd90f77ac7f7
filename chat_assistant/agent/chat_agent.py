"""Response client with blocking and streaming completion paths.

Core module for the assistant's conversation handling.

Architecture Decisions:

1. **Injected store** - The ConversationStore is passed in rather than looked
   up from a module global. The API factory owns one store per app, so tests
   get a clean slate by building their own.

2. **Transport owns the provider** - All OpenAI specifics, including error
   classification, live in CompletionTransport. This module only sees text
   fragments and tagged CompletionErrors.

3. **Errors become conversation text** - A failed call is answered with a
   canned apology chosen by ErrorKind. The apology is returned (or pushed as a
   single chunk) but never stored in the conversation log.

4. **Persist after completion** - Streamed fragments are buffered and the
   assistant message is appended only once the stream ends, so a failed or
   abandoned stream leaves no partial reply in the log. A reply whose
   conversation was cleared or evicted mid-call is dropped rather than
   recreating the conversation.
"""

import logging
from collections.abc import AsyncGenerator, Callable

from chat_assistant.agent.config import AgentConfig
from chat_assistant.agent.transport import CompletionError, CompletionTransport, ErrorKind
from chat_assistant.memory.store import ConversationStore
from chat_assistant.models.schemas import (
    ChatMessage,
    ContextUpdate,
    ConversationContext,
    ConversationMemory,
)

logger = logging.getLogger(__name__)

APOLOGIES: dict[ErrorKind, str] = {
    ErrorKind.AUTH: (
        "I apologize, but there seems to be an issue with the API configuration. "
        "Please check that the OpenAI API key is properly set."
    ),
    ErrorKind.RATE_LIMITED: (
        "I apologize, but I'm currently experiencing high demand. "
        "Please try again in a moment."
    ),
    ErrorKind.QUOTA_EXCEEDED: (
        "I apologize, but the API quota has been exceeded. Please try again later."
    ),
    ErrorKind.UNKNOWN: (
        "I apologize, but I encountered an error while processing your request. "
        "Please try again."
    ),
}


def apology_for(kind: ErrorKind) -> str:
    """Return the user-facing apology text for a failure category."""
    return APOLOGIES[kind]


class ResponseClient:
    """Forwards user messages to the model and records the exchange.

    Wraps CompletionTransport with:
    - Conversation bookkeeping in a ConversationStore
    - Request trimming to the configured history window
    - Streaming chunk aggregation
    - Apology text in place of remote failures
    """

    def __init__(
        self,
        store: ConversationStore,
        transport: CompletionTransport,
        config: AgentConfig,
    ) -> None:
        self._store = store
        self._transport = transport
        self._config = config

    @property
    def store(self) -> ConversationStore:
        return self._store

    def _prepare_request(
        self,
        message: str,
        conversation_id: str,
        user_name: str | None,
    ) -> tuple[ConversationMemory, list[dict[str, str]]]:
        memory = self._store.get_or_create(conversation_id, user_name=user_name)
        self._store.append(conversation_id, ChatMessage(role="user", content=message))
        request = self._store.trim_for_request(
            conversation_id, window=self._config.history_window
        )
        return memory, request

    def _record_reply(
        self,
        conversation_id: str,
        memory: ConversationMemory,
        reply: str,
    ) -> None:
        # Conversation was cleared or evicted while the call was in flight.
        if self._store.get(conversation_id) is not memory:
            logger.warning(f"Dropping reply for {conversation_id}: conversation no longer exists")
            return
        self._store.append(conversation_id, ChatMessage(role="assistant", content=reply))

    async def complete(
        self,
        message: str,
        conversation_id: str,
        user_name: str | None = None,
    ) -> str:
        """Get the complete reply for a message.

        Args:
            message: The user's message.
            conversation_id: Conversation identifier for history tracking.
            user_name: Optional display name recorded in the context.

        Returns:
            The assistant's reply, or an apology if the remote call failed.
        """
        memory, request = self._prepare_request(message, conversation_id, user_name)

        try:
            reply = await self._transport.complete(request)
        except CompletionError as e:
            logger.error(f"Completion failed for {conversation_id} ({e.kind.value}): {e}")
            return apology_for(e.kind)

        self._record_reply(conversation_id, memory, reply)
        return reply

    async def stream_response(
        self,
        message: str,
        conversation_id: str,
        user_name: str | None = None,
    ) -> AsyncGenerator[str]:
        """Stream reply fragments for a message.

        Each fragment is yielded as it arrives and added to a running buffer.
        The buffer is stored as the assistant message once the stream ends,
        unless the conversation was cleared or evicted in the meantime.
        On failure a single apology fragment is yielded instead and nothing
        is stored.

        Args:
            message: The user's message.
            conversation_id: Conversation identifier for history tracking.
            user_name: Optional display name recorded in the context.

        Yields:
            Response text fragments as they arrive.
        """
        memory, request = self._prepare_request(message, conversation_id, user_name)
        fragments: list[str] = []

        try:
            async for fragment in self._transport.stream(request):
                fragments.append(fragment)
                yield fragment
        except CompletionError as e:
            logger.error(
                f"Streaming completion failed for {conversation_id} ({e.kind.value}): {e}"
            )
            yield apology_for(e.kind)
            return

        self._record_reply(conversation_id, memory, "".join(fragments))

    async def complete_streaming(
        self,
        message: str,
        conversation_id: str,
        on_chunk: Callable[[str], None],
        user_name: str | None = None,
    ) -> None:
        """Stream a reply into a synchronous chunk sink.

        Args:
            message: The user's message.
            conversation_id: Conversation identifier for history tracking.
            on_chunk: Called once per fragment, in order.
            user_name: Optional display name recorded in the context.
        """
        async for fragment in self.stream_response(message, conversation_id, user_name):
            on_chunk(fragment)

    def history(self, conversation_id: str) -> list[ChatMessage]:
        return self._store.history(conversation_id)

    def clear_conversation(self, conversation_id: str) -> None:
        self._store.clear(conversation_id)

    def set_user_context(
        self,
        conversation_id: str,
        context: ContextUpdate,
    ) -> ConversationContext:
        return self._store.set_context(conversation_id, context)

    def update_system_instructions(self, conversation_id: str, instructions: str) -> bool:
        return self._store.set_system_instructions(conversation_id, instructions)
