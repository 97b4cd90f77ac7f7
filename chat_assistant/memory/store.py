"""In-memory conversation store.

Keeps one ConversationMemory per conversation identifier, seeded with the
system instruction, and owns the policy for trimming a log down to the
window sent to the model.

Design notes:

1. **Explicit instance** - The store is constructed by the application factory
   and handed to consumers. There is no module-level conversation map, so
   tests and multiple apps in one process never share state.

2. **Storage vs request window** - The log itself is never trimmed. Only the
   outbound request is cut to the most recent messages, and the leading system
   instruction always keeps its slot in that window.

3. **Optional LRU cap** - ``max_conversations`` bounds how many conversations
   are held. Touching a conversation marks it as recently used; the oldest one
   is evicted when a new conversation would exceed the cap.
"""

import logging
from collections import OrderedDict
from datetime import datetime, timezone

from chat_assistant.models.schemas import (
    ChatMessage,
    ContextUpdate,
    ConversationContext,
    ConversationMemory,
)

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 20


class ConversationStore:
    """Keyed mapping from conversation identifier to ConversationMemory."""

    def __init__(
        self,
        system_instructions: str,
        max_conversations: int | None = None,
    ) -> None:
        """Initialize an empty store.

        Args:
            system_instructions: Text of the system message that leads every
                new conversation.
            max_conversations: Maximum number of conversations to hold.
                None keeps every conversation until it is cleared.
        """
        if max_conversations is not None and max_conversations < 1:
            raise ValueError("max_conversations must be at least 1")
        self._system_instructions = system_instructions
        self._max_conversations = max_conversations
        self._conversations: OrderedDict[str, ConversationMemory] = OrderedDict()

    def __contains__(self, conversation_id: object) -> bool:
        return conversation_id in self._conversations

    def __len__(self) -> int:
        return len(self._conversations)

    @property
    def system_instructions(self) -> str:
        return self._system_instructions

    def get(self, conversation_id: str) -> ConversationMemory | None:
        """Return the memory for an identifier without creating it."""
        memory = self._conversations.get(conversation_id)
        if memory is not None:
            self._conversations.move_to_end(conversation_id)
        return memory

    def get_or_create(
        self,
        conversation_id: str,
        user_name: str | None = None,
    ) -> ConversationMemory:
        """Return the conversation's memory, creating it on first use.

        A new memory holds only the system instruction. A user name is recorded
        when the conversation does not have one yet.

        Args:
            conversation_id: Opaque conversation identifier.
            user_name: Optional display name of the person chatting.

        Returns:
            The ConversationMemory for ``conversation_id``.
        """
        memory = self.get(conversation_id)
        if memory is None:
            memory = ConversationMemory(
                messages=[
                    ChatMessage(role="system", content=self._system_instructions)
                ],
                context=ConversationContext(user_name=user_name),
            )
            self._conversations[conversation_id] = memory
            logger.debug(f"Created conversation {conversation_id}")
            self._evict_if_needed()
        elif user_name and not memory.context.user_name:
            memory.context = memory.context.model_copy(update={"user_name": user_name})
        return memory

    def append(self, conversation_id: str, message: ChatMessage) -> None:
        """Append a message to the conversation log, stamping it if needed."""
        if message.timestamp is None:
            message = message.model_copy(
                update={"timestamp": datetime.now(timezone.utc)}
            )
        self.get_or_create(conversation_id).messages.append(message)

    def trim_for_request(
        self,
        conversation_id: str,
        window: int = DEFAULT_WINDOW,
    ) -> list[dict[str, str]]:
        """Build the outbound message list for a completion request.

        Returns at most ``window`` messages in chronological order. The leading
        system instruction is always included and the remaining slots hold the
        most recent messages.

        Args:
            conversation_id: Opaque conversation identifier.
            window: Maximum number of messages to send.

        Returns:
            ``{role, content}`` dictionaries ready for the completion API.

        Raises:
            ValueError: If ``window`` leaves no room beside the system message.
        """
        if window < 2:
            raise ValueError("window must be at least 2")

        messages = self.get_or_create(conversation_id).messages
        head, tail = messages[:1], messages[1:]
        recent = tail[-(window - 1):]
        return [msg.to_request() for msg in head + recent]

    def history(self, conversation_id: str) -> list[ChatMessage]:
        """Return the full, untrimmed log without the system instruction."""
        memory = self.get(conversation_id)
        if memory is None:
            return []
        return [msg for msg in memory.messages if msg.role != "system"]

    def clear(self, conversation_id: str) -> None:
        """Remove a conversation entirely. Unknown identifiers are ignored."""
        if self._conversations.pop(conversation_id, None) is not None:
            logger.info(f"Cleared conversation {conversation_id}")

    def set_context(
        self,
        conversation_id: str,
        partial: ContextUpdate,
    ) -> ConversationContext:
        """Merge a partial context into the conversation's context.

        Returns:
            The merged context now stored for the conversation.
        """
        memory = self.get_or_create(conversation_id)
        memory.context = memory.context.merged(partial)
        return memory.context

    def set_system_instructions(self, conversation_id: str, instructions: str) -> bool:
        """Replace the leading system message of an existing conversation.

        Returns:
            False when the conversation does not exist.
        """
        memory = self.get(conversation_id)
        if memory is None:
            return False
        memory.messages[0] = ChatMessage(role="system", content=instructions)
        return True

    def _evict_if_needed(self) -> None:
        if self._max_conversations is None:
            return
        while len(self._conversations) > self._max_conversations:
            evicted_id, _ = self._conversations.popitem(last=False)
            logger.info(f"Evicted least recently used conversation {evicted_id}")
