"""Conversation state kept in process memory.

Responsibilities:
    - Per-conversation message logs seeded with the system instruction
    - Trimming logs to the window sent to the model
    - Context merging and conversation clearing
    - Optional least-recently-used eviction

Nothing here is persisted; conversations live as long as the process.
"""

from chat_assistant.memory.store import DEFAULT_WINDOW, ConversationStore

__all__ = ["DEFAULT_WINDOW", "ConversationStore"]
