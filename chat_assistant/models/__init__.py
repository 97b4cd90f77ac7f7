"""Pydantic models for conversation state and the HTTP API.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatMessage: Immutable message in a conversation log
    - ConversationContext / ConversationMemory: Per-conversation state
    - ChatRequest / ChatResponse: Blocking chat payloads
    - StreamChunk: One Server-Sent Event of a streamed reply
    - HistoryResponse, ContextUpdate, SystemInstructionsUpdate: Conversation management
"""

from chat_assistant.models.schemas import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    ContextUpdate,
    ConversationContext,
    ConversationMemory,
    HistoryResponse,
    StreamChunk,
    StreamStatus,
    SystemInstructionsUpdate,
)

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "ContextUpdate",
    "ConversationContext",
    "ConversationMemory",
    "HistoryResponse",
    "StreamChunk",
    "StreamStatus",
    "SystemInstructionsUpdate",
]
