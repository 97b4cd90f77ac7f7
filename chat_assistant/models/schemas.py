from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Role = Literal["system", "user", "assistant"]


class StreamStatus(str, Enum):
    """Status values for streaming updates."""

    RECEIVED = "received"
    GENERATING = "generating"
    COMPLETE = "complete"


class ChatMessage(BaseModel):
    """A single message in a conversation log.

    Messages are frozen once created; the log they live in is append-only.

    Attributes:
        role: The speaker identifier (system, user, or assistant).
        content: The message text.
        timestamp: When the message was appended, if known.
    """

    model_config = ConfigDict(frozen=True)

    role: Role = Field(..., description="Message role: 'system', 'user', or 'assistant'")
    content: str = Field(..., description="The message content")
    timestamp: datetime | None = Field(None, description="Time the message was recorded")

    def to_request(self) -> dict[str, str]:
        """Return the ``{role, content}`` pair sent to the completion API."""
        return {"role": self.role, "content": self.content}


class ConversationContext(BaseModel):
    """Small per-conversation context object.

    Attributes:
        user_name: Display name of the person chatting.
        preferences: Free-form preference values.
        summary: Optional running summary of the conversation.
    """

    user_name: str | None = None
    preferences: dict[str, Any] = Field(default_factory=dict)
    summary: str | None = None

    def merged(self, partial: "ContextUpdate") -> "ConversationContext":
        """Return a new context with the explicitly set fields of ``partial`` applied.

        Preferences are merged key by key rather than replaced.
        """
        updates = partial.model_dump(exclude_unset=True)
        preferences = dict(self.preferences)
        if updates.get("preferences"):
            preferences.update(updates.pop("preferences"))
        else:
            updates.pop("preferences", None)
        return self.model_copy(update={**updates, "preferences": preferences})


class ConversationMemory(BaseModel):
    """Message log plus context for one conversation identifier."""

    messages: list[ChatMessage] = Field(default_factory=list)
    context: ConversationContext = Field(default_factory=ConversationContext)


class ChatRequest(BaseModel):
    """Request payload for chat completion endpoints.

    Attributes:
        message: User's question or prompt.
        session_id: Optional conversation identifier for continuity.
        user_name: Optional display name recorded in the conversation context.
    """

    message: str = Field(..., min_length=1)
    session_id: str | None = None
    user_name: str | None = None

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class ChatResponse(BaseModel):
    """Response from the blocking chat endpoint."""

    response: str = Field(..., description="The assistant's response")
    session_id: str = Field(..., description="Session ID for this conversation")


class StreamChunk(BaseModel):
    """A chunk of streamed response data.

    Attributes:
        content: The text content of this chunk.
        done: Whether this is the final chunk.
        status: Current processing status (received, generating, complete).
    """

    content: str
    done: bool
    status: StreamStatus | None = None


class HistoryResponse(BaseModel):
    """Untrimmed conversation history, system instruction excluded."""

    session_id: str
    messages: list[ChatMessage]


class ContextUpdate(BaseModel):
    """Partial context; only fields that are set get merged."""

    user_name: str | None = None
    preferences: dict[str, Any] | None = None
    summary: str | None = None


class SystemInstructionsUpdate(BaseModel):
    """Replacement system instruction for an existing conversation."""

    instructions: str = Field(..., min_length=1)
