"""Agent configuration with environment variable loading.

Pydantic-based configuration for the chat assistant.
Supports OpenAI and OpenAI-compatible APIs via custom base URL.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_SYSTEM_INSTRUCTIONS = """You are a helpful, knowledgeable, and friendly AI assistant. \
Your goal is to provide accurate, helpful, and engaging responses to users.

Key guidelines:
- Be conversational and personable while maintaining professionalism
- Provide detailed, accurate information when requested
- Ask clarifying questions when needed
- Remember context from the conversation
- Be creative and helpful in problem-solving
- If you don't know something, admit it honestly
- Keep responses concise but comprehensive
- Use markdown formatting when appropriate for better readability

Remember previous messages in this conversation to maintain context and \
provide personalized responses."""


def _env_or_none(name: str) -> str | None:
    return os.getenv(name) or None


class AgentConfig(BaseModel):
    """Configuration for the chat assistant.

    Supports OpenAI and any OpenAI-compatible API via LLM_BASE_URL.

    Attributes:
        api_key: API key for model access.
        base_url: API base URL (None for OpenAI default).
        model_name: Model identifier to use.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
        history_window: Messages sent per request, system instruction included.
        max_conversations: Conversations kept in memory (None = unbounded).
        system_instructions: System message that opens every conversation.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY", "")),
        validate_default=True,
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"),
        description="Model to use",
    )
    temperature: float = Field(
        default_factory=lambda: os.getenv("LLM_TEMPERATURE", "0.7"),
        ge=0.0,
        le=2.0,
        validate_default=True,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default_factory=lambda: os.getenv("LLM_MAX_TOKENS", "2000"),
        ge=1,
        le=4000,
        validate_default=True,
        description="Maximum tokens in generated response",
    )
    history_window: int = Field(
        default_factory=lambda: os.getenv("CHAT_HISTORY_WINDOW", "20"),
        ge=2,
        validate_default=True,
        description="Messages per request, including the system instruction",
    )
    max_conversations: int | None = Field(
        default_factory=lambda: _env_or_none("CHAT_MAX_CONVERSATIONS"),
        ge=1,
        validate_default=True,
        description="Conversations held in memory before LRU eviction",
    )
    system_instructions: str = Field(
        default_factory=lambda: os.getenv(
            "CHAT_SYSTEM_INSTRUCTIONS", DEFAULT_SYSTEM_INSTRUCTIONS
        ),
        min_length=1,
        validate_default=True,
        description="System message that opens every conversation",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set LLM_API_KEY or OPENAI_API_KEY in .env"
            )
        return v.strip()


def get_agent_config() -> AgentConfig:
    """Create agent configuration from environment.

    Returns:
        Configured AgentConfig instance.

    Raises:
        ValidationError: If no API key is set or a numeric value is out of range.
    """
    return AgentConfig()
