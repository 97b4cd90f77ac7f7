"""Completion transport over the OpenAI chat-completions API.

Issues exactly one request per call, either collecting the whole answer or
yielding text fragments as they arrive. Every failure leaves this module as a
CompletionError tagged with an ErrorKind so callers never inspect raw
provider exceptions.
"""

import logging
from collections.abc import AsyncIterator
from enum import Enum

import openai
from openai import AsyncOpenAI

from chat_assistant.agent.config import AgentConfig

logger = logging.getLogger(__name__)

EMPTY_RESPONSE_FALLBACK = (
    "I apologize, but I was unable to generate a response. Please try again."
)


class ErrorKind(str, Enum):
    """Categories of remote completion failures."""

    AUTH = "auth"
    RATE_LIMITED = "rate_limited"
    QUOTA_EXCEEDED = "quota_exceeded"
    UNKNOWN = "unknown"


class CompletionError(Exception):
    """A remote completion call failed.

    Attributes:
        kind: Category of the failure.
        message: Text of the underlying error.
    """

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an exception raised by the completion client to an ErrorKind.

    Typed OpenAI errors are classified by class. Anything else, including
    errors from OpenAI-compatible servers that reuse generic status codes,
    falls back to the error text.
    """
    text = str(exc).lower()

    if isinstance(exc, openai.AuthenticationError):
        return ErrorKind.AUTH
    if isinstance(exc, openai.RateLimitError):
        if getattr(exc, "code", None) == "insufficient_quota" or "quota" in text:
            return ErrorKind.QUOTA_EXCEEDED
        return ErrorKind.RATE_LIMITED

    if "api key" in text:
        return ErrorKind.AUTH
    if "rate limit" in text:
        return ErrorKind.RATE_LIMITED
    if "quota" in text:
        return ErrorKind.QUOTA_EXCEEDED
    return ErrorKind.UNKNOWN


class CompletionTransport:
    """One-shot chat-completions calls with configured sampling parameters."""

    def __init__(
        self,
        config: AgentConfig,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            config: Model id, sampling parameters and credentials.
            client: Optional preconfigured client. Built from config if omitted.
        """
        self._config = config
        self._client = client or AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
        )

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """Request a full completion for the given messages.

        Returns:
            The assistant's reply, or a fallback text when the reply is empty.

        Raises:
            CompletionError: If the remote call fails.
        """
        logger.debug(f"Requesting completion with {len(messages)} messages")
        try:
            completion = await self._client.chat.completions.create(
                model=self._config.model_name,
                messages=messages,
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
                stream=False,
            )
        except Exception as e:
            raise CompletionError(classify_error(e), str(e)) from e

        content = completion.choices[0].message.content if completion.choices else None
        return content or EMPTY_RESPONSE_FALLBACK

    async def stream(self, messages: list[dict[str, str]]) -> AsyncIterator[str]:
        """Stream completion fragments for the given messages.

        Yields:
            Non-empty text fragments in the order they arrive.

        Raises:
            CompletionError: If the remote call fails before or during streaming.
        """
        logger.debug(f"Requesting streamed completion with {len(messages)} messages")
        try:
            response_stream = await self._client.chat.completions.create(
                model=self._config.model_name,
                messages=messages,
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
                stream=True,
            )

            async for chunk in response_stream:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if content:
                    yield content

        except Exception as e:
            raise CompletionError(classify_error(e), str(e)) from e
