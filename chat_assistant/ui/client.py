"""HTTP helpers the chat page uses to talk to the API."""

import json
import os
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager

import httpx

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")


async def stream_chat_response(
    message: str,
    session_id: str,
    on_chunk: Callable[[str], None],
    on_complete: Callable[[], None],
    on_error: Callable[[str], None],
    user_name: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> None:
    """Consume SSE stream from /chat/stream endpoint.

    Args:
        message: Text typed by the user.
        session_id: Conversation identifier.
        on_chunk: Called with every non-empty content fragment.
        on_complete: Called once when the final chunk arrives.
        on_error: Called with a description if the request fails.
        user_name: Optional display name forwarded to the API.
        client: Optional client to reuse; a short-lived one is created otherwise.
    """
    payload = {"message": message, "session_id": session_id}
    if user_name:
        payload["user_name"] = user_name

    async with _client_scope(client) as http:
        try:
            async with http.stream(
                "POST",
                "/chat/stream",
                json=payload,
                headers={"Accept": "text/event-stream"},
            ) as response:
                response.raise_for_status()
                async for line in response.aiter_lines():
                    if not line.startswith("data: "):
                        continue
                    data = json.loads(line[6:])
                    if content := data.get("content"):
                        on_chunk(content)
                    if data.get("done"):
                        on_complete()
                        return
        except httpx.HTTPStatusError as e:
            on_error(f"HTTP {e.response.status_code}")
        except httpx.RequestError as e:
            on_error(f"Connection failed: {e}")


async def clear_conversation(
    session_id: str,
    client: httpx.AsyncClient | None = None,
) -> None:
    """Ask the API to forget a conversation.

    Raises:
        httpx.HTTPError: If the request fails.
    """
    async with _client_scope(client) as http:
        response = await http.delete(f"/conversations/{session_id}")
        response.raise_for_status()


@asynccontextmanager
async def _client_scope(
    client: httpx.AsyncClient | None,
) -> AsyncGenerator[httpx.AsyncClient]:
    """Yield the given client, or a temporary one that is closed afterwards."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=120.0) as owned:
        yield owned
