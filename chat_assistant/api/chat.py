"""Chat endpoints: blocking completion and Server-Sent Events streaming."""

import logging
import uuid
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from chat_assistant.agent.chat_agent import ResponseClient
from chat_assistant.api.deps import get_response_client
from chat_assistant.models.schemas import (
    ChatRequest,
    ChatResponse,
    StreamChunk,
    StreamStatus,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def format_sse(chunk: StreamChunk) -> str:
    """Frame a StreamChunk as one Server-Sent Event."""
    return f"data: {chunk.model_dump_json()}\n\n"


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    client: ResponseClient = Depends(get_response_client),
) -> ChatResponse:
    """Return the assistant's complete reply to a message.

    A missing session_id starts a new conversation with a generated identifier.
    Remote failures are answered with an apology rather than an error status.
    """
    session_id = request.session_id or str(uuid.uuid4())
    logger.info(f"Chat request for session {session_id}")

    reply = await client.complete(request.message, session_id, user_name=request.user_name)
    return ChatResponse(response=reply, session_id=session_id)


@router.post("/stream")
async def chat_stream(
    request: ChatRequest,
    client: ResponseClient = Depends(get_response_client),
) -> StreamingResponse:
    """Stream the assistant's reply as Server-Sent Events.

    Each event carries a StreamChunk: a ``received`` status first, then
    ``generating`` content chunks, and finally ``done=true`` with status
    ``complete``.
    """
    session_id = request.session_id or str(uuid.uuid4())
    logger.info(f"Streaming chat request for session {session_id}")

    async def event_stream() -> AsyncGenerator[str]:
        yield format_sse(StreamChunk(content="", done=False, status=StreamStatus.RECEIVED))

        async for fragment in client.stream_response(
            request.message, session_id, user_name=request.user_name
        ):
            yield format_sse(
                StreamChunk(content=fragment, done=False, status=StreamStatus.GENERATING)
            )

        yield format_sse(StreamChunk(content="", done=True, status=StreamStatus.COMPLETE))

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Session-Id": session_id},
    )
