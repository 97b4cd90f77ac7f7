"""Conversation management endpoints: history, clearing, context and instructions."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from chat_assistant.agent.chat_agent import ResponseClient
from chat_assistant.api.deps import get_response_client
from chat_assistant.models.schemas import (
    ContextUpdate,
    ConversationContext,
    HistoryResponse,
    SystemInstructionsUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.get("/{session_id}/history", response_model=HistoryResponse)
async def get_history(
    session_id: str,
    client: ResponseClient = Depends(get_response_client),
) -> HistoryResponse:
    """Return the untrimmed message log, system instruction excluded.

    Unknown conversations return an empty list.
    """
    return HistoryResponse(session_id=session_id, messages=client.history(session_id))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def clear_conversation(
    session_id: str,
    client: ResponseClient = Depends(get_response_client),
) -> Response:
    """Remove a conversation entirely."""
    client.clear_conversation(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{session_id}/context", response_model=ConversationContext)
async def update_context(
    session_id: str,
    update: ContextUpdate,
    client: ResponseClient = Depends(get_response_client),
) -> ConversationContext:
    """Merge the provided fields into the conversation context."""
    return client.set_user_context(session_id, update)


@router.put("/{session_id}/system", status_code=status.HTTP_204_NO_CONTENT)
async def update_system_instructions(
    session_id: str,
    update: SystemInstructionsUpdate,
    client: ResponseClient = Depends(get_response_client),
) -> Response:
    """Replace the system instruction of an existing conversation.

    Raises:
        404: Conversation does not exist.
    """
    if not client.update_system_instructions(session_id, update.instructions):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Conversation {session_id} not found",
        )
    logger.info(f"Updated system instructions for {session_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
