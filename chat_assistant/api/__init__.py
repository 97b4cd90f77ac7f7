"""FastAPI endpoints for the chat assistant.

HTTP and streaming routes with async request handling.
Supports Server-Sent Events for real-time chat streaming.

Endpoints:
    - GET /health: Service health status
    - POST /chat: Blocking chat completion
    - POST /chat/stream: Streaming chat completion (SSE)
    - GET /conversations/{id}/history: Untrimmed conversation log
    - DELETE /conversations/{id}: Clear a conversation
    - PATCH /conversations/{id}/context: Merge conversation context
    - PUT /conversations/{id}/system: Replace the system instruction
"""

from chat_assistant.api.app import create_app

__all__ = ["create_app"]
