"""FastAPI dependencies resolving per-app services."""

from fastapi import Request

from chat_assistant.agent.chat_agent import ResponseClient


def get_response_client(request: Request) -> ResponseClient:
    """Return the ResponseClient owned by the running application."""
    return request.app.state.response_client
