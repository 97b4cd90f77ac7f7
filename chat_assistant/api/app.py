"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chat_assistant.agent.chat_agent import ResponseClient
from chat_assistant.agent.config import AgentConfig, get_agent_config
from chat_assistant.agent.transport import CompletionTransport
from chat_assistant.api.chat import router as chat_router
from chat_assistant.api.conversations import router as conversations_router
from chat_assistant.memory.store import ConversationStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting Chat Assistant API...")
    yield
    logger.info(f"Shutting down Chat Assistant API ({len(app.state.store)} conversations dropped)")


def create_app(
    config: AgentConfig | None = None,
    transport: CompletionTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Builds one ConversationStore and ResponseClient per application and keeps
    them on ``app.state`` for the route dependencies.

    Args:
        config: Optional agent configuration. Loads from environment if not provided.
        transport: Optional completion transport. Built from config if not provided.

    Returns:
        Configured FastAPI application instance.
    """
    config = config or get_agent_config()

    application = FastAPI(
        title="Chat Assistant API",
        description=(
            "Conversational assistant backed by an OpenAI-compatible model. "
            "Keeps per-conversation history in memory and supports blocking "
            "and streaming responses."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    store = ConversationStore(
        system_instructions=config.system_instructions,
        max_conversations=config.max_conversations,
    )
    application.state.store = store
    application.state.response_client = ResponseClient(
        store=store,
        transport=transport or CompletionTransport(config),
        config=config,
    )

    application.include_router(chat_router)
    application.include_router(conversations_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "chat-assistant"}

    return application
