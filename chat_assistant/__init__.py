"""Chat Assistant - conversational UI over an OpenAI-compatible model.

Combines FastAPI for HTTP streaming, the OpenAI client for model access,
NiceGUI for the chat page, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and streaming responses
    - agent: Model configuration, transport and response client
    - memory: In-process conversation store
    - ui: Web interface for chat interactions
    - models: Conversation and request/response schemas
"""

__version__ = "0.1.0"
