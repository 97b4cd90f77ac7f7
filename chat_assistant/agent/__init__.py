"""Model access for the chat assistant.

Responsibilities:
    - Configuration of model id, sampling parameters and credentials
    - One-shot and streaming chat-completions calls
    - Tagged classification of remote failures
    - Conversation bookkeeping around each call

Maintains clean separation from the HTTP layer.
"""

from chat_assistant.agent.chat_agent import ResponseClient, apology_for
from chat_assistant.agent.config import AgentConfig, get_agent_config
from chat_assistant.agent.transport import CompletionError, CompletionTransport, ErrorKind

__all__ = [
    "AgentConfig",
    "CompletionError",
    "CompletionTransport",
    "ErrorKind",
    "ResponseClient",
    "apology_for",
    "get_agent_config",
]
