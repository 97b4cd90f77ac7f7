"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat message display with streaming support
    - Sending messages and clearing the conversation

Contains no conversation logic. Delegates all operations to the API.
"""
