"""Integration tests for components working together as a system.

Coverage:
    - API endpoints with real HTTP requests through ASGITransport
    - SSE framing as consumed by the chat page helpers
    - Live model replies (when OPENAI_API_KEY is configured)
"""
