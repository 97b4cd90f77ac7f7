"""Test package for Chat Assistant.

Structure:
    - unit/: Store, config, transport and response client in isolation
    - integration/: FastAPI app and UI helpers over ASGITransport

The model provider is replaced by a scripted transport; the single live
test is skipped unless OPENAI_API_KEY is set.
"""
