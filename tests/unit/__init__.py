"""Unit tests for individual components in isolation.

Coverage:
    - memory/: Conversation creation, trimming, clearing and eviction
    - agent/: Configuration, transport error classification, response client
"""
