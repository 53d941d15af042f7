"""Unit tests for individual components in isolation.

Coverage:
    - agent/: Configuration, request assembly, citation normalization and
      chunk translation
    - parsing/: Markdown block and inline parsing
    - ui/: Message store, SSE decoding and the password check

Uses mocks for the Agno model classes. Leverages pytest-check for multiple
assertions per test.
"""
