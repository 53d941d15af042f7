"""Test package for Aether Chat.

Unit tests cover isolated logic and integration tests cover request and
stream workflows end to end.

Structure:
    - unit/: Individual function and class tests
    - integration/: API and client streaming workflows

The model is always replaced by a scripted agent service, so no test needs
an API key or network access. Leverages pytest with pytest-check for soft
assertions.
"""
