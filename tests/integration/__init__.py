"""Integration tests for components working together as a system.

Coverage:
    - POST /api/chat through the real FastAPI app and httpx's ASGITransport
    - Client turns streamed from that app into a MessageStore
    - Network failures simulated with httpx.MockTransport

The model call is the only piece replaced (see ``FakeAgentService``).
"""
