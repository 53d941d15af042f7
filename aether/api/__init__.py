"""FastAPI endpoints for the Aether chat client.

HTTP and streaming routes with async request handling.
Supports Server-Sent Events for real-time chat streaming.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Streaming chat completion
"""

from aether.api.app import app, create_app

__all__ = ["app", "create_app"]
