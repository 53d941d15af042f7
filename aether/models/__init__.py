"""Pydantic models for API requests, responses, and stream events.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Content / Part / InlineData: turns as exchanged with the model
    - ChatRequest / UserMessage / ImagePayload: incoming chat request payload
    - Citation: a normalized web source
    - StreamPayload: the JSON body of one SSE event
    - ErrorResponse: error body for failed requests
"""

from aether.models.schemas import (
    ChatRequest,
    Citation,
    Content,
    ErrorResponse,
    ImagePayload,
    InlineData,
    Part,
    Role,
    StreamPayload,
    UserMessage,
)

__all__ = [
    "ChatRequest",
    "Citation",
    "Content",
    "ErrorResponse",
    "ImagePayload",
    "InlineData",
    "Part",
    "Role",
    "StreamPayload",
    "UserMessage",
]
