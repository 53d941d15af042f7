from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Speaker of a turn."""

    USER = "user"
    MODEL = "model"


class InlineData(BaseModel):
    """Binary attachment embedded in a part as base64.

    Attributes:
        mime_type: MIME type of the data (e.g. ``image/png``).
        data: Base64-encoded payload, without a data-URI prefix.
    """

    model_config = ConfigDict(populate_by_name=True)

    mime_type: str = Field(..., alias="mimeType")
    data: str


class Part(BaseModel):
    """One piece of turn content: text, inline data, or both absent."""

    model_config = ConfigDict(populate_by_name=True)

    text: str | None = None
    inline_data: InlineData | None = Field(None, alias="inlineData")

    def has_content(self) -> bool:
        return bool(self.text) or self.inline_data is not None


class Content(BaseModel):
    """A single turn as exchanged with the model."""

    role: Role
    parts: list[Part] = Field(default_factory=list)


class ImagePayload(BaseModel):
    """Image attached to the new user turn.

    Attributes:
        data: Base64-encoded image bytes.
        type: MIME type of the image.
    """

    data: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)


class UserMessage(BaseModel):
    """The newest user turn, sent apart from the history."""

    content: str = ""
    image: ImagePayload | None = None


class ChatRequest(BaseModel):
    """Request payload for the chat endpoint.

    Attributes:
        messages: Prior turns of the transcript, oldest first.
        user_message: The new user turn.
    """

    model_config = ConfigDict(populate_by_name=True)

    messages: list[Content] = Field(default_factory=list)
    user_message: UserMessage = Field(..., alias="userMessage")


class Citation(BaseModel):
    """A web source referenced by the model.

    Attributes:
        url: Address of the source.
        title: Human-readable title.
        index: 1-based display ordinal.
    """

    url: str = ""
    title: str = ""
    index: int = 1


class StreamPayload(BaseModel):
    """JSON body of one SSE event.

    Both fields are optional; empty ones are left out of the wire form.
    """

    text: str | None = None
    citations: list[Citation] | None = None

    def is_empty(self) -> bool:
        return not self.text and not self.citations


class ErrorResponse(BaseModel):
    """Body returned when a request fails before streaming starts."""

    error: str
