"""In-memory transcript for one page session.

The store is the single owner of the chat transcript. The display reads it;
only the stream reducer and the input handler mutate it.
"""

import json
import logging
import uuid
from collections.abc import Callable, Iterator
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from aether.models.schemas import Citation, Part, Role

logger = logging.getLogger(__name__)


def new_message_id() -> str:
    """Generate an opaque unique message identifier."""
    return str(uuid.uuid4())


def _display_time() -> str:
    return datetime.now().strftime("%I:%M %p")


class MessageImage(BaseModel):
    """Image shown on a user turn.

    Attributes:
        url: ``data:`` URI of the image.
        mime_type: MIME type of the image.
    """

    model_config = ConfigDict(populate_by_name=True)

    url: str
    mime_type: str = Field(..., alias="mimeType")


class Message(BaseModel):
    """One chat turn.

    Attributes:
        id: Stable identifier for the turn's lifetime.
        role: Who produced the turn.
        content: Text so far; grows while a model turn streams.
        image: Attached image (user turns only).
        citations: Web sources, unique by url, in arrival order.
        is_streaming: True until the model turn's stream ends.
        parts: Turn content as sent to or received from the model.
        time: Display timestamp.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_message_id)
    role: Role
    content: str = ""
    image: MessageImage | None = None
    citations: list[Citation] = Field(default_factory=list)
    is_streaming: bool = Field(False, alias="isStreaming")
    parts: list[Part] = Field(default_factory=list)
    time: str = Field(default_factory=_display_time)


class MessageStore:
    """Ordered, append-only (until cleared) sequence of messages.

    Args:
        on_change: Optional callback run after every mutation, typically
            a UI refresh.
    """

    def __init__(self, on_change: Callable[[], None] | None = None) -> None:
        self._messages: list[Message] = []
        self._on_change = on_change

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def set_listener(self, on_change: Callable[[], None] | None) -> None:
        self._on_change = on_change

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def get(self, message_id: str) -> Message | None:
        for message in self._messages:
            if message.id == message_id:
                return message
        return None

    def append(self, message: Message) -> Message:
        self._messages.append(message)
        self._changed()
        return message

    def update(self, message_id: str, mutate: Callable[[Message], None]) -> Message:
        """Mutate one message in place.

        Args:
            message_id: Identifier of the message to change.
            mutate: Function applied to the stored message.

        Returns:
            The updated message.

        Raises:
            KeyError: If no message has that id.
        """
        message = self.get(message_id)
        if message is None:
            raise KeyError(message_id)
        mutate(message)
        self._changed()
        return message

    def remove(self, *message_ids: str | None) -> int:
        """Remove messages by id, ignoring unknown ids.

        Returns:
            Number of messages removed.
        """
        doomed = {message_id for message_id in message_ids if message_id}
        before = len(self._messages)
        self._messages = [m for m in self._messages if m.id not in doomed]
        removed = before - len(self._messages)
        if removed:
            self._changed()
        return removed

    def clear(self) -> None:
        self._messages.clear()
        self._changed()

    def snapshot(self) -> list[Message]:
        """Deep copy of the transcript, for comparisons and rollback checks."""
        return [message.model_copy(deep=True) for message in self._messages]

    def to_history(self) -> list[dict]:
        """Wire form of the transcript: ``[{role, parts}]``."""
        return [
            {
                "role": message.role.value,
                "parts": [
                    part.model_dump(by_alias=True, exclude_none=True) for part in message.parts
                ],
            }
            for message in self._messages
        ]

    def export_json(self) -> str:
        """Serialize the transcript for download."""
        payload = [message.model_dump(mode="json", by_alias=True) for message in self._messages]
        logger.info(f"Exporting transcript with {len(payload)} messages")
        return json.dumps(payload, ensure_ascii=False, indent=2)
