"""Client-side consumption of the chat SSE stream.

Reads the response body as raw bytes, decodes them incrementally, reassembles
events split across reads, and folds each payload into the streaming model
message held by the :class:`~aether.ui.message_store.MessageStore`.
"""

import codecs
import logging
import os

import httpx
from pydantic import ValidationError

from aether.models.schemas import ImagePayload, Part, Role, StreamPayload
from aether.ui.message_store import Message, MessageImage, MessageStore

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
CHAT_ENDPOINT = "/api/chat"

EVENT_DELIMITER = "\n\n"
DATA_PREFIX = "data:"


class StreamParseError(Exception):
    """Raised when one SSE event cannot be parsed."""

    pass


class UpstreamError(Exception):
    """Raised when a chat turn fails; the turn has been rolled back."""

    pass


def parse_event(event: str) -> StreamPayload | None:
    """Parse one SSE event into a payload.

    Args:
        event: Raw event text, without the trailing blank line.

    Returns:
        The payload, or None for events without data (comments, keep-alives).

    Raises:
        StreamParseError: If the data is not a valid payload.
    """
    data_lines = [
        line[len(DATA_PREFIX) :].removeprefix(" ")
        for line in event.splitlines()
        if line.startswith(DATA_PREFIX)
    ]
    if not data_lines:
        return None
    try:
        return StreamPayload.model_validate_json("\n".join(data_lines))
    except ValidationError as e:
        raise StreamParseError(f"Invalid event data: {e.errors()[0]['msg']}") from e


class SSEDecoder:
    """Incremental SSE decoder.

    Multi-byte characters split across reads are held by a stateful UTF-8
    decoder, and an event split across reads is kept in a buffer until its
    delimiter arrives.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def _parse_all(self, events: list[str]) -> list[StreamPayload]:
        payloads: list[StreamPayload] = []
        for event in events:
            try:
                payload = parse_event(event)
            except StreamParseError as e:
                logger.debug(f"Dropping malformed event: {e}")
                continue
            if payload is not None:
                payloads.append(payload)
        return payloads

    def feed(self, data: bytes) -> list[StreamPayload]:
        """Consume one network read.

        Args:
            data: Bytes as received, with no alignment guarantees.

        Returns:
            Payloads of every event completed by this read, in order.
        """
        self._buffer += self._decoder.decode(data)
        *events, self._buffer = self._buffer.split(EVENT_DELIMITER)
        return self._parse_all(events)

    def flush(self) -> list[StreamPayload]:
        """Consume whatever remains once the stream has ended."""
        remainder = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        if not remainder.strip():
            return []
        return self._parse_all([remainder])


def apply_payload(message: Message, payload: StreamPayload) -> None:
    """Fold one payload into the streaming message.

    Text is appended; citations whose url is already present are dropped and
    the rest appended in arrival order.
    """
    if payload.text:
        message.content += payload.text
    if payload.citations:
        seen = {citation.url for citation in message.citations}
        for citation in payload.citations:
            if citation.url not in seen:
                seen.add(citation.url)
                message.citations.append(citation)


def finalize_message(message: Message) -> None:
    message.is_streaming = False
    message.parts = [Part(text=message.content)]


def _error_message(response: httpx.Response) -> str:
    try:
        error = response.json().get("error")
    except (ValueError, AttributeError):
        error = None
    return error or f"Server error (HTTP {response.status_code})"


def build_user_message(text: str, image: ImagePayload | None = None) -> Message:
    """Create the user turn shown in the transcript."""
    return Message(
        role=Role.USER,
        content=text,
        parts=[Part(text=text)],
        image=(
            MessageImage(url=f"data:{image.type};base64,{image.data}", mime_type=image.type)
            if image
            else None
        ),
    )


async def send_turn(
    client: httpx.AsyncClient,
    store: MessageStore,
    text: str,
    image: ImagePayload | None = None,
    endpoint: str = CHAT_ENDPOINT,
) -> Message:
    """Submit one user turn and stream the model's reply into the store.

    Args:
        client: HTTP client pointed at the chat API.
        store: Transcript to update.
        text: User's message text.
        image: Optional attached image.
        endpoint: Chat endpoint path.

    Returns:
        The finished model message.

    Raises:
        UpstreamError: If the request fails at any point. The user turn and
            any partial reply have already been removed from the store.
    """
    history = store.to_history()
    user_message = store.append(build_user_message(text, image))
    body: dict = {"messages": history, "userMessage": {"content": text}}
    if image:
        body["userMessage"]["image"] = image.model_dump()

    model_id: str | None = None
    try:
        async with client.stream(
            "POST",
            endpoint,
            json=body,
            headers={"Accept": "text/event-stream"},
        ) as response:
            if not response.is_success:
                await response.aread()
                raise UpstreamError(_error_message(response))

            model_id = store.append(Message(role=Role.MODEL, is_streaming=True)).id
            decoder = SSEDecoder()
            async for data in response.aiter_bytes():
                for payload in decoder.feed(data):
                    store.update(model_id, lambda m, p=payload: apply_payload(m, p))
            for payload in decoder.flush():
                store.update(model_id, lambda m, p=payload: apply_payload(m, p))

        return store.update(model_id, finalize_message)

    except UpstreamError as e:
        logger.warning(f"Chat turn rejected: {e}")
        store.remove(user_message.id, model_id)
        raise
    except httpx.HTTPError as e:
        logger.warning(f"Chat turn failed: {e}")
        store.remove(user_message.id, model_id)
        raise UpstreamError(f"Connection failed: {e}") from e
    except Exception as e:
        logger.exception("Unexpected error while streaming chat turn")
        store.remove(user_message.id, model_id)
        raise UpstreamError(f"Chat turn failed: {e}") from e
