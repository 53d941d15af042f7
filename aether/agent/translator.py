"""Translation of upstream model events into the client SSE protocol.

Each upstream chunk becomes at most one event::

    data: {"text": "...", "citations": [{"url": ..., "title": ..., "index": 1}]}\\n\\n

Empty fields are left out, and a chunk with nothing to report produces no
event at all. A chunk that cannot be read is logged and skipped; one bad
chunk never ends the response.

A failed model run is different. Agno reports it as a ``RunError`` event
rather than an exception, and it aborts the response so the client rolls
the turn back instead of keeping a truncated reply.
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

from aether.agent.citations import normalize_citations
from aether.models.schemas import StreamPayload

logger = logging.getLogger(__name__)

# Agno run events that carry model output; anything else is bookkeeping.
_CONTENT_EVENTS = frozenset({"RunContent"})
_FAILURE_EVENTS = frozenset({"RunError", "RunCancelled"})


class ChunkTranslationError(Exception):
    """Raised when a single upstream chunk cannot be translated."""

    pass


class UpstreamStreamError(Exception):
    """Raised when the model run fails; the response cannot be completed."""

    pass


def run_failure(chunk: Any) -> str | None:
    """Return the failure message of a run error event, or None for any other chunk."""
    if getattr(chunk, "event", None) not in _FAILURE_EVENTS:
        return None
    detail = getattr(chunk, "content", None) or getattr(chunk, "reason", None)
    return str(detail) if detail else "The model run failed"


def is_content_event(chunk: Any) -> bool:
    event = getattr(chunk, "event", None)
    return event is None or event in _CONTENT_EVENTS


def _chunk_text(chunk: Any) -> str:
    content = getattr(chunk, "content", None)
    if content is None:
        return ""
    if not isinstance(content, str):
        raise ChunkTranslationError(f"Unexpected content type: {type(content).__name__}")
    return content


def _chunk_citations(chunk: Any) -> list[Any]:
    """Collect citation-like attachments from a chunk.

    Accepts a plain list, or an object exposing ``urls`` (Agno's
    ``Citations``), or a mapping with a ``urls`` key.
    """
    citations = getattr(chunk, "citations", None)
    if not citations:
        return []
    if isinstance(citations, list | tuple):
        return list(citations)
    urls = citations.get("urls") if isinstance(citations, dict) else getattr(citations, "urls", None)
    return list(urls or [])


def translate_chunk(chunk: Any) -> StreamPayload | None:
    """Extract the text delta and citations from one upstream chunk.

    Args:
        chunk: One upstream event.

    Returns:
        The payload to emit, or None when the chunk has nothing to report.

    Raises:
        ChunkTranslationError: If the chunk is malformed.
        UpstreamStreamError: If the chunk reports a failed run.
    """
    failure = run_failure(chunk)
    if failure is not None:
        raise UpstreamStreamError(failure)
    if not is_content_event(chunk):
        return None

    try:
        text = _chunk_text(chunk)
        citations = normalize_citations(_chunk_citations(chunk))
    except ChunkTranslationError:
        raise
    except Exception as e:
        raise ChunkTranslationError(str(e)) from e

    payload = StreamPayload(text=text or None, citations=citations or None)
    if payload.is_empty():
        return None
    return payload


def format_event(payload: StreamPayload) -> str:
    """Serialize a payload as one SSE event."""
    return f"data: {payload.model_dump_json(exclude_none=True)}\n\n"


async def translate_stream(chunks: AsyncIterator[Any]) -> AsyncIterator[str]:
    """Convert an upstream event stream into SSE event strings.

    Args:
        chunks: Upstream events, in arrival order.

    Yields:
        Encoded SSE events, one per chunk that had something to report.

    Raises:
        UpstreamStreamError: If the run fails part way. Headers are already
            sent, so the response body ends abnormally.
    """
    count = 0
    try:
        async for chunk in chunks:
            try:
                payload = translate_chunk(chunk)
            except ChunkTranslationError as e:
                logger.warning(f"Skipping malformed chunk: {e}", exc_info=True)
                continue
            if payload is not None:
                count += 1
                yield format_event(payload)
    except UpstreamStreamError as e:
        logger.error(f"Model run failed after {count} events: {e}")
        raise
    except Exception as e:
        logger.exception(f"Upstream stream failed after {count} events")
        raise UpstreamStreamError(str(e) or type(e).__name__) from e
    else:
        logger.info(f"Stream completed with {count} events")
