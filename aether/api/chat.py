"""Chat endpoint streaming model output as server-sent events.

Validates configuration and the request, opens the upstream stream, and
relays it through the translator. Failures before the first event are
answered with a JSON ``{"error": ...}`` body instead of a stream.
"""

import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError

from aether.agent import chat_agent
from aether.agent.assembler import InvalidRequestError, assemble_contents
from aether.agent.config import ConfigError
from aether.agent.translator import (
    UpstreamStreamError,
    is_content_event,
    run_failure,
    translate_stream,
)
from aether.models.schemas import ChatRequest, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def _error_detail(error: Exception) -> str:
    """Prefer the underlying cause's message, as SDK errors often wrap it."""
    cause = error.__cause__
    if cause is not None and str(cause):
        return str(cause)
    return str(error) or "Unknown error communicating with the model API"


async def _prepend(first: object, rest: AsyncIterator[object]) -> AsyncIterator[object]:
    yield first
    async for item in rest:
        yield item


async def _empty() -> AsyncIterator[object]:
    return
    yield


async def _first_content(chunks: AsyncIterator[object]) -> object | None:
    """Advance past run bookkeeping to the first content event.

    Raises:
        UpstreamStreamError: If the run fails before producing content.
    """
    async for chunk in chunks:
        failure = run_failure(chunk)
        if failure is not None:
            raise UpstreamStreamError(failure)
        if is_content_event(chunk):
            return chunk
    return None


@router.post(
    "",
    response_model=None,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def chat(request: Request) -> StreamingResponse | JSONResponse:
    """Stream a model reply to the submitted turn.

    The request body is ``{messages: [{role, parts}], userMessage: {content,
    image?}}``. The body is read by hand so that the configuration check
    comes first.

    Returns:
        StreamingResponse of ``data: {...}`` events, or a JSON error.

    Raises:
        400: The new turn has neither text nor image.
        422: Malformed request body.
        500: Missing API key, or the model call failed before streaming.
    """
    try:
        agent_service = chat_agent.get_agent_service()
    except ConfigError as e:
        logger.error(f"Chat service misconfigured: {e}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Server misconfigured: {e}")

    try:
        body = ChatRequest.model_validate_json(await request.body())
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        )
        logger.warning(f"Invalid chat request: {problems}")
        return _error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY, f"Invalid request body: {problems}"
        )

    try:
        contents = assemble_contents(body.messages, body.user_message)
        chunks = agent_service.stream_chunks(contents)
    except (InvalidRequestError, ValueError) as e:
        logger.warning(f"Rejected chat request: {e}")
        return _error_response(status.HTTP_400_BAD_REQUEST, str(e))

    # Wait for the first content so upstream rejections still get a JSON answer.
    iterator = aiter(chunks)
    try:
        first = await _first_content(iterator)
    except Exception as e:
        logger.error(f"Model API error: {e}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, _error_detail(e))

    stream = _empty() if first is None else _prepend(first, iterator)

    return StreamingResponse(
        translate_stream(stream),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
