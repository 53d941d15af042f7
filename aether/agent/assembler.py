"""Builds the outbound model request from the transcript and the new turn."""

import logging

from aether.models.schemas import Content, InlineData, Part, Role, UserMessage

logger = logging.getLogger(__name__)


class InvalidRequestError(Exception):
    """Raised when a chat request carries nothing to send to the model."""

    pass


def _filter_history(messages: list[Content]) -> list[Content]:
    """Drop empty parts, then drop turns left with no parts."""
    history: list[Content] = []
    for message in messages:
        parts = [part for part in message.parts if part.has_content()]
        if parts:
            history.append(Content(role=message.role, parts=parts))
    return history


def build_user_turn(user_message: UserMessage) -> Content:
    """Convert the new user turn into model content.

    Args:
        user_message: Text and optional image submitted by the user.

    Returns:
        A user Content with a text part and, if attached, an inline image part.
    """
    parts: list[Part] = []
    if user_message.content:
        parts.append(Part(text=user_message.content))
    if user_message.image:
        parts.append(
            Part(
                inline_data=InlineData(
                    mime_type=user_message.image.type,
                    data=user_message.image.data,
                )
            )
        )
    return Content(role=Role.USER, parts=parts)


def assemble_contents(messages: list[Content], user_message: UserMessage) -> list[Content]:
    """Assemble the full content list for one model call.

    Args:
        messages: Prior turns, oldest first, excluding the new user turn.
        user_message: The new user turn.

    Returns:
        Filtered history followed by the new user turn.

    Raises:
        InvalidRequestError: If the new turn has neither text nor an image.
    """
    turn = build_user_turn(user_message)
    if not turn.parts:
        raise InvalidRequestError("Request must contain at least one valid part.")

    contents = [*_filter_history(messages), turn]
    logger.debug(f"Assembled {len(contents)} turns ({len(turn.parts)} parts in new turn)")
    return contents
