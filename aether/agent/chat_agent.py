"""Agno agent service streaming Gemini responses with web search grounding.

Core module for the chatbot's link to the hosted model.

Architecture Decisions:

1. **Stateless** - The browser owns the transcript and sends the prior turns
   with every request. The agent has no storage; each request is independent,
   so concurrent users never share mutable state.

2. **Singleton Pattern** - Building the agent (model client, safety settings)
   is done once and reused across requests.

3. **Service Wrapper** - Decouples the HTTP layer from Agno's interface. The
   endpoint only sees wire-level ``Content`` turns going in and raw run events
   coming out; conversion to Agno messages happens here.

4. **Raw Event Stream** - Unlike a plain text generator, ``stream_chunks``
   hands back Agno's events untouched. Citations ride on the same events as
   the text, and the translator needs both.
"""

import base64
import logging
from collections.abc import AsyncIterator
from typing import Any

from agno.agent import Agent
from agno.media import Image
from agno.models.google import Gemini
from agno.models.message import Message
from google.genai import types

from aether.agent.config import AgentConfig, get_agent_config
from aether.models.schemas import Content, Role

logger = logging.getLogger(__name__)

_BLOCKED_CATEGORIES = (
    types.HarmCategory.HARM_CATEGORY_HARASSMENT,
    types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
    types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
    types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
)

_AGENT_ROLES = {Role.USER: "user", Role.MODEL: "assistant"}


def to_agent_message(content: Content) -> Message:
    """Convert one wire-level turn into an Agno message.

    Text parts are joined with blank lines; inline data parts become images.

    Args:
        content: A filtered turn from the request assembler.

    Returns:
        Agno Message carrying the text and any images.
    """
    texts: list[str] = []
    images: list[Image] = []
    for part in content.parts:
        if part.text:
            texts.append(part.text)
        if part.inline_data is not None:
            try:
                raw = base64.b64decode(part.inline_data.data, validate=True)
            except ValueError as e:
                raise ValueError(f"Inline data is not valid base64: {e}") from e
            images.append(Image(content=raw, mime_type=part.inline_data.mime_type))

    return Message(
        role=_AGENT_ROLES[content.role],
        content="\n\n".join(texts),
        images=images or None,
    )


class AgentService:
    """Service for managing the Agno chat agent.

    Wraps Agno's Agent with:
    - Gemini model with Google Search grounding
    - Safety settings blocking medium-and-above harm
    - Singleton lifecycle management
    - Raw event streaming for the SSE translator
    """

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the agent service.

        Args:
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()
        self._agent = self._create_agent()

    @property
    def model_name(self) -> str:
        return self._config.model_name

    @property
    def search(self) -> bool:
        return self._config.search

    def _safety_settings(self) -> list[types.SafetySetting]:
        return [
            types.SafetySetting(
                category=category,
                threshold=types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
            )
            for category in _BLOCKED_CATEGORIES
        ]

    def _create_agent(self) -> Agent:
        """Create the Agno agent instance.

        Returns:
            Configured Agent with a Gemini model and no storage.
        """
        model = Gemini(
            id=self._config.model_name,
            api_key=self._config.api_key,
            temperature=self._config.temperature,
            top_k=self._config.top_k,
            top_p=self._config.top_p,
            max_output_tokens=self._config.max_tokens,
            search=self._config.search,
            safety_settings=self._safety_settings(),
        )

        return Agent(model=model)

    def stream_chunks(self, contents: list[Content]) -> AsyncIterator[Any]:
        """Open a streaming model call for an assembled conversation.

        Args:
            contents: Prior turns followed by the new user turn.

        Returns:
            Async iterator over Agno run events as they arrive.
        """
        messages = [to_agent_message(content) for content in contents]
        logger.debug(f"Opening model stream with {len(messages)} messages")
        return self._agent.arun(input=messages, stream=True)


# Module-level singleton instance
_agent_service: AgentService | None = None


def get_agent_service() -> AgentService:
    """Get or create the global agent service.

    Uses singleton pattern for resource efficiency.

    Returns:
        The AgentService instance.

    Raises:
        ConfigError: If the agent configuration is incomplete.
    """
    global _agent_service
    if _agent_service is None:
        _agent_service = AgentService()
    return _agent_service
