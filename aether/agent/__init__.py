"""Agno agent logic for the upstream model call.

Turns a chat request into a streaming Gemini call and the model's events
back into the client protocol.

Responsibilities:
    - Request assembly and validation of the outbound turn
    - Agent initialization with a Gemini model and web search grounding
    - Citation normalization at the upstream boundary
    - Translation of model events into server-sent events

Maintains clean separation from the HTTP layer.
"""

from aether.agent.assembler import InvalidRequestError, assemble_contents
from aether.agent.chat_agent import AgentService, get_agent_service
from aether.agent.citations import normalize_citations
from aether.agent.config import AgentConfig, ConfigError, get_agent_config
from aether.agent.translator import ChunkTranslationError, UpstreamStreamError, translate_stream

__all__ = [
    "AgentConfig",
    "AgentService",
    "ChunkTranslationError",
    "ConfigError",
    "InvalidRequestError",
    "UpstreamStreamError",
    "assemble_contents",
    "get_agent_config",
    "get_agent_service",
    "normalize_citations",
    "translate_stream",
]
