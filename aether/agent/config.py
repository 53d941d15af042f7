"""Agent configuration with environment variable loading.

Pydantic-based configuration for the Gemini-backed chat agent.
Google Search grounding is enabled by default so the model can cite
web sources.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

# Load environment variables from .env file
load_dotenv()


class ConfigError(Exception):
    """Raised when required server configuration is missing or invalid."""

    pass


class AgentConfig(BaseModel):
    """Configuration for the Gemini chat agent.

    Attributes:
        api_key: Gemini API key.
        model_name: Model identifier to use.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        top_k: Top-k sampling cutoff.
        top_p: Nucleus sampling cutoff.
        max_tokens: Maximum tokens in generated response.
        search: Whether Google Search grounding is enabled.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY", os.getenv("GOOGLE_API_KEY", "")),
        description="API key for the Gemini API",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gemini-2.5-flash"),
        description="Model to use",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    top_k: int = Field(default=1, ge=1, description="Top-k sampling cutoff")
    top_p: float = Field(default=1.0, gt=0.0, le=1.0, description="Nucleus sampling cutoff")
    max_tokens: int = Field(
        default=8192,
        ge=1,
        le=65536,
        description="Maximum tokens in generated response",
    )
    search: bool = Field(default=True, description="Enable Google Search grounding")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("GEMINI_API_KEY is required. Set it in the environment or .env")
        return v.strip()


def get_agent_config() -> AgentConfig:
    """Create agent configuration from environment.

    Returns:
        Configured AgentConfig instance.

    Raises:
        ConfigError: If no API key is set or a value is out of range.
    """
    try:
        return AgentConfig()
    except ValidationError as e:
        messages = "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())
        raise ConfigError(messages) from e
