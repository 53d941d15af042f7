"""Unit tests for AgentService and AgentConfig.

Tests configuration validation, message conversion and agent initialization.
"""

from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from aether.agent.config import AgentConfig, ConfigError, get_agent_config
from aether.models.schemas import Content, InlineData, Part, Role


class TestAgentConfig:
    """Tests for AgentConfig validation."""

    def test_valid_config_with_all_fields(self) -> None:
        """Config accepts valid values for all fields."""
        config = AgentConfig(
            api_key="test-key-12345",
            model_name="gemini-2.5-pro",
            temperature=0.5,
            max_tokens=2048,
            search=False,
        )

        assert config.api_key == "test-key-12345"
        assert config.model_name == "gemini-2.5-pro"
        assert config.temperature == 0.5
        assert config.max_tokens == 2048
        assert config.search is False

    def test_config_with_default_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Config uses the chat defaults when only API key provided."""
        monkeypatch.delenv("LLM_MODEL", raising=False)
        config = AgentConfig(api_key="test-key")

        assert config.model_name == "gemini-2.5-flash"
        assert config.temperature == 0.7
        assert config.top_k == 1
        assert config.top_p == 1.0
        assert config.max_tokens == 8192
        assert config.search is True

    def test_config_fails_with_missing_api_key(self) -> None:
        """Config raises ValueError when API key is missing."""
        with pytest.raises(ValidationError) as exc_info:
            AgentConfig(api_key="")

        assert "GEMINI_API_KEY is required" in str(exc_info.value)

    def test_config_fails_with_whitespace_api_key(self) -> None:
        """Config rejects whitespace-only API key."""
        with pytest.raises(ValidationError) as exc_info:
            AgentConfig(api_key="   ")

        assert "GEMINI_API_KEY is required" in str(exc_info.value)

    def test_config_strips_api_key_whitespace(self) -> None:
        """Config strips leading/trailing whitespace from API key."""
        config = AgentConfig(api_key="  test-key  ")

        assert config.api_key == "test-key"

    def test_config_fails_with_temperature_out_of_range(self) -> None:
        """Config rejects temperature outside 0.0-2.0."""
        with pytest.raises(ValidationError) as exc_info:
            AgentConfig(api_key="k", temperature=2.5)

        assert "temperature" in str(exc_info.value).lower()

    def test_config_accepts_boundary_temperatures(self) -> None:
        """Config accepts temperature at boundaries (0.0 and 2.0)."""
        assert AgentConfig(api_key="k", temperature=0.0).temperature == 0.0
        assert AgentConfig(api_key="k", temperature=2.0).temperature == 2.0

    def test_config_fails_with_max_tokens_too_low(self) -> None:
        """Config rejects max_tokens below 1."""
        with pytest.raises(ValidationError) as exc_info:
            AgentConfig(api_key="k", max_tokens=0)

        assert "max_tokens" in str(exc_info.value).lower()


class TestGetAgentConfig:
    """Tests for get_agent_config factory function."""

    def test_get_config_from_environment(self) -> None:
        """get_agent_config loads API key from environment."""
        with patch.dict("os.environ", {"GEMINI_API_KEY": "env-key"}):
            config = get_agent_config()

        assert config.api_key == "env-key"

    def test_google_api_key_is_a_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")

        assert get_agent_config().api_key == "google-key"

    def test_get_config_fails_without_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """get_agent_config raises ConfigError when no key is set."""
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)

        with pytest.raises(ConfigError, match="GEMINI_API_KEY is required"):
            get_agent_config()


class TestToAgentMessage:
    """Tests for converting wire turns into Agno messages."""

    def test_model_role_becomes_assistant(self) -> None:
        from aether.agent.chat_agent import to_agent_message

        message = to_agent_message(Content(role=Role.MODEL, parts=[Part(text="hi")]))

        assert message.role == "assistant"
        assert message.content == "hi"

    def test_text_parts_are_joined(self) -> None:
        from aether.agent.chat_agent import to_agent_message

        message = to_agent_message(
            Content(role=Role.USER, parts=[Part(text="one"), Part(text="two")])
        )

        assert message.content == "one\n\ntwo"
        assert not message.images

    def test_inline_data_becomes_image(self) -> None:
        from aether.agent.chat_agent import to_agent_message

        part = Part(inline_data=InlineData(mime_type="image/png", data="aGVsbG8="))
        message = to_agent_message(Content(role=Role.USER, parts=[Part(text="look"), part]))

        assert len(message.images) == 1
        assert message.images[0].content == b"hello"

    def test_invalid_base64_is_rejected(self) -> None:
        from aether.agent.chat_agent import to_agent_message

        part = Part(inline_data=InlineData(mime_type="image/png", data="not base64!!"))

        with pytest.raises(ValueError, match="base64"):
            to_agent_message(Content(role=Role.USER, parts=[part]))


class TestAgentServiceInit:
    """Tests for AgentService initialization."""

    @patch("aether.agent.chat_agent.Gemini")
    @patch("aether.agent.chat_agent.Agent")
    def test_service_uses_config_values(
        self,
        mock_agent_class: MagicMock,
        mock_gemini: MagicMock,
    ) -> None:
        """AgentService passes config values to the Gemini model."""
        from aether.agent.chat_agent import AgentService

        config = AgentConfig(
            api_key="custom-key",
            model_name="gemini-2.5-pro",
            temperature=0.3,
            max_tokens=4096,
        )

        service = AgentService(config=config)

        kwargs = mock_gemini.call_args.kwargs
        assert kwargs["id"] == "gemini-2.5-pro"
        assert kwargs["api_key"] == "custom-key"
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_output_tokens"] == 4096
        assert kwargs["search"] is True
        assert len(kwargs["safety_settings"]) == 4
        mock_agent_class.assert_called_once_with(model=mock_gemini.return_value)
        assert service._config == config

    @patch("aether.agent.chat_agent.Gemini")
    @patch("aether.agent.chat_agent.Agent")
    def test_stream_chunks_streams_converted_messages(
        self,
        mock_agent_class: MagicMock,
        mock_gemini: MagicMock,
    ) -> None:
        """stream_chunks hands Agno messages to a streaming run."""
        from aether.agent.chat_agent import AgentService

        service = AgentService(config=AgentConfig(api_key="k"))
        agent = mock_agent_class.return_value

        result = service.stream_chunks(
            [
                Content(role=Role.USER, parts=[Part(text="hi")]),
                Content(role=Role.MODEL, parts=[Part(text="hello")]),
                Content(role=Role.USER, parts=[Part(text="again")]),
            ]
        )

        assert result is agent.arun.return_value
        kwargs = agent.arun.call_args.kwargs
        assert kwargs["stream"] is True
        assert [m.role for m in kwargs["input"]] == ["user", "assistant", "user"]


class TestGetAgentService:
    """Tests for get_agent_service singleton function."""

    def test_singleton_returns_same_instance(self) -> None:
        """get_agent_service returns the same instance on multiple calls."""
        import aether.agent.chat_agent as chat_agent_module

        chat_agent_module._agent_service = None

        with patch.object(chat_agent_module, "AgentService") as mock_service:
            mock_service.return_value = MagicMock()

            first = chat_agent_module.get_agent_service()
            second = chat_agent_module.get_agent_service()

            assert first is second
            mock_service.assert_called_once()

        chat_agent_module._agent_service = None
