"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - fake_agent: Stand-in for the Agno agent service with scripted chunks
    - async_client: HTTPX client for API testing, wired to fake_agent
    - message_store: Empty transcript

Upstream chunks are either plain namespaces shaped like Agno run events or
Agno's own event classes (see ``run_content`` and ``run_error``). No test ever
reaches the real model API.
"""

from collections.abc import AsyncGenerator, AsyncIterator
from types import SimpleNamespace
from typing import Any

import pytest
from agno.models.message import Citations, UrlCitation
from agno.run.agent import RunContentEvent, RunErrorEvent
from httpx import ASGITransport, AsyncClient

from aether.agent import chat_agent
from aether.api import app
from aether.models.schemas import Content
from aether.ui.message_store import MessageStore


def chunk(text: str | None = None, citations: Any = None, event: str | None = None) -> SimpleNamespace:
    """Build an upstream chunk shaped like an Agno content event."""
    fields: dict[str, Any] = {"content": text, "citations": citations}
    if event is not None:
        fields["event"] = event
    return SimpleNamespace(**fields)


def run_content(text: str, urls: list[tuple[str, str]] | None = None) -> RunContentEvent:
    """Build a real Agno content event, optionally carrying url citations."""
    citations = None
    if urls:
        citations = Citations(urls=[UrlCitation(url=url, title=title) for url, title in urls])
    return RunContentEvent(content=text, citations=citations)


def run_error(message: str) -> RunErrorEvent:
    """Build the event Agno yields in place of raising when a streamed run fails."""
    return RunErrorEvent(content=message, error_type="ModelProviderError")


class FakeAgentService:
    """Records assembled contents and replays scripted chunks.

    Args:
        chunks: Items to yield; an Exception instance is raised in place.
    """

    def __init__(self, chunks: list[Any] | None = None) -> None:
        self.chunks: list[Any] = list(chunks or [])
        self.calls: list[list[Content]] = []

    async def _replay(self) -> AsyncIterator[Any]:
        for item in self.chunks:
            if isinstance(item, Exception):
                raise item
            yield item

    def stream_chunks(self, contents: list[Content]) -> AsyncIterator[Any]:
        self.calls.append(contents)
        return self._replay()


@pytest.fixture
def fake_agent(monkeypatch: pytest.MonkeyPatch) -> FakeAgentService:
    """Replace the agent singleton with a scripted fake.

    Returns:
        The fake; tests set ``fake_agent.chunks`` before calling the API.
    """
    service = FakeAgentService()
    monkeypatch.setattr(chat_agent, "get_agent_service", lambda: service)
    return service


@pytest.fixture
async def async_client(fake_agent: FakeAgentService) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def message_store() -> MessageStore:
    return MessageStore()
