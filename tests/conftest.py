"""Pytest configuration and fixtures for Triggr tests."""

from __future__ import annotations

from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from triggr.config import Settings
from triggr.core.types import LLMResponse, Message, ToolCall, Usage
from triggr.db.database import Base
from triggr.llm.base import BaseLLMProvider
from triggr.models import Agent, User  # noqa: F401

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class MockLLMProvider(BaseLLMProvider):
    """Mock LLM provider for testing."""

    def __init__(
        self,
        model: str = "mock-model",
        response_content: str = "Mock response",
        tool_calls: list[ToolCall] | None = None,
    ) -> None:
        self._model = model
        self._response_content = response_content
        self._tool_calls = tool_calls
        self.call_count = 0
        self.received_messages: list[list[Message]] = []
        self.received_kwargs: list[dict[str, Any]] = []

    async def complete(
        self,
        messages: list[Message],
        *,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        **kwargs: Any,
    ) -> LLMResponse:
        """Mock complete implementation."""
        self.call_count += 1
        self.received_messages.append(list(messages))
        self.received_kwargs.append(
            {"temperature": temperature, "max_tokens": max_tokens, **kwargs}
        )
        return LLMResponse(
            content=self._response_content,
            model=self._model,
            usage=Usage(prompt_tokens=10, completion_tokens=5),
            finish_reason="tool_calls" if self._tool_calls else "stop",
            tool_calls=self._tool_calls,
        )

    @property
    def model(self) -> str:
        return self._model

    @property
    def provider_name(self) -> str:
        return "mock"


class MockToolCallProvider(BaseLLMProvider):
    """Mock provider that simulates tool calling behavior.

    Call ``n`` returns ``tool_calls_sequence[n]`` when set, otherwise text
    from ``responses``. Useful for testing the chat execution loop.
    """

    def __init__(
        self,
        model: str = "mock-model",
        tool_calls_sequence: list[list[ToolCall] | None] | None = None,
        responses: list[str] | None = None,
    ) -> None:
        self._model = model
        self._tool_calls_sequence = tool_calls_sequence or [None]
        self._responses = responses or ["Final response"]
        self.call_count = 0
        self.received_messages: list[list[Message]] = []
        self.received_kwargs: list[dict[str, Any]] = []

    async def complete(
        self,
        messages: list[Message],
        *,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        **kwargs: Any,
    ) -> LLMResponse:
        """Return tool_calls or text based on call sequence."""
        self.received_messages.append(list(messages))
        self.received_kwargs.append(dict(kwargs))
        idx = self.call_count
        self.call_count += 1

        tool_calls = (
            self._tool_calls_sequence[idx]
            if idx < len(self._tool_calls_sequence)
            else None
        )
        response_text = (
            self._responses[idx]
            if idx < len(self._responses)
            else self._responses[-1]
        )

        return LLMResponse(
            content=response_text if not tool_calls else "",
            model=self._model,
            usage=Usage(prompt_tokens=10, completion_tokens=5),
            finish_reason="tool_calls" if tool_calls else "stop",
            tool_calls=tool_calls,
        )

    @property
    def model(self) -> str:
        return self._model

    @property
    def provider_name(self) -> str:
        return "mock"


@pytest.fixture
def mock_provider() -> MockLLMProvider:
    """Create a mock LLM provider."""
    return MockLLMProvider()


@pytest.fixture
def mock_provider_factory():
    """Factory fixture for creating mock providers with custom responses."""

    def _factory(
        response_content: str = "Mock response",
        tool_calls: list[ToolCall] | None = None,
    ) -> MockLLMProvider:
        return MockLLMProvider(response_content=response_content, tool_calls=tool_calls)

    return _factory


@pytest.fixture
def mock_tool_call_provider_factory():
    """Factory for creating mock providers that simulate tool calling."""

    def _factory(
        tool_calls_sequence: list[list[ToolCall] | None] | None = None,
        responses: list[str] | None = None,
    ) -> MockToolCallProvider:
        return MockToolCallProvider(
            tool_calls_sequence=tool_calls_sequence,
            responses=responses,
        )

    return _factory


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        openai_api_key="",
        openrouter_api_key="",
        openrouter_base_url="https://openrouter.ai/api/v1",
        default_agent_model="",
        tool_config_model="",
        kestra_url="http://kestra.test:8080/",
        kestra_username="admin@kestra.io",
        kestra_password="kestra",
        kestra_namespace="triggr.workflows",
        max_tool_rounds=3,
        new_user_token=5000,
    )


@pytest.fixture
def weather_graph_payload() -> dict[str, Any]:
    """Start -> Agent -> API -> IfElse -(if)-> Approval -> End, -(else)-> End."""
    return {
        "nodes": [
            {"id": "start", "type": "StartNode", "position": {"x": 0, "y": 0},
             "data": {"label": "Start"}},
            {"id": "agent-1", "type": "AgentNode", "position": {"x": 200, "y": 0},
             "data": {"label": "Agent", "settings": {
                 "name": "Weather Agent",
                 "instruction": "Answer weather questions.",
                 "model": "openai/gpt-4o",
             }}},
            {"id": "api-1", "type": "ApiNode", "position": {"x": 400, "y": 0},
             "data": {"label": "API", "settings": {
                 "name": "Weather API",
                 "endpoint": "https://api.weather.test/v1/current.json?q={city}",
                 "method": "get",
                 "authType": "query",
                 "apiKeyName": "key",
             }}},
            {"id": "if-1", "type": "IfElseNode", "position": {"x": 600, "y": 0},
             "data": {"label": "If / Else", "settings": {"ifCondition": "outputs.api_1.code == 200"}}},
            {"id": "approve-1", "type": "UserApprovalNode", "position": {"x": 800, "y": -100},
             "data": {"label": "Approval", "settings": {"name": "Check", "message": "Send report?"}}},
            {"id": "end", "type": "EndNode", "position": {"x": 1000, "y": 0},
             "data": {"label": "End"}},
        ],
        "edges": [
            {"id": "e1", "source": "start", "target": "agent-1"},
            {"id": "e2", "source": "agent-1", "target": "api-1"},
            {"id": "e3", "source": "api-1", "target": "if-1"},
            {"id": "e4", "source": "if-1", "target": "approve-1", "sourceHandle": "if"},
            {"id": "e5", "source": "if-1", "target": "end", "sourceHandle": "else"},
            {"id": "e6", "source": "approve-1", "target": "end"},
        ],
    }


@pytest_asyncio.fixture
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        future=True,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    AsyncSessionLocal = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
