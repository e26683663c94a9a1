"""Integration test fixtures.

This module provides shared fixtures for integration tests including:
- A scripted fake model provider that replays canned chunk streams
- A dispatcher that records every tool call
- A shallow FastAPI app with only the routers under test
"""

import copy
from collections.abc import AsyncGenerator, Generator
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from athena_tutor.agents.tutor.routes import tutor_router
from athena_tutor.agents.tutor.tools import ToolDispatch, ToolResult
from athena_tutor.platform.llm.messages import StreamChunk
from athena_tutor.platform.server.health import HealthCheck
from athena_tutor.platform.server.routes import root as root_router
from athena_tutor.platform.settings import Settings

# =============================================================================
# Provider and Dispatcher Fakes
# =============================================================================


class ScriptedProvider:
    """Fake model provider that replays one chunk script per streaming round.

    This is a fake (not a mock): it behaves like a provider, records every
    request it receives and raises any exception found in a script at that
    point of the stream. Rounds past the end of ``rounds`` stop immediately.
    """

    def __init__(self, rounds: list[list[Any]] | None = None):
        self.rounds = rounds or []
        self.requests: list[dict[str, Any]] = []
        self.closed_streams = 0
        self.complete = AsyncMock(return_value="")
        self.transcribe = AsyncMock(return_value="")
        self.speech = AsyncMock(return_value=b"")

    async def stream_chat(
        self,
        model: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        **params: Any,
    ) -> AsyncGenerator[StreamChunk, None]:
        index = len(self.requests)
        self.requests.append(
            {
                "model": model,
                "messages": copy.deepcopy(messages),
                "tools": tools,
                "params": params,
            }
        )
        script = self.rounds[index] if index < len(self.rounds) else [StreamChunk(finish_reason="stop")]
        try:
            for item in script:
                if isinstance(item, Exception):
                    raise item
                yield item
        finally:
            self.closed_streams += 1


class RecordingDispatch:
    """Dispatcher that records calls and returns a canned result or runs the real tool."""

    def __init__(self, result: ToolResult | None = None):
        self.result = result
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._dispatch = ToolDispatch()

    async def execute(self, name: str, args: dict[str, Any]) -> ToolResult:
        self.calls.append((name, copy.deepcopy(args)))
        if self.result is not None:
            return self.result
        return await self._dispatch.execute(name, args)


@pytest.fixture
def scripted_provider() -> ScriptedProvider:
    """Provider with no scripts; tests assign ``rounds`` before posting."""
    return ScriptedProvider()


@pytest.fixture
def recording_dispatch() -> RecordingDispatch:
    """Dispatcher that runs the real math tools and records each call."""
    return RecordingDispatch()


@pytest.fixture
def test_settings() -> Settings:
    return Settings()


# =============================================================================
# FastAPI App Fixtures (Shallow - no middleware, minimal lifespan)
# =============================================================================


@pytest.fixture
def test_app(
    test_settings: Settings,
    scripted_provider: ScriptedProvider,
    recording_dispatch: RecordingDispatch,
) -> FastAPI:
    """Create a minimal test FastAPI app for integration tests.

    This is intentionally SHALLOW - no middleware, no lifespan. The provider
    and dispatcher fakes are placed on app.state directly.
    """
    app = FastAPI()

    app.state.settings = test_settings
    app.state.provider = scripted_provider
    app.state.dispatch = recording_dispatch

    app.include_router(root_router)
    app.include_router(tutor_router)

    return app


@pytest.fixture
def client(test_app: FastAPI) -> TestClient:
    """Create a test client for the test app.

    No context manager needed since we're not using lifespan.
    """
    return TestClient(test_app)


@pytest.fixture
def client_with_health_enabled(test_app: FastAPI) -> Generator[TestClient]:
    """Create a test client with health checks enabled."""
    HealthCheck.enable()
    yield TestClient(test_app)
    HealthCheck.disable()


@pytest.fixture
def client_with_health_disabled(test_app: FastAPI) -> Generator[TestClient]:
    """Create a test client with health checks disabled."""
    HealthCheck.disable()
    yield TestClient(test_app)
