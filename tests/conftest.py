"""Shared pytest fixtures for FlashcardEngine tests."""

import json
from typing import Any, Callable
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from flashcardengine.models.config import OpenRouterConfig
from flashcardengine.storage.database import create_db_and_tables, create_db_engine
from flashcardengine.storage.generation_repository import SQLModelGenerationRepository


def completion_body(content: str | None, **overrides: Any) -> dict[str, Any]:
    """Build a provider response body with a single choice."""
    body: dict[str, Any] = {
        "id": "gen-test",
        "model": "openai/gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 100, "completion_tokens": 50, "total_tokens": 150},
    }
    body.update(overrides)
    return body


def flashcards_content(count: int = 3) -> str:
    return json.dumps({
        "flashcards": [
            {"front": f"Question {i}?", "back": f"Answer {i}."} for i in range(1, count + 1)
        ]
    })


class MockProvider:
    """Scripted provider: each call consumes the next response (the last one repeats)."""

    def __init__(self, *responses: httpx.Response | Exception | Callable[[httpx.Request], Any]):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def handler(self, request: httpx.Request) -> Any:
        self.requests.append(request)
        index = min(len(self.requests), len(self.responses)) - 1
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, httpx.Response):
            # Fresh copy per call; retried requests must not share a consumed response
            return httpx.Response(response.status_code, headers=response.headers, content=response.content)
        return response(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def config():
    """Config with a short per-attempt timeout and the default three attempts."""
    return OpenRouterConfig(api_key="test-api-key", timeout_seconds=5.0, max_retries=3)


@pytest.fixture(autouse=True)
def no_backoff_sleep():
    """Skip real backoff sleeps; the mock records the requested delays."""
    with patch("flashcardengine.services.retry_service._sleep", new_callable=AsyncMock) as mock_sleep:
        yield mock_sleep


@pytest.fixture
def engine():
    """In-memory SQLite engine with all tables created."""
    db_engine = create_db_engine("sqlite://")
    create_db_and_tables(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def repository(engine):
    return SQLModelGenerationRepository(engine)
