"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from chat_stream_relay.api.app import create_app
from chat_stream_relay.api.routes.chat import get_upstream_transport
from chat_stream_relay.config import Settings

CHAT_PATH = "/api/chat-stream"


def make_settings(**overrides) -> Settings:
    """Build settings isolated from the process environment and any .env file."""
    values = {
        "OPENAI_API_KEY": None,
        "OPENAI_BASE_URL": "https://provider.test/v1",
        "FALLBACK_CHUNK_DELAY_MS": 0,
        "REQUEST_DEADLINE_SECONDS": 5.0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def offline_settings() -> Settings:
    """Settings without a provider credential."""
    return make_settings()


@pytest.fixture
def online_settings() -> Settings:
    """Settings with a provider credential."""
    return make_settings(OPENAI_API_KEY="sk-test-123")


@pytest.fixture
def sample_conversation() -> dict:
    return {
        "messages": [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello! How can I help?"},
            {"role": "user", "content": "What projects has he built?"},
        ]
    }


@pytest.fixture
def client_factory() -> Callable[..., TestClient]:
    """Build a TestClient for the given settings and optional provider handler."""

    def _build(settings: Settings, handler: Callable | None = None) -> TestClient:
        app = create_app(settings)
        if handler is not None:
            transport = httpx.MockTransport(handler)
            app.dependency_overrides[get_upstream_transport] = lambda: transport
        return TestClient(app)

    return _build
