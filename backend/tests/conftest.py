"""Global pytest fixtures for the chat relay.

Usage:
  pytest            (from the repository root; no network or credentials needed)

This file will:
  * Provide `settings` built by `build_test_settings` (fixed fake keys)
  * Provide `make_client` to build a TestClient around a fresh app for given settings
  * Provide `client` bound to the default test settings
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from chatrelay.clients.base import ChatAdapter, ProviderConfig
from chatrelay.core.test_settings import build_test_settings
from chatrelay.main import create_app


@pytest.fixture(scope="session")
def anyio_backend():  # ensure anyio uses asyncio
    return "asyncio"


@pytest.fixture
def settings():
    return build_test_settings()


@pytest.fixture
def make_client():
    def _make(settings=None, adapter: ChatAdapter | None = None, **client_kwargs) -> TestClient:
        app = create_app(settings or build_test_settings())
        if adapter is not None:
            from chatrelay.deps import chat_adapter
            app.dependency_overrides[chat_adapter] = lambda: adapter
        return TestClient(app, **client_kwargs)
    return _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def gemini_config(settings) -> ProviderConfig:
    return settings.provider_config()
