from __future__ import annotations
"""Common FastAPI dependency helpers.

Settings and the ProviderConfig are built once in `create_app` and stored on
`app.state`; routes receive them explicitly through these dependencies and
tests swap them through `app.dependency_overrides`.
"""
from fastapi import Depends, Request

from chatrelay.clients.base import ChatAdapter, ProviderConfig
from chatrelay.clients.factory import get_adapter
from chatrelay.core.settings import Settings


def app_settings(request: Request) -> Settings:
    return request.app.state.settings


def provider_config(request: Request) -> ProviderConfig:
    return request.app.state.provider_config


def chat_adapter(config: ProviderConfig = Depends(provider_config)) -> ChatAdapter:
    """Return the adapter selected by CHAT_PROVIDER."""
    return get_adapter(config.provider)


__all__ = ["app_settings", "provider_config", "chat_adapter"]
