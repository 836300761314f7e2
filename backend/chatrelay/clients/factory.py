from __future__ import annotations
from typing import Literal

from .base import ChatAdapter
from .deepseek_client import DeepSeekAdapter
from .gemini_client import GeminiRestAdapter
from .gemini_sdk_client import GeminiSdkAdapter
from .openrouter_client import OpenRouterAdapter

Provider = Literal['gemini', 'gemini-sdk', 'deepseek', 'openrouter']
PROVIDERS: tuple[str, ...] = ('gemini', 'gemini-sdk', 'deepseek', 'openrouter')


def get_adapter(provider: Provider | str) -> ChatAdapter:
    p = provider.lower()
    if p == 'gemini':
        return GeminiRestAdapter()
    if p == 'gemini-sdk':
        return GeminiSdkAdapter()
    if p == 'deepseek':
        return DeepSeekAdapter()
    if p == 'openrouter':
        return OpenRouterAdapter()
    raise ValueError(f"Unsupported provider {provider}")
