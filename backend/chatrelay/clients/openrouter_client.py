from __future__ import annotations
from typing import Any, Dict

from .base import HttpChatAdapter, ProviderConfig

OPENROUTER_BASE = "https://openrouter.ai/api/v1"


def extract_choice_text(data: Any) -> str | None:
    """Return `choices[0].message.content` from an OpenAI-style completion body."""
    if not isinstance(data, dict):
        return None
    choices = data.get('choices') or []
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    msg = choices[0].get('message')
    if not isinstance(msg, dict):
        return None
    return msg.get('content')


class OpenRouterAdapter(HttpChatAdapter):
    provider = 'openrouter'
    label = 'OpenRouter'

    def endpoint(self, config: ProviderConfig) -> str:
        return f"{(config.base_url or OPENROUTER_BASE).rstrip('/')}/chat/completions"

    def headers(self, config: ProviderConfig) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Authorization": f"Bearer {config.api_key}"}
        # attribution headers (HTTP-Referer / X-Title) are optional
        headers.update(config.extra_headers)
        return headers

    def build_payload(self, message: str, config: ProviderConfig) -> Dict[str, Any]:
        return {"model": config.model_id, "messages": [{"role": "user", "content": message}]}

    def extract_text(self, data: Any) -> str | None:
        return extract_choice_text(data)
