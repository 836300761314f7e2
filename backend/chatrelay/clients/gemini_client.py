from __future__ import annotations
from typing import Any, Dict

from .base import HttpChatAdapter, ProviderConfig

GEMINI_BASE = "https://generativelanguage.googleapis.com/v1beta"


class GeminiRestAdapter(HttpChatAdapter):
    """Gemini `generateContent` over plain REST.

    The key travels in the `x-goog-api-key` header so request URLs can be
    logged as-is.
    """
    provider = 'gemini'
    label = 'Gemini'

    def endpoint(self, config: ProviderConfig) -> str:
        base = (config.base_url or GEMINI_BASE).rstrip('/')
        return f"{base}/models/{config.model_id}:generateContent"

    def headers(self, config: ProviderConfig) -> Dict[str, str]:
        return {"Content-Type": "application/json", "x-goog-api-key": config.api_key or ""}

    def build_payload(self, message: str, config: ProviderConfig) -> Dict[str, Any]:
        return {"contents": [{"parts": [{"text": message}]}]}

    def extract_text(self, data: Any) -> str | None:
        if not isinstance(data, dict):
            return None
        candidates = data.get('candidates')
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            return None
        content = candidates[0].get('content')
        parts = content.get('parts') if isinstance(content, dict) else None
        if not parts or not isinstance(parts, list) or not isinstance(parts[0], dict):
            return None
        return parts[0].get('text')

    def describe_missing(self, data: Any) -> str:
        if isinstance(data, dict):
            feedback = data.get('promptFeedback')
            reason = feedback.get('blockReason') if isinstance(feedback, dict) else None
            if reason:
                return f"Prompt was blocked by Gemini (blockReason: {reason})"
        return super().describe_missing(data)
