from __future__ import annotations
from typing import Any, Callable, Dict
import logging, time

import openai
from openai import AsyncOpenAI

from chatrelay.logging import log_upstream_request, log_upstream_response
from .base import HttpChatAdapter, ProviderConfig, RAW_BODY_LIMIT
from .openrouter_client import extract_choice_text
from .result import ChatResult, ErrorKind, failure

logger = logging.getLogger("deepseek_client")

DEEPSEEK_BASE = "https://api.deepseek.com"


class DeepSeekAdapter(HttpChatAdapter):
    """DeepSeek chat completions through the OpenAI-compatible SDK.

    The SDK owns auth and the status-error types; the raw httpx response of a
    successful call is normalized like any other HTTP adapter so undecodable
    and incomplete bodies are reported the same way.
    """
    provider = 'deepseek'
    label = 'DeepSeek'

    def __init__(self, client_factory: Callable[..., AsyncOpenAI] = AsyncOpenAI):
        self._client_factory = client_factory

    def endpoint(self, config: ProviderConfig) -> str:
        return f"{(config.base_url or DEEPSEEK_BASE).rstrip('/')}/chat/completions"

    def build_payload(self, message: str, config: ProviderConfig) -> Dict[str, Any]:
        return {"model": config.model_id, "messages": [{"role": "user", "content": message}]}

    def extract_text(self, data: Any) -> str | None:
        return extract_choice_text(data)

    async def _dispatch(self, message: str, config: ProviderConfig) -> ChatResult:
        log_upstream_request(self.provider, config.model_id, self.endpoint(config))
        started = time.perf_counter()
        try:
            async with self._client_factory(
                api_key=config.api_key,
                base_url=config.base_url or DEEPSEEK_BASE,
                timeout=config.timeout.as_httpx(),
                max_retries=0,
                default_headers=config.extra_headers or None,
            ) as client:
                raw = await client.chat.completions.with_raw_response.create(**self.build_payload(message, config))
        except openai.APITimeoutError as e:
            logger.warning("DeepSeek request timed out: %r", e)
            return failure(ErrorKind.TRANSPORT_FAILURE, f"Request to {self.label} API timed out")
        except openai.APIConnectionError as e:
            logger.warning("DeepSeek request failed: %r (cause: %r)", e, e.__cause__)
            cause = f": {e.__cause__}" if e.__cause__ else ""
            return failure(ErrorKind.TRANSPORT_FAILURE, f"{e.message}{cause}")
        except openai.APIStatusError as e:
            logger.warning("DeepSeek call failed %s: %s", e.status_code, e.response.text[:200])
            return failure(
                ErrorKind.UPSTREAM_ERROR,
                _status_error_message(e),
                details=e.body if e.body is not None else e.response.text[:RAW_BODY_LIMIT],
                status_code=e.status_code,
            )
        log_upstream_response(self.provider, raw.http_response.status_code, int((time.perf_counter() - started) * 1000))
        return self.normalize(raw.http_response)


def _status_error_message(e: openai.APIStatusError) -> str:
    # the SDK unwraps `{"error": {...}}` into `body`
    body = e.body
    if isinstance(body, dict) and isinstance(body.get('message'), str) and body['message']:
        return body['message']
    if isinstance(body, str) and body.strip():
        return body.strip()[:RAW_BODY_LIMIT]
    return e.message
