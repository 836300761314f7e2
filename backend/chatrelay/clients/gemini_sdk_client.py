from __future__ import annotations
from typing import Any, Callable
import logging, time

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from chatrelay.logging import log_upstream_request, log_upstream_response
from .base import ChatAdapter, ProviderConfig
from .result import ChatResult, ErrorKind, failure, success

logger = logging.getLogger("gemini_sdk_client")


class GeminiSdkAdapter(ChatAdapter):
    provider = 'gemini-sdk'
    label = 'Gemini'

    def __init__(self, client_factory: Callable[..., Any] = genai.Client):
        self._client_factory = client_factory

    def _client(self, config: ProviderConfig):
        opts = genai_types.HttpOptions(timeout=int(config.timeout.total * 1000))
        return self._client_factory(api_key=config.api_key, http_options=opts)

    async def _dispatch(self, message: str, config: ProviderConfig) -> ChatResult:
        log_upstream_request(self.provider, config.model_id, f"models/{config.model_id}:generateContent")
        started = time.perf_counter()
        try:
            async with self._client(config).aio as aclient:
                resp = await aclient.models.generate_content(model=config.model_id, contents=message)
        except genai_errors.APIError as e:
            logger.warning("Gemini SDK call failed %s: %s", e.code, e.message)
            return failure(
                ErrorKind.UPSTREAM_ERROR,
                e.message or str(e),
                details=e.details,
                status_code=e.code,
            )
        except (httpx.TimeoutException, TimeoutError) as e:
            logger.warning("Gemini SDK request timed out: %r", e)
            return failure(ErrorKind.TRANSPORT_FAILURE, f"Request to {self.label} API timed out")
        except (httpx.TransportError, OSError) as e:
            # OSError covers connection failures from the aiohttp transport
            logger.warning("Gemini SDK request failed: %r", e)
            return failure(ErrorKind.TRANSPORT_FAILURE, str(e) or e.__class__.__name__)
        except ValueError as e:
            # undecodable body or a payload the SDK models reject
            logger.warning("Gemini SDK could not decode response: %s", e)
            return failure(ErrorKind.MALFORMED_RESPONSE, f"Failed to parse {self.label} response: {e}")
        log_upstream_response(self.provider, 200, int((time.perf_counter() - started) * 1000))

        text = getattr(resp, 'text', None)
        if not isinstance(text, str) or not text:
            return failure(ErrorKind.UNEXPECTED_SHAPE, _describe_missing(resp), details=_dump(resp), status_code=200)
        return success(text)


def _describe_missing(resp: Any) -> str:
    feedback = getattr(resp, 'prompt_feedback', None)
    reason = getattr(feedback, 'block_reason', None) if feedback is not None else None
    if reason:
        return f"Prompt was blocked by Gemini (blockReason: {getattr(reason, 'value', reason)})"
    return "The API response did not contain the expected data structure"


def _dump(resp: Any) -> Any:
    dump = getattr(resp, 'model_dump', None)
    if callable(dump):
        return dump(mode='json', exclude_none=True)
    return None
