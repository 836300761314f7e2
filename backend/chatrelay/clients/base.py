from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict
import httpx
import logging, time

from chatrelay.logging import log_upstream_request, log_upstream_response
from .result import ChatResult, ErrorKind, failure, success, scrub

logger = logging.getLogger("chat_clients")

RAW_BODY_LIMIT = 1000
_UNPARSED = object()


@dataclass(frozen=True)
class ChatRequest:
    message: str | None = None

    def is_empty(self) -> bool:
        return not isinstance(self.message, str) or not self.message.strip()


@dataclass(frozen=True)
class TimeoutPolicy:
    total: float = 30.0  # seconds
    connect: float = 10.0

    def as_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(self.total, connect=self.connect)


@dataclass(frozen=True)
class ProviderConfig:
    provider: str
    base_url: str
    api_key: str | None
    model_id: str
    timeout: TimeoutPolicy = field(default_factory=TimeoutPolicy)
    extra_headers: Dict[str, str] = field(default_factory=dict)

    @property
    def key_status(self) -> str:
        """Diagnostic description of the credential; discloses length only."""
        if not self.api_key:
            return "missing"
        return f"configured (length: {len(self.api_key)})"


class ChatAdapter:
    """Relays one message to one upstream provider and normalizes the outcome.

    Subclasses implement `_dispatch`, which performs exactly one outbound call
    and returns a ChatResult. Input and credential checks happen here, before
    any network activity.
    """
    provider: str = ""
    label: str = ""

    async def relay(self, request: ChatRequest, config: ProviderConfig) -> ChatResult:
        if request.is_empty():
            return failure(ErrorKind.INVALID_INPUT, "Message is required")
        if not config.api_key:
            logger.error("%s API key is not configured", self.label)
            return failure(
                ErrorKind.MISSING_CREDENTIAL,
                f"The {self.label} API key is missing from environment variables",
            )
        result = await self._dispatch(request.message, config)
        if result.ok:
            return result
        return replace(
            result,
            message=scrub(result.message, config.api_key),
            provider_details=scrub(result.provider_details, config.api_key),
        )

    async def _dispatch(self, message: str, config: ProviderConfig) -> ChatResult:
        raise NotImplementedError("ChatAdapter._dispatch() must be implemented by a provider-specific subclass.")


class HttpChatAdapter(ChatAdapter):
    """Adapter for providers reached with a single JSON POST over httpx."""

    def endpoint(self, config: ProviderConfig) -> str:
        raise NotImplementedError

    def headers(self, config: ProviderConfig) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    def build_payload(self, message: str, config: ProviderConfig) -> Dict[str, Any]:
        raise NotImplementedError

    def extract_text(self, data: Any) -> str | None:
        raise NotImplementedError

    def extract_error_message(self, data: Any) -> str | None:
        if isinstance(data, dict):
            err = data.get('error')
            if isinstance(err, dict) and isinstance(err.get('message'), str) and err['message']:
                return err['message']
            if isinstance(err, str) and err:
                return err
        return None

    def describe_missing(self, data: Any) -> str:
        return "The API response did not contain the expected data structure"

    async def _dispatch(self, message: str, config: ProviderConfig) -> ChatResult:
        url = self.endpoint(config)
        log_upstream_request(self.provider, config.model_id, url)
        started = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=config.timeout.as_httpx()) as client:
                resp = await client.post(url, json=self.build_payload(message, config), headers=self.headers(config))
        except httpx.TimeoutException as e:
            logger.warning("%s request timed out: %r", self.label, e)
            return failure(ErrorKind.TRANSPORT_FAILURE, f"Request to {self.label} API timed out: {str(e) or e.__class__.__name__}")
        except httpx.TransportError as e:
            logger.warning("%s request failed: %r", self.label, e)
            return failure(ErrorKind.TRANSPORT_FAILURE, str(e) or e.__class__.__name__)
        log_upstream_response(self.provider, resp.status_code, int((time.perf_counter() - started) * 1000))
        return self.normalize(resp)

    def normalize(self, resp: httpx.Response) -> ChatResult:
        raw = resp.text
        try:
            data = resp.json()
        except ValueError:
            data = _UNPARSED

        if not resp.is_success:
            logger.warning("%s call failed %s: %s", self.label, resp.status_code, raw[:200])
            msg = self.extract_error_message(data) if data is not _UNPARSED else None
            if data is _UNPARSED:
                details = raw[:RAW_BODY_LIMIT]
            elif isinstance(data, dict) and 'error' in data:
                details = data['error']
            else:
                details = data
            return failure(
                ErrorKind.UPSTREAM_ERROR,
                msg or raw.strip()[:RAW_BODY_LIMIT] or f"{self.label} API returned HTTP {resp.status_code}",
                details=details,
                status_code=resp.status_code,
            )

        if data is _UNPARSED:
            logger.warning("%s returned a non-JSON body: %s", self.label, raw[:200])
            return failure(
                ErrorKind.MALFORMED_RESPONSE,
                "Failed to parse JSON response",
                details=raw[:RAW_BODY_LIMIT],
                status_code=resp.status_code,
            )

        text = self.extract_text(data)
        if not isinstance(text, str) or not text:
            logger.warning("%s unexpected response format: %s", self.label, raw[:200])
            return failure(
                ErrorKind.UNEXPECTED_SHAPE,
                self.describe_missing(data),
                details=data,
                status_code=resp.status_code,
            )
        return success(text)


__all__ = ['ChatRequest', 'TimeoutPolicy', 'ProviderConfig', 'ChatAdapter', 'HttpChatAdapter', 'RAW_BODY_LIMIT']
