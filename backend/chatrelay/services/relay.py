from __future__ import annotations
import traceback
from typing import Any, Dict, Tuple

from chatrelay.clients.base import ChatAdapter, ChatRequest, ProviderConfig
from chatrelay.clients.result import ChatResult, ErrorKind, Failure
from chatrelay.logging import log_chat_received, log_relay_failed, log_relay_succeeded

# HTTP status returned to the caller per failure kind; the upstream status is
# reported in the body, never forwarded.
STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.MISSING_CREDENTIAL: 500,
    ErrorKind.TRANSPORT_FAILURE: 500,
    ErrorKind.UPSTREAM_ERROR: 500,
    ErrorKind.MALFORMED_RESPONSE: 500,
    ErrorKind.UNEXPECTED_SHAPE: 500,
    ErrorKind.SERVER_ERROR: 500,
}

ERROR_TITLES = {
    ErrorKind.INVALID_INPUT: "Message is required",
    ErrorKind.MISSING_CREDENTIAL: "API key not configured",
    ErrorKind.TRANSPORT_FAILURE: "Failed to reach {label} API",
    ErrorKind.UPSTREAM_ERROR: "{label} API error",
    ErrorKind.MALFORMED_RESPONSE: "Invalid response from {label} API",
    ErrorKind.UNEXPECTED_SHAPE: "Unexpected response format",
    ErrorKind.SERVER_ERROR: "Failed to process the request",
}


async def relay_chat(request: ChatRequest, config: ProviderConfig, adapter: ChatAdapter) -> ChatResult:
    """Relay one chat message through `adapter` and log the outcome."""
    log_chat_received(len(request.message) if isinstance(request.message, str) else 0)
    result = await adapter.relay(request, config)
    if result.ok:
        log_relay_succeeded(len(result.text))
    else:
        log_relay_failed(result.error_kind.value, result.message, result.status_code)
    return result


def error_payload(result: Failure, label: str) -> Tuple[int, Dict[str, Any]]:
    """Map a Failure to the (status, JSON body) returned by the HTTP front door."""
    body: Dict[str, Any] = {
        "error": ERROR_TITLES[result.error_kind].format(label=label),
        "details": result.message,
        "kind": result.error_kind.value,
    }
    if result.provider_details is not None:
        body["upstream"] = result.provider_details
    if result.status_code is not None:
        body["upstream_status"] = result.status_code
    return STATUS_BY_KIND[result.error_kind], body


def server_error_payload(exc: BaseException, *, include_stack: bool = False) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "error": ERROR_TITLES[ErrorKind.SERVER_ERROR],
        "details": str(exc) or exc.__class__.__name__,
        "kind": ErrorKind.SERVER_ERROR.value,
        "type": exc.__class__.__name__,
    }
    if include_stack:
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return body


__all__ = ["relay_chat", "error_payload", "server_error_payload", "STATUS_BY_KIND", "ERROR_TITLES"]
