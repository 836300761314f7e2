"""Centralized logging utilities wrapping structlog configuration and reusable event helpers.

This module is imported by the provider adapters as well as the FastAPI `main` module,
so it must stay free of side-effects that depend on settings or the `app` instance.

Never pass an API key to any helper here; credentials are described by length only.
"""
from __future__ import annotations

import logging
import contextvars
import structlog
from typing import Any

# -------------------------
# ContextVars for request-scoped data
# -------------------------
_request_id_var = contextvars.ContextVar("request_id", default=None)
_provider_var = contextvars.ContextVar("provider", default=None)


def _add_context(logger, method_name: str, event_dict: dict[str, Any]):  # noqa: D401
    rid = _request_id_var.get()
    if rid:
        event_dict["request_id"] = rid
    prov = _provider_var.get()
    if prov:
        event_dict.setdefault("provider", prov)
    return event_dict

# -------------------------
# One-time structlog configuration (idempotent)
# -------------------------
if not getattr(structlog, "_CHATRELAY_CONFIGURED", False):
    logging_logger = logging.getLogger("chatrelay")
    logging_logger.setLevel(logging.INFO)
    if not logging_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logging_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _add_context,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        cache_logger_on_first_use=True,
    )
    structlog._CHATRELAY_CONFIGURED = True  # type: ignore[attr-defined]

slog = structlog.get_logger()


def set_log_level(level: str) -> None:
    """Re-filter structlog output at `level` (e.g. from LOG_LEVEL)."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.getLogger("chatrelay").setLevel(numeric)
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(numeric))

# -------------------------
# Public helper functions
# -------------------------

def set_log_request(request_id: str | None):
    _request_id_var.set(request_id)

def set_log_provider(provider: str | None):
    _provider_var.set(provider)

# Event helpers reused across modules

def log_startup_config(provider: str, model: str, api_key_configured: bool, api_key_length: int | None, **extra):
    slog.info("startup_config", provider=provider, model=model, api_key_configured=api_key_configured, api_key_length=api_key_length, **extra)

def log_chat_received(message_length: int, **extra):
    slog.info("chat_received", message_length=message_length, **extra)

def log_upstream_request(provider: str, model: str, url: str, **extra):
    slog.info("upstream_request", provider=provider, model=model, url=url, **extra)

def log_upstream_response(provider: str, status_code: int, elapsed_ms: int, **extra):
    slog.info("upstream_response", provider=provider, status_code=status_code, elapsed_ms=elapsed_ms, **extra)

def log_relay_failed(kind: str, message: str, upstream_status: int | None = None, **extra):
    slog.warning("relay_failed", kind=kind, detail=message, upstream_status=upstream_status, **extra)

def log_relay_succeeded(text_length: int, **extra):
    slog.info("relay_succeeded", text_length=text_length, **extra)
