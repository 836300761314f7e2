from __future__ import annotations
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from chatrelay.clients.base import ChatAdapter, ChatRequest, ProviderConfig
from chatrelay.core.settings import Settings
from chatrelay.deps import app_settings, chat_adapter, provider_config
from chatrelay.logging import set_log_provider, slog
from chatrelay.schemas.chat import ChatIn, ChatOut, ErrorOut
from chatrelay.services.relay import error_payload, relay_chat, server_error_payload

router = APIRouter(prefix="/api", tags=["chat"])


@router.post(
    "/chat",
    response_model=ChatOut,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
async def chat(
    body: ChatIn | None = None,
    config: ProviderConfig = Depends(provider_config),
    adapter: ChatAdapter = Depends(chat_adapter),
    settings: Settings = Depends(app_settings),
):
    set_log_provider(config.provider)
    try:
        result = await relay_chat(ChatRequest(message=body.message if body else None), config, adapter)
    except Exception as e:
        slog.error("relay_crashed", error=str(e), type=e.__class__.__name__, exc_info=True)
        return JSONResponse(status_code=500, content=server_error_payload(e, include_stack=settings.is_development))
    if not result.ok:
        status, payload = error_payload(result, adapter.label)
        return JSONResponse(status_code=status, content=payload)
    return ChatOut(response=result.text)
