from __future__ import annotations
import uuid as _uuid_mod
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chatrelay import __version__
from chatrelay.clients.result import ErrorKind
from chatrelay.core.settings import Settings, get_settings
from chatrelay.logging import (
    slog,
    log_startup_config,
    set_log_level,
    set_log_provider,
    set_log_request,
)
from chatrelay.routers.chat import router as chat_router
from chatrelay.schemas.chat import HealthConfigOut, HealthOut, RootOut


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    set_log_level(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = app.state.provider_config
        log_startup_config(
            provider=cfg.provider,
            model=cfg.model_id,
            api_key_configured=bool(cfg.api_key),
            api_key_length=len(cfg.api_key) if cfg.api_key else None,
            port=settings.PORT,
        )
        yield

    app = FastAPI(title="Chat Relay API", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.provider_config = settings.provider_config()

    # -------------------------
    # Middleware: payload size limit
    # -------------------------
    max_bytes = settings.MAX_REQUEST_BYTES

    @app.middleware("http")
    async def limit_payload_size(request: Request, call_next):
        if request.method in {"POST", "PUT", "PATCH"}:
            cl = request.headers.get("content-length")
            if cl and cl.isdigit() and int(cl) > max_bytes:
                return JSONResponse(status_code=413, content={"error": "Payload too large", "details": f"Request body exceeds {max_bytes} bytes"})
        return await call_next(request)

    def server_error_response(request: Request, exc: Exception) -> JSONResponse:
        slog.error("unhandled_exception", path=request.url.path, error=str(exc), type=exc.__class__.__name__, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Server error", "details": str(exc) or exc.__class__.__name__, "type": exc.__class__.__name__},
        )

    # Request id + context binding middleware
    @app.middleware("http")
    async def request_id_and_context(request: Request, call_next):
        rid = request.headers.get("x-request-id") or str(_uuid_mod.uuid4())
        set_log_request(rid)
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                # 500s still pass back through CORS and carry the request id
                response = server_error_response(request, exc)
            response.headers.setdefault("X-Request-Id", rid)
            return response
        finally:
            set_log_provider(None)

    # CORS is added last so it wraps the other middleware and preflights never reach them
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}" for err in exc.errors()
        )
        return JSONResponse(
            status_code=400,
            content={"error": "Message is required", "details": details or "Invalid request body", "kind": ErrorKind.INVALID_INPUT.value},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception):
        return server_error_response(request, exc)

    @app.get("/", response_model=RootOut)
    def root():
        return RootOut(
            message="Welcome to the Chatbot API",
            endpoints={"health": "/health", "chat": "/api/chat (POST)"},
        )

    @app.get("/health", response_model=HealthOut)
    async def health():
        cfg = app.state.provider_config
        return HealthOut(
            config=HealthConfigOut(
                provider=cfg.provider,
                model=cfg.model_id,
                apiKey=cfg.key_status,
                environment=settings.APP_ENV,
            )
        )

    app.include_router(chat_router)
    return app


app = create_app()
