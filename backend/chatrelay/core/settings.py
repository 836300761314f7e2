"""Application configuration using pydantic-settings.

Environment variables are the sole source of truth (12-factor). No secrets committed.
Use `get_settings()` for DI; `provider_config()` builds the immutable ProviderConfig
handed to the relay for every request.
"""
from __future__ import annotations

from functools import lru_cache
import json
from typing import Annotated, Any, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from chatrelay.clients.base import ProviderConfig, TimeoutPolicy
from chatrelay.clients.factory import PROVIDERS

DEFAULT_CORS_ORIGINS = [
    "https://amaltomajith.github.io",
    "http://localhost:3000",
    "http://127.0.0.1:5500",
]


class Settings(BaseSettings):
    # Core
    CHAT_PROVIDER: str = Field("gemini", description="Upstream adapter: gemini, gemini-sdk, deepseek or openrouter")
    APP_ENV: str = Field("production", description="'development' adds stack traces to 500 responses")
    LOG_LEVEL: str = Field("INFO", description="Application log level")
    PORT: int = 3000

    # Gemini (REST and SDK share the key and model)
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-2.0-flash"

    # DeepSeek
    DEEPSEEK_API_KEY: Optional[str] = None
    DEEPSEEK_BASE_URL: str = "https://api.deepseek.com"
    DEEPSEEK_MODEL: str = "deepseek-chat"

    # OpenRouter
    OPENROUTER_API_KEY: Optional[str] = None
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    OPENROUTER_MODEL: str = "deepseek/deepseek-chat"
    OPENROUTER_SITE_URL: Optional[str] = None  # sent as HTTP-Referer
    OPENROUTER_APP_NAME: Optional[str] = None  # sent as X-Title

    # Outbound call bounds (seconds)
    UPSTREAM_TIMEOUT_SECONDS: float = Field(30.0, gt=0)
    UPSTREAM_CONNECT_TIMEOUT_SECONDS: float = Field(10.0, gt=0)

    # HTTP front door
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    MAX_REQUEST_BYTES: int = Field(64 * 1024, gt=0)

    model_config = SettingsConfigDict(env_file=None, case_sensitive=False, extra="ignore")

    @field_validator("CHAT_PROVIDER", mode="before")
    @classmethod
    def _known_provider(cls, v: Any) -> str:
        p = str(v).strip().lower()
        if p not in PROVIDERS:
            raise ValueError(f"CHAT_PROVIDER must be one of {', '.join(PROVIDERS)}; got {v!r}")
        return p

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, v: Any) -> Any:
        # accepts a JSON list or a comma separated string
        if isinstance(v, str):
            raw = v.strip()
            if raw.startswith("["):
                return json.loads(raw)
            return [o.strip() for o in raw.split(",") if o.strip()]
        return v

    @property
    def is_development(self) -> bool:
        return self.APP_ENV.lower() == "development"

    @property
    def timeout_policy(self) -> TimeoutPolicy:
        return TimeoutPolicy(total=self.UPSTREAM_TIMEOUT_SECONDS, connect=self.UPSTREAM_CONNECT_TIMEOUT_SECONDS)

    def provider_config(self) -> ProviderConfig:
        p = self.CHAT_PROVIDER
        if p in ("gemini", "gemini-sdk"):
            return ProviderConfig(
                provider=p,
                base_url=self.GEMINI_BASE_URL if p == "gemini" else "",
                api_key=self.GEMINI_API_KEY,
                model_id=self.GEMINI_MODEL,
                timeout=self.timeout_policy,
            )
        if p == "deepseek":
            return ProviderConfig(
                provider=p,
                base_url=self.DEEPSEEK_BASE_URL,
                api_key=self.DEEPSEEK_API_KEY,
                model_id=self.DEEPSEEK_MODEL,
                timeout=self.timeout_policy,
            )
        extra = {}
        if self.OPENROUTER_SITE_URL:
            extra["HTTP-Referer"] = self.OPENROUTER_SITE_URL
        if self.OPENROUTER_APP_NAME:
            extra["X-Title"] = self.OPENROUTER_APP_NAME
        return ProviderConfig(
            provider=p,
            base_url=self.OPENROUTER_BASE_URL,
            api_key=self.OPENROUTER_API_KEY,
            model_id=self.OPENROUTER_MODEL,
            timeout=self.timeout_policy,
            extra_headers=extra,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton settings instance.

    Usage: settings = get_settings()
    In FastAPI dependency: `Depends(get_settings)`.
    """
    return Settings()  # pydantic-settings loads from environment automatically


__all__ = ["Settings", "get_settings", "DEFAULT_CORS_ORIGINS"]
