"""Pydantic v2 schemas for the HTTP front door.

`ChatIn.message` is optional at the schema level so a missing message reaches the
relay and is reported as `invalid_input` (400) instead of a validation error.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class ChatIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: Optional[str] = None


class ChatOut(BaseModel):
    response: str


class ErrorOut(BaseModel):
    error: str
    details: str
    kind: str
    upstream: Optional[Any] = None
    upstream_status: Optional[int] = None


class HealthConfigOut(BaseModel):
    provider: str
    model: str
    apiKey: str
    environment: str


class HealthOut(BaseModel):
    status: str = "ok"
    message: str = "Server is running"
    config: HealthConfigOut


class RootOut(BaseModel):
    message: str
    endpoints: Dict[str, str]


__all__ = ["ChatIn", "ChatOut", "ErrorOut", "HealthConfigOut", "HealthOut", "RootOut"]
