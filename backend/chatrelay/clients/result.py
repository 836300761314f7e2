from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class ErrorKind(str, Enum):
    INVALID_INPUT = 'invalid_input'
    MISSING_CREDENTIAL = 'missing_credential'
    TRANSPORT_FAILURE = 'transport_failure'
    UPSTREAM_ERROR = 'upstream_error'
    MALFORMED_RESPONSE = 'malformed_response'
    UNEXPECTED_SHAPE = 'unexpected_shape'
    SERVER_ERROR = 'server_error'


@dataclass(frozen=True)
class Success:
    text: str
    ok: bool = True


@dataclass(frozen=True)
class Failure:
    error_kind: ErrorKind
    message: str
    provider_details: Any | None = None
    status_code: int | None = None  # upstream HTTP status, when one was received
    ok: bool = False


ChatResult = Union[Success, Failure]


def success(text: str) -> Success:
    return Success(text=text)


def failure(kind: ErrorKind, msg: str, *, details: Any | None = None, status_code: int | None = None) -> Failure:
    return Failure(error_kind=kind, message=msg, provider_details=details, status_code=status_code)


def scrub(value: Any, secret: str | None) -> Any:
    """Replace every occurrence of `secret` inside strings nested in `value`."""
    if not secret:
        return value
    if isinstance(value, str):
        return value.replace(secret, '***')
    if isinstance(value, dict):
        return {k: scrub(v, secret) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [scrub(v, secret) for v in value]
    return value


__all__ = ['ErrorKind', 'Success', 'Failure', 'ChatResult', 'success', 'failure', 'scrub']
