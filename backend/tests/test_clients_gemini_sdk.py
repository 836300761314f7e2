from types import SimpleNamespace

import httpx
import pytest
from google.genai import errors as genai_errors

from chatrelay.clients.base import ChatRequest
from chatrelay.clients.gemini_sdk_client import GeminiSdkAdapter
from chatrelay.clients.result import ErrorKind
from factories import FakeGenaiClient, config_factory

CONFIG = config_factory(provider='gemini-sdk', api_key='sdk-key', model_id='gemini-2.0-flash')


def _adapter(**client_kwargs):
    created = []

    def factory(**kwargs):
        c = FakeGenaiClient(**client_kwargs, **kwargs)
        created.append(c)
        return c

    return GeminiSdkAdapter(client_factory=factory), created


@pytest.mark.asyncio
async def test_gemini_sdk_success():
    adapter, created = _adapter(response=SimpleNamespace(text="hi there"))
    result = await adapter.relay(ChatRequest(message="hello"), CONFIG)
    assert result.ok and result.text == "hi there"
    client = created[0]
    assert client.kwargs["api_key"] == "sdk-key"
    assert client.kwargs["http_options"].timeout == 30000
    assert client.calls == [{"model": "gemini-2.0-flash", "contents": "hello"}]
    assert client.closed


@pytest.mark.asyncio
async def test_gemini_sdk_missing_key_never_builds_client():
    adapter, created = _adapter(response=SimpleNamespace(text="unused"))
    result = await adapter.relay(ChatRequest(message="hello"), config_factory(provider='gemini-sdk', api_key=None))
    assert result.error_kind is ErrorKind.MISSING_CREDENTIAL
    assert created == []


@pytest.mark.asyncio
async def test_gemini_sdk_api_error():
    exc = genai_errors.APIError(500, {"error": {"code": 500, "message": "X", "status": "INTERNAL"}})
    adapter, _ = _adapter(exc=exc)
    result = await adapter.relay(ChatRequest(message="hello"), CONFIG)
    assert result.error_kind is ErrorKind.UPSTREAM_ERROR
    assert result.message == "X"
    assert result.status_code == 500


@pytest.mark.asyncio
@pytest.mark.parametrize("exc", [
    httpx.ConnectError("dns failure"),
    httpx.ConnectTimeout("slow"),
    ConnectionRefusedError(111, "Connection refused"),
])
async def test_gemini_sdk_transport_errors(exc):
    adapter, _ = _adapter(exc=exc)
    result = await adapter.relay(ChatRequest(message="hello"), CONFIG)
    assert result.error_kind is ErrorKind.TRANSPORT_FAILURE


@pytest.mark.asyncio
async def test_gemini_sdk_undecodable_response():
    adapter, _ = _adapter(exc=ValueError("Expecting value: line 1 column 1 (char 0)"))
    result = await adapter.relay(ChatRequest(message="hello"), CONFIG)
    assert result.error_kind is ErrorKind.MALFORMED_RESPONSE


@pytest.mark.asyncio
async def test_gemini_sdk_blocked_prompt():
    resp = SimpleNamespace(text=None, prompt_feedback=SimpleNamespace(block_reason="SAFETY"))
    adapter, _ = _adapter(response=resp)
    result = await adapter.relay(ChatRequest(message="hello"), CONFIG)
    assert result.error_kind is ErrorKind.UNEXPECTED_SHAPE
    assert "SAFETY" in result.message


@pytest.mark.asyncio
async def test_gemini_sdk_client_closed_after_failure():
    exc = genai_errors.APIError(429, {"error": {"code": 429, "message": "quota", "status": "RESOURCE_EXHAUSTED"}})
    adapter, created = _adapter(exc=exc)
    result = await adapter.relay(ChatRequest(message="hello"), CONFIG)
    assert result.status_code == 429
    assert created[0].closed
