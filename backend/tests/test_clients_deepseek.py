import json

import httpx
import pytest
import respx

from chatrelay.clients.base import ChatRequest
from chatrelay.clients.deepseek_client import DeepSeekAdapter
from chatrelay.clients.result import ErrorKind
from factories import DEEPSEEK_URL, completion_body, config_factory

CONFIG = config_factory(provider='deepseek', base_url='https://api.deepseek.com', api_key='ds-key', model_id='deepseek-chat')


async def _relay(message: str = "hello"):
    return await DeepSeekAdapter().relay(ChatRequest(message=message), CONFIG)


@pytest.mark.asyncio
@respx.mock
async def test_deepseek_success():
    route = respx.post(DEEPSEEK_URL).mock(return_value=httpx.Response(200, json=completion_body("hi there")))
    result = await _relay()
    assert result.ok and result.text == "hi there"
    req = route.calls.last.request
    assert req.headers["authorization"] == "Bearer ds-key"
    body = json.loads(req.content)
    assert body["model"] == "deepseek-chat"
    assert body["messages"] == [{"role": "user", "content": "hello"}]


@pytest.mark.asyncio
@respx.mock
async def test_deepseek_status_error_is_not_retried():
    route = respx.post(DEEPSEEK_URL).mock(
        return_value=httpx.Response(500, json={"error": {"message": "X", "type": "server_error"}})
    )
    result = await _relay()
    assert route.call_count == 1
    assert result.error_kind is ErrorKind.UPSTREAM_ERROR
    assert result.message == "X"
    assert result.status_code == 500


@pytest.mark.asyncio
@respx.mock
async def test_deepseek_undecodable_success_body():
    respx.post(DEEPSEEK_URL).mock(
        return_value=httpx.Response(200, content=b"{not json", headers={"content-type": "application/json"})
    )
    result = await _relay()
    assert result.error_kind is ErrorKind.MALFORMED_RESPONSE


@pytest.mark.asyncio
@respx.mock
async def test_deepseek_missing_choices():
    respx.post(DEEPSEEK_URL).mock(return_value=httpx.Response(200, json={"id": "cmpl-1", "choices": []}))
    result = await _relay()
    assert result.error_kind is ErrorKind.UNEXPECTED_SHAPE
    assert result.provider_details == {"id": "cmpl-1", "choices": []}


@pytest.mark.asyncio
@respx.mock
async def test_deepseek_connection_error():
    route = respx.post(DEEPSEEK_URL).mock(side_effect=httpx.ConnectError("connection refused"))
    result = await _relay()
    assert route.call_count == 1
    assert result.error_kind is ErrorKind.TRANSPORT_FAILURE


@pytest.mark.asyncio
@respx.mock
async def test_deepseek_timeout():
    respx.post(DEEPSEEK_URL).mock(side_effect=httpx.ReadTimeout("read timed out"))
    result = await _relay()
    assert result.error_kind is ErrorKind.TRANSPORT_FAILURE
    assert "timed out" in result.message
