"""Testes do cliente HTTP da Open API Lark (httpx.MockTransport)."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from api.connectors.lark import http_base
from api.connectors.lark.http_base import HttpClientConfig, backoff_delay
from api.connectors.lark.http_client import LarkHttpClient, resolve_receive_id_type
from utils.errors import AuthError, TransportError

BASE_URL = "https://open.example.test/open-apis"


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Substitui o sleep do backoff, registrando os atrasos pedidos."""
    delays: list[float] = []

    async def _fake_backoff(attempt: int, base: float, max_seconds: float) -> None:
        delays.append(backoff_delay(attempt, base, max_seconds))

    monkeypatch.setattr(http_base, "_backoff_sleep", _fake_backoff)
    return delays


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> LarkHttpClient:
    config = HttpClientConfig(transport=httpx.MockTransport(handler))
    return LarkHttpClient(config=config, base_url=BASE_URL)


def test_backoff_delay_doubles_and_caps() -> None:
    assert [backoff_delay(attempt, 1.0, 32.0) for attempt in range(7)] == [
        1.0,
        2.0,
        4.0,
        8.0,
        16.0,
        32.0,
        32.0,
    ]


def test_resolve_receive_id_type() -> None:
    assert resolve_receive_id_type("oc_123") == "chat_id"
    assert resolve_receive_id_type("ou_123") == "open_id"


@pytest.mark.asyncio
async def test_fetch_tenant_access_token_success() -> None:
    captured: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(json.loads(request.content))
        assert request.url.path.endswith("/auth/v3/tenant_access_token/internal/")
        return httpx.Response(
            200, json={"code": 0, "msg": "ok", "tenant_access_token": "t-abc", "expire": 7200}
        )

    issued = await _client(handler).fetch_tenant_access_token("cli_1", "secret_1")

    assert issued.token == "t-abc"
    assert issued.expires_in_seconds == 7200
    assert captured == [{"app_id": "cli_1", "app_secret": "secret_1"}]


@pytest.mark.asyncio
async def test_fetch_tenant_access_token_bad_credentials_raise_auth_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": 10014, "msg": "app secret invalid"})

    with pytest.raises(AuthError, match="App Secret is incorrect"):
        await _client(handler).fetch_tenant_access_token("cli_1", "wrong")


@pytest.mark.asyncio
async def test_send_message_to_chat_uses_chat_id_type() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"code": 0, "data": {"message_id": "om_1"}})

    data = await _client(handler).send_message("t-abc", "oc_chat", "text", '{"text":"oi"}')

    assert data == {"message_id": "om_1"}
    request = seen[0]
    assert request.url.params["receive_id_type"] == "chat_id"
    assert request.headers["Authorization"] == "Bearer t-abc"
    assert json.loads(request.content) == {
        "receive_id": "oc_chat",
        "msg_type": "text",
        "content": '{"text":"oi"}',
    }


@pytest.mark.asyncio
async def test_reply_message_posts_to_reply_endpoint() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={"code": 0, "data": {"message_id": "om_2"}})

    data = await _client(handler).reply_message("t-abc", "om_parent", "text", "{}")

    assert data["message_id"] == "om_2"
    assert seen == ["/open-apis/im/v1/messages/om_parent/reply"]


@pytest.mark.asyncio
async def test_rate_limit_code_is_retried_until_success(sleeps: list[float]) -> None:
    responses = iter(
        [
            httpx.Response(200, json={"code": 99991429, "msg": "too many"}),
            httpx.Response(429, json={"code": 99991429, "msg": "too many"}),
            httpx.Response(200, json={"code": 0, "data": {"message_id": "om_3"}}),
        ]
    )

    data = await _client(lambda request: next(responses)).send_message(
        "t-abc", "ou_user", "text", "{}"
    )

    assert data["message_id"] == "om_3"
    assert sleeps == [1.0, 2.0]


@pytest.mark.asyncio
async def test_network_failure_is_retried(sleeps: list[float]) -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"code": 0, "data": {"message_id": "om_4"}})

    data = await _client(handler).send_message("t-abc", "ou_user", "text", "{}")

    assert data["message_id"] == "om_4"
    assert calls == 2
    assert sleeps == [1.0]


@pytest.mark.asyncio
async def test_other_errors_are_not_retried(sleeps: list[float]) -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(400, json={"code": 99991400, "msg": "bad params"})

    with pytest.raises(TransportError) as exc_info:
        await _client(handler).send_message("t-abc", "ou_user", "text", "{}")

    assert calls == 1
    assert sleeps == []
    assert exc_info.value.error_code == 99991400
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_retry_exhaustion_surfaces_last_error(sleeps: list[float]) -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(429, json={"code": 99991429, "msg": "too many"})

    with pytest.raises(TransportError) as exc_info:
        await _client(handler).send_message("t-abc", "ou_user", "text", "{}")

    assert calls == 6
    assert sleeps == [1.0, 2.0, 4.0, 8.0, 16.0]
    assert exc_info.value.status_code == 429
    assert exc_info.value.error_code == 99991429
    assert exc_info.value.is_retryable is True


@pytest.mark.asyncio
async def test_auth_failure_code_is_flagged() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": 99991401, "msg": "token expired"})

    with pytest.raises(TransportError) as exc_info:
        await _client(handler).send_message("t-abc", "ou_user", "text", "{}")

    assert exc_info.value.is_auth_failure is True


@pytest.mark.asyncio
async def test_non_json_response_becomes_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>bad gateway</html>")

    with pytest.raises(TransportError, match="invalid_json_response"):
        await _client(handler).send_message("t-abc", "ou_user", "text", "{}")


@pytest.mark.asyncio
async def test_upload_image_returns_image_key() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"code": 0, "data": {"image_key": "img_v2_1"}})

    image_key = await _client(handler).upload_image("t-abc", b"\x89PNG")

    assert image_key == "img_v2_1"
    assert seen[0].headers["content-type"].startswith("multipart/form-data")
    assert b'name="image_type"' in seen[0].content


@pytest.mark.asyncio
async def test_download_resource_returns_bytes() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"binary-data")

    content = await _client(handler).download_resource("t-abc", "om_1", "file_k", "image")

    assert content == b"binary-data"
    assert seen[0].url.path == "/open-apis/im/v1/messages/om_1/resources/file_k"
    assert seen[0].url.params["type"] == "image"


@pytest.mark.asyncio
async def test_empty_token_is_rejected_before_any_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("request não deveria ser enviado")

    with pytest.raises(ValueError):
        await _client(handler).send_message("", "ou_user", "text", "{}")
