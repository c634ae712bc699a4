"""Testes do downloader de mídia outbound."""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest

from app.infra.lark.media_downloader import LarkMediaDownloader, parse_media_url
from tests.fakes.fake_lark import FakeLarkClient, FakeTokenProvider, make_account
from utils.errors import TransportError


def _downloader(
    client: FakeLarkClient | None = None,
    handler=None,
    max_size_bytes: int = 1024,
) -> LarkMediaDownloader:
    transport = httpx.MockTransport(handler) if handler else None
    return LarkMediaDownloader(
        client=client or FakeLarkClient(),
        token_provider=FakeTokenProvider(),
        max_size_bytes=max_size_bytes,
        transport=transport,
    )


def test_parse_media_url() -> None:
    reference = parse_media_url("lark://message/om_1/image/img_key")

    assert reference is not None
    assert (reference.message_id, reference.resource_type, reference.key) == (
        "om_1",
        "image",
        "img_key",
    )
    assert parse_media_url("https://cdn.example.com/a.png") is None
    assert parse_media_url("lark://message/om_1/audio/k") is None


@pytest.mark.asyncio
async def test_lark_uri_uses_resource_endpoint() -> None:
    client = FakeLarkClient()

    result = await _downloader(client).download(make_account(), "lark://message/om_1/file/f_k")

    assert result.error is None
    assert result.content == b"\x89PNG-bytes"
    assert client.downloads == [("om_1", "f_k", "file")]


@pytest.mark.asyncio
async def test_http_url_is_fetched() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"img", headers={"content-type": "image/png"})

    result = await _downloader(handler=handler).download(
        make_account(), "https://cdn.example.com/a.png"
    )

    assert result.content == b"img"
    assert result.mime_type == "image/png"


@pytest.mark.asyncio
async def test_http_error_becomes_download_failed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    result = await _downloader(handler=handler).download(
        make_account(), "https://cdn.example.com/missing.png"
    )

    assert result.content is None
    assert result.error == "download_failed"


@pytest.mark.asyncio
async def test_oversized_media_is_rejected() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"x" * 2048)

    result = await _downloader(handler=handler, max_size_bytes=1024).download(
        make_account(), "https://cdn.example.com/big.png"
    )

    assert result.content is None
    assert result.error == "media_too_large"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("media_url", "error"),
    [("", "missing_media_reference"), ("ftp://host/file", "unsupported_media_url")],
)
async def test_invalid_references(media_url: str, error: str) -> None:
    result = await _downloader().download(make_account(), media_url)

    assert result.content is None
    assert result.error == error


@pytest.mark.asyncio
async def test_malformed_content_length_is_ignored() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"img", headers={"content-length": "abc"})

    result = await _downloader(handler=handler).download(
        make_account(), "https://cdn.example.com/a.png"
    )

    assert result.error is None
    assert result.content == b"img"


@pytest.mark.asyncio
async def test_streamed_body_stops_at_size_cap() -> None:
    yielded: list[int] = []

    async def body() -> AsyncIterator[bytes]:
        for index in range(10):
            yielded.append(index)
            yield b"x" * 512

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body())

    result = await _downloader(handler=handler, max_size_bytes=1024).download(
        make_account(), "https://cdn.example.com/endless.png"
    )

    assert result.content is None
    assert result.error == "media_too_large"
    assert len(yielded) < 10


@pytest.mark.asyncio
async def test_resource_auth_error_is_kept_on_result() -> None:
    error = TransportError("unauthorized", status_code=401, error_code=99991663)
    client = FakeLarkClient(download_error=error)

    result = await _downloader(client).download(make_account(), "lark://message/om_1/image/k")

    assert result.content is None
    assert result.error == "download_failed"
    assert result.cause is error
