"""Downloader de mídia para respostas outbound.

Aceita URLs http(s) e a URI privada `lark://message/<id>/<image|file>/<key>`
gerada pelo normalizer inbound.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from utils.errors import LarkChannelError, TransportError

if TYPE_CHECKING:
    from app.protocols.http_client import LarkApiClientProtocol
    from app.protocols.token_provider import TokenProviderProtocol
    from config.settings import LarkAccountSettings

logger = logging.getLogger(__name__)

_LARK_MEDIA_URI = re.compile(r"^lark://message/([^/]+)/(image|file)/([^/]+)$")


@dataclass(frozen=True, slots=True)
class MediaReference:
    message_id: str
    resource_type: str
    key: str


@dataclass(frozen=True, slots=True)
class MediaDownloadResult:
    """Resultado do download de mídia."""

    content: bytes | None
    mime_type: str | None
    error: str | None = None
    cause: TransportError | None = None


def parse_media_url(media_url: str) -> MediaReference | None:
    """Decodifica a URI `lark://`; None para qualquer outro formato."""
    match = _LARK_MEDIA_URI.match(media_url)
    if not match:
        return None
    message_id, resource_type, key = match.groups()
    return MediaReference(message_id=message_id, resource_type=resource_type, key=key)


def _failed(
    error: str,
    mime_type: str | None = None,
    cause: TransportError | None = None,
) -> MediaDownloadResult:
    return MediaDownloadResult(content=None, mime_type=mime_type, error=error, cause=cause)


class LarkMediaDownloader:
    """Resolve mídia outbound para bytes (nunca lança; erro vai no resultado)."""

    def __init__(
        self,
        client: LarkApiClientProtocol,
        token_provider: TokenProviderProtocol,
        max_size_bytes: int,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = client
        self._token_provider = token_provider
        self._max_size_bytes = max_size_bytes
        self._timeout = timeout_seconds
        self._transport = transport

    async def download(self, account: LarkAccountSettings, media_url: str) -> MediaDownloadResult:
        if not media_url:
            return _failed("missing_media_reference")

        try:
            reference = parse_media_url(media_url)
            if reference is not None:
                result = await self._download_resource(account, reference)
            elif media_url.startswith(("http://", "https://")):
                result = await self._download_http(media_url)
            else:
                return _failed("unsupported_media_url")
        except (LarkChannelError, httpx.HTTPError) as exc:
            logger.warning(
                "lark_media_download_failed",
                extra={"channel": "lark", "error_type": type(exc).__name__},
            )
            return _failed(
                "download_failed",
                cause=exc if isinstance(exc, TransportError) else None,
            )

        if result.content is not None and len(result.content) > self._max_size_bytes:
            return _failed("media_too_large", result.mime_type)
        return result

    async def _download_resource(
        self,
        account: LarkAccountSettings,
        reference: MediaReference,
    ) -> MediaDownloadResult:
        token = await self._token_provider.get_token(account)
        content = await self._client.download_resource(
            token,
            reference.message_id,
            reference.key,
            "image" if reference.resource_type == "image" else "file",
        )
        return MediaDownloadResult(content=content, mime_type=None)

    async def _download_http(self, media_url: str) -> MediaDownloadResult:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            async with client.stream("GET", media_url, follow_redirects=True) as response:
                response.raise_for_status()
                mime_type = response.headers.get("content-type")
                if self._declared_too_large(response):
                    return _failed("media_too_large", mime_type)

                # content-length pode faltar ou mentir; o limite vale para o corpo lido
                body = bytearray()
                async for part in response.aiter_bytes():
                    body.extend(part)
                    if len(body) > self._max_size_bytes:
                        return _failed("media_too_large", mime_type)

                return MediaDownloadResult(content=bytes(body), mime_type=mime_type)

    def _declared_too_large(self, response: httpx.Response) -> bool:
        try:
            declared = int(response.headers.get("content-length", ""))
        except ValueError:
            return False
        return declared > self._max_size_bytes
