"""Entrega de um turno outbound: token, fragmentação, codificação e envio."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.observability import record_delivery
from app.protocols.models import OutboundMessage
from app.services.text_chunking import chunk_message
from utils.errors import LarkChannelError, TransportError

if TYPE_CHECKING:
    from app.infra.lark.media_downloader import LarkMediaDownloader
    from app.protocols.http_client import LarkApiClientProtocol
    from app.protocols.models import PlatformMessage
    from app.protocols.payload_builder import PayloadBuilderProtocol
    from app.protocols.token_provider import TokenProviderProtocol
    from config.settings import LarkAccountSettings

logger = logging.getLogger(__name__)


class LarkOutboundSender:
    """Envia OutboundMessage para um chat (`oc_`) ou usuário (open_id).

    Reply só vale para o primeiro envio do turno; os demais fragmentos usam
    envio simples. Falha em qualquer fragmento interrompe o turno.
    """

    def __init__(
        self,
        client: LarkApiClientProtocol,
        token_provider: TokenProviderProtocol,
        builder: PayloadBuilderProtocol,
        chunk_limit: int,
        media_downloader: LarkMediaDownloader | None = None,
    ) -> None:
        self._client = client
        self._token_provider = token_provider
        self._builder = builder
        self._chunk_limit = chunk_limit
        self._media_downloader = media_downloader

    async def deliver(
        self,
        account: LarkAccountSettings,
        to: str,
        message: OutboundMessage,
    ) -> tuple[str, ...]:
        """Entrega o turno completo e retorna os message_ids criados.

        Raises:
            LarkChannelError: Falha de token, mídia ou envio (turno abortado)
        """
        message_ids: list[str] = []
        reply_to_id = message.reply_to_id

        try:
            token = await self._token_provider.get_token(account)

            if message.media_url:
                image_key = await self._upload_media(account, token, message.media_url)
                message_ids.append(
                    await self._post(token, to, self._builder.image(image_key), reply_to_id)
                )
                reply_to_id = None

            chunks = chunk_message(message.text, self._chunk_limit) if message.text.strip() else []
            for chunk in chunks:
                payload = self._builder.to_platform(
                    OutboundMessage(
                        text=chunk.text,
                        mention_user_ids=message.mention_user_ids if chunk.is_first else (),
                    )
                )
                message_ids.append(
                    await self._post(token, to, payload, reply_to_id if chunk.is_first else None)
                )
        except TransportError as exc:
            if exc.is_auth_failure:
                self._token_provider.invalidate(account)
            self._record(account, message_ids, message, success=False)
            raise
        except LarkChannelError:
            self._record(account, message_ids, message, success=False)
            raise

        self._record(account, message_ids, message, success=True)
        return tuple(message_ids)

    async def _post(
        self,
        token: str,
        to: str,
        payload: PlatformMessage,
        reply_to_id: str | None,
    ) -> str:
        if reply_to_id:
            data = await self._client.reply_message(
                token, reply_to_id, payload.msg_type, payload.content
            )
        else:
            data = await self._client.send_message(token, to, payload.msg_type, payload.content)
        return _message_id(data)

    async def _upload_media(self, account: LarkAccountSettings, token: str, media_url: str) -> str:
        if self._media_downloader is None:
            raise TransportError("media_downloader_unavailable")

        result = await self._media_downloader.download(account, media_url)
        if result.content is None:
            reason = f"media_{result.error or 'download_failed'}"
            cause = result.cause
            if cause is None:
                raise TransportError(reason)
            # Preserva status/código para que 401 invalide o token no deliver
            raise TransportError(
                reason,
                status_code=cause.status_code,
                error_code=cause.error_code,
                is_retryable=cause.is_retryable,
            ) from cause

        return await self._client.upload_image(token, result.content)

    def _record(
        self,
        account: LarkAccountSettings,
        message_ids: list[str],
        message: OutboundMessage,
        success: bool,
    ) -> None:
        record_delivery(
            account_id=account.account_id,
            chunks_sent=len(message_ids),
            chunks_total=_expected_sends(message, self._chunk_limit),
            success=success,
        )


def _expected_sends(message: OutboundMessage, chunk_limit: int) -> int:
    chunks = len(chunk_message(message.text, chunk_limit)) if message.text.strip() else 0
    return chunks + (1 if message.media_url else 0)


def _message_id(data: dict[str, Any]) -> str:
    return str(data.get("message_id") or "")
