"""Use case para envio outbound Lark (texto e mídia)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.coordinators.lark.outbound.reply_dispatcher import ReplyTurn
from app.protocols.models import OutboundMessage, OutboundMessageResponse
from utils.errors import AuthError, LarkChannelError, TransportError

if TYPE_CHECKING:
    from app.coordinators.lark.outbound.reply_dispatcher import LarkReplyDispatcher
    from config.settings import LarkAccountSettings


def _error_code(exc: LarkChannelError) -> str:
    if isinstance(exc, AuthError):
        return "AUTH_ERROR"
    if isinstance(exc, TransportError) and exc.error_code is not None:
        return f"LARK_{exc.error_code}"
    if isinstance(exc, TransportError):
        return "TRANSPORT_ERROR"
    return "CHANNEL_ERROR"


class SendOutboundMessageUseCase:
    """Orquestra validação e entrega outbound (nunca lança para o chamador)."""

    def __init__(self, dispatcher: LarkReplyDispatcher) -> None:
        self._dispatcher = dispatcher

    async def send_text(
        self,
        account: LarkAccountSettings,
        to: str,
        text: str,
        reply_to_id: str | None = None,
        mention_user_ids: tuple[str, ...] = (),
    ) -> OutboundMessageResponse:
        """Envia texto (fragmentado se necessário)."""
        return await self.execute(
            account,
            to,
            OutboundMessage(text=text, reply_to_id=reply_to_id, mention_user_ids=mention_user_ids),
        )

    async def send_media(
        self,
        account: LarkAccountSettings,
        to: str,
        media_url: str,
        text: str = "",
        reply_to_id: str | None = None,
    ) -> OutboundMessageResponse:
        """Envia imagem (http(s) ou `lark://`) seguida do texto opcional."""
        return await self.execute(
            account,
            to,
            OutboundMessage(text=text, media_url=media_url, reply_to_id=reply_to_id),
        )

    async def execute(
        self,
        account: LarkAccountSettings,
        to: str,
        message: OutboundMessage,
    ) -> OutboundMessageResponse:
        """Executa envio outbound com validação e tratamento de erro."""
        validation_error = _validate(account, to, message)
        if validation_error:
            return OutboundMessageResponse(
                success=False,
                error_code="VALIDATION_ERROR",
                error_message=validation_error,
            )

        try:
            message_ids = await self._dispatcher.dispatch(
                ReplyTurn(account=account, to=to, message=message)
            )
        except LarkChannelError as exc:
            return OutboundMessageResponse(
                success=False,
                error_code=_error_code(exc),
                error_message=str(exc),
            )

        return OutboundMessageResponse(success=True, message_ids=message_ids)


def _validate(account: LarkAccountSettings, to: str, message: OutboundMessage) -> str | None:
    if not account.is_configured:
        return "Lark not configured"
    if not to:
        return "Destinatário obrigatório"
    if not message.text.strip() and not message.media_url:
        return "Mensagem vazia"
    return None
