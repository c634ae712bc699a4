"""Normalizer Lark: ParsedMessage → InternalMessage."""

from __future__ import annotations

from typing import TYPE_CHECKING

from api.connectors.lark.webhook.events import unsupported_reply_text
from app.protocols.models import InternalMessage
from utils.errors import UnsupportedContentError

from .extractor import extract_media, extract_text

if TYPE_CHECKING:
    from app.protocols.models import ParsedMessage

CHANNEL = "lark"


class LarkMessageNormalizer:
    """Converte mensagens decodificadas no modelo agnóstico de plataforma."""

    def to_internal(self, message: ParsedMessage) -> InternalMessage:
        """Deriva a InternalMessage (texto com menções resolvidas, mídia como URI).

        Raises:
            UnsupportedContentError: Se o tipo da mensagem não é suportado
        """
        if not message.kind.is_supported:
            raise UnsupportedContentError(
                message.message_type, unsupported_reply_text(message.message_type)
            )

        media = extract_media(message)
        return InternalMessage(
            id=message.message_id,
            channel=CHANNEL,
            chat_id=message.chat_id,
            chat_type=message.chat_type,
            sender_id=message.sender_id,
            text=extract_text(message),
            timestamp=message.create_time,
            media_url=media[0] if media else None,
            media_type=media[1] if media else None,
            reply_to_id=message.parent_id,
            thread_id=message.root_id,
            mentions=message.mentions,
        )


def normalize_message(message: ParsedMessage) -> InternalMessage:
    """Atalho funcional para LarkMessageNormalizer().to_internal()."""
    return LarkMessageNormalizer().to_internal(message)
