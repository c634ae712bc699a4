"""Factory do payload outbound: escolhe entre `text` e `post`."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from app.protocols.models import PlatformMessage

from .post import PostPayloadBuilder, needs_rich_text
from .text import TextPayloadBuilder

if TYPE_CHECKING:
    from app.protocols.models import OutboundMessage

_TEXT_BUILDER = TextPayloadBuilder()
_POST_BUILDER = PostPayloadBuilder()


class LarkPayloadBuilder:
    """Codifica OutboundMessage no formato da Open API Lark."""

    def to_platform(self, message: OutboundMessage) -> PlatformMessage:
        """Texto simples, salvo quando o conteúdo pede rich text.

        Args:
            message: Mensagem construída pelo runtime

        Returns:
            PlatformMessage com `content` em JSON string
        """
        if needs_rich_text(message.text, message.mention_user_ids):
            return _POST_BUILDER.build(message.text, message.mention_user_ids)
        return _TEXT_BUILDER.build(message.text)

    def image(self, image_key: str) -> PlatformMessage:
        return PlatformMessage(msg_type="image", content=json.dumps({"image_key": image_key}))


def build_platform_message(message: OutboundMessage) -> PlatformMessage:
    return LarkPayloadBuilder().to_platform(message)
