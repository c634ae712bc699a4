"""Builder para mensagens de texto simples."""

from __future__ import annotations

import json

from app.protocols.models import PlatformMessage


class TextPayloadBuilder:
    """Codifica texto puro como `msg_type=text`."""

    def build(self, text: str) -> PlatformMessage:
        return PlatformMessage(
            msg_type="text",
            content=json.dumps({"text": text}, ensure_ascii=False),
        )
