"""Protocolo do runtime externo (agente) que consome mensagens normalizadas."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from config.settings import LarkAccountSettings

    from .models import InternalMessage


class InboundRuntimeProtocol(Protocol):
    """Recebe mensagens inbound já normalizadas e autorizadas."""

    async def handle_inbound(
        self,
        account: LarkAccountSettings,
        message: InternalMessage,
    ) -> None: ...
