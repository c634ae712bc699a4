"""Protocolos de construção de payload outbound."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import OutboundMessage, PlatformMessage


class PayloadBuilderProtocol(Protocol):
    """Contrato mínimo para codificar OutboundMessage no formato da plataforma."""

    def to_platform(self, message: OutboundMessage) -> PlatformMessage: ...

    def image(self, image_key: str) -> PlatformMessage: ...
