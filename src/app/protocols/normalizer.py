"""Protocolos de normalização inbound."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import InternalMessage, ParsedMessage


class MessageNormalizerProtocol(Protocol):
    """Contrato mínimo para converter ParsedMessage em InternalMessage."""

    def to_internal(self, message: ParsedMessage) -> InternalMessage: ...
