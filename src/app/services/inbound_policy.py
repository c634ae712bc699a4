"""Política de admissão de mensagens inbound (DMs e grupos)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.protocols.models import Mention, ParsedMessage
    from config.settings import LarkAccountSettings

ALLOW_ALL = "*"


@dataclass(frozen=True, slots=True)
class InboundDecision:
    allowed: bool
    reason: str = "allowed"


def is_bot_mentioned(mentions: Sequence[Mention], bot_open_id: str | None) -> bool:
    """Bot mencionado pelo open_id; sem open_id conhecido, qualquer menção conta."""
    if not mentions:
        return False
    if bot_open_id:
        return any(mention.id == bot_open_id for mention in mentions)
    return True


def is_sender_allowed(sender_id: str, allow_from: Sequence[str]) -> bool:
    return ALLOW_ALL in allow_from or sender_id in allow_from


def evaluate_inbound_access(
    account: LarkAccountSettings,
    message: ParsedMessage,
) -> InboundDecision:
    """Decide se a mensagem segue para o runtime.

    DMs seguem `dm_policy` (open | allowlist | disabled). Em grupos com
    `require_mention`, só passa se o bot foi mencionado.
    """
    if message.chat_type == "dm":
        if account.dm_policy == "disabled":
            return InboundDecision(allowed=False, reason="dm_disabled")
        if account.dm_policy == "allowlist" and not is_sender_allowed(
            message.sender_id, account.allow_from
        ):
            return InboundDecision(allowed=False, reason="sender_not_allowlisted")
        return InboundDecision(allowed=True)

    if account.require_mention and not is_bot_mentioned(message.mentions, account.bot_open_id):
        return InboundDecision(allowed=False, reason="bot_not_mentioned")

    return InboundDecision(allowed=True)
