"""Entrega outbound Lark: envio de turnos e fila por conversa."""

from app.coordinators.lark.outbound.reply_dispatcher import LarkReplyDispatcher, ReplyTurn
from app.coordinators.lark.outbound.sender import LarkOutboundSender

__all__ = [
    "LarkOutboundSender",
    "LarkReplyDispatcher",
    "ReplyTurn",
]
