"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.human_delay import HumanDelayConfig, resolve_delay_seconds
from app.services.inbound_policy import InboundDecision, evaluate_inbound_access, is_bot_mentioned
from app.services.text_chunking import MessageChunk, chunk_message, split_long_message

__all__ = [
    "HumanDelayConfig",
    "InboundDecision",
    "MessageChunk",
    "chunk_message",
    "evaluate_inbound_access",
    "is_bot_mentioned",
    "resolve_delay_seconds",
    "split_long_message",
]
