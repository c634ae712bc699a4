"""Processamento inbound: política de acesso, normalização e runtime.

Chamado pelo pipeline de webhook depois da autenticação. Exceções do runtime
sobem para o pipeline, que as registra e confirma o webhook mesmo assim.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import TYPE_CHECKING

from app.coordinators.lark.outbound.reply_dispatcher import ReplyTurn
from app.protocols.models import OutboundMessage
from app.services.inbound_policy import evaluate_inbound_access

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine
    from typing import Any

    from app.coordinators.lark.outbound.reply_dispatcher import LarkReplyDispatcher
    from app.protocols.models import InternalMessage, ParsedMessage
    from app.protocols.normalizer import MessageNormalizerProtocol
    from app.protocols.runtime import InboundRuntimeProtocol
    from config.settings import LarkAccountSettings

    RuntimeProvider = Callable[[], InboundRuntimeProtocol | None]
    Scheduler = Callable[[Coroutine[Any, Any, None], str], None]

logger = logging.getLogger(__name__)


class LarkInboundHandler:
    """Liga mensagens decodificadas ao runtime externo."""

    def __init__(
        self,
        normalizer: MessageNormalizerProtocol,
        runtime_provider: RuntimeProvider,
        dispatcher: LarkReplyDispatcher,
        scheduler: Scheduler | None = None,
    ) -> None:
        """Inicializa handler.

        Args:
            normalizer: ParsedMessage → InternalMessage
            runtime_provider: Retorna o runtime registrado (ou None)
            dispatcher: Fila outbound, usada para a resposta de tipo não suportado
            scheduler: Agenda a chamada ao runtime em background; None aguarda inline
        """
        self._normalizer = normalizer
        self._runtime_provider = runtime_provider
        self._dispatcher = dispatcher
        self._scheduler = scheduler

    async def on_message(self, account: LarkAccountSettings, message: ParsedMessage) -> None:
        decision = evaluate_inbound_access(account, message)
        if not decision.allowed:
            logger.info(
                "lark_inbound_dropped",
                extra={
                    "channel": "lark",
                    "account_id": account.account_id,
                    "chat_type": message.chat_type,
                    "reason": decision.reason,
                },
            )
            return

        internal = self._normalizer.to_internal(message)

        runtime = self._runtime_provider()
        if runtime is None:
            logger.warning(
                "lark_inbound_runtime_unavailable",
                extra={"channel": "lark", "account_id": account.account_id},
            )
            return

        logger.info(
            "lark_inbound_received",
            extra={
                "channel": "lark",
                "account_id": account.account_id,
                "chat_type": internal.chat_type,
                "message_type": message.message_type,
            },
        )

        if self._scheduler is not None:
            self._scheduler(self._run(runtime, account, internal), message.message_id)
            return
        await self._run(runtime, account, internal)

    @staticmethod
    async def _run(
        runtime: InboundRuntimeProtocol,
        account: LarkAccountSettings,
        message: InternalMessage,
    ) -> None:
        await runtime.handle_inbound(account, message)

    async def on_unsupported(
        self,
        account: LarkAccountSettings,
        message: ParsedMessage,
        reply_text: str,
    ) -> None:
        """Enfileira a resposta explicando os tipos suportados, sem aguardar a entrega.

        O webhook é confirmado sem esperar a fila da conversa; falha de entrega só é logada.
        """
        turn = ReplyTurn(
            account=account,
            to=message.chat_id,
            message=OutboundMessage(text=reply_text, reply_to_id=message.message_id),
        )
        future = self._dispatcher.submit(turn)
        future.add_done_callback(partial(_log_unsupported_reply_outcome, account.account_id))


def _log_unsupported_reply_outcome(
    account_id: str,
    future: asyncio.Future[tuple[str, ...]],
) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error(
            "lark_unsupported_reply_failed",
            extra={
                "channel": "lark",
                "account_id": account_id,
                "error_type": type(exc).__name__,
            },
        )
