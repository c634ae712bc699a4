"""Fila de respostas por conversa.

Cada conversa (conta + destino) tem uma fila FIFO drenada por uma única task,
então turnos da mesma conversa saem na ordem de submissão mesmo quando o
runtime produz respostas em paralelo. Conversas diferentes não têm ordem
entre si.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from app.observability import record_latency
from app.services.human_delay import HumanDelayConfig, resolve_delay_seconds

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.coordinators.lark.outbound.sender import LarkOutboundSender
    from app.protocols.models import OutboundMessage
    from config.settings import LarkAccountSettings

    TypingStart = Callable[["ReplyTurn"], Awaitable[None]]
    IdleCallback = Callable[[str], "Awaitable[None] | None"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReplyTurn:
    """Um turno de resposta: tudo que o runtime devolveu de uma vez."""

    account: LarkAccountSettings
    to: str
    message: OutboundMessage

    @property
    def conversation_key(self) -> str:
        return f"{self.account.account_id}:{self.to}"


@dataclass
class _QueuedTurn:
    turn: ReplyTurn
    future: asyncio.Future[tuple[str, ...]] = field(repr=False)


async def _no_typing(_turn: ReplyTurn) -> None:
    """A Open API não expõe indicador de digitação."""


class LarkReplyDispatcher:
    """Serializa e cadencia a entrega de turnos por conversa."""

    def __init__(
        self,
        sender: LarkOutboundSender,
        human_delay: HumanDelayConfig | None = None,
        typing_start: TypingStart | None = None,
        on_idle: IdleCallback | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._sender = sender
        self._human_delay = human_delay or HumanDelayConfig()
        self._typing_start = typing_start or _no_typing
        self._on_idle = on_idle
        self._sleep = sleep
        self._queues: dict[str, deque[_QueuedTurn]] = {}
        self._workers: dict[str, asyncio.Task[None]] = {}

    def submit(self, turn: ReplyTurn) -> asyncio.Future[tuple[str, ...]]:
        """Enfileira o turno; o future resolve com os message_ids ou com o erro."""
        future: asyncio.Future[tuple[str, ...]] = asyncio.get_running_loop().create_future()
        key = turn.conversation_key
        self._queues.setdefault(key, deque()).append(_QueuedTurn(turn, future))

        if key not in self._workers:
            self._workers[key] = asyncio.create_task(self._drain(key))
        return future

    async def dispatch(self, turn: ReplyTurn) -> tuple[str, ...]:
        """Enfileira e aguarda a entrega do turno.

        Raises:
            LarkChannelError: Falha que abortou o turno
        """
        return await self.submit(turn)

    def pending(self, conversation_key: str) -> int:
        """Turnos aguardando na fila da conversa (sem contar o em andamento)."""
        return len(self._queues.get(conversation_key, ()))

    @property
    def active_conversations(self) -> int:
        return len(self._workers)

    async def _drain(self, key: str) -> None:
        queue = self._queues[key]
        item: _QueuedTurn | None = None
        try:
            while queue:
                item = queue.popleft()
                if item.future.done():
                    continue
                try:
                    result = await self._deliver(item.turn)
                except Exception as exc:
                    if not item.future.done():
                        item.future.set_exception(exc)
                else:
                    if not item.future.done():
                        item.future.set_result(result)
        finally:
            # Futures já resolvidos ignoram cancel()
            if item is not None:
                item.future.cancel()
            self._workers.pop(key, None)
            for pending in self._queues.pop(key, ()):
                pending.future.cancel()

        await self._notify_idle(key)

    async def _deliver(self, turn: ReplyTurn) -> tuple[str, ...]:
        started = time.perf_counter()

        try:
            await self._typing_start(turn)
        except Exception as exc:
            logger.debug(
                "lark_typing_start_failed",
                extra={"channel": "lark", "error_type": type(exc).__name__},
            )

        delay = resolve_delay_seconds(self._human_delay)
        if delay > 0:
            await self._sleep(delay)

        try:
            return await self._sender.deliver(turn.account, turn.to, turn.message)
        except Exception as exc:
            logger.warning(
                "lark_reply_failed",
                extra={
                    "channel": "lark",
                    "account_id": turn.account.account_id,
                    "error_type": type(exc).__name__,
                },
            )
            raise
        finally:
            record_latency(
                component="lark_reply_dispatcher",
                operation="deliver_turn",
                latency_ms=(time.perf_counter() - started) * 1000,
            )

    async def _notify_idle(self, key: str) -> None:
        if self._on_idle is None:
            return
        try:
            result = self._on_idle(key)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            logger.warning(
                "lark_dispatch_idle_callback_failed",
                extra={"channel": "lark", "error_type": type(exc).__name__},
            )

    async def close(self) -> None:
        """Cancela workers ativos e os turnos ainda na fila."""
        workers = list(self._workers.values())
        for worker in workers:
            worker.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
