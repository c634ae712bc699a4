"""Pool de tasks em background para o modo async do webhook Lark.

Cada mensagem admitida vira uma task. O pool limita a concorrência com um
semáforo e guarda o message_id de cada task para os logs de falha e shutdown.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)

MAX_CONCURRENT_TASKS = 100


class InboundTaskPool:
    """Tasks de processamento inbound em andamento, com concorrência limitada."""

    def __init__(self, max_concurrency: int = MAX_CONCURRENT_TASKS) -> None:
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._tasks: dict[asyncio.Task[None], str] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def schedule(
        self,
        coroutine: Awaitable[None],
        *,
        message_id: str,
        correlation_id: str,
    ) -> int:
        """Agenda a coroutine e retorna o total de tasks ativas."""
        task = asyncio.create_task(self._guarded(coroutine), name=f"lark-inbound-{message_id}")
        self._tasks[task] = message_id
        task.add_done_callback(self._forget)
        logger.info(
            "webhook_processing_scheduled",
            extra={
                "channel": "lark",
                "correlation_id": correlation_id,
                "message_id": message_id,
                "mode": "async",
                "active_tasks": len(self._tasks),
            },
        )
        return len(self._tasks)

    async def _guarded(self, coroutine: Awaitable[None]) -> None:
        async with self._semaphore:
            await coroutine

    def _forget(self, task: asyncio.Task[None]) -> None:
        message_id = self._tasks.pop(task, None)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "webhook_processing_task_failed",
                extra={
                    "channel": "lark",
                    "message_id": message_id,
                    "error_type": type(exc).__name__,
                    "active_tasks": len(self._tasks),
                },
            )

    async def drain(self, timeout_seconds: float = 30.0) -> int:
        """Aguarda as tasks pendentes; as que estouram o prazo são canceladas.

        Returns:
            Quantidade de tasks canceladas.
        """
        if not self._tasks:
            return 0

        logger.info(
            "webhook_processing_shutdown_wait",
            extra={
                "channel": "lark",
                "pending_tasks": len(self._tasks),
                "timeout_seconds": timeout_seconds,
            },
        )
        _, pending = await asyncio.wait(list(self._tasks), timeout=timeout_seconds)
        if not pending:
            return 0

        abandoned = sorted(self._tasks.get(task, "") for task in pending)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.warning(
            "webhook_processing_shutdown_cancelled",
            extra={
                "channel": "lark",
                "cancelled_tasks": len(pending),
                "message_ids": abandoned,
            },
        )
        return len(pending)
