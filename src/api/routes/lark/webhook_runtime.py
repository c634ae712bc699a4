"""Runtime helpers para processamento do webhook Lark (inline ou async)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from api.routes.lark.webhook_runtime_tasks import InboundTaskPool
from app.observability import get_correlation_id, record_handler_failure
from utils.errors import HandlerError

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from config.settings import LarkAccountSettings, LarkSettings

logger = logging.getLogger(__name__)

_task_pool = InboundTaskPool()


def get_task_pool() -> InboundTaskPool:
    return _task_pool


async def run_inbound_safe(
    *,
    coroutine: Coroutine[Any, Any, None],
    account_id: str,
    message_id: str,
    correlation_id: str,
) -> None:
    """Executa o runtime em background; exceção vira telemetria, nunca resposta HTTP."""
    try:
        await coroutine
    except Exception as exc:
        error = HandlerError(message_id, exc)
        logger.exception(
            "lark_message_handler_failed",
            extra={
                "channel": "lark",
                "account_id": account_id,
                "message_id": error.message_id,
                "correlation_id": correlation_id,
                "mode": "async",
            },
        )
        record_handler_failure(
            account_id=account_id,
            message_id=message_id,
            error_type=type(exc).__name__,
            correlation_id=correlation_id,
        )


def build_scheduler(
    account: LarkAccountSettings,
    settings: LarkSettings,
) -> Callable[[Coroutine[Any, Any, None], str], None] | None:
    """Scheduler para o handler inbound; None em modo inline."""
    processing_mode = (settings.webhook_processing_mode or "async").lower()
    if processing_mode == "inline":
        return None

    def _schedule(coroutine: Coroutine[Any, Any, None], message_id: str) -> None:
        correlation_id = get_correlation_id()
        get_task_pool().schedule(
            run_inbound_safe(
                coroutine=coroutine,
                account_id=account.account_id,
                message_id=message_id,
                correlation_id=correlation_id,
            ),
            message_id=message_id,
            correlation_id=correlation_id,
        )

    return _schedule


async def drain_background_tasks(timeout_seconds: float = 30.0) -> None:
    """Aguarda tasks async pendentes durante shutdown do processo."""
    await get_task_pool().drain(timeout_seconds=timeout_seconds)
