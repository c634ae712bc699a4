"""Registro de métricas via structured logging.

As métricas são logs estruturados (`metric_*`) agregados depois pelo coletor
de logs. Também é o canal de telemetria para falhas do handler de negócio,
que nunca aparecem na resposta HTTP do webhook.

Uso:
    start = time.perf_counter()
    # ... operação ...
    record_latency("webhook", "handle", (time.perf_counter() - start) * 1000)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "webhook", "reply_dispatcher")
        operation: Nome da operação (ex: "handle", "deliver_turn")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_handler_failure(
    account_id: str,
    message_id: str,
    error_type: str,
    correlation_id: str | None = None,
) -> None:
    """Registra exceção do handler de negócio (o webhook já foi confirmado com 200)."""
    logger.error(
        "metric_handler_failure",
        extra={
            "metric_type": "handler_failure",
            "channel": "lark",
            "account_id": account_id,
            "message_id": message_id,
            "error_type": error_type,
            "correlation_id": correlation_id,
        },
    )


def record_delivery(
    account_id: str,
    chunks_sent: int,
    chunks_total: int,
    success: bool,
    correlation_id: str | None = None,
) -> None:
    """Registra resultado de um turno de entrega outbound."""
    logger.info(
        "metric_delivery",
        extra={
            "metric_type": "delivery",
            "channel": "lark",
            "account_id": account_id,
            "chunks_sent": chunks_sent,
            "chunks_total": chunks_total,
            "success": success,
            "correlation_id": correlation_id,
        },
    )


def record_token_refresh(account_id: str, expires_in_seconds: int) -> None:
    """Registra emissão de novo tenant_access_token (nunca o valor do token)."""
    logger.info(
        "metric_token_refresh",
        extra={
            "metric_type": "token_refresh",
            "channel": "lark",
            "account_id": account_id,
            "expires_in_seconds": expires_in_seconds,
        },
    )
