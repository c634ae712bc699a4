"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, register_inbound_runtime

    # Na inicialização do serviço
    initialize_app()

    # O runtime (agente) registra o consumidor de mensagens inbound
    register_inbound_runtime(my_runtime)
"""

from __future__ import annotations

import logging

from app.bootstrap.lark_factory import (
    create_inbound_handler,
    get_inbound_runtime,
    get_outbound_use_case,
    get_reply_dispatcher,
    get_token_manager,
    register_inbound_runtime,
    reset_lark_singletons,
)
from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import get_base_settings, get_lark_settings

# Nome do serviço exposto em /health
SERVICE_NAME = "lark_gateway"

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Configura logging a partir de LOG_LEVEL, LOG_FORMAT e SERVICE_NAME.

    Deve ser chamada uma vez no início do serviço.
    """
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name or SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
        json_output=base.json_logs,
    )


def validate_runtime_settings() -> None:
    """Valida settings base e de todas as contas Lark no startup.

    Raises:
        RuntimeError: Settings inválidas em staging/production.
    """
    base = get_base_settings()
    errors = [f"base: {error}" for error in base.validate()]
    errors += [f"lark: {error}" for error in get_lark_settings().validate()]

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "strict": base.strict_validation,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if base.strict_validation:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")


__all__ = [
    "SERVICE_NAME",
    "create_inbound_handler",
    "get_inbound_runtime",
    "get_outbound_use_case",
    "get_reply_dispatcher",
    "get_token_manager",
    "initialize_app",
    "register_inbound_runtime",
    "reset_lark_singletons",
    "validate_runtime_settings",
]
