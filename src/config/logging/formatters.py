"""Formatters de logging estruturado.

Todo record JSON sai com: asctime, level, logger, message, correlation_id, service
e os campos passados via `extra`.
"""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

# Campos obrigatórios em todo log estruturado
REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

# Mapeamento de nomes de campos para formato padrão
FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}

_TEXT_FORMAT = "%(asctime)s %(levelname)s [%(service)s] %(name)s %(message)s cid=%(correlation_id)s"


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {"asctime": "...", "level": "INFO", "logger": "api.routes.lark.webhook",
         "message": "lark_webhook_received", "correlation_id": "abc-123",
         "service": "lark_gateway", "account_id": "default"}
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)

    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
    )


def create_text_formatter() -> logging.Formatter:
    """Formatter legível para desenvolvimento local."""
    return logging.Formatter(_TEXT_FORMAT)
