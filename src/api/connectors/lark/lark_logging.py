"""Helpers de logging para a Open API Lark (sem tokens nem conteúdo)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .lark_errors import LarkApiError

logger = logging.getLogger(__name__)


def log_lark_error(lark_error: LarkApiError, method: str, endpoint: str) -> None:
    """Loga erro da API Lark sem expor dados sensíveis."""
    logger.warning(
        "lark_api_error",
        extra={
            "channel": "lark",
            "method": method,
            "endpoint": endpoint,
            "error_code": lark_error.error_code,
            "error_message": lark_error.error_message,
        },
    )


def log_success(method: str, endpoint: str, status_code: int) -> None:
    logger.debug(
        "lark_api_success",
        extra={
            "channel": "lark",
            "method": method,
            "endpoint": endpoint,
            "status_code": status_code,
        },
    )
