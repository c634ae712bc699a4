"""Códigos de erro e helpers de parsing para a Open API Lark."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

SUCCESS_CODE = 0
APP_ID_NOT_FOUND = 10003
APP_SECRET_INCORRECT = 10014
INVALID_PARAMS = 99991400
AUTH_FAILED = 99991401
PERMISSION_DENIED = 99991402
RATE_LIMITED = 99991429

ERROR_MESSAGES: dict[int, str] = {
    SUCCESS_CODE: "Success",
    APP_ID_NOT_FOUND: "App ID does not exist",
    APP_SECRET_INCORRECT: "App Secret is incorrect",
    INVALID_PARAMS: "Invalid request parameters",
    AUTH_FAILED: "Authentication failed",
    PERMISSION_DENIED: "Permission denied",
    RATE_LIMITED: "Rate limited",
}


@dataclass(frozen=True)
class LarkApiError:
    """Erro retornado no envelope `{code, msg, data}`."""

    error_code: int
    error_message: str
    is_rate_limited: bool


def is_success(code: int | None) -> bool:
    return code == SUCCESS_CODE


def get_error_message(code: int, server_message: str | None = None) -> str:
    """Mensagem legível para um código; cai para o `msg` do servidor."""
    if code in ERROR_MESSAGES:
        return ERROR_MESSAGES[code]
    return server_message or f"Unknown error (code: {code})"


def parse_lark_error(response_data: dict[str, Any]) -> LarkApiError | None:
    """Extrai erro do envelope da API.

    Args:
        response_data: Dict do response JSON

    Returns:
        LarkApiError se `code != 0`, None se sucesso ou sem código
    """
    code = response_data.get("code")
    if code is None or not isinstance(code, int) or is_success(code):
        return None

    return LarkApiError(
        error_code=code,
        error_message=get_error_message(code, response_data.get("msg")),
        is_rate_limited=code == RATE_LIMITED,
    )
