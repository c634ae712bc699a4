"""Parse, descriptografia e autenticação do webhook (sem PII)."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from app.infra.crypto import decrypt_event, verify_lark_signature
from utils.errors import AuthError, DecryptionError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


class WebhookRequestError(ValueError):
    """Erro base para falhas de webhook."""


class InvalidJsonError(WebhookRequestError):
    """JSON inválido no payload do webhook."""


def parse_webhook_body(raw_body: bytes) -> dict[str, Any]:
    """Parseia o corpo bruto do webhook.

    Raises:
        InvalidJsonError: Se o JSON estiver inválido ou não for objeto
    """
    try:
        payload = json.loads(raw_body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidJsonError("invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidJsonError("payload_not_object")

    return payload


def is_encrypted(payload: Mapping[str, Any]) -> bool:
    return "encrypt" in payload


def decrypt_payload(payload: Mapping[str, Any], encrypt_key: str | None) -> dict[str, Any]:
    """Descriptografa envelope `{"encrypt": ...}`.

    Raises:
        DecryptionError: Sem encrypt_key configurada ou envelope inválido
    """
    if not encrypt_key:
        raise DecryptionError("Encryption not configured")

    encrypted = payload.get("encrypt")
    if not isinstance(encrypted, str) or not encrypted:
        raise DecryptionError("Invalid encrypt field")

    return decrypt_event(encrypted, encrypt_key)


def verify_request_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    encrypt_key: str | None,
) -> None:
    """Valida a assinatura quando presente.

    Raises:
        AuthError: Assinatura presente e inválida
    """
    result = verify_lark_signature(raw_body, headers, encrypt_key)
    if not result.valid:
        raise AuthError(result.error or "invalid_signature")


def extract_event_token(event: Mapping[str, Any]) -> str | None:
    """Token do evento: `header.token` (v2) ou `token` no topo (v1)."""
    header = event.get("header")
    if isinstance(header, dict) and header.get("token"):
        return str(header["token"])
    token = event.get("token")
    return str(token) if token else None


def verify_event_token(event: Mapping[str, Any], expected_token: str | None) -> None:
    """Compara o token do evento com o configurado (quando há um).

    Raises:
        AuthError: Token ausente ou divergente
    """
    if not expected_token:
        return
    if extract_event_token(event) != expected_token:
        raise AuthError("Invalid token")
