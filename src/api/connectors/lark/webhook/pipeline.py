"""Pipeline de ingestão de webhooks Lark.

Fluxo por request:
    parse JSON → challenge? → decrypt (se `encrypt`) → assinatura → token
    → im.message.receive_v1? → tipo suportado? → handler

Falhas de parse, criptografia e autenticação viram 400/401. Tudo que passa da
autenticação é confirmado com 200, inclusive tipo não suportado e exceção do
handler, para a plataforma não reenviar o evento.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from api.connectors.lark.webhook.events import (
    EventEnvelope,
    parse_message_event,
    unsupported_reply_text,
)
from api.connectors.lark.webhook.receive import (
    InvalidJsonError,
    decrypt_payload,
    is_encrypted,
    parse_webhook_body,
    verify_event_token,
    verify_request_signature,
)
from api.connectors.lark.webhook.verify import is_challenge, verify_challenge
from app.observability import record_handler_failure, record_latency
from utils.errors import AuthError, DecryptionError, HandlerError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from app.protocols.models import ParsedMessage
    from config.settings import LarkAccountSettings

    MessageHandler = Callable[[ParsedMessage], Awaitable[None]]
    UnsupportedHandler = Callable[[ParsedMessage, str], Awaitable[None]]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WebhookResult:
    """Resposta HTTP do pipeline."""

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


def _reject(status_code: int, error: str, account_id: str, reason: str) -> WebhookResult:
    logger.warning(
        "lark_webhook_rejected",
        extra={
            "channel": "lark",
            "account_id": account_id,
            "status_code": status_code,
            "reason": reason,
        },
    )
    return WebhookResult(status_code=status_code, body={"error": error})


async def handle_webhook_request(
    raw_body: bytes,
    headers: Mapping[str, str],
    account: LarkAccountSettings,
    on_message: MessageHandler,
    on_unsupported: UnsupportedHandler | None = None,
) -> WebhookResult:
    """Processa um request de webhook de ponta a ponta.

    Args:
        raw_body: Corpo bruto do request
        headers: Headers recebidos
        account: Conta resolvida pela URL
        on_message: Handler para mensagens de tipo suportado
        on_unsupported: Handler opcional para tipos não suportados

    Returns:
        WebhookResult com status 200, 400 ou 401
    """
    account_id = account.account_id

    try:
        payload = parse_webhook_body(raw_body)
    except InvalidJsonError as exc:
        return _reject(400, "Invalid JSON", account_id, str(exc))

    if is_challenge(payload):
        return _challenge_result(payload, account)

    try:
        event = decrypt_payload(payload, account.encrypt_key) if is_encrypted(payload) else payload
    except DecryptionError as exc:
        logger.error(
            "lark_event_decryption_failed",
            extra={"channel": "lark", "account_id": account_id, "error": str(exc)},
        )
        error = "Encryption not configured" if not account.encrypt_key else "Decryption failed"
        return WebhookResult(status_code=400, body={"error": error})

    # Com encrypt_key configurada o próprio challenge chega criptografado
    if is_challenge(event):
        return _challenge_result(event, account)

    try:
        verify_request_signature(raw_body, headers, account.encrypt_key)
    except AuthError:
        return _reject(401, "Invalid signature", account_id, "invalid_signature")

    try:
        verify_event_token(event, account.verification_token)
    except AuthError:
        return _reject(401, "Invalid token", account_id, "invalid_token")

    return await _dispatch_event(event, account, on_message, on_unsupported)


def _challenge_result(payload: Mapping[str, Any], account: LarkAccountSettings) -> WebhookResult:
    try:
        challenge = verify_challenge(payload, account.verification_token)
    except AuthError:
        return _reject(401, "Invalid token", account.account_id, "challenge_token_mismatch")

    logger.info(
        "lark_url_verification",
        extra={"channel": "lark", "account_id": account.account_id},
    )
    return WebhookResult(status_code=200, body={"challenge": challenge})


async def _dispatch_event(
    event: dict[str, Any],
    account: LarkAccountSettings,
    on_message: MessageHandler,
    on_unsupported: UnsupportedHandler | None,
) -> WebhookResult:
    try:
        envelope = EventEnvelope.model_validate(event)
    except ValidationError:
        logger.warning(
            "lark_event_malformed",
            extra={"channel": "lark", "account_id": account.account_id},
        )
        return WebhookResult(status_code=200)

    if not envelope.is_message_receive:
        logger.debug(
            "lark_event_ignored",
            extra={
                "channel": "lark",
                "account_id": account.account_id,
                "event_type": envelope.event_type or None,
            },
        )
        return WebhookResult(status_code=200)

    try:
        message = parse_message_event(envelope)
    except ValidationError:
        logger.warning(
            "lark_message_event_malformed",
            extra={"channel": "lark", "account_id": account.account_id},
        )
        return WebhookResult(status_code=200)

    if not message.kind.is_supported:
        await _handle_unsupported(message, account, on_unsupported)
        return WebhookResult(status_code=200)

    await _invoke_handler(message, account, on_message)
    return WebhookResult(status_code=200)


async def _handle_unsupported(
    message: ParsedMessage,
    account: LarkAccountSettings,
    on_unsupported: UnsupportedHandler | None,
) -> None:
    logger.warning(
        "lark_message_type_unsupported",
        extra={
            "channel": "lark",
            "account_id": account.account_id,
            "message_type": message.message_type,
        },
    )
    if on_unsupported is None:
        return

    try:
        await on_unsupported(message, unsupported_reply_text(message.message_type))
    except Exception as exc:
        _report_handler_failure(HandlerError(message.message_id, exc), account)


async def _invoke_handler(
    message: ParsedMessage,
    account: LarkAccountSettings,
    on_message: MessageHandler,
) -> None:
    started = time.perf_counter()
    try:
        await on_message(message)
    except Exception as exc:
        _report_handler_failure(HandlerError(message.message_id, exc), account)
        return

    record_latency(
        component="lark_webhook",
        operation="handle_message",
        latency_ms=(time.perf_counter() - started) * 1000,
    )


def _report_handler_failure(error: HandlerError, account: LarkAccountSettings) -> None:
    logger.error(
        "lark_message_handler_failed",
        exc_info=error.original,
        extra={
            "channel": "lark",
            "account_id": account.account_id,
            "message_id": error.message_id,
            "error_type": type(error.original).__name__,
        },
    )
    record_handler_failure(
        account_id=account.account_id,
        message_id=error.message_id,
        error_type=type(error.original).__name__,
    )
