"""Endpoint de webhook da Lark.

Endpoint:
- POST /webhook/lark/{account_id}: challenge de URL e eventos inbound

Segurança:
- Assinatura SHA-256 e token de verificação quando configurados
- Eventos criptografados (AES-256-CBC) exigem encrypt_key da conta
- Depois da autenticação sempre responde 200, para a plataforma não reenviar
"""

from __future__ import annotations

import logging
from functools import partial

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from api.connectors.lark.webhook import handle_webhook_request
from api.routes.lark.webhook_runtime import build_scheduler
from app.bootstrap import create_inbound_handler
from app.observability import get_correlation_id, reset_correlation_id, set_correlation_id
from config.settings import get_lark_settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{account_id}", response_model=None)
async def receive_webhook(account_id: str, request: Request) -> JSONResponse:
    """Recebe challenge ou evento de uma conta.

    Returns:
        200 (challenge ecoado ou confirmação), 400 (JSON/criptografia),
        401 (assinatura/token) ou 404 (conta desconhecida ou desabilitada).
    """
    correlation_id = request.headers.get("x-correlation-id")
    token = set_correlation_id(correlation_id)

    try:
        settings = get_lark_settings()
        account = settings.resolve_account(account_id)
        if not account.is_enabled:
            logger.warning(
                "lark_webhook_unknown_account",
                extra={"channel": "lark", "account_id": account_id},
            )
            return JSONResponse(
                content={"error": "Unknown account"},
                status_code=status.HTTP_404_NOT_FOUND,
            )

        raw_body = await request.body()
        handler = create_inbound_handler(scheduler=build_scheduler(account, settings))

        result = await handle_webhook_request(
            raw_body=raw_body,
            headers=dict(request.headers),
            account=account,
            on_message=partial(handler.on_message, account),
            on_unsupported=partial(handler.on_unsupported, account),
        )

        logger.info(
            "webhook_received",
            extra={
                "channel": "lark",
                "account_id": account_id,
                "correlation_id": get_correlation_id(),
                "status_code": result.status_code,
                "payload_size": len(raw_body),
            },
        )
        return JSONResponse(content=result.body, status_code=result.status_code)

    finally:
        reset_correlation_id(token)
