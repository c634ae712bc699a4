"""Endpoints de health check (liveness e readiness)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.bootstrap import SERVICE_NAME, get_token_manager
from app.use_cases.lark import describe_account
from config.settings import get_lark_settings

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe — verifica se o serviço está rodando."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check() -> JSONResponse:
    """Readiness probe — pronto quando ao menos uma conta está habilitada."""
    settings = get_lark_settings()
    token_manager = get_token_manager()

    accounts: dict[str, dict[str, Any]] = {}
    for account_id in settings.list_account_ids():
        snapshot = describe_account(settings.resolve_account(account_id), token_manager)
        accounts[account_id] = {
            "name": snapshot.name,
            "state": snapshot.state,
            "configured": snapshot.configured,
            "enabled": snapshot.enabled,
            "connected": snapshot.connected,
        }

    ready = any(item["configured"] and item["enabled"] for item in accounts.values())
    if not ready:
        logger.warning("readiness_no_enabled_account", extra={"channel": "lark"})

    payload = {
        "status": "ready" if ready else "not_ready",
        "accounts": accounts,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)
