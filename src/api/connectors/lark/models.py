"""Contratos de resposta da Open API Lark (pydantic)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TenantTokenResponse(BaseModel):
    """Resposta de `/auth/v3/tenant_access_token/internal/`."""

    model_config = ConfigDict(extra="ignore")

    code: int
    msg: str = ""
    tenant_access_token: str | None = None
    expire: int = 0
