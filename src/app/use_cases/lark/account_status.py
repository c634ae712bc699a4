"""Status de contas Lark (descrição e probe de credenciais)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from config.settings import mask_secret

if TYPE_CHECKING:
    from app.infra.lark.token_manager import LarkTokenManager
    from config.settings import LarkAccountSettings


@dataclass(frozen=True, slots=True)
class AccountSnapshot:
    account_id: str
    name: str | None
    enabled: bool
    configured: bool
    connected: bool
    state: str


@dataclass(frozen=True, slots=True)
class ProbeResult:
    ok: bool
    error: str | None = None


def resolve_account_state(configured: bool, enabled: bool) -> str:
    if not configured:
        return "not configured"
    if not enabled:
        return "disabled"
    return "configured"


def describe_account(
    account: LarkAccountSettings,
    token_manager: LarkTokenManager,
) -> AccountSnapshot:
    """Resumo da conta sem segredos (app_id mascarado)."""
    configured = account.is_configured
    return AccountSnapshot(
        account_id=account.account_id,
        name=f"App: {mask_secret(account.app_id)}" if account.app_id else None,
        enabled=account.enabled,
        configured=configured,
        connected=configured and token_manager.has_valid_token(account),
        state=resolve_account_state(configured, account.enabled),
    )


async def probe_account(
    account: LarkAccountSettings,
    token_manager: LarkTokenManager,
) -> ProbeResult:
    """Valida credenciais emitindo um token."""
    if not account.is_configured:
        return ProbeResult(ok=False, error="Not configured")

    check = await token_manager.validate_credentials(account)
    return ProbeResult(ok=check.ok, error=check.error)
