"""Ciclo de vida do tenant_access_token por app.

Cache em memória indexado por app_id, com renovação preguiçosa: o token só é
renovado quando alguém pede e ele está a menos de `refresh_buffer_seconds` de
expirar. Não há lock; renovações concorrentes para o mesmo app são toleradas
(a última escrita vence) porque a emissão é idempotente e barata.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.observability import record_token_refresh
from utils.errors import AuthError, LarkChannelError

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.protocols.http_client import LarkApiClientProtocol
    from config.settings import LarkAccountSettings

logger = logging.getLogger(__name__)

REFRESH_BUFFER_SECONDS = 300.0


@dataclass(frozen=True, slots=True)
class CachedToken:
    """Entrada imutável do cache (substituída, nunca alterada)."""

    token: str
    expires_at: float


@dataclass(frozen=True, slots=True)
class CredentialCheck:
    ok: bool
    error: str | None = None


class LarkTokenManager:
    """Obtém, cacheia e invalida tokens por app."""

    def __init__(
        self,
        client: LarkApiClientProtocol,
        clock: Callable[[], float] = time.time,
        refresh_buffer_seconds: float = REFRESH_BUFFER_SECONDS,
    ) -> None:
        self._client = client
        self._clock = clock
        self._refresh_buffer = refresh_buffer_seconds
        self._cache: dict[str, CachedToken] = {}

    def _is_fresh(self, cached: CachedToken | None) -> bool:
        return cached is not None and cached.expires_at > self._clock() + self._refresh_buffer

    async def get_token(self, account: LarkAccountSettings) -> str:
        """Retorna token válido, emitindo um novo se necessário.

        Raises:
            AuthError: Conta sem credenciais ou credenciais rejeitadas
            TransportError: Falha ao falar com a API
        """
        if not account.is_configured:
            raise AuthError(account.unconfigured_reason)

        cached = self._cache.get(account.app_id)
        if self._is_fresh(cached):
            return cached.token

        return await self._issue(account)

    async def _issue(self, account: LarkAccountSettings) -> str:
        issued = await self._client.fetch_tenant_access_token(account.app_id, account.app_secret)
        self._cache[account.app_id] = CachedToken(
            token=issued.token,
            expires_at=self._clock() + issued.expires_in_seconds,
        )
        record_token_refresh(account.account_id, issued.expires_in_seconds)
        return issued.token

    def invalidate(self, account: LarkAccountSettings) -> None:
        if self._cache.pop(account.app_id, None) is not None:
            logger.info(
                "lark_token_invalidated",
                extra={"channel": "lark", "account_id": account.account_id},
            )

    def has_valid_token(self, account: LarkAccountSettings) -> bool:
        """True se há token em cache fora da janela de renovação."""
        return self._is_fresh(self._cache.get(account.app_id))

    def get_expires_at(self, account: LarkAccountSettings) -> float | None:
        cached = self._cache.get(account.app_id)
        return cached.expires_at if cached else None

    async def validate_credentials(self, account: LarkAccountSettings) -> CredentialCheck:
        """Valida credenciais emitindo um token novo, mesmo com cache válido.

        O token emitido substitui a entrada do cache em caso de sucesso.
        """
        if not account.is_configured:
            return CredentialCheck(ok=False, error=account.unconfigured_reason)

        try:
            await self._issue(account)
        except LarkChannelError as exc:
            return CredentialCheck(ok=False, error=str(exc))
        return CredentialCheck(ok=True)

    def clear(self) -> None:
        self._cache.clear()
