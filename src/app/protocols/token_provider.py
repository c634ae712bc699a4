"""Protocolo do provedor de bearer token por conta."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from config.settings import LarkAccountSettings


class TokenProviderProtocol(Protocol):
    """Obtém e invalida tokens por conta."""

    async def get_token(self, account: LarkAccountSettings) -> str: ...

    def invalidate(self, account: LarkAccountSettings) -> None: ...
