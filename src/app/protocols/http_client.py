"""Protocolos HTTP usados pelo app.

Evita dependência direta da camada api.
"""

from __future__ import annotations

from typing import Any, Literal, Protocol

from .models import IssuedToken


class LarkApiClientProtocol(Protocol):
    """Contrato mínimo do cliente da Open API Lark.

    Todas as operações lançam TransportError em falha de rede/HTTP
    ou quando a API responde com `code != 0`.
    """

    async def fetch_tenant_access_token(self, app_id: str, app_secret: str) -> IssuedToken: ...

    async def send_message(
        self,
        token: str,
        receive_id: str,
        msg_type: str,
        content: str,
    ) -> dict[str, Any]: ...

    async def reply_message(
        self,
        token: str,
        message_id: str,
        msg_type: str,
        content: str,
    ) -> dict[str, Any]: ...

    async def upload_image(self, token: str, image: bytes) -> str: ...

    async def download_resource(
        self,
        token: str,
        message_id: str,
        file_key: str,
        resource_type: Literal["image", "file"],
    ) -> bytes: ...
