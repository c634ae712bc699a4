"""Cliente HTTP especializado para a Open API Lark/Feishu.

Estende HttpClient com comportamentos específicos da plataforma:
- Rate limit pelo código 99991429 no corpo (além do HTTP 429)
- Envelope `{code, msg, data}` validado em toda resposta
- Logging estruturado sem tokens nem conteúdo de mensagens
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Literal

from pydantic import ValidationError

from api.connectors.lark.http_base import HttpClient, HttpClientConfig
from api.connectors.lark.lark_errors import (
    APP_ID_NOT_FOUND,
    APP_SECRET_INCORRECT,
    AUTH_FAILED,
    RATE_LIMITED,
    get_error_message,
    parse_lark_error,
)
from api.connectors.lark.lark_logging import log_lark_error, log_success
from api.connectors.lark.models import TenantTokenResponse
from app.protocols.models import IssuedToken
from config.settings import LARK_API_BASE_URL
from utils.errors import AuthError, TransportError

if TYPE_CHECKING:
    import httpx

    from config.settings import LarkSettings

logger: logging.Logger = logging.getLogger(__name__)

TOKEN_ENDPOINT = "/auth/v3/tenant_access_token/internal/"
MESSAGES_ENDPOINT = "/im/v1/messages"
IMAGES_ENDPOINT = "/im/v1/images"

_CREDENTIAL_ERROR_CODES = frozenset({APP_ID_NOT_FOUND, APP_SECRET_INCORRECT, AUTH_FAILED})


def resolve_receive_id_type(receive_id: str) -> Literal["chat_id", "open_id"]:
    """`oc_...` é chat; qualquer outro id é tratado como open_id de usuário."""
    return "chat_id" if receive_id.startswith("oc_") else "open_id"


class LarkHttpClient(HttpClient):
    """Cliente da Open API Lark.

    Toda operação lança TransportError em falha de rede/HTTP ou `code != 0`.
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        base_url: str = LARK_API_BASE_URL,
    ) -> None:
        super().__init__(config)
        self._base_url = base_url.rstrip("/")

    def is_rate_limited(self, response: httpx.Response) -> bool:
        if response.status_code == 429:
            return True
        if "json" not in response.headers.get("content-type", ""):
            return False
        try:
            data = response.json()
        except ValueError:
            return False
        return isinstance(data, dict) and data.get("code") == RATE_LIMITED

    async def fetch_tenant_access_token(self, app_id: str, app_secret: str) -> IssuedToken:
        """Emite tenant_access_token para o app.

        Raises:
            AuthError: Credenciais rejeitadas pela plataforma
            TransportError: Falha de rede ou resposta inesperada
        """
        response = await self.request(
            "POST",
            self._url(TOKEN_ENDPOINT),
            json={"app_id": app_id, "app_secret": app_secret},
        )
        try:
            parsed = TenantTokenResponse.model_validate(self._decode(response, TOKEN_ENDPOINT))
        except ValidationError as exc:
            raise TransportError(
                "invalid_token_response", status_code=response.status_code
            ) from exc

        if parsed.code != 0:
            message = get_error_message(parsed.code, parsed.msg)
            logger.warning(
                "lark_token_request_failed",
                extra={"channel": "lark", "error_code": parsed.code, "error_message": message},
            )
            if parsed.code in _CREDENTIAL_ERROR_CODES:
                raise AuthError(message)
            raise TransportError(message, status_code=response.status_code, error_code=parsed.code)

        if not parsed.tenant_access_token:
            raise TransportError("missing_tenant_access_token", status_code=response.status_code)

        log_success("POST", TOKEN_ENDPOINT, response.status_code)
        return IssuedToken(token=parsed.tenant_access_token, expires_in_seconds=parsed.expire)

    async def send_message(
        self,
        token: str,
        receive_id: str,
        msg_type: str,
        content: str,
    ) -> dict[str, Any]:
        """Envia mensagem para chat (`oc_`) ou usuário (open_id)."""
        response = await self.request(
            "POST",
            self._url(MESSAGES_ENDPOINT),
            headers=self._auth_headers(token),
            params={"receive_id_type": resolve_receive_id_type(receive_id)},
            json={"receive_id": receive_id, "msg_type": msg_type, "content": content},
        )
        return self._ensure_success(response, "POST", MESSAGES_ENDPOINT)

    async def reply_message(
        self,
        token: str,
        message_id: str,
        msg_type: str,
        content: str,
    ) -> dict[str, Any]:
        """Responde a uma mensagem existente (vincula a resposta no thread)."""
        endpoint = f"{MESSAGES_ENDPOINT}/{message_id}/reply"
        response = await self.request(
            "POST",
            self._url(endpoint),
            headers=self._auth_headers(token),
            json={"msg_type": msg_type, "content": content},
        )
        return self._ensure_success(response, "POST", f"{MESSAGES_ENDPOINT}/:id/reply")

    async def upload_image(self, token: str, image: bytes) -> str:
        """Faz upload de imagem (multipart) e retorna o image_key."""
        response = await self.request(
            "POST",
            self._url(IMAGES_ENDPOINT),
            headers=self._auth_headers(token),
            data={"image_type": "message"},
            files={"image": ("image", image, "application/octet-stream")},
        )
        data = self._ensure_success(response, "POST", IMAGES_ENDPOINT)
        image_key = data.get("image_key")
        if not image_key:
            raise TransportError("missing_image_key", status_code=response.status_code)
        return str(image_key)

    async def download_resource(
        self,
        token: str,
        message_id: str,
        file_key: str,
        resource_type: Literal["image", "file"],
    ) -> bytes:
        """Baixa recurso binário anexado a uma mensagem."""
        endpoint = f"{MESSAGES_ENDPOINT}/{message_id}/resources/{file_key}"
        response = await self.request(
            "GET",
            self._url(endpoint),
            headers=self._auth_headers(token),
            params={"type": resource_type},
        )
        if response.status_code >= 400:
            # Erros de download voltam como envelope JSON
            self._ensure_success(response, "GET", f"{MESSAGES_ENDPOINT}/:id/resources/:key")
            raise TransportError("resource_download_failed", status_code=response.status_code)
        return response.content

    def _url(self, endpoint: str) -> str:
        return f"{self._base_url}{endpoint}"

    @staticmethod
    def _auth_headers(token: str) -> dict[str, str]:
        if not token or not token.strip():
            raise ValueError("token não pode ser vazio")
        return {"Authorization": f"Bearer {token}"}

    @staticmethod
    def _decode(response: httpx.Response, endpoint: str) -> dict[str, Any]:
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            logger.error(
                "lark_invalid_json_response",
                extra={
                    "channel": "lark",
                    "endpoint": endpoint,
                    "status_code": response.status_code,
                },
            )
            raise TransportError(
                "invalid_json_response", status_code=response.status_code
            ) from exc
        if not isinstance(data, dict):
            raise TransportError("invalid_json_response", status_code=response.status_code)
        return data

    def _ensure_success(
        self,
        response: httpx.Response,
        method: str,
        endpoint: str,
    ) -> dict[str, Any]:
        """Valida envelope `{code, msg, data}` e retorna `data`."""
        response_data = self._decode(response, endpoint)

        lark_error = parse_lark_error(response_data)
        if lark_error:
            log_lark_error(lark_error, method, endpoint)
            raise TransportError(
                lark_error.error_message,
                status_code=response.status_code,
                error_code=lark_error.error_code,
                is_retryable=lark_error.is_rate_limited,
            )

        if response.status_code >= 400:
            raise TransportError(
                f"http_error_{response.status_code}", status_code=response.status_code
            )

        log_success(method, endpoint, response.status_code)
        data = response_data.get("data")
        return data if isinstance(data, dict) else {}


def create_lark_http_client(
    settings: LarkSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> LarkHttpClient:
    """Factory para criar cliente Lark com config do ambiente.

    Args:
        settings: LarkSettings opcional. Se None, carrega do ambiente.
        transport: Transport httpx opcional (testes).
    """
    # Import local para evitar dependência circular
    from config.settings import get_lark_settings

    lark = settings or get_lark_settings()
    config = HttpClientConfig(
        timeout_seconds=lark.request_timeout_seconds,
        max_retries=lark.max_retries,
        backoff_base_seconds=lark.backoff_base_seconds,
        backoff_max_seconds=lark.backoff_max_seconds,
        transport=transport,
    )
    return LarkHttpClient(config=config, base_url=lark.api_base_url)
