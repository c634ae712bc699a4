"""Settings específicas do canal Lark/Feishu.

As credenciais de cada conta são fornecidas externamente (env ou JSON injetado
pelo gerenciador de segredos). Este módulo só lê; nunca persiste configuração.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Literal

LARK_API_BASE_URL: str = "https://open.feishu.cn/open-apis"
DEFAULT_ACCOUNT_ID: str = "default"
ENCRYPT_KEY_LENGTH: int = 32
TEXT_CHUNK_LIMIT: int = 4000

DmPolicy = Literal["open", "allowlist", "disabled"]
HumanDelayMode = Literal["off", "natural", "custom"]

_VALID_DM_POLICIES = ("open", "allowlist", "disabled")
_VALID_DELAY_MODES = ("off", "natural", "custom")
_TRUTHY = ("true", "1", "yes")


@dataclass(frozen=True)
class LarkAccountSettings:
    """Identidade e políticas de uma conta (app) Lark.

    Attributes:
        account_id: Identificador da conta no gateway (segmento da URL do webhook)
        app_id: App ID do Lark Open Platform
        app_secret: App Secret correspondente
        encrypt_key: Chave de criptografia de eventos (32 caracteres, opcional)
        verification_token: Token de verificação de eventos (opcional)
        enabled: Se a conta está habilitada
        bot_open_id: open_id do bot, usado para detectar menções em grupos
        require_mention: Em grupos, só responde quando o bot é mencionado
        dm_policy: Política de DMs (open|allowlist|disabled)
        allow_from: open_ids liberados quando dm_policy=allowlist ("*" libera todos)
    """

    account_id: str = DEFAULT_ACCOUNT_ID
    app_id: str = ""
    app_secret: str = ""
    encrypt_key: str | None = None
    verification_token: str | None = None
    enabled: bool = True
    bot_open_id: str | None = None
    require_mention: bool = True
    dm_policy: DmPolicy = "allowlist"
    allow_from: tuple[str, ...] = ()

    @property
    def is_configured(self) -> bool:
        """True se app_id e app_secret estão presentes."""
        return bool(self.app_id) and bool(self.app_secret)

    @property
    def is_enabled(self) -> bool:
        """True se configurada e não desabilitada."""
        return self.enabled and self.is_configured

    @property
    def unconfigured_reason(self) -> str:
        """Motivo legível para conta não configurada."""
        if not self.app_id:
            return "Missing App ID"
        if not self.app_secret:
            return "Missing App Secret"
        return "Not configured"

    def validate(self) -> list[str]:
        """Valida a conta.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []
        prefix = f"LARK[{self.account_id}]"

        if self.enabled and not self.app_id:
            errors.append(f"{prefix} app_id não configurado")
        if self.enabled and not self.app_secret:
            errors.append(f"{prefix} app_secret não configurado")
        if self.encrypt_key is not None and len(self.encrypt_key) != ENCRYPT_KEY_LENGTH:
            errors.append(f"{prefix} encrypt_key deve ter {ENCRYPT_KEY_LENGTH} caracteres")
        if self.dm_policy not in _VALID_DM_POLICIES:
            errors.append(f"{prefix} dm_policy inválida: {self.dm_policy}")

        return errors


@dataclass(frozen=True)
class LarkSettings:
    """Configurações do canal Lark.

    Attributes:
        accounts: Contas indexadas por account_id
        api_base_url: URL base da Open API
        request_timeout_seconds: Timeout para requisições HTTP
        max_retries: Retentativas em rate limit / falha de rede
        backoff_base_seconds: Atraso inicial do backoff exponencial
        backoff_max_seconds: Teto do backoff exponencial
        text_chunk_limit: Tamanho máximo de cada fragmento de texto enviado
        human_delay_mode: Modo de atraso humano antes da entrega (off|natural|custom)
        human_delay_min_ms: Limite inferior do atraso no modo custom
        human_delay_max_ms: Limite superior do atraso no modo custom
        webhook_processing_mode: Modo de processamento do webhook (async|inline)
        media_max_size_bytes: Tamanho máximo de mídia baixada
    """

    accounts: dict[str, LarkAccountSettings] = field(default_factory=dict)
    api_base_url: str = LARK_API_BASE_URL
    request_timeout_seconds: float = 30.0
    max_retries: int = 5
    backoff_base_seconds: float = 1.0
    backoff_max_seconds: float = 32.0
    text_chunk_limit: int = TEXT_CHUNK_LIMIT
    human_delay_mode: HumanDelayMode = "off"
    human_delay_min_ms: int = 800
    human_delay_max_ms: int = 2500
    webhook_processing_mode: str = "async"
    media_max_size_bytes: int = 30 * 1024 * 1024

    def list_account_ids(self) -> list[str]:
        """Lista ids de conta; `["default"]` quando nenhuma está configurada."""
        ids = list(self.accounts)
        return ids or [DEFAULT_ACCOUNT_ID]

    def default_account_id(self) -> str:
        """Primeira conta configurada (ou `default`)."""
        return self.list_account_ids()[0]

    def resolve_account(self, account_id: str | None = None) -> LarkAccountSettings:
        """Resolve conta por id; id desconhecido gera conta vazia e desabilitada."""
        resolved_id = account_id or self.default_account_id()
        account = self.accounts.get(resolved_id)
        if account is None:
            return LarkAccountSettings(account_id=resolved_id, enabled=False)
        return account

    def validate(self) -> list[str]:
        """Valida configurações do canal e de todas as contas.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.accounts:
            errors.append("Nenhuma conta Lark configurada (LARK_APP_ID ou LARK_ACCOUNTS_JSON)")

        for account in self.accounts.values():
            errors.extend(account.validate())

        if self.request_timeout_seconds <= 0:
            errors.append("LARK_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 0:
            errors.append("LARK_MAX_RETRIES deve ser >= 0")

        if self.backoff_base_seconds <= 0 or self.backoff_max_seconds < self.backoff_base_seconds:
            errors.append("LARK_BACKOFF_* inválido (base > 0 e max >= base)")

        if self.text_chunk_limit <= 0:
            errors.append("LARK_TEXT_CHUNK_LIMIT deve ser > 0")

        if self.human_delay_mode not in _VALID_DELAY_MODES:
            errors.append(f"LARK_HUMAN_DELAY_MODE inválido: {self.human_delay_mode}")

        if self.human_delay_min_ms < 0 or self.human_delay_max_ms < self.human_delay_min_ms:
            errors.append("LARK_HUMAN_DELAY_MIN_MS/MAX_MS inválidos")

        if self.webhook_processing_mode not in ("async", "inline"):
            errors.append("LARK_WEBHOOK_PROCESSING_MODE deve ser 'async' ou 'inline'")

        return errors


def mask_secret(secret: str) -> str:
    """Mascara segredo para exibição (nunca logar o valor completo)."""
    if len(secret) <= 8:
        return "****"
    return f"{secret[:4]}****{secret[-4:]}"


def _parse_bool(raw: Any, default: bool) -> bool:
    if raw is None or raw == "":
        return default
    if isinstance(raw, bool):
        return raw
    return str(raw).lower() in _TRUTHY


def _parse_allow_from(raw: Any) -> tuple[str, ...]:
    if not raw:
        return ()
    if isinstance(raw, str):
        return tuple(item.strip() for item in raw.split(",") if item.strip())
    return tuple(str(item) for item in raw)


def account_from_mapping(account_id: str, raw: dict[str, Any]) -> LarkAccountSettings:
    """Constrói conta a partir de um dict (camelCase ou snake_case)."""

    def _get(*keys: str) -> Any:
        for key in keys:
            if key in raw:
                return raw[key]
        return None

    return LarkAccountSettings(
        account_id=account_id,
        app_id=_get("app_id", "appId") or "",
        app_secret=_get("app_secret", "appSecret") or "",
        encrypt_key=_get("encrypt_key", "encryptKey") or None,
        verification_token=_get("verification_token", "verificationToken") or None,
        enabled=_get("enabled") is not False,
        bot_open_id=_get("bot_open_id", "botOpenId") or None,
        require_mention=_parse_bool(_get("require_mention", "requireMention"), True),
        dm_policy=(_get("dm_policy", "dmPolicy") or "allowlist").lower(),
        allow_from=_parse_allow_from(_get("allow_from", "allowFrom")),
    )


def _load_accounts_from_env() -> dict[str, LarkAccountSettings]:
    raw_json = os.getenv("LARK_ACCOUNTS_JSON", "").strip()
    if raw_json:
        try:
            mapping = json.loads(raw_json)
        except json.JSONDecodeError as exc:
            raise ValueError("LARK_ACCOUNTS_JSON não é um JSON válido") from exc
        if not isinstance(mapping, dict):
            raise ValueError("LARK_ACCOUNTS_JSON deve ser um objeto {account_id: {...}}")
        return {
            account_id: account_from_mapping(account_id, raw or {})
            for account_id, raw in mapping.items()
        }

    if not os.getenv("LARK_APP_ID"):
        return {}

    account = account_from_mapping(
        DEFAULT_ACCOUNT_ID,
        {
            "app_id": os.getenv("LARK_APP_ID", ""),
            "app_secret": os.getenv("LARK_APP_SECRET", ""),
            "encrypt_key": os.getenv("LARK_ENCRYPT_KEY", ""),
            "verification_token": os.getenv("LARK_VERIFICATION_TOKEN", ""),
            "enabled": _parse_bool(os.getenv("LARK_ENABLED"), True),
            "bot_open_id": os.getenv("LARK_BOT_OPEN_ID", ""),
            "require_mention": os.getenv("LARK_REQUIRE_MENTION"),
            "dm_policy": os.getenv("LARK_DM_POLICY", ""),
            "allow_from": os.getenv("LARK_ALLOW_FROM", ""),
        },
    )
    return {DEFAULT_ACCOUNT_ID: account}


def _load_from_env() -> LarkSettings:
    """Carrega LarkSettings a partir de variáveis de ambiente."""
    environment = os.getenv("ENVIRONMENT", "").lower()
    default_processing_mode = (
        "inline" if environment in ("development", "dev", "test") else "async"
    )
    return LarkSettings(
        accounts=_load_accounts_from_env(),
        api_base_url=os.getenv("LARK_API_BASE_URL", LARK_API_BASE_URL),
        request_timeout_seconds=float(os.getenv("LARK_REQUEST_TIMEOUT_SECONDS", "30")),
        max_retries=int(os.getenv("LARK_MAX_RETRIES", "5")),
        backoff_base_seconds=float(os.getenv("LARK_BACKOFF_BASE_SECONDS", "1")),
        backoff_max_seconds=float(os.getenv("LARK_BACKOFF_MAX_SECONDS", "32")),
        text_chunk_limit=int(os.getenv("LARK_TEXT_CHUNK_LIMIT", str(TEXT_CHUNK_LIMIT))),
        human_delay_mode=os.getenv("LARK_HUMAN_DELAY_MODE", "off").lower(),
        human_delay_min_ms=int(os.getenv("LARK_HUMAN_DELAY_MIN_MS", "800")),
        human_delay_max_ms=int(os.getenv("LARK_HUMAN_DELAY_MAX_MS", "2500")),
        webhook_processing_mode=os.getenv(
            "LARK_WEBHOOK_PROCESSING_MODE", default_processing_mode
        ).lower(),
        media_max_size_bytes=int(
            os.getenv("LARK_MEDIA_MAX_SIZE_BYTES", str(30 * 1024 * 1024))
        ),
    )


@lru_cache(maxsize=1)
def get_lark_settings() -> LarkSettings:
    """Retorna instância cacheada de LarkSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
