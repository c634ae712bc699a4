"""Modelos canônicos do canal Lark.

ParsedMessage é a decodificação fiel do evento da plataforma; InternalMessage é
a mensagem agnóstica de plataforma consumida pelo runtime; OutboundMessage é o
que o runtime devolve para entrega.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

ChatType = Literal["dm", "group"]
MediaKind = Literal["image", "file"]

# Tag de chat direto na plataforma; qualquer outra tag é grupo
PLATFORM_DIRECT_CHAT_TAG = "p2p"


class MessageKind(Enum):
    """Tipos de mensagem reconhecidos (allow-list) + variante explícita para o resto."""

    TEXT = "text"
    RICH_TEXT = "post"
    IMAGE = "image"
    FILE = "file"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_platform(cls, message_type: str) -> MessageKind:
        """Mapeia `message_type` da plataforma; desconhecido vira UNSUPPORTED."""
        for kind in cls:
            if kind is not cls.UNSUPPORTED and kind.value == message_type:
                return kind
        return cls.UNSUPPORTED

    @property
    def is_supported(self) -> bool:
        return self is not MessageKind.UNSUPPORTED


SUPPORTED_MESSAGE_TYPES: tuple[str, ...] = tuple(
    kind.value for kind in MessageKind if kind.is_supported
)


def to_canonical_chat_type(platform_chat_type: str) -> ChatType:
    """`p2p` vira `dm`; qualquer outro valor vira `group`."""
    return "dm" if platform_chat_type == PLATFORM_DIRECT_CHAT_TAG else "group"


@dataclass(frozen=True, slots=True)
class Mention:
    """Menção dentro de uma mensagem (placeholder `@_user_N` → usuário)."""

    key: str
    id: str
    name: str


@dataclass(frozen=True, slots=True)
class ParsedMessage:
    """Mensagem decodificada do evento `im.message.receive_v1`.

    Atributos:
        message_id: ID da mensagem (om_...)
        chat_id: ID do chat (oc_...)
        chat_type: Tipo canônico (dm|group)
        sender_id: open_id do remetente
        sender_type: Tipo do remetente (user|app)
        message_type: Tipo bruto informado pela plataforma
        kind: Variante reconhecida (UNSUPPORTED para tipos fora da allow-list)
        content: Conteúdo já decodificado do JSON aninhado ({} se inválido)
        mentions: Menções na ordem recebida
        create_time: Timestamp de criação em ms
        root_id: ID da mensagem raiz do thread
        parent_id: ID da mensagem respondida
        tenant_key: Tenant do remetente
        app_id: App que recebeu o evento
    """

    message_id: str
    chat_id: str
    chat_type: ChatType
    sender_id: str
    sender_type: str
    message_type: str
    kind: MessageKind
    content: dict[str, Any] = field(default_factory=dict)
    mentions: tuple[Mention, ...] = ()
    create_time: int = 0
    root_id: str | None = None
    parent_id: str | None = None
    tenant_key: str = ""
    app_id: str = ""


@dataclass(frozen=True, slots=True)
class InternalMessage:
    """Mensagem agnóstica de plataforma, derivada uma única vez de ParsedMessage."""

    id: str
    channel: str
    chat_id: str
    chat_type: ChatType
    sender_id: str
    text: str
    timestamp: int
    media_url: str | None = None
    media_type: MediaKind | None = None
    reply_to_id: str | None = None
    thread_id: str | None = None
    mentions: tuple[Mention, ...] = ()


@dataclass(frozen=True, slots=True)
class OutboundMessage:
    """Resposta construída pelo runtime externo."""

    text: str
    media_url: str | None = None
    reply_to_id: str | None = None
    mention_user_ids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PlatformMessage:
    """Mensagem codificada para a API (content é uma string JSON)."""

    msg_type: str
    content: str


@dataclass(frozen=True, slots=True)
class OutboundMessageResponse:
    """Resultado de envio outbound (nunca lança para o chamador)."""

    success: bool
    message_ids: tuple[str, ...] = ()
    error_code: str | None = None
    error_message: str | None = None


@dataclass(frozen=True, slots=True)
class IssuedToken:
    """tenant_access_token recém-emitido e seu tempo de vida informado pelo servidor."""

    token: str
    expires_in_seconds: int
