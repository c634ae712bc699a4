"""Contratos do envelope de eventos Lark e decodificação de mensagens.

O payload da plataforma é JSON pouco tipado; os modelos abaixo aceitam campos
extras e só exigem o que a decodificação de `im.message.receive_v1` precisa.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.protocols.models import (
    SUPPORTED_MESSAGE_TYPES,
    Mention,
    MessageKind,
    ParsedMessage,
    to_canonical_chat_type,
)

logger = logging.getLogger(__name__)

MESSAGE_RECEIVE_EVENT = "im.message.receive_v1"


class _LooseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class EventHeader(_LooseModel):
    event_id: str = ""
    event_type: str = ""
    create_time: str = ""
    token: str | None = None
    app_id: str = ""
    tenant_key: str = ""


class EventEnvelope(_LooseModel):
    """Envelope v2: `{schema, header, event}`."""

    header: EventHeader = Field(default_factory=EventHeader)
    event: dict[str, Any] = Field(default_factory=dict)

    @property
    def event_type(self) -> str:
        return self.header.event_type

    @property
    def is_message_receive(self) -> bool:
        return self.event_type == MESSAGE_RECEIVE_EVENT


class UserId(_LooseModel):
    open_id: str = ""
    user_id: str | None = None
    union_id: str | None = None


class Sender(_LooseModel):
    sender_id: UserId = Field(default_factory=UserId)
    sender_type: str = ""
    tenant_key: str = ""


class MentionPayload(_LooseModel):
    key: str
    id: UserId = Field(default_factory=UserId)
    name: str = ""


class MessagePayload(_LooseModel):
    message_id: str
    root_id: str | None = None
    parent_id: str | None = None
    create_time: str = "0"
    chat_id: str
    chat_type: str
    message_type: str
    content: str = ""
    mentions: list[MentionPayload] = Field(default_factory=list)

    @field_validator("mentions", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return value or []


class MessageReceiveEvent(_LooseModel):
    sender: Sender = Field(default_factory=Sender)
    message: MessagePayload


def _decode_content(raw: str) -> dict[str, Any]:
    """Conteúdo é uma string JSON aninhada; falha vira `{}`."""
    try:
        content = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("lark_message_content_invalid", extra={"channel": "lark"})
        return {}
    return content if isinstance(content, dict) else {}


def _parse_create_time(raw: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


def parse_message_event(envelope: EventEnvelope) -> ParsedMessage:
    """Decodifica `im.message.receive_v1` em ParsedMessage.

    Raises:
        pydantic.ValidationError: Se faltarem campos obrigatórios da mensagem
    """
    body = MessageReceiveEvent.model_validate(envelope.event)
    message = body.message

    return ParsedMessage(
        message_id=message.message_id,
        chat_id=message.chat_id,
        chat_type=to_canonical_chat_type(message.chat_type),
        sender_id=body.sender.sender_id.open_id,
        sender_type=body.sender.sender_type,
        message_type=message.message_type,
        kind=MessageKind.from_platform(message.message_type),
        content=_decode_content(message.content),
        mentions=tuple(
            Mention(key=item.key, id=item.id.open_id, name=item.name)
            for item in message.mentions
        ),
        create_time=_parse_create_time(message.create_time),
        root_id=message.root_id or None,
        parent_id=message.parent_id or None,
        tenant_key=body.sender.tenant_key,
        app_id=envelope.header.app_id,
    )


def unsupported_reply_text(message_type: str) -> str:
    """Texto (zh-CN) enviado ao usuário quando o tipo não é suportado."""
    supported_list = ", ".join(SUPPORTED_MESSAGE_TYPES)
    return f"暂不支持此消息类型 ({message_type})。目前支持的类型: {supported_list}"
