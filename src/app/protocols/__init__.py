"""Protocolos e contratos do core da aplicação."""

from .http_client import LarkApiClientProtocol
from .models import (
    SUPPORTED_MESSAGE_TYPES,
    ChatType,
    InternalMessage,
    IssuedToken,
    Mention,
    MessageKind,
    OutboundMessage,
    OutboundMessageResponse,
    ParsedMessage,
    PlatformMessage,
    to_canonical_chat_type,
)
from .normalizer import MessageNormalizerProtocol
from .payload_builder import PayloadBuilderProtocol
from .runtime import InboundRuntimeProtocol
from .token_provider import TokenProviderProtocol

__all__ = [
    "SUPPORTED_MESSAGE_TYPES",
    "ChatType",
    "InboundRuntimeProtocol",
    "InternalMessage",
    "IssuedToken",
    "LarkApiClientProtocol",
    "Mention",
    "MessageKind",
    "MessageNormalizerProtocol",
    "OutboundMessage",
    "OutboundMessageResponse",
    "ParsedMessage",
    "PayloadBuilderProtocol",
    "PlatformMessage",
    "TokenProviderProtocol",
    "to_canonical_chat_type",
]
