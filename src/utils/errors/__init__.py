"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AUTH_FAILURE_CODES,
    AuthError,
    DecryptionError,
    HandlerError,
    LarkChannelError,
    TransportError,
    UnsupportedContentError,
)

__all__ = [
    "AUTH_FAILURE_CODES",
    "AuthError",
    "DecryptionError",
    "HandlerError",
    "LarkChannelError",
    "TransportError",
    "UnsupportedContentError",
]
