"""Taxonomia de erros do canal Lark.

Erros de autenticação e criptografia falham o request sem retry.
Erros de transporte são retentados localmente e só sobem após esgotar a política.
Erros do handler de negócio são engolidos na borda do webhook, mas sempre logados.
"""

from __future__ import annotations

# Códigos Lark que indicam falha de autenticação do bearer token
AUTH_FAILURE_CODES = frozenset({99991401, 99991663, 99991668})


class LarkChannelError(Exception):
    """Base para erros do canal Lark."""


class AuthError(LarkChannelError):
    """Token de verificação, assinatura ou credencial inválidos."""


class DecryptionError(LarkChannelError):
    """Envelope criptografado mal-formado ou impossível de decifrar."""


class TransportError(LarkChannelError):
    """Falha de rede ou HTTP ao falar com a API Lark (sem dados sensíveis)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.is_retryable = is_retryable

    @property
    def is_auth_failure(self) -> bool:
        """True se a API rejeitou o bearer token."""
        return self.status_code == 401 or self.error_code in AUTH_FAILURE_CODES


class UnsupportedContentError(LarkChannelError):
    """Tipo de mensagem reconhecido mas não tratado."""

    def __init__(self, message_type: str, reply_text: str) -> None:
        super().__init__(f"unsupported_message_type: {message_type}")
        self.message_type = message_type
        self.reply_text = reply_text


class HandlerError(LarkChannelError):
    """Exceção levantada pelo handler de negócio fornecido pelo chamador."""

    def __init__(self, message_id: str, original: BaseException) -> None:
        super().__init__(f"handler_failed: {type(original).__name__}")
        self.message_id = message_id
        self.original = original
