"""Validação de assinatura SHA-256 dos webhooks Lark."""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .constants import HEADER_NONCE, HEADER_SIGNATURE, HEADER_TIMESTAMP

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Resultado da verificação de assinatura.

    `skipped=True` quando não há encrypt_key ou o request não veio assinado.
    """

    valid: bool
    skipped: bool = False
    error: str | None = None


def compute_signature(timestamp: str, nonce: str, encrypt_key: str, raw_body: bytes) -> str:
    """SHA-256 hex de timestamp + nonce + encrypt_key + corpo bruto."""
    prefix = (timestamp + nonce + encrypt_key).encode("utf-8")
    return hashlib.sha256(prefix + raw_body).hexdigest()


def validate_signature(
    raw_body: bytes,
    timestamp: str,
    nonce: str,
    signature: str,
    encrypt_key: str,
) -> bool:
    """True se a assinatura confere (comparação em tempo constante)."""
    expected = compute_signature(timestamp, nonce, encrypt_key, raw_body)
    return hmac.compare_digest(expected, signature.strip().lower())


def verify_lark_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    encrypt_key: str | None,
) -> SignatureResult:
    """Verifica assinatura a partir dos headers do request.

    Sem encrypt_key, ou sem o trio completo de headers, o request é tratado
    como não assinado.

    Args:
        raw_body: Corpo bruto do request
        headers: Headers recebidos (qualquer capitalização)
        encrypt_key: Chave de criptografia da conta

    Returns:
        SignatureResult
    """
    if not encrypt_key:
        return SignatureResult(valid=True, skipped=True)

    lowered = {key.lower(): value for key, value in headers.items()}
    timestamp = lowered.get(HEADER_TIMESTAMP)
    nonce = lowered.get(HEADER_NONCE)
    signature = lowered.get(HEADER_SIGNATURE)

    if not (timestamp and nonce and signature):
        return SignatureResult(valid=True, skipped=True)

    if validate_signature(raw_body, timestamp, nonce, signature, encrypt_key):
        return SignatureResult(valid=True)
    return SignatureResult(valid=False, error="invalid_signature")
