"""Descriptografia de eventos Lark (AES-256-CBC).

Formato do campo `encrypt`: base64(IV[16] + ciphertext), com chave
SHA-256(encrypt_key) e padding PKCS#7. O plaintext é um objeto JSON.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import json
from typing import Any

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from utils.errors import DecryptionError

from .constants import AES_BLOCK_SIZE, IV_SIZE


def derive_key(encrypt_key: str) -> bytes:
    """Deriva a chave AES-256 a partir da encrypt_key configurada."""
    return hashlib.sha256(encrypt_key.encode("utf-8")).digest()


def _decode_envelope(encrypted: str) -> tuple[bytes, bytes]:
    try:
        raw = base64.b64decode(encrypted.strip(), validate=True)
    except (ValueError, binascii.Error) as exc:
        raise DecryptionError(f"Invalid base64 envelope: {exc}") from exc

    iv, ciphertext = raw[:IV_SIZE], raw[IV_SIZE:]
    if len(iv) != IV_SIZE or not ciphertext or len(ciphertext) % AES_BLOCK_SIZE:
        raise DecryptionError("Invalid envelope size")
    return iv, ciphertext


def decrypt_event(encrypted: str, encrypt_key: str) -> dict[str, Any]:
    """Descriptografa o campo `encrypt` do webhook.

    Args:
        encrypted: Valor base64 do campo `encrypt`
        encrypt_key: Chave de criptografia da conta

    Returns:
        Evento descriptografado (dict)

    Raises:
        DecryptionError: Envelope inválido, chave errada ou plaintext não-JSON
    """
    iv, ciphertext = _decode_envelope(encrypted)

    try:
        decryptor = Cipher(algorithms.AES(derive_key(encrypt_key)), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
        plaintext = unpadder.update(padded) + unpadder.finalize()
        payload = json.loads(plaintext.decode("utf-8"))
    except Exception as exc:
        raise DecryptionError(f"Event decryption failed: {type(exc).__name__}") from exc

    if not isinstance(payload, dict):
        raise DecryptionError("Decrypted event must be a JSON object")

    return payload
