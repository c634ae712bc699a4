"""Testes da descriptografia AES-256-CBC de eventos."""

from __future__ import annotations

import base64

import pytest

from app.infra.crypto import AES_KEY_SIZE, decrypt_event, derive_key
from tests.fakes.fake_lark import ENCRYPT_KEY, encrypt_event
from utils.errors import DecryptionError


def test_derive_key_is_sha256_of_encrypt_key() -> None:
    key = derive_key(ENCRYPT_KEY)

    assert len(key) == AES_KEY_SIZE
    assert derive_key(ENCRYPT_KEY) == key
    assert derive_key("other" * 8) != key


def test_decrypt_event_returns_original_payload() -> None:
    payload = {"type": "url_verification", "challenge": "abc123", "token": "T"}

    decrypted = decrypt_event(encrypt_event(payload, ENCRYPT_KEY), ENCRYPT_KEY)

    assert decrypted == payload


def test_decrypt_event_with_wrong_key_raises() -> None:
    encrypted = encrypt_event({"hello": "world"}, ENCRYPT_KEY)

    with pytest.raises(DecryptionError):
        decrypt_event(encrypted, "z" * 32)


def test_decrypt_event_rejects_invalid_base64() -> None:
    with pytest.raises(DecryptionError, match="Invalid base64"):
        decrypt_event("not base64 at all!!", ENCRYPT_KEY)


def test_decrypt_event_rejects_envelope_without_ciphertext() -> None:
    only_iv = base64.b64encode(b"\x00" * 16).decode("ascii")

    with pytest.raises(DecryptionError, match="Invalid envelope size"):
        decrypt_event(only_iv, ENCRYPT_KEY)


def test_decrypt_event_rejects_unaligned_ciphertext() -> None:
    unaligned = base64.b64encode(b"\x00" * 16 + b"\x01" * 10).decode("ascii")

    with pytest.raises(DecryptionError, match="Invalid envelope size"):
        decrypt_event(unaligned, ENCRYPT_KEY)


def test_decrypt_event_rejects_non_object_plaintext() -> None:
    encrypted = encrypt_event(["not", "an", "object"], ENCRYPT_KEY)  # type: ignore[arg-type]

    with pytest.raises(DecryptionError, match="JSON object"):
        decrypt_event(encrypted, ENCRYPT_KEY)
