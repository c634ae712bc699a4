"""Testes da assinatura SHA-256 de webhooks."""

from __future__ import annotations

import pytest

from app.infra.crypto import (
    HEADER_NONCE,
    HEADER_SIGNATURE,
    HEADER_TIMESTAMP,
    compute_signature,
    validate_signature,
    verify_lark_signature,
)
from tests.fakes.fake_lark import ENCRYPT_KEY

BODY = b'{"schema":"2.0","header":{"event_type":"im.message.receive_v1"}}'
TIMESTAMP = "1700000000"
NONCE = "nonce-abc"


def _signature() -> str:
    return compute_signature(TIMESTAMP, NONCE, ENCRYPT_KEY, BODY)


def _flip_last(value: str) -> str:
    return value[:-1] + ("x" if value[-1] != "x" else "y")


def test_validate_signature_accepts_matching_hash() -> None:
    assert validate_signature(BODY, TIMESTAMP, NONCE, _signature(), ENCRYPT_KEY) is True


def test_validate_signature_ignores_case_of_hex_digest() -> None:
    assert validate_signature(BODY, TIMESTAMP, NONCE, _signature().upper(), ENCRYPT_KEY) is True


def test_validate_signature_rejects_body_with_one_byte_changed() -> None:
    tampered = BODY[:-1] + b"]"
    assert validate_signature(tampered, TIMESTAMP, NONCE, _signature(), ENCRYPT_KEY) is False


@pytest.mark.parametrize("field", ["timestamp", "nonce", "key"])
def test_validate_signature_rejects_any_changed_input(field: str) -> None:
    timestamp, nonce, key = TIMESTAMP, NONCE, ENCRYPT_KEY
    if field == "timestamp":
        timestamp = _flip_last(timestamp)
    elif field == "nonce":
        nonce = _flip_last(nonce)
    else:
        key = _flip_last(key)

    assert validate_signature(BODY, timestamp, nonce, _signature(), key) is False


def test_verify_lark_signature_skips_without_encrypt_key() -> None:
    result = verify_lark_signature(BODY, {HEADER_SIGNATURE: "whatever"}, None)

    assert result.valid is True
    assert result.skipped is True


def test_verify_lark_signature_skips_when_headers_incomplete() -> None:
    result = verify_lark_signature(BODY, {HEADER_TIMESTAMP: TIMESTAMP}, ENCRYPT_KEY)

    assert result.valid is True
    assert result.skipped is True


def test_verify_lark_signature_reads_headers_case_insensitively() -> None:
    headers = {
        "X-Lark-Request-Timestamp": TIMESTAMP,
        "X-Lark-Request-Nonce": NONCE,
        "X-Lark-Signature": _signature(),
    }

    result = verify_lark_signature(BODY, headers, ENCRYPT_KEY)

    assert result.valid is True
    assert result.skipped is False


def test_verify_lark_signature_reports_invalid_signature() -> None:
    headers = {
        HEADER_TIMESTAMP: TIMESTAMP,
        HEADER_NONCE: NONCE,
        HEADER_SIGNATURE: "0" * 64,
    }

    result = verify_lark_signature(BODY, headers, ENCRYPT_KEY)

    assert result.valid is False
    assert result.error == "invalid_signature"
