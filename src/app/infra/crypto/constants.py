"""Constantes criptográficas para eventos Lark."""

AES_BLOCK_SIZE = 16  # bytes (AES-CBC)
IV_SIZE = 16  # primeiros 16 bytes do envelope base64
AES_KEY_SIZE = 32  # SHA-256(encrypt_key) → AES-256

HEADER_TIMESTAMP = "x-lark-request-timestamp"
HEADER_NONCE = "x-lark-request-nonce"
HEADER_SIGNATURE = "x-lark-signature"
