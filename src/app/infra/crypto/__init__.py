"""Criptografia de webhooks Lark.

- Assinatura SHA-256 de timestamp + nonce + encrypt_key + corpo
- Descriptografia AES-256-CBC do campo `encrypt`

Localizado em app/infra/ para ser usado tanto pela borda (api/) quanto por app/.
"""

from .constants import AES_KEY_SIZE, HEADER_NONCE, HEADER_SIGNATURE, HEADER_TIMESTAMP, IV_SIZE
from .event_encryption import decrypt_event, derive_key
from .signature import (
    SignatureResult,
    compute_signature,
    validate_signature,
    verify_lark_signature,
)

__all__ = [
    "AES_KEY_SIZE",
    "HEADER_NONCE",
    "HEADER_SIGNATURE",
    "HEADER_TIMESTAMP",
    "IV_SIZE",
    "SignatureResult",
    "compute_signature",
    "decrypt_event",
    "derive_key",
    "validate_signature",
    "verify_lark_signature",
]
