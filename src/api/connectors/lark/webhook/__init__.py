"""Webhook Lark: challenge, descriptografia, autenticação e ingestão."""

from .events import (
    MESSAGE_RECEIVE_EVENT,
    EventEnvelope,
    parse_message_event,
    unsupported_reply_text,
)
from .pipeline import WebhookResult, handle_webhook_request
from .receive import (
    InvalidJsonError,
    WebhookRequestError,
    decrypt_payload,
    extract_event_token,
    is_encrypted,
    parse_webhook_body,
    verify_event_token,
    verify_request_signature,
)
from .verify import CHALLENGE_TYPE, is_challenge, verify_challenge

__all__ = [
    "CHALLENGE_TYPE",
    "MESSAGE_RECEIVE_EVENT",
    "EventEnvelope",
    "InvalidJsonError",
    "WebhookRequestError",
    "WebhookResult",
    "decrypt_payload",
    "extract_event_token",
    "handle_webhook_request",
    "is_challenge",
    "is_encrypted",
    "parse_message_event",
    "parse_webhook_body",
    "unsupported_reply_text",
    "verify_challenge",
    "verify_event_token",
    "verify_request_signature",
]
