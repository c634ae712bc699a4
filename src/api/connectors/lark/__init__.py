"""Conector Lark/Feishu: cliente da Open API e ingestão de webhooks."""

from .http_base import HttpClient, HttpClientConfig
from .http_client import LarkHttpClient, create_lark_http_client, resolve_receive_id_type
from .lark_errors import LarkApiError, get_error_message, is_success, parse_lark_error

__all__ = [
    "HttpClient",
    "HttpClientConfig",
    "LarkApiError",
    "LarkHttpClient",
    "create_lark_http_client",
    "get_error_message",
    "is_success",
    "parse_lark_error",
    "resolve_receive_id_type",
]
