"""Desafio de verificação de URL exigido pela Lark."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from utils.errors import AuthError

if TYPE_CHECKING:
    from collections.abc import Mapping

CHALLENGE_TYPE = "url_verification"


def is_challenge(payload: Mapping[str, Any]) -> bool:
    return payload.get("type") == CHALLENGE_TYPE


def verify_challenge(payload: Mapping[str, Any], expected_token: str | None) -> str:
    """Valida o challenge e retorna o valor a ecoar.

    Args:
        payload: Payload `{type, challenge, token}`
        expected_token: Token de verificação configurado (opcional)

    Raises:
        AuthError: Token configurado e divergente

    Returns:
        Challenge (string) ou vazio
    """
    if expected_token and payload.get("token") != expected_token:
        raise AuthError("Invalid token")

    challenge = payload.get("challenge")
    return str(challenge) if challenge is not None else ""
