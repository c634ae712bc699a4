"""Normalizer Lark — conteúdo de mensagens para o modelo interno.

Tipos suportados: text, post, image, file.
"""

from .extractor import (
    build_media_url,
    extract_media,
    extract_text,
    render_post,
    substitute_mentions,
)
from .normalizer import CHANNEL, LarkMessageNormalizer, normalize_message

__all__ = [
    "CHANNEL",
    "LarkMessageNormalizer",
    "build_media_url",
    "extract_media",
    "extract_text",
    "normalize_message",
    "render_post",
    "substitute_mentions",
]
