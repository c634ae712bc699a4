"""Payload builders Lark — OutboundMessage para `text`, `post` e `image`."""

from .factory import LarkPayloadBuilder, build_platform_message
from .post import PostPayloadBuilder, needs_rich_text, paragraph_elements
from .text import TextPayloadBuilder

__all__ = [
    "LarkPayloadBuilder",
    "PostPayloadBuilder",
    "TextPayloadBuilder",
    "build_platform_message",
    "needs_rich_text",
    "paragraph_elements",
]
