"""Builder para mensagens rich text (`msg_type=post`).

O texto vira parágrafos (separados por linha em branco) de elementos
`text`/`a`; blocos de código cercados por ``` viram um único elemento `text`.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

from app.protocols.models import PlatformMessage

if TYPE_CHECKING:
    from collections.abc import Sequence

CODE_FENCE = "```"
PARAGRAPH_SEPARATOR = "\n\n"
POST_LOCALE = "zh_cn"

_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_LANGUAGE_HINT = re.compile(r"^\w+\n")
_LOOSE_LINK_PATTERN = re.compile(r"\[.+\]\(.+\)")


def needs_rich_text(text: str, mention_user_ids: Sequence[str] = ()) -> bool:
    """True se o texto pede codificação `post` (código, parágrafos, links, menções)."""
    return bool(
        CODE_FENCE in text
        or PARAGRAPH_SEPARATOR in text
        or _LOOSE_LINK_PATTERN.search(text)
        or mention_user_ids
    )


def _text(value: str) -> dict[str, Any]:
    return {"tag": "text", "text": value}


def paragraph_elements(paragraph: str) -> list[dict[str, Any]]:
    """Converte um parágrafo em elementos do post."""
    if paragraph.startswith(CODE_FENCE) and paragraph.endswith(CODE_FENCE):
        code = _LANGUAGE_HINT.sub("", paragraph[len(CODE_FENCE):-len(CODE_FENCE)], count=1)
        return [_text(code)]

    elements: list[dict[str, Any]] = []
    last_index = 0
    for match in _LINK_PATTERN.finditer(paragraph):
        if match.start() > last_index:
            elements.append(_text(paragraph[last_index:match.start()]))
        elements.append({"tag": "a", "text": match.group(1), "href": match.group(2)})
        last_index = match.end()

    if last_index < len(paragraph):
        elements.append(_text(paragraph[last_index:]))

    return elements or [_text(paragraph)]


class PostPayloadBuilder:
    """Codifica texto (e menções) como `msg_type=post`."""

    def build(self, text: str, mention_user_ids: Sequence[str] = ()) -> PlatformMessage:
        content: list[list[dict[str, Any]]] = []

        if mention_user_ids:
            mentions: list[dict[str, Any]] = [
                {"tag": "at", "user_id": user_id} for user_id in mention_user_ids
            ]
            mentions.append(_text(" "))
            content.append(mentions)

        content.extend(
            paragraph_elements(paragraph) for paragraph in text.split(PARAGRAPH_SEPARATOR)
        )

        return PlatformMessage(
            msg_type="post",
            content=json.dumps({POST_LOCALE: {"content": content}}, ensure_ascii=False),
        )
