"""Extração de texto e mídia do conteúdo de mensagens Lark.

Não faz validação de negócio, apenas extração estrutural do `content`
já decodificado pela camada de webhook.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.protocols.models import MessageKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.protocols.models import MediaKind, Mention, ParsedMessage

MEDIA_URI_SCHEME = "lark"
POST_LOCALES = ("zh_cn", "en_us")
IMAGE_PLACEHOLDER = "[图片]"
UNRESOLVED_MENTION = "@user"
PARAGRAPH_SEPARATOR = "\n\n"


def build_media_url(message_id: str, media_kind: MediaKind, key: str) -> str:
    """URI privada `lark://message/<id>/<kind>/<key>` resolvida depois pelo downloader."""
    return f"{MEDIA_URI_SCHEME}://message/{message_id}/{media_kind}/{key}"


def substitute_mentions(text: str, mentions: Sequence[Mention]) -> str:
    """Troca cada placeholder `@_user_N` por `@<nome>`."""
    for mention in mentions:
        if mention.key:
            text = text.replace(mention.key, f"@{mention.name}")
    return text


def _select_post_body(content: dict[str, Any]) -> dict[str, Any] | None:
    for locale in POST_LOCALES:
        body = content.get(locale)
        if isinstance(body, dict):
            return body
    # Eventos de recebimento entregam o post já "achatado": {title, content}
    if isinstance(content.get("content"), list):
        return content
    return None


def _render_element(element: dict[str, Any], mentions: Sequence[Mention]) -> str:
    tag = element.get("tag")
    if tag == "text":
        return str(element.get("text") or "")
    if tag == "a":
        text = element.get("text")
        return f"[{text}]({element.get('href') or ''})" if text else ""
    if tag == "at":
        user_id = element.get("user_id")
        for mention in mentions:
            if mention.id == user_id:
                return f"@{mention.name}"
        return UNRESOLVED_MENTION
    if tag == "img":
        return IMAGE_PLACEHOLDER
    return ""


def render_post(content: dict[str, Any], mentions: Sequence[Mention]) -> str:
    """Renderiza post (rich text) como texto com links markdown.

    Args:
        content: Conteúdo decodificado do post
        mentions: Menções da mensagem (para resolver `at` por id)

    Returns:
        Título (se houver) e parágrafos separados por linha em branco
    """
    body = _select_post_body(content)
    if body is None:
        return ""

    parts: list[str] = []
    title = body.get("title")
    if title:
        parts.append(str(title))

    for paragraph in body.get("content") or []:
        if not isinstance(paragraph, list):
            continue
        parts.append(
            "".join(
                _render_element(element, mentions)
                for element in paragraph
                if isinstance(element, dict)
            )
        )

    return PARAGRAPH_SEPARATOR.join(parts).strip()


def extract_text(message: ParsedMessage) -> str:
    """Texto resolvido da mensagem (vazio para mídia)."""
    if message.kind is MessageKind.TEXT:
        return substitute_mentions(str(message.content.get("text") or ""), message.mentions)
    if message.kind is MessageKind.RICH_TEXT:
        return render_post(message.content, message.mentions)
    return ""


def extract_media(message: ParsedMessage) -> tuple[str, MediaKind] | None:
    """(media_url, media_type) para imagem/arquivo, None para o resto."""
    if message.kind is MessageKind.IMAGE:
        key = message.content.get("image_key")
        return (build_media_url(message.message_id, "image", key), "image") if key else None
    if message.kind is MessageKind.FILE:
        key = message.content.get("file_key")
        return (build_media_url(message.message_id, "file", key), "file") if key else None
    return None
