"""Testes para api.payload_builders.lark.

Cobre: text, post (código, parágrafos, links, menções), image e factory.
"""

from __future__ import annotations

import json

import pytest

from api.payload_builders.lark import (
    LarkPayloadBuilder,
    PostPayloadBuilder,
    TextPayloadBuilder,
    needs_rich_text,
    paragraph_elements,
)
from app.protocols.models import OutboundMessage


def _post_content(text: str, mention_user_ids: tuple[str, ...] = ()) -> list:
    platform = PostPayloadBuilder().build(text, mention_user_ids)
    assert platform.msg_type == "post"
    return json.loads(platform.content)["zh_cn"]["content"]


class TestTextPayloadBuilder:
    def test_build_keeps_unicode(self) -> None:
        platform = TextPayloadBuilder().build("你好, olá")

        assert platform.msg_type == "text"
        assert json.loads(platform.content) == {"text": "你好, olá"}
        assert "你好" in platform.content


class TestNeedsRichText:
    @pytest.mark.parametrize(
        "text",
        [
            "```python\nprint(1)\n```",
            "primeiro\n\nsegundo",
            "veja [docs](https://docs.example.com)",
        ],
    )
    def test_structured_text_needs_post(self, text: str) -> None:
        assert needs_rich_text(text) is True

    def test_mentions_need_post(self) -> None:
        assert needs_rich_text("oi", ("ou_1",)) is True

    def test_plain_text_does_not_need_post(self) -> None:
        assert needs_rich_text("apenas uma linha\ncom quebra simples") is False


class TestPostPayloadBuilder:
    def test_paragraphs_become_separate_lines(self) -> None:
        assert _post_content("um\n\ndois") == [
            [{"tag": "text", "text": "um"}],
            [{"tag": "text", "text": "dois"}],
        ]

    def test_links_become_anchor_elements(self) -> None:
        assert paragraph_elements("leia [o guia](https://g.io) agora") == [
            {"tag": "text", "text": "leia "},
            {"tag": "a", "text": "o guia", "href": "https://g.io"},
            {"tag": "text", "text": " agora"},
        ]

    def test_code_fence_becomes_single_text_without_language_hint(self) -> None:
        assert paragraph_elements("```python\nprint('x')\n```") == [
            {"tag": "text", "text": "print('x')\n"},
        ]

    def test_mentions_open_the_post(self) -> None:
        content = _post_content("bem-vindos", ("ou_a", "ou_b"))

        assert content[0] == [
            {"tag": "at", "user_id": "ou_a"},
            {"tag": "at", "user_id": "ou_b"},
            {"tag": "text", "text": " "},
        ]
        assert content[1] == [{"tag": "text", "text": "bem-vindos"}]


class TestLarkPayloadBuilder:
    def test_plain_message_is_text(self) -> None:
        platform = LarkPayloadBuilder().to_platform(OutboundMessage(text="ok"))

        assert platform.msg_type == "text"

    def test_markdown_message_is_post(self) -> None:
        platform = LarkPayloadBuilder().to_platform(
            OutboundMessage(text="a\n\n[b](https://b.io)")
        )

        assert platform.msg_type == "post"

    def test_image_payload(self) -> None:
        platform = LarkPayloadBuilder().image("img_v2_1")

        assert platform.msg_type == "image"
        assert json.loads(platform.content) == {"image_key": "img_v2_1"}
