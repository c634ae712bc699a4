"""Testes do use case de envio outbound."""

from __future__ import annotations

import pytest

from app.coordinators.lark.outbound import ReplyTurn
from app.use_cases.lark import SendOutboundMessageUseCase
from tests.fakes.fake_lark import make_account
from utils.errors import AuthError, LarkChannelError, TransportError


class StubDispatcher:
    def __init__(self, error: LarkChannelError | None = None) -> None:
        self.error = error
        self.turns: list[ReplyTurn] = []

    async def dispatch(self, turn: ReplyTurn) -> tuple[str, ...]:
        self.turns.append(turn)
        if self.error is not None:
            raise self.error
        return ("om_1", "om_2")


def _use_case(dispatcher: StubDispatcher) -> SendOutboundMessageUseCase:
    return SendOutboundMessageUseCase(dispatcher)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_send_text_success() -> None:
    dispatcher = StubDispatcher()

    response = await _use_case(dispatcher).send_text(
        make_account(), "oc_chat", "olá", reply_to_id="om_parent"
    )

    assert response.success is True
    assert response.message_ids == ("om_1", "om_2")
    turn = dispatcher.turns[0]
    assert turn.to == "oc_chat"
    assert turn.message.reply_to_id == "om_parent"


@pytest.mark.asyncio
async def test_send_media_builds_media_turn() -> None:
    dispatcher = StubDispatcher()

    await _use_case(dispatcher).send_media(
        make_account(), "ou_user", "https://cdn.example.com/a.png", text="legenda"
    )

    message = dispatcher.turns[0].message
    assert message.media_url == "https://cdn.example.com/a.png"
    assert message.text == "legenda"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("account_overrides", "to", "text", "expected"),
    [
        ({"app_secret": ""}, "oc_chat", "oi", "Lark not configured"),
        ({}, "", "oi", "Destinatário obrigatório"),
        ({}, "oc_chat", "   ", "Mensagem vazia"),
    ],
)
async def test_validation_errors(
    account_overrides: dict, to: str, text: str, expected: str
) -> None:
    dispatcher = StubDispatcher()

    response = await _use_case(dispatcher).send_text(make_account(**account_overrides), to, text)

    assert response.success is False
    assert response.error_code == "VALIDATION_ERROR"
    assert response.error_message == expected
    assert dispatcher.turns == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("error", "code"),
    [
        (AuthError("App Secret is incorrect"), "AUTH_ERROR"),
        (TransportError("Permission denied", error_code=99991402), "LARK_99991402"),
        (TransportError("http_connection_error"), "TRANSPORT_ERROR"),
        (LarkChannelError("other"), "CHANNEL_ERROR"),
    ],
)
async def test_delivery_errors_become_response(error: LarkChannelError, code: str) -> None:
    response = await _use_case(StubDispatcher(error)).send_text(make_account(), "oc_chat", "oi")

    assert response.success is False
    assert response.error_code == code
    assert response.error_message == str(error)
