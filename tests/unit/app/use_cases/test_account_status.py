from __future__ import annotations

import pytest

from app.infra.lark.token_manager import LarkTokenManager
from app.use_cases.lark import describe_account, probe_account
from app.use_cases.lark.account_status import resolve_account_state
from tests.fakes.fake_lark import FakeLarkClient, make_account


def test_resolve_account_state() -> None:
    assert resolve_account_state(configured=False, enabled=True) == "not configured"
    assert resolve_account_state(configured=True, enabled=False) == "disabled"
    assert resolve_account_state(configured=True, enabled=True) == "configured"


@pytest.mark.asyncio
async def test_describe_account_masks_app_id_and_tracks_connection() -> None:
    manager = LarkTokenManager(FakeLarkClient())
    account = make_account(app_id="cli_a1b2c3d4e5")

    before = describe_account(account, manager)
    await manager.get_token(account)
    after = describe_account(account, manager)

    assert before.name == "App: cli_****d4e5"
    assert before.connected is False
    assert after.connected is True
    assert after.state == "configured"


def test_describe_unconfigured_account() -> None:
    snapshot = describe_account(make_account(app_id=""), LarkTokenManager(FakeLarkClient()))

    assert snapshot.name is None
    assert snapshot.configured is False
    assert snapshot.connected is False
    assert snapshot.state == "not configured"


@pytest.mark.asyncio
async def test_probe_account_success_caches_token() -> None:
    client = FakeLarkClient()
    manager = LarkTokenManager(client)
    account = make_account()

    result = await probe_account(account, manager)

    assert result.ok is True
    assert manager.has_valid_token(account) is True
    assert client.token_calls == 1


@pytest.mark.asyncio
async def test_probe_unconfigured_account() -> None:
    result = await probe_account(make_account(app_secret=""), LarkTokenManager(FakeLarkClient()))

    assert result.ok is False
    assert result.error == "Not configured"
