"""Testes dos endpoints de health e readiness."""

from __future__ import annotations

import json

import pytest

from api.routes.health import router as health_router
from app.infra.lark.token_manager import LarkTokenManager
from config.settings import LarkSettings
from tests.fakes.fake_lark import FakeLarkClient, make_account


@pytest.fixture
def token_manager(monkeypatch: pytest.MonkeyPatch) -> LarkTokenManager:
    manager = LarkTokenManager(FakeLarkClient())
    monkeypatch.setattr(health_router, "get_token_manager", lambda: manager)
    return manager


def _use_settings(monkeypatch: pytest.MonkeyPatch, settings: LarkSettings) -> None:
    monkeypatch.setattr(health_router, "get_lark_settings", lambda: settings)


@pytest.mark.asyncio
async def test_health_check_reports_service() -> None:
    response = await health_router.health_check()

    assert response.status == "healthy"
    assert response.service == "lark_gateway"


@pytest.mark.asyncio
async def test_readiness_not_ready_without_accounts(
    monkeypatch: pytest.MonkeyPatch, token_manager: LarkTokenManager
) -> None:
    _use_settings(monkeypatch, LarkSettings())

    response = await health_router.readiness_check()
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["status"] == "not_ready"
    assert payload["accounts"]["default"]["state"] == "not configured"


@pytest.mark.asyncio
async def test_readiness_ready_with_enabled_account(
    monkeypatch: pytest.MonkeyPatch, token_manager: LarkTokenManager
) -> None:
    account = make_account(app_id="cli_a1b2c3d4e5")
    _use_settings(monkeypatch, LarkSettings(accounts={"default": account}))
    await token_manager.get_token(account)

    response = await health_router.readiness_check()
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["status"] == "ready"
    assert payload["accounts"]["default"] == {
        "name": "App: cli_****d4e5",
        "state": "configured",
        "configured": True,
        "enabled": True,
        "connected": True,
    }


@pytest.mark.asyncio
async def test_readiness_disabled_account_is_not_ready(
    monkeypatch: pytest.MonkeyPatch, token_manager: LarkTokenManager
) -> None:
    account = make_account(enabled=False)
    _use_settings(monkeypatch, LarkSettings(accounts={"default": account}))

    response = await health_router.readiness_check()

    assert response.status_code == 503
