from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from storefront.app_setup.factory import create_app
from storefront.health import service as health_service


def test_lifespan_disables_rate_limit_when_redis_unreachable(monkeypatch):
    monkeypatch.delenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", raising=False)

    async def _boom(*args, **kwargs):
        raise ConnectionError("redis down")

    monkeypatch.setattr("storefront.app_setup.lifespan._redis_client", lambda: object())
    monkeypatch.setattr("storefront.app_setup.lifespan.FastAPILimiter.init", _boom)
    app = create_app()

    with TestClient(app):
        assert app.state.rate_limit_enabled is False


def test_lifespan_enables_and_closes_rate_limit(monkeypatch):
    monkeypatch.delenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", raising=False)
    calls = []

    async def _init(*args, **kwargs):
        calls.append("init")

    async def _close(*args, **kwargs):
        calls.append("close")

    monkeypatch.setattr("storefront.app_setup.lifespan._redis_client", lambda: object())
    monkeypatch.setattr("storefront.app_setup.lifespan.FastAPILimiter.init", _init)
    monkeypatch.setattr("storefront.app_setup.lifespan.FastAPILimiter.close", _close)
    app = create_app()

    with TestClient(app):
        assert app.state.rate_limit_enabled is True
    assert calls == ["init", "close"]


def test_health_supabase_info_checks_store_tables(monkeypatch):
    client = MagicMock()
    monkeypatch.setattr(health_service, "get_supabase", lambda: client)
    monkeypatch.setattr(health_service, "SUPABASE_URL", "")

    info = health_service.health_supabase_info()

    assert info["connect_ok"] is True
    assert info["dns"] is None
    assert set(info["tables"]) == set(health_service.STORE_TABLES)
    assert all(t["ok"] for t in info["tables"].values())


def test_health_supabase_info_reports_client_error(monkeypatch):
    def _boom():
        raise RuntimeError("bad key")

    monkeypatch.setattr(health_service, "get_supabase", _boom)
    monkeypatch.setattr(health_service, "SUPABASE_URL", "")

    info = health_service.health_supabase_info()

    assert info["connect_ok"] is False
    assert info["error"] == "bad key"
