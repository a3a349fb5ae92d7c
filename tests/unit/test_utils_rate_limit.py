import time

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from storefront.utils.rate_limit import _user_key_from_request, optional_rate_limit, rate_limit_health_info


def _limited_app(times: int, seconds: int) -> FastAPI:
    app = FastAPI()
    limit = optional_rate_limit(times, seconds)

    @app.post("/api/v1/checkout", dependencies=[Depends(limit)])
    def checkout():
        return {"status": "ok"}

    @app.post("/api/v1/cart/items", dependencies=[Depends(limit)])
    def add_item():
        return {"status": "ok"}

    @app.get("/rl_info")
    def rl_info(request: Request):
        return rate_limit_health_info(request)

    return app


@pytest.fixture
def local_fallback(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")


def _statuses(client, path, n, headers=None):
    return [client.post(path, headers=headers).status_code for _ in range(n)]


def test_local_fallback_returns_429_past_limit(local_fallback):
    client = TestClient(_limited_app(times=2, seconds=60))

    assert _statuses(client, "/api/v1/checkout", 3) == [200, 200, 429]


def test_counters_are_per_path_and_per_token(local_fallback):
    client = TestClient(_limited_app(times=1, seconds=60))
    alice = {"Authorization": "Bearer alice-token"}
    bob = {"Authorization": "Bearer bob-token"}

    assert _statuses(client, "/api/v1/checkout", 2, alice) == [200, 429]
    assert _statuses(client, "/api/v1/cart/items", 1, alice) == [200]
    assert _statuses(client, "/api/v1/checkout", 1, bob) == [200]


def test_window_expires(local_fallback):
    client = TestClient(_limited_app(times=1, seconds=1))

    assert _statuses(client, "/api/v1/checkout", 2) == [200, 429]
    time.sleep(1.1)
    assert _statuses(client, "/api/v1/checkout", 1) == [200]


def test_no_limit_when_limiter_not_initialised(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    app = _limited_app(times=1, seconds=60)
    app.state.rate_limit_enabled = False

    assert _statuses(TestClient(app), "/api/v1/checkout", 3) == [200, 200, 200]


def test_user_key_hashes_token_and_falls_back_to_ip():
    app = FastAPI()

    @app.get("/key")
    def key(request: Request):
        return {"key": _user_key_from_request(request)}

    client = TestClient(app)
    with_token = client.get("/key", headers={"Authorization": "Bearer secret-jwt"}).json()["key"]
    anonymous = client.get("/key").json()["key"]

    assert with_token.startswith("user:") and with_token.endswith(":/key")
    assert "secret-jwt" not in with_token
    assert anonymous.startswith("ip:")


def test_health_info_when_limiter_not_ready(monkeypatch):
    monkeypatch.setattr("storefront.utils.rate_limit.FastAPILimiter.redis", None, raising=False)
    app = _limited_app(times=1, seconds=60)
    app.state.rate_limit_enabled = False

    assert TestClient(app).get("/rl_info").json() == {"enabled": False, "ready": False, "backend": None}
