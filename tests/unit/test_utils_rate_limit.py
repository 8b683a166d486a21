import time

from fastapi import FastAPI, Depends, Request
from fastapi.testclient import TestClient
from fastapi_limiter import FastAPILimiter

from pos_backend.utils.rate_limit import optional_rate_limit, rate_limit_health_info


def _make_app(times=2, seconds=60):
    app = FastAPI()

    @app.post("/checkout", dependencies=[Depends(optional_rate_limit(times, seconds))])
    async def checkout():
        return {"ok": True}

    @app.post("/api/checkout", dependencies=[Depends(optional_rate_limit(times, seconds))])
    async def api_checkout():
        return {"ok": True}

    @app.get("/rl_info")
    def rl_info(request: Request):
        return rate_limit_health_info(request)

    return app


def test_double_tap_on_pay_is_blocked_with_fallback(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=2, seconds=60))

    assert client.post("/checkout").status_code == 200
    assert client.post("/checkout").status_code == 200
    assert client.post("/checkout").status_code == 429


def test_limit_is_tracked_per_path(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=1, seconds=60))

    assert client.post("/checkout").status_code == 200
    assert client.post("/checkout").status_code == 429
    # Chemin API indépendant du formulaire
    assert client.post("/api/checkout").status_code == 200
    assert client.post("/api/checkout").status_code == 429


def test_window_expires(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=1, seconds=1))

    assert client.post("/checkout").status_code == 200
    assert client.post("/checkout").status_code == 429
    time.sleep(1.1)
    assert client.post("/checkout").status_code == 200


def test_disabled_limiter_lets_everything_through(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = False
    client = TestClient(app)

    for _ in range(3):
        assert client.post("/checkout").status_code == 200


def test_health_info_reports_limiter_readiness(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    monkeypatch.setattr(FastAPILimiter, "redis", None, raising=False)
    app = _make_app()
    app.state.rate_limit_enabled = True
    client = TestClient(app)

    info = client.get("/rl_info").json()
    assert info == {"enabled": True, "ready": False, "backend": None, "fallback": False}

    monkeypatch.setattr(FastAPILimiter, "redis", object(), raising=False)
    info = client.get("/rl_info").json()
    assert info["ready"] is True
    assert info["backend"] == "redis"
