from __future__ import annotations

from fastapi.testclient import TestClient

from app.core.app_factory import create_app
from app.core.config import LogSettings, Settings
from app.main import app


def test_preserves_incoming_request_id_header():
    incoming_id = "test-request-id-123"
    with TestClient(app) as client:
        resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing():
    with TestClient(app) as client:
        resp = client.get("/health")

    assert resp.status_code == 200
    generated = resp.headers.get("X-Request-ID")
    assert generated
    assert len(generated) > 0

    duration = resp.headers.get("X-Request-Duration-ms")
    assert duration is not None
    assert float(duration) >= 0


def test_demo_account_can_sign_in():
    with TestClient(app) as client:
        resp = client.post(
            "/v1/auth/login",
            json={"email": "demo@wardrobe.app", "password": "Wardrobe!2024"},
        )

    assert resp.status_code == 200
    assert resp.json()["user"]["name"] == "Demo User"


def test_uses_configured_header_name():
    cfg = Settings(log=LogSettings(request_id_header="X-Correlation-ID"))
    with TestClient(create_app(cfg)) as client:
        resp = client.get("/health", headers={"X-Correlation-ID": "corr-42"})

    assert resp.headers.get("X-Correlation-ID") == "corr-42"
    assert "X-Request-ID" not in resp.headers
