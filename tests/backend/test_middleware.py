import uuid

from fastapi.testclient import TestClient

from backend.app.main import create_app
from core.config import get_settings


def test_security_headers_on_every_response(test_app_client):
    client, _ = test_app_client

    resp = client.get("/api/health")

    assert resp.headers["X-Frame-Options"] == "DENY"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert "frame-ancestors 'none'" in resp.headers["Content-Security-Policy"]
    assert "'unsafe-eval'" in resp.headers["Content-Security-Policy"]
    assert "Strict-Transport-Security" not in resp.headers


def test_production_security_headers(test_app_client, monkeypatch):
    client, _ = test_app_client
    monkeypatch.setattr(get_settings(), "env", "production")

    resp = client.get("/api/health")

    assert resp.headers["Strict-Transport-Security"] == "max-age=31536000; includeSubDomains"
    csp = resp.headers["Content-Security-Policy"]
    assert "'unsafe-eval'" not in csp
    assert "script-src 'self' 'unsafe-inline'" in csp


def test_security_headers_on_short_circuit_responses(test_app_client):
    client, _ = test_app_client
    resp = client.post("/api/v1/favorites", json={})
    assert resp.status_code == 403
    assert resp.headers["X-Frame-Options"] == "DENY"


def test_request_id_is_echoed_or_generated(test_app_client):
    client, _ = test_app_client

    resp = client.get("/api/health", headers={"X-Request-ID": "req-123"})
    assert resp.headers["X-Request-ID"] == "req-123"

    generated = client.get("/api/health").headers["X-Request-ID"]
    uuid.UUID(generated)


def test_known_bots_are_blocked(test_app_client):
    client, _ = test_app_client

    resp = client.get("/api/health", headers={"User-Agent": "Mozilla/5.0 (compatible; GPTBot/1.0)"})

    assert resp.status_code == 403
    assert resp.json() == {"error": "Access denied"}


def test_cors_preflight_for_allowed_origin(test_app_client):
    client, _ = test_app_client

    resp = client.options(
        "/api/v1/favorites",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "POST"},
    )

    assert resp.status_code == 204
    assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"
    assert resp.headers["Access-Control-Allow-Credentials"] == "true"
    assert "X-CSRF-Token" in resp.headers["Access-Control-Allow-Headers"]
    assert resp.headers["Access-Control-Max-Age"] == "86400"


def test_cors_ignores_unknown_origin(test_app_client):
    client, _ = test_app_client

    resp = client.get("/api/v1/plan", headers={"Origin": "https://evil.example"})

    assert resp.status_code == 200
    assert "Access-Control-Allow-Origin" not in resp.headers


def test_maintenance_mode_blocks_api_but_not_health(test_app_client, monkeypatch):
    client, _ = test_app_client
    monkeypatch.setattr(get_settings(), "maintenance_mode", True)

    resp = client.get("/api/v1/plan")
    assert resp.status_code == 503
    assert resp.json()["error"]["code"] == "MAINTENANCE_MODE"

    assert client.get("/api/health").status_code == 200

    page = client.get("/favorites", follow_redirects=False)
    assert page.status_code == 307
    assert page.headers["location"] == "/maintenance"


def test_oversized_body_is_rejected(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "max_request_size", 100)

    resp = client.post(
        "/api/v1/interactions/check",
        content=b'{"substances": ["' + b"a" * 200 + b'", "b"]}',
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 413
    assert resp.json()["error"]["code"] == "PAYLOAD_TOO_LARGE"


def test_csrf_required_for_cookie_writes(test_app_client):
    client, _ = test_app_client
    body = {"remedyId": "ginger", "remedyName": "Ginger", "sessionId": str(uuid.uuid4())}

    resp = client.post("/api/v1/favorites", json=body)
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "CSRF_VALIDATION_FAILED"

    client.cookies.set("csrf_token", "token-a")
    resp = client.post("/api/v1/favorites", json=body, headers={"X-CSRF-Token": "token-b"})
    assert resp.status_code == 403

    resp = client.post("/api/v1/favorites", json=body, headers={"X-CSRF-Token": "token-a"})
    assert resp.status_code == 201


def test_csrf_exempts_bearer_clients(test_app_client, free_account):
    client, _ = test_app_client
    _, headers = free_account

    resp = client.post(
        "/api/v1/usage", json={"type": "searches"}, headers=headers
    )

    assert resp.status_code == 200


def test_query_validation_errors_are_400(test_app_client):
    client, _ = test_app_client

    resp = client.get("/api/v1/search")

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"]["code"] == "INVALID_INPUT"
    assert body["error"]["message"] == "query: Field required"
    assert body["error"]["details"]["issues"][0]["path"] == "query"


def test_request_validation_errors_are_400(test_app_client, free_account):
    client, _ = test_app_client
    _, headers = free_account

    resp = client.get("/api/v1/usage?days=500", headers=headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["message"].startswith("days:")


def test_unhandled_errors_become_internal_error():
    app = create_app()

    @app.get("/api/v1/explode")
    def explode():
        raise RuntimeError("kaboom")

    client = TestClient(app, raise_server_exceptions=False)
    resp = client.get("/api/v1/explode")

    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "INTERNAL_ERROR"
    assert body["error"]["message"] == "kaboom"


def test_unknown_route_is_not_found_envelope(test_app_client):
    client, _ = test_app_client
    resp = client.get("/api/v1/nothing-here")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "RESOURCE_NOT_FOUND"
