def test_public_health_is_minimal(client):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    body = resp.json()
    assert set(body) == {"status", "timestamp"}
    assert body["status"] == "healthy"


def test_verbose_ignored_for_non_admins(client, moderator_account):
    _, headers = moderator_account
    body = client.get("/api/health", params={"verbose": "true"}, headers=headers).json()
    assert set(body) == {"status", "timestamp"}


def test_verbose_health_for_admin(client, admin_account):
    _, headers = admin_account

    resp = client.get("/api/health", params={"verbose": "true"}, headers=headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["environment"] == "test"
    assert body["uptime"] >= 0
    assert body["services"]["database"]["status"] == "healthy"
    assert body["services"]["redis"]["status"] == "not_configured"
