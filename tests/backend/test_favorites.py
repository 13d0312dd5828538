import uuid

from ..factories import new_session_id


def _add(client, session_id, remedy_id="ginger", **extra):
    body = {"remedyId": remedy_id, "remedyName": remedy_id.title(), "sessionId": session_id}
    body.update(extra)
    return client.post("/api/v1/favorites", json=body)


def test_anonymous_session_favorites_lifecycle(client):
    session_id = new_session_id()

    resp = _add(client, session_id, notes="for nausea", collectionName="Kitchen")
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["message"] == "Remedy added to favorites"
    favorite = data["favorite"]
    assert favorite["remedyId"] == "ginger"
    assert favorite["sessionId"] == session_id
    assert favorite["userId"] is None
    assert favorite["collectionName"] == "Kitchen"

    listed = client.get("/api/v1/favorites", params={"sessionId": session_id}).json()
    assert listed["data"]["count"] == 1
    assert listed["metadata"] == {"total": 1}

    check = client.get("/api/v1/favorites", params={"sessionId": session_id, "check": "ginger"})
    assert check.json()["data"]["isFavorite"] is True
    assert check.json()["data"]["favorite"]["id"] == favorite["id"]

    missing = client.get("/api/v1/favorites", params={"sessionId": session_id, "check": "mint"})
    assert missing.json()["data"] == {"isFavorite": False, "remedyId": "mint", "favorite": None}

    collections = client.get(
        "/api/v1/favorites", params={"sessionId": session_id, "collections": "true"}
    )
    assert collections.json()["data"] == {"collections": ["Kitchen"]}

    updated = client.put(
        "/api/v1/favorites",
        json={"id": favorite["id"], "sessionId": session_id, "notes": "tea"},
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["favorite"]["notes"] == "tea"

    deleted = client.delete(
        "/api/v1/favorites", params={"id": favorite["id"], "sessionId": session_id}
    )
    assert deleted.status_code == 200
    assert deleted.json()["data"]["message"] == "Favorite removed successfully"
    assert client.get("/api/v1/favorites", params={"sessionId": session_id}).json()["data"][
        "count"
    ] == 0


def test_duplicate_favorite_is_conflict(client):
    session_id = new_session_id()
    assert _add(client, session_id).status_code == 201

    resp = _add(client, session_id)

    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "CONFLICT"
    assert resp.json()["error"]["message"] == "This remedy is already in your favorites"


def test_owner_is_required(client):
    resp = client.post("/api/v1/favorites", json={"remedyId": "ginger", "remedyName": "Ginger"})
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Either sessionId or userId must be provided"


def test_session_id_must_be_uuid(client):
    resp = client.get("/api/v1/favorites", params={"sessionId": "abc"})
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Invalid session ID format"


def test_cannot_read_another_users_favorites(client, free_account, make_account):
    _, headers = free_account
    other, _ = make_account()

    resp = client.get("/api/v1/favorites", params={"userId": other.id}, headers=headers)

    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "FORBIDDEN"


def test_user_id_requires_authentication(client, free_account):
    user, _ = free_account
    resp = client.get("/api/v1/favorites", params={"userId": user.id})
    assert resp.status_code == 401


def test_signed_in_favorites_default_to_current_user(client, free_account):
    user, headers = free_account

    resp = client.post(
        "/api/v1/favorites", json={"remedyId": "ginger", "remedyName": "Ginger"}, headers=headers
    )

    assert resp.status_code == 201
    assert resp.json()["data"]["favorite"]["userId"] == user.id


def test_free_plan_favorites_quota(client, free_account):
    _, headers = free_account
    for remedy in ("ginger", "mint", "sage"):
        resp = client.post(
            "/api/v1/favorites", json={"remedyId": remedy, "remedyName": remedy}, headers=headers
        )
        assert resp.status_code == 201

    resp = client.post(
        "/api/v1/favorites", json={"remedyId": "thyme", "remedyName": "Thyme"}, headers=headers
    )

    assert resp.status_code == 403
    error = resp.json()["error"]
    assert error["message"] == (
        "You've reached the maximum of 3 favorites on your free plan. Upgrade for more."
    )
    assert error["details"] == {"limit": 3, "current": 3, "plan": "free"}


def test_other_session_cannot_delete(client):
    owner_session = new_session_id()
    favorite_id = _add(client, owner_session).json()["data"]["favorite"]["id"]

    resp = client.delete(
        "/api/v1/favorites", params={"id": favorite_id, "sessionId": new_session_id()}
    )
    assert resp.status_code == 403

    resp = client.delete("/api/v1/favorites", params={"id": favorite_id})
    assert resp.status_code == 401


def test_update_missing_favorite(client):
    resp = client.put(
        "/api/v1/favorites", json={"id": str(uuid.uuid4()), "sessionId": new_session_id()}
    )
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Favorite not found"
