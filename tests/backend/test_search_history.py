from ..factories import new_session_id


def _save(client, query, headers=None, **owner):
    body = {"query": query, "resultsCount": 4}
    body.update(owner)
    return client.post("/api/v1/search-history", json=body, headers=headers or {})


def test_save_and_read_history(client, basic_account):
    user, headers = basic_account

    resp = _save(client, "ginger", headers, userId=user.id, filters={"evidenceLevel": "Strong"})
    assert resp.status_code == 201
    assert resp.json()["data"] == {"message": "Search history saved successfully"}
    _save(client, "sleep", headers, userId=user.id)

    history = client.get(
        "/api/v1/search-history", params={"userId": user.id}, headers=headers
    ).json()["data"]

    assert history["count"] == 2
    assert {item["query"] for item in history["history"]} == {"ginger", "sleep"}
    ginger = next(item for item in history["history"] if item["query"] == "ginger")
    assert ginger["resultsCount"] == 4
    assert ginger["filters"] == {"evidenceLevel": "Strong"}


def test_anonymous_sessions_may_save_but_not_read(client):
    session_id = new_session_id()
    assert _save(client, "ginger", sessionId=session_id).status_code == 201

    resp = client.get("/api/v1/search-history", params={"sessionId": session_id})

    assert resp.status_code == 403
    assert resp.json()["error"]["message"] == "Search history requires a Basic plan or higher."


def test_free_plan_cannot_read_history(client, free_account):
    user, headers = free_account
    resp = client.get("/api/v1/search-history", params={"userId": user.id}, headers=headers)
    assert resp.status_code == 403
    assert resp.json()["error"]["details"] == {"plan": "free", "isTrial": False}


def test_owner_required(client):
    resp = client.get("/api/v1/search-history")
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "MISSING_PARAMETER"

    resp = client.post("/api/v1/search-history", json={"query": "ginger", "resultsCount": 1})
    assert resp.status_code == 400


def test_query_is_validated(client):
    session_id = new_session_id()
    assert _save(client, "   ", sessionId=session_id).status_code == 400
    assert _save(client, "<script>", sessionId=session_id).status_code == 400
    assert _save(client, "x" * 101, sessionId=session_id).status_code == 400


def test_popular_searches(client):
    for query in ("ginger", "ginger", "ginger", "sleep", "sleep", "mint"):
        _save(client, query, sessionId=new_session_id())

    resp = client.get("/api/v1/search-history", params={"popular": "true", "limit": 2})

    assert resp.json()["data"] == {
        "popular": [{"query": "ginger", "count": 3}, {"query": "sleep", "count": 2}]
    }


def test_clear_history(client):
    session_id = new_session_id()
    _save(client, "ginger", sessionId=session_id)
    _save(client, "sleep", sessionId=session_id)
    _save(client, "mint", sessionId=new_session_id())

    resp = client.delete("/api/v1/search-history", params={"sessionId": session_id})

    assert resp.status_code == 200
    assert resp.json()["data"]["deletedCount"] == 2


def test_cannot_clear_another_users_history(client, basic_account, make_account):
    _, headers = basic_account
    other, _ = make_account()
    resp = client.delete("/api/v1/search-history", params={"userId": other.id}, headers=headers)
    assert resp.status_code == 403
