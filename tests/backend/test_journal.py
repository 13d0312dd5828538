import uuid
from datetime import date, timedelta

import pytest

REMEDY_ID = str(uuid.uuid4())


def _entry(day: date, rating: int, **extra) -> dict:
    body = {
        "remedyId": REMEDY_ID,
        "remedyName": "Turmeric",
        "date": day.isoformat(),
        "rating": rating,
    }
    body.update(extra)
    return body


def test_free_plan_cannot_use_journal(client, free_account):
    _, headers = free_account

    resp = client.get("/api/v1/journal", headers=headers)

    assert resp.status_code == 403
    error = resp.json()["error"]
    assert error["message"] == "Remedy tracking journal requires a Basic plan or higher"
    assert error["details"] == {"plan": "free", "isTrial": False}


def test_journal_requires_authentication(client):
    assert client.get("/api/v1/journal").status_code == 401


def test_create_list_update_delete(client, basic_account):
    _, headers = basic_account
    today = date.today()

    created = client.post(
        "/api/v1/journal",
        json=_entry(today, 4, symptoms=["headache"], mood=3),
        headers=headers,
    )
    assert created.status_code == 201
    body = created.json()["data"]
    assert body["message"] == "Journal entry created"
    entry = body["entry"]
    assert entry["date"] == today.isoformat()
    assert entry["symptoms"] == ["headache"]
    assert entry["sideEffects"] == []

    listed = client.get("/api/v1/journal", headers=headers).json()
    assert listed["data"]["total"] == 1
    assert listed["data"]["page"] == 1
    assert listed["data"]["pageSize"] == 20
    assert listed["metadata"] == {"page": 1, "pageSize": 20, "total": 1}

    updated = client.put(
        "/api/v1/journal", json={"id": entry["id"], "rating": 2}, headers=headers
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["entry"]["rating"] == 2
    assert updated.json()["data"]["entry"]["symptoms"] == ["headache"]

    deleted = client.delete("/api/v1/journal", params={"id": entry["id"]}, headers=headers)
    assert deleted.json()["data"] == {"message": "Journal entry deleted"}
    assert client.get("/api/v1/journal", headers=headers).json()["data"]["total"] == 0


def test_full_datetime_is_truncated_to_date(client, basic_account):
    _, headers = basic_account
    body = _entry(date(2026, 3, 1), 3)
    body["date"] = "2026-03-01T18:30:00Z"

    resp = client.post("/api/v1/journal", json=body, headers=headers)

    assert resp.status_code == 201
    assert resp.json()["data"]["entry"]["date"] == "2026-03-01"


def test_one_entry_per_remedy_per_day(client, basic_account):
    _, headers = basic_account
    today = date.today()
    assert client.post("/api/v1/journal", json=_entry(today, 4), headers=headers).status_code == 201

    resp = client.post("/api/v1/journal", json=_entry(today, 5), headers=headers)

    assert resp.status_code == 409
    assert resp.json()["error"]["message"] == (
        "You already have a journal entry for this remedy on this date"
    )


@pytest.mark.parametrize(
    "override",
    [{"rating": 6}, {"rating": 0}, {"remedyId": "turmeric"}, {"mood": 9}],
)
def test_invalid_entries_rejected(client, basic_account, override):
    _, headers = basic_account
    body = _entry(date.today(), 3)
    body.update(override)

    resp = client.post("/api/v1/journal", json=body, headers=headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_INPUT"


def test_tracked_remedies(client, basic_account):
    _, headers = basic_account
    client.post("/api/v1/journal", json=_entry(date.today(), 4), headers=headers)

    resp = client.get("/api/v1/journal", params={"tracked": "true"}, headers=headers)

    assert resp.json()["data"] == {
        "remedies": [{"remedyId": REMEDY_ID, "remedyName": "Turmeric"}]
    }


def test_insights(client, basic_account):
    _, headers = basic_account
    today = date.today()
    for offset, rating in enumerate([2, 2, 3, 4, 5, 5]):
        day = today - timedelta(days=6 - offset)
        resp = client.post(
            "/api/v1/journal",
            json=_entry(day, rating, symptoms=["bloating"], sideEffects=["nausea"] if offset else []),
            headers=headers,
        )
        assert resp.status_code == 201

    resp = client.get("/api/v1/journal/insights", params={"remedyId": REMEDY_ID}, headers=headers)

    assert resp.status_code == 200
    insights = resp.json()["data"]
    assert insights["totalEntries"] == 6
    assert insights["avgRating"] == 3.5
    assert insights["trend"] == "improving"
    assert insights["topSymptoms"] == [{"symptom": "bloating", "count": 6}]
    assert insights["topSideEffects"] == [{"effect": "nausea", "count": 5}]
    assert len(insights["ratingHistory"]) == 6


def test_insights_requires_remedy_id(client, basic_account):
    _, headers = basic_account
    resp = client.get("/api/v1/journal/insights", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "MISSING_PARAMETER"


def test_insights_without_entries(client, basic_account):
    _, headers = basic_account
    resp = client.get("/api/v1/journal/insights", params={"remedyId": REMEDY_ID}, headers=headers)
    assert resp.status_code == 404


def test_cannot_touch_other_users_entries(client, basic_account, make_account):
    _, headers = basic_account
    _, other_headers = make_account(plan="premium")
    entry_id = client.post(
        "/api/v1/journal", json=_entry(date.today(), 4), headers=headers
    ).json()["data"]["entry"]["id"]

    resp = client.delete("/api/v1/journal", params={"id": entry_id}, headers=other_headers)

    assert resp.status_code == 404


@pytest.mark.parametrize("field", ["rating", "remedyName", "date"])
def test_update_rejects_null_required_field(client, basic_account, field):
    _, headers = basic_account
    entry = client.post(
        "/api/v1/journal", json=_entry(date.today(), 4), headers=headers
    ).json()["data"]["entry"]

    resp = client.put("/api/v1/journal", json={"id": entry["id"], field: None}, headers=headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_INPUT"
    assert resp.json()["error"]["message"] == f"{field}: cannot be null"


def test_update_can_clear_optional_field(client, basic_account):
    _, headers = basic_account
    entry = client.post(
        "/api/v1/journal", json=_entry(date.today(), 4, mood=3), headers=headers
    ).json()["data"]["entry"]

    resp = client.put("/api/v1/journal", json={"id": entry["id"], "mood": None}, headers=headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["entry"]["mood"] is None
    assert resp.json()["data"]["entry"]["rating"] == 4
