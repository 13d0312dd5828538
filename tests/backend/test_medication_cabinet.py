import uuid

import pytest

from ..factories import make_interaction


@pytest.fixture
def seeded_interactions(session_factory):
    session = session_factory()
    make_interaction(session, "Warfarin", "Ginkgo", severity="severe")
    make_interaction(session, "Warfarin", "Garlic", severity="mild")
    session.commit()
    session.close()


def _add(client, headers, name, **extra):
    body = {"name": name, "type": "pharmaceutical"}
    body.update(extra)
    return client.post("/api/v1/medication-cabinet", json=body, headers=headers)


def test_cabinet_requires_authentication(client):
    resp = client.get("/api/v1/medication-cabinet")
    assert resp.status_code == 401
    assert resp.json()["error"]["message"] == "Authentication required"


def test_medication_lifecycle(client, basic_account):
    _, headers = basic_account

    created = _add(client, headers, "  Warfarin ", dosage="5mg", frequency="daily")
    assert created.status_code == 201
    medication = created.json()["data"]["medication"]
    assert created.json()["data"]["message"] == "Medication added"
    assert medication["name"] == "Warfarin"
    assert medication["isActive"] is True

    listed = client.get("/api/v1/medication-cabinet", headers=headers).json()["data"]
    assert listed["count"] == 1

    updated = client.put(
        "/api/v1/medication-cabinet",
        json={"id": medication["id"], "isActive": False},
        headers=headers,
    )
    assert updated.json()["data"]["message"] == "Medication updated"
    assert updated.json()["data"]["medication"]["isActive"] is False
    assert updated.json()["data"]["medication"]["dosage"] == "5mg"

    removed = client.delete(
        "/api/v1/medication-cabinet", params={"id": medication["id"]}, headers=headers
    )
    assert removed.json()["data"] == {"message": "Medication removed"}


def test_duplicate_medication_name(client, basic_account):
    _, headers = basic_account
    assert _add(client, headers, "Warfarin").status_code == 201

    resp = _add(client, headers, "Warfarin")

    assert resp.status_code == 409
    assert resp.json()["error"]["message"] == "This medication is already in your cabinet"


def test_invalid_medication_type(client, basic_account):
    _, headers = basic_account
    resp = _add(client, headers, "Warfarin", type="candy")
    assert resp.status_code == 400
    assert resp.json()["error"]["message"].startswith("type:")


def test_free_plan_medication_quota(client, free_account):
    _, headers = free_account
    for name in ("A", "B", "C"):
        assert _add(client, headers, name).status_code == 201

    resp = _add(client, headers, "D")

    assert resp.status_code == 403
    assert resp.json()["error"]["details"] == {"limit": 3, "current": 3, "plan": "free"}


def test_free_plan_cannot_check_cabinet_interactions(client, free_account):
    _, headers = free_account
    resp = client.get("/api/v1/medication-cabinet/interactions", headers=headers)
    assert resp.status_code == 403
    assert resp.json()["error"]["details"] == {"plan": "free", "isTrial": False}


def test_cabinet_interactions_cover_active_medications(
    client, basic_account, seeded_interactions
):
    _, headers = basic_account
    for name in ("Warfarin", "Ginkgo"):
        _add(client, headers, name)
    _add(client, headers, "Garlic", type="supplement", isActive=False)

    resp = client.get("/api/v1/medication-cabinet/interactions", headers=headers)

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["count"] == 1
    assert data["interactions"][0]["severity"] == "severe"


def test_cannot_remove_unknown_medication(client, basic_account):
    _, headers = basic_account
    resp = client.delete(
        "/api/v1/medication-cabinet", params={"id": str(uuid.uuid4())}, headers=headers
    )
    assert resp.status_code == 404


@pytest.mark.parametrize("field", ["name", "type", "isActive"])
def test_update_rejects_null_required_field(client, basic_account, field):
    _, headers = basic_account
    medication = _add(client, headers, "Warfarin").json()["data"]["medication"]

    resp = client.put(
        "/api/v1/medication-cabinet", json={"id": medication["id"], field: None}, headers=headers
    )

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == f"{field}: cannot be null"

    listed = client.get("/api/v1/medication-cabinet", headers=headers).json()["data"]
    assert listed["medications"][0]["name"] == "Warfarin"
