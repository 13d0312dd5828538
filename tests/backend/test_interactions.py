import pytest

from ..factories import make_interaction


@pytest.fixture(autouse=True)
def seeded_interactions(session_factory):
    session = session_factory()
    make_interaction(session, "Warfarin", "Ginkgo", severity="severe")
    make_interaction(session, "Warfarin", "Garlic", severity="mild")
    make_interaction(session, "Sertraline", "St. John's Wort", severity="contraindicated")
    session.commit()
    session.close()


def test_lookup_by_substance(client):
    resp = client.get("/api/v1/interactions", params={"substance": "warfarin"})

    assert resp.status_code == 200
    assert resp.headers["cache-control"] == (
        "public, s-maxage=3600, stale-while-revalidate=86400"
    )
    body = resp.json()
    assert [item["severity"] for item in body["data"]] == ["severe", "mild"]
    assert body["metadata"] == {"total": 2}


def test_pair_check_matches_either_order(client):
    resp = client.get("/api/v1/interactions", params={"check": "ginkgo, WARFARIN"})

    data = resp.json()["data"]
    assert len(data) == 1
    assert data[0]["substanceA"] == "Warfarin"
    assert data[0]["substanceB"] == "Ginkgo"


def test_requires_substance_or_check(client):
    resp = client.get("/api/v1/interactions")
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "MISSING_PARAMETER"


@pytest.mark.parametrize("check", ["warfarin", "a,b,c", "a,"])
def test_malformed_pair(client, check):
    resp = client.get("/api/v1/interactions", params={"check": check})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_INPUT"


def test_check_multiple_sorted_by_severity(client):
    resp = client.post(
        "/api/v1/interactions/check",
        json={"substances": ["Garlic", "Warfarin", "Ginkgo", "Sertraline", "St. John's Wort"]},
    )

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["substancesChecked"] == 5
    assert data["pairsChecked"] == 10
    assert data["interactionsFound"] == 3
    assert [item["severity"] for item in data["interactions"]] == [
        "contraindicated",
        "severe",
        "mild",
    ]


def test_check_needs_two_substances(client):
    resp = client.post("/api/v1/interactions/check", json={"substances": ["Warfarin"]})
    assert resp.status_code == 400
    assert resp.json()["error"]["message"].startswith("substances:")


def test_check_rejects_malformed_json(client):
    resp = client.post(
        "/api/v1/interactions/check",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == (
        'Request body must be valid JSON with a "substances" array'
    )
