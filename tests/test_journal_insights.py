import uuid
from datetime import date, timedelta

from core.services import build_insights, get_remedy_insights, rating_trend

from .factories import make_journal_entry, make_user

TODAY = date(2026, 5, 1)


def test_rating_trend():
    assert rating_trend([3, 4]) == "stable"
    assert rating_trend([1, 2, 2, 4, 5, 5]) == "improving"
    assert rating_trend([5, 5, 4, 2, 1, 1]) == "declining"
    assert rating_trend([3, 3, 3, 3, 4, 3]) == "stable"


def test_build_insights_empty():
    assert build_insights("remedy", []) is None


def test_insights_summarize_recent_entries(test_session):
    user = make_user(test_session)
    remedy_id = str(uuid.uuid4())
    ratings = [2, 2, 3, 4, 5, 5]
    for offset, rating in enumerate(ratings):
        make_journal_entry(
            test_session,
            user,
            remedy_id,
            TODAY - timedelta(days=len(ratings) - offset),
            rating,
            symptoms=["headache", "fatigue"] if offset % 2 == 0 else ["headache"],
            side_effects=["nausea"] if offset == 0 else [],
            mood=3,
        )
    # Outside the 90 day window
    make_journal_entry(test_session, user, remedy_id, TODAY - timedelta(days=200), 1)

    insights = get_remedy_insights(test_session, user.id, remedy_id, today=TODAY)

    assert insights["remedyId"] == remedy_id
    assert insights["remedyName"] == "Turmeric"
    assert insights["totalEntries"] == 6
    assert insights["avgRating"] == 3.5
    assert insights["trend"] == "improving"
    assert insights["topSymptoms"][0] == {"symptom": "headache", "count": 6}
    assert insights["topSymptoms"][1] == {"symptom": "fatigue", "count": 3}
    assert insights["topSideEffects"] == [{"effect": "nausea", "count": 1}]
    assert [point["rating"] for point in insights["ratingHistory"]] == ratings
    assert insights["ratingHistory"][0]["mood"] == 3


def test_insights_are_scoped_to_user(test_session):
    owner = make_user(test_session, email="owner@example.com")
    other = make_user(test_session, email="other@example.com")
    remedy_id = str(uuid.uuid4())
    make_journal_entry(test_session, owner, remedy_id, TODAY - timedelta(days=1), 4)

    assert get_remedy_insights(test_session, other.id, remedy_id, today=TODAY) is None
