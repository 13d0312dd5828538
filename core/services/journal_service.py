"""
Journal effectiveness insights.
"""

from collections import Counter
from datetime import date, timedelta

from sqlalchemy.orm import Session

from core.logging import log_timing
from core.models import JournalEntry
from core.repositories import JournalRepository

INSIGHTS_WINDOW_DAYS = 90
INSIGHTS_MAX_ENTRIES = 365
TREND_SAMPLE = 3
TREND_THRESHOLD = 0.5
TOP_N = 5


def rating_trend(ratings: list[int]) -> str:
    """Compare the mean of the last three ratings with the first three."""
    if len(ratings) < TREND_SAMPLE:
        return "stable"
    recent = sum(ratings[-TREND_SAMPLE:]) / TREND_SAMPLE
    earlier = sum(ratings[:TREND_SAMPLE]) / TREND_SAMPLE
    if recent - earlier > TREND_THRESHOLD:
        return "improving"
    if earlier - recent > TREND_THRESHOLD:
        return "declining"
    return "stable"


def build_insights(remedy_id: str, entries: list[JournalEntry]) -> dict | None:
    """Summarize entries given oldest first. None when there are no entries."""
    if not entries:
        return None

    ratings = [entry.rating for entry in entries]
    symptoms = Counter(s for entry in entries for s in entry.symptoms or [])
    side_effects = Counter(e for entry in entries for e in entry.side_effects or [])

    return {
        "remedyId": remedy_id,
        "remedyName": entries[0].remedy_name,
        "totalEntries": len(entries),
        "avgRating": round(sum(ratings) / len(ratings), 1),
        "trend": rating_trend(ratings),
        "topSymptoms": [
            {"symptom": symptom, "count": count} for symptom, count in symptoms.most_common(TOP_N)
        ],
        "topSideEffects": [
            {"effect": effect, "count": count} for effect, count in side_effects.most_common(TOP_N)
        ],
        "ratingHistory": [
            {
                "date": entry.date.isoformat(),
                "rating": entry.rating,
                "mood": entry.mood,
                "energyLevel": entry.energy_level,
                "sleepQuality": entry.sleep_quality,
            }
            for entry in entries
        ],
    }


@log_timing("journal_insights")
def get_remedy_insights(
    session: Session, user_id: str, remedy_id: str, today: date | None = None
) -> dict | None:
    since = (today or date.today()) - timedelta(days=INSIGHTS_WINDOW_DAYS)
    entries = JournalRepository(session).entries_since(
        user_id, remedy_id, since, limit=INSIGHTS_MAX_ENTRIES
    )
    return build_insights(remedy_id, entries)


__all__ = ["rating_trend", "build_insights", "get_remedy_insights"]
