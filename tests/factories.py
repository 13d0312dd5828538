"""Row builders shared by the unit and API tests."""

import uuid
from datetime import date

from core.models import (
    Interaction,
    JournalEntry,
    NaturalRemedy,
    RemedyReview,
    Subscription,
    User,
)


def new_session_id() -> str:
    return str(uuid.uuid4())


def make_user(session, email: str = "tester@example.com", role: str = "user", **kwargs) -> User:
    user = User(email=email, name=kwargs.pop("name", "Tester"), role=role, **kwargs)
    session.add(user)
    session.flush()
    return user


def make_subscription(
    session, user: User, plan: str, status: str = "active", **kwargs
) -> Subscription:
    subscription = Subscription(user_id=user.id, plan=plan, status=status, **kwargs)
    session.add(subscription)
    session.flush()
    return subscription


def make_remedy(session, name: str, **kwargs) -> NaturalRemedy:
    values = {
        "description": f"{name} is a traditional natural remedy.",
        "category": "Herbal Supplement",
        "matching_nutrients": ["Vitamin C"],
        "similarity_score": 0.8,
        "evidence_level": "Moderate",
    }
    values.update(kwargs)
    remedy = NaturalRemedy(name=name, **values)
    session.add(remedy)
    session.flush()
    return remedy


def make_interaction(
    session, substance_a: str, substance_b: str, severity: str = "moderate"
) -> Interaction:
    interaction = Interaction(
        substance_a=substance_a,
        substance_a_type="pharmaceutical",
        substance_b=substance_b,
        substance_b_type="supplement",
        severity=severity,
        description=f"{substance_a} interacts with {substance_b}",
        recommendation="Consult your doctor before combining.",
        evidence="clinical",
        sources=["https://example.org/interactions"],
    )
    session.add(interaction)
    session.flush()
    return interaction


def make_journal_entry(
    session, user: User, remedy_id: str, day: date, rating: int, **kwargs
) -> JournalEntry:
    entry = JournalEntry(
        user_id=user.id,
        remedy_id=remedy_id,
        remedy_name=kwargs.pop("remedy_name", "Turmeric"),
        date=day,
        rating=rating,
        **kwargs,
    )
    session.add(entry)
    session.flush()
    return entry


def make_review(session, user: User, remedy_id: str, rating: int, **kwargs) -> RemedyReview:
    review = RemedyReview(
        user_id=user.id,
        remedy_id=remedy_id,
        remedy_name=kwargs.pop("remedy_name", "Turmeric"),
        rating=rating,
        comment=kwargs.pop("comment", "Helped with my joint stiffness."),
        **kwargs,
    )
    session.add(review)
    session.flush()
    return review
