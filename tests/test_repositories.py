import uuid
from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from core.db import utcnow
from core.models import Favorite, SearchHistory
from core.repositories import (
    ContributionRepository,
    FavoriteRepository,
    FilterPreferenceRepository,
    HealthProfileRepository,
    MedicationRepository,
    RemedyRepository,
    ReviewRepository,
    SearchHistoryRepository,
    TokenBlacklistRepository,
    UserRepository,
    is_unique_violation,
)

from .factories import make_remedy, make_review, make_user, new_session_id


def test_user_create_or_update_matches_external_id_then_email(test_session):
    repo = UserRepository(test_session)
    created = repo.create_or_update("Person@Example.com", external_id="idp-1", name="Person")
    assert created.email == "person@example.com"

    updated = repo.create_or_update("new@example.com", external_id="idp-1")
    assert updated.id == created.id
    assert updated.email == "new@example.com"
    assert updated.name == "Person"

    by_email = repo.create_or_update("NEW@example.com", image="http://img")
    assert by_email.id == created.id
    assert by_email.image == "http://img"


def test_token_blacklist_cleanup(test_session):
    repo = TokenBlacklistRepository(test_session)
    repo.blacklist_token("expired", utcnow() - timedelta(hours=1))
    repo.blacklist_token("live", utcnow() + timedelta(hours=1))

    assert repo.is_blacklisted("expired")
    assert repo.cleanup_expired() == 1
    assert not repo.is_blacklisted("expired")
    assert repo.is_blacklisted("live")


def test_favorites_owner_lookup_and_collections(test_session):
    user = make_user(test_session)
    session_id = new_session_id()
    repo = FavoriteRepository(test_session)
    repo.create(session_id=session_id, remedy_id="ginger", remedy_name="Ginger", collection_name="Tea")
    repo.create(user_id=user.id, remedy_id="mint", remedy_name="Mint", collection_name="Tea")
    repo.create(user_id=user.id, remedy_id="sage", remedy_name="Sage", collection_name="Garden")
    repo.create(session_id=new_session_id(), remedy_id="thyme", remedy_name="Thyme")

    assert {f.remedy_id for f in repo.list_for_owner(session_id, user.id)} == {
        "ginger",
        "mint",
        "sage",
    }
    assert [f.remedy_id for f in repo.list_for_owner(user_id=user.id, collection_name="Garden")] == [
        "sage"
    ]
    assert repo.list_collections(session_id, user.id) == ["Garden", "Tea"]
    assert repo.get_for_remedy("ginger", session_id=session_id) is not None
    assert repo.count_for_user(user.id) == 2


def test_owned_lookups_without_owner_return_nothing(test_session):
    test_session.add(Favorite(session_id=new_session_id(), remedy_id="x", remedy_name="X"))
    test_session.add(SearchHistory(session_id=new_session_id(), query="ginger"))
    test_session.flush()

    assert FavoriteRepository(test_session).list_for_owner() == []
    assert FavoriteRepository(test_session).list_collections() == []
    assert SearchHistoryRepository(test_session).clear_for_owner() == 0
    assert FilterPreferenceRepository(test_session).get_for_owner() is None


def test_duplicate_favorite_is_unique_violation(test_session):
    session_id = new_session_id()
    repo = FavoriteRepository(test_session)
    repo.create(session_id=session_id, remedy_id="ginger", remedy_name="Ginger")

    with pytest.raises(IntegrityError) as exc_info:
        repo.create(session_id=session_id, remedy_id="ginger", remedy_name="Ginger")
    assert is_unique_violation(exc_info.value)
    test_session.rollback()


def test_popular_queries(test_session):
    repo = SearchHistoryRepository(test_session)
    session_id = new_session_id()
    for query in ["ginger", "ginger", "turmeric", "ginger", "turmeric", "mint"]:
        repo.create(session_id=session_id, query=query, results_count=1)

    assert repo.popular_queries(limit=2) == [
        {"query": "ginger", "count": 3},
        {"query": "turmeric", "count": 2},
    ]
    assert len(repo.list_for_owner(session_id=session_id, limit=4)) == 4
    assert repo.clear_for_owner(session_id=session_id) == 6


def test_filter_preference_upsert_by_session(test_session):
    repo = FilterPreferenceRepository(test_session)
    session_id = new_session_id()
    first = repo.upsert(session_id, None, categories=["Herbal"], sort_by="name")
    second = repo.upsert(session_id, None, nutrients=["Zinc"])

    assert first.id == second.id
    assert second.categories == []
    assert second.nutrients == ["Zinc"]
    assert second.sort_by is None


def test_medication_ordering_and_active_names(test_session):
    user = make_user(test_session)
    repo = MedicationRepository(test_session)
    repo.create(user_id=user.id, name="Zinc", type="supplement")
    repo.create(user_id=user.id, name="Aspirin", type="pharmaceutical", is_active=False)
    repo.create(user_id=user.id, name="Ginkgo", type="natural_remedy")

    assert [m.name for m in repo.list_for_user(user.id)] == ["Ginkgo", "Zinc", "Aspirin"]
    assert repo.active_names(user.id) == ["Ginkgo", "Zinc"]
    assert repo.count_for_user(user.id) == 3


def test_remedy_search_filters(test_session):
    make_remedy(test_session, "Ginger Root", similarity_score=0.9, evidence_level="Strong")
    make_remedy(test_session, "Ginger Tea", similarity_score=0.7)
    make_remedy(test_session, "Gingko", similarity_score=0.3, category="Leaf")
    make_remedy(test_session, "Mint", category="Leaf")
    repo = RemedyRepository(test_session)

    remedies, total = repo.search("ginger")
    assert total == 2
    assert [r.name for r in remedies] == ["Ginger Root", "Ginger Tea"]

    strong, _ = repo.search("ginger", evidence_level="Strong")
    assert [r.name for r in strong] == ["Ginger Root"]

    _, filtered_total = repo.search("leaf", min_similarity=0.5)
    assert filtered_total == 1

    assert repo.get_all_categories() == ["Herbal Supplement", "Leaf"]
    assert repo.get_all_evidence_levels() == ["Moderate", "Strong"]


def test_contribution_approval_publishes_remedy(test_session):
    author = make_user(test_session, email="author@example.com")
    moderator = make_user(test_session, email="mod@example.com", role="moderator")
    repo = ContributionRepository(test_session)
    contribution = repo.create(
        user_id=author.id,
        name="Chamomile Tea",
        description="A calming herbal infusion for sleep.",
        category="Herbal",
        ingredients=["chamomile"],
        benefits=["sleep"],
        references=["Sleep study (https://example.org)"],
    )

    remedy = repo.approve(contribution, moderator.id, "Looks good")
    test_session.flush()

    assert contribution.status == "approved"
    assert contribution.moderated_by == moderator.id
    assert contribution.moderated_at is not None
    assert remedy.evidence_level == "Traditional"
    assert remedy.matching_nutrients == ["chamomile"]
    assert remedy.references == [{"title": "Sleep study (https://example.org)"}]
    assert repo.list_pending() == []
    uuid.UUID(remedy.id)


def test_review_rating_summary(test_session):
    repo = ReviewRepository(test_session)
    assert repo.rating_summary("turmeric") == (0.0, 0)

    for i, rating in enumerate((5, 2)):
        user = make_user(test_session, email=f"r{i}@example.com")
        make_review(test_session, user, "turmeric", rating)
    make_review(test_session, user, "ginger", 1, remedy_name="Ginger")

    assert repo.rating_summary("turmeric") == (3.5, 2)
    assert repo.get_by_user_and_remedy(user.id, "ginger") is not None
    assert repo.get_by_user_and_remedy(user.id, "ginseng") is None


def test_one_review_per_user_and_remedy(test_session):
    user = make_user(test_session)
    make_review(test_session, user, "turmeric", 4)

    with pytest.raises(IntegrityError) as exc_info:
        make_review(test_session, user, "turmeric", 2)
    assert is_unique_violation(exc_info.value)
    test_session.rollback()


def test_health_profile_upsert(test_session):
    user = make_user(test_session)
    repo = HealthProfileRepository(test_session)

    created = repo.upsert(user.id, goals=["Sleep"])
    assert created.goals == ["Sleep"]
    assert created.allergies == []

    updated = repo.upsert(user.id, allergies=["Ragweed"])
    assert updated.id == created.id
    assert updated.goals == ["Sleep"]
    assert updated.allergies == ["Ragweed"]
    assert repo.get_for_user(user.id) is updated


def test_get_many_skips_unknown_ids(test_session):
    make_remedy(test_session, "Turmeric", id="turmeric")
    make_remedy(test_session, "Ginger", id="ginger")

    found = RemedyRepository(test_session).get_many(["ginger", "missing", "turmeric"])

    assert sorted(found) == ["ginger", "turmeric"]
    assert found["ginger"].name == "Ginger"
