import uuid
from datetime import date

import pytest
from pydantic import ValidationError

from backend.app.schemas import (
    AddFavoriteRequest,
    BatchParams,
    CompareParams,
    ContributionCreate,
    ContributionReference,
    JournalEntryCreate,
    JournalEntryUpdate,
    MedicationUpdate,
    MultipleInteractionsRequest,
    PairCheckParams,
    RemedyIdParams,
    ReviewCreate,
    SearchParams,
    get_validation_error_message,
    is_uuid_v4,
)


def test_search_params_defaults_and_aliases():
    params = SearchParams.model_validate({"query": "  turmeric ", "pageSize": "5"})
    assert params.query == "turmeric"
    assert params.page == 1
    assert params.page_size == 5
    assert params.offset == 0
    assert params.evidence_level == "All"
    assert params.min_similarity == 0.6


@pytest.mark.parametrize("query", ["", "   ", "<b>", "javascript:alert(1)", "x" * 101])
def test_search_params_rejects_bad_queries(query):
    with pytest.raises(ValidationError):
        SearchParams.model_validate({"query": query})


def test_validation_message_has_field_path():
    with pytest.raises(ValidationError) as exc_info:
        SearchParams.model_validate({"query": "<script>"})
    assert get_validation_error_message(exc_info.value) == "query: Input contains invalid characters"


def test_remedy_id_accepts_uuid_and_slug():
    RemedyIdParams.model_validate({"id": str(uuid.uuid4())})
    RemedyIdParams.model_validate({"id": "st-johns_wort"})
    with pytest.raises(ValidationError):
        RemedyIdParams.model_validate({"id": "Bad ID!"})


def test_is_uuid_v4():
    assert is_uuid_v4(str(uuid.uuid4()))
    assert not is_uuid_v4(str(uuid.uuid1()))
    assert not is_uuid_v4("not-a-uuid")
    assert not is_uuid_v4(None)


def test_add_favorite_accepts_camel_case():
    session_id = str(uuid.uuid4())
    body = AddFavoriteRequest.model_validate(
        {"remedyId": "ginger", "remedyName": "Ginger", "sessionId": session_id}
    )
    assert body.remedy_id == "ginger"
    assert body.session_id == session_id


def test_pair_check_splits_and_trims():
    params = PairCheckParams.model_validate({"check": "warfarin , ginkgo"})
    assert params.substances == ("warfarin", "ginkgo")


@pytest.mark.parametrize("check", ["warfarin", "a,b,c", "warfarin,", "<x>,ginkgo"])
def test_pair_check_rejects_bad_pairs(check):
    with pytest.raises(ValidationError):
        PairCheckParams.model_validate({"check": check})


def test_multiple_interactions_bounds():
    with pytest.raises(ValidationError):
        MultipleInteractionsRequest.model_validate({"substances": ["only-one"]})
    with pytest.raises(ValidationError):
        MultipleInteractionsRequest.model_validate({"substances": [f"s{i}" for i in range(21)]})
    body = MultipleInteractionsRequest.model_validate({"substances": [" a ", "b"]})
    assert body.substances == ["a", "b"]


def test_journal_entry_accepts_datetime_strings():
    body = JournalEntryCreate.model_validate(
        {
            "remedyId": str(uuid.uuid4()),
            "remedyName": "Turmeric",
            "date": "2026-03-04T10:00:00Z",
            "rating": 4,
        }
    )
    assert body.date == date(2026, 3, 4)
    assert body.symptoms == []


def test_journal_entry_rejects_out_of_range_rating():
    with pytest.raises(ValidationError):
        JournalEntryCreate.model_validate(
            {
                "remedyId": str(uuid.uuid4()),
                "remedyName": "Turmeric",
                "date": "2026-03-04",
                "rating": 6,
            }
        )


def test_contribution_reference_flatten():
    assert ContributionReference(title="Study").flatten() == "Study"
    assert (
        ContributionReference(title="Study", url="https://example.org").flatten()
        == "Study (https://example.org)"
    )


def test_contribution_requires_description_length():
    with pytest.raises(ValidationError):
        ContributionCreate.model_validate(
            {
                "name": "Tea",
                "description": "too short",
                "category": "Herbal",
                "ingredients": ["leaf"],
                "benefits": ["calm"],
            }
        )


def test_search_page_size_is_capped_at_result_limit():
    params = SearchParams.model_validate({"query": "herb", "pageSize": 50, "page": 2})
    assert params.page_size == 20
    assert params.offset == 20


@pytest.mark.parametrize("field", ["rating", "remedyName", "date", "symptoms"])
def test_journal_update_rejects_null_for_required_columns(field):
    with pytest.raises(ValidationError) as exc_info:
        JournalEntryUpdate.model_validate({"id": str(uuid.uuid4()), field: None})
    assert get_validation_error_message(exc_info.value) == f"{field}: cannot be null"


def test_journal_update_allows_null_for_optional_columns():
    update = JournalEntryUpdate.model_validate({"id": str(uuid.uuid4()), "mood": None})
    assert update.model_dump(exclude={"id"}, exclude_unset=True) == {"mood": None}


@pytest.mark.parametrize("field", ["name", "type", "isActive"])
def test_medication_update_rejects_null_for_required_columns(field):
    with pytest.raises(ValidationError):
        MedicationUpdate.model_validate({"id": str(uuid.uuid4()), field: None})


def test_compare_params_split_and_strip():
    params = CompareParams.model_validate({"ids": " turmeric , ginger,ginseng "})
    assert params.remedy_ids == ["turmeric", "ginger", "ginseng"]


@pytest.mark.parametrize(
    "ids, message",
    [
        ("turmeric, turmeric", "ids: Duplicate remedy IDs"),
        ("turmeric,", "ids: Invalid remedy ID format"),
    ],
)
def test_compare_params_rejects(ids, message):
    with pytest.raises(ValidationError) as exc_info:
        CompareParams.model_validate({"ids": ids})
    assert get_validation_error_message(exc_info.value) == message


def test_batch_params_cap():
    assert len(BatchParams.model_validate({"ids": "a,b,c,d"}).remedy_ids) == 4
    with pytest.raises(ValidationError) as exc_info:
        BatchParams.model_validate({"ids": "a,b,c,d,e"})
    assert "Maximum 4 remedies" in get_validation_error_message(exc_info.value)


def test_review_comment_is_trimmed_before_length_check():
    with pytest.raises(ValidationError) as exc_info:
        ReviewCreate.model_validate(
            {"remedyId": "turmeric", "remedyName": "Turmeric", "rating": 3, "comment": "  short   "}
        )
    assert get_validation_error_message(exc_info.value) == (
        "comment: Review must be at least 10 characters"
    )
