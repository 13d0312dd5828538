"""
Pydantic schemas for request and response validation.

Request models accept camelCase JSON (and snake_case field names); response
models are built from ORM rows and dumped with camelCase aliases.
"""

import re
from datetime import date, datetime
from typing import Annotated, Any, Literal, TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from core.repositories.remedy_repository import SEARCH_RESULT_LIMIT

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)
UUID_V4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE
)
SLUG_PATTERN = re.compile(r"^[a-z0-9_-]+$")
BATCH_REMEDY_LIMIT = 4
UNSAFE_INPUT_PATTERN = re.compile(r"<|>|script|javascript:", re.IGNORECASE)

# Leading loc entries FastAPI adds to request validation errors
_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


# =============================================================================
# Field Types
# =============================================================================


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _reject_markup(value: str) -> str:
    if UNSAFE_INPUT_PATTERN.search(value):
        raise ValueError("Input contains invalid characters")
    return value


def _check_uuid(value: str) -> str:
    if not UUID_PATTERN.match(value):
        raise ValueError("Invalid UUID format")
    return value


def _check_remedy_id(value: str) -> str:
    if UUID_PATTERN.match(value) or SLUG_PATTERN.match(value):
        return value
    raise ValueError("Invalid remedy ID format")


def _not_null(value: Any) -> Any:
    """Partial updates may omit a field but not set it to null."""
    if value is None:
        raise ValueError("cannot be null")
    return value


def is_uuid_v4(value: str | None) -> bool:
    return bool(value) and UUID_V4_PATTERN.match(value) is not None


SearchQuery = Annotated[
    str,
    BeforeValidator(_strip),
    Field(min_length=1, max_length=100),
    AfterValidator(_reject_markup),
]
SubstanceName = Annotated[
    str,
    BeforeValidator(_strip),
    Field(min_length=1, max_length=200),
    AfterValidator(_reject_markup),
]
UUIDStr = Annotated[str, AfterValidator(_check_uuid)]
RemedyId = Annotated[str, Field(min_length=1, max_length=100), AfterValidator(_check_remedy_id)]
EvidenceFilter = Literal["Strong", "Moderate", "Limited", "All"]
EvidenceLevel = Literal["Strong", "Moderate", "Limited", "Traditional"]
MedicationType = Literal["pharmaceutical", "supplement", "natural_remedy"]
MedicationFrequency = Literal["daily", "twice_daily", "as_needed", "weekly"]
Score = Annotated[int, Field(ge=1, le=5)]
ShortLabel = Annotated[str, Field(min_length=1, max_length=100)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def get_validation_error_message(exc: ValidationError | RequestValidationError) -> str:
    """``"<dotted path>: <message>"`` for the first issue."""
    errors = exc.errors()
    if not errors:
        return "Validation failed"

    first = errors[0]
    loc = [str(part) for part in first.get("loc", ())]
    if isinstance(exc, RequestValidationError) and loc and loc[0] in _REQUEST_LOCATIONS:
        loc = loc[1:]

    message = str(first.get("msg", "Invalid value"))
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]

    path = ".".join(loc)
    return f"{path}: {message}" if path else message


def validation_issues(exc: ValidationError | RequestValidationError) -> list[dict]:
    """JSON-safe issue list for error details."""
    return [
        {
            "path": ".".join(str(part) for part in error.get("loc", ())),
            "message": str(error.get("msg", "")),
            "type": error.get("type"),
        }
        for error in exc.errors()
    ]


# =============================================================================
# Search & Remedies
# =============================================================================


class PaginationParams(CamelModel):
    page: int = Field(default=1, ge=1, le=1000)
    page_size: int = Field(default=10, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class SearchParams(PaginationParams):
    query: SearchQuery
    evidence_level: EvidenceFilter = "All"
    min_similarity: float = Field(default=0.6, ge=0, le=1)

    @field_validator("page_size")
    @classmethod
    def cap_page_size(cls, value: int) -> int:
        """Pages larger than the search result cap are served at the cap."""
        return min(value, SEARCH_RESULT_LIMIT)


class RemedyIdParams(CamelModel):
    id: RemedyId


class CompareParams(CamelModel):
    """``ids=a,b,...``: distinct remedy IDs separated by commas, request order kept."""

    ids: str = Field(min_length=1, max_length=1000)

    @field_validator("ids")
    @classmethod
    def validate_ids(cls, value: str) -> str:
        parts = [part.strip() for part in value.split(",")]
        for part in parts:
            _check_remedy_id(part)
        if len(set(parts)) != len(parts):
            raise ValueError("Duplicate remedy IDs")
        return value

    @property
    def remedy_ids(self) -> list[str]:
        return [part.strip() for part in self.ids.split(",")]


class BatchParams(CompareParams):
    @field_validator("ids")
    @classmethod
    def cap_batch_size(cls, value: str) -> str:
        if len(value.split(",")) > BATCH_REMEDY_LIMIT:
            raise ValueError(f"Maximum {BATCH_REMEDY_LIMIT} remedies can be compared at once")
        return value


# =============================================================================
# Reviews
# =============================================================================


class ReviewCreate(CamelModel):
    remedy_id: RemedyId
    remedy_name: str = Field(min_length=1, max_length=200)
    rating: Score
    title: str | None = Field(default=None, max_length=200)
    comment: str = Field(max_length=5000)

    @field_validator("comment")
    @classmethod
    def require_substance(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 10:
            raise ValueError("Review must be at least 10 characters")
        return value


class ReviewListParams(CamelModel):
    remedy_id: RemedyId
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=50)


class ReviewAuthor(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None = None
    image: str | None = None


class ReviewResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    remedy_id: str
    remedy_name: str
    user_id: str
    rating: int
    title: str | None = None
    comment: str
    verified: bool = False
    created_at: datetime
    user: ReviewAuthor | None = None


class RemedyResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    image_url: str | None = None
    category: str
    matching_nutrients: list[str] = Field(default_factory=list)
    similarity_score: float = 0.0
    evidence_level: str | None = None


# =============================================================================
# Search History
# =============================================================================


class SaveSearchHistoryRequest(CamelModel):
    query: SearchQuery
    results_count: int = Field(ge=0)
    session_id: UUIDStr | None = None
    user_id: str | None = None
    filters: dict[str, Any] | None = None


class GetSearchHistoryParams(CamelModel):
    session_id: UUIDStr | None = None
    user_id: str | None = None
    limit: int = Field(default=10, ge=1, le=100)


class PopularSearchParams(CamelModel):
    limit: int = Field(default=5, ge=1, le=50)


class SearchHistoryResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    query: str
    results_count: int
    filters: dict[str, Any] | None = None
    created_at: datetime


# =============================================================================
# Favorites
# =============================================================================


class AddFavoriteRequest(CamelModel):
    remedy_id: RemedyId
    remedy_name: str = Field(min_length=1, max_length=200)
    session_id: UUIDStr | None = None
    user_id: str | None = None
    notes: str | None = Field(default=None, max_length=1000)
    collection_name: str | None = Field(default=None, max_length=100)


class UpdateFavoriteRequest(CamelModel):
    id: UUIDStr
    session_id: UUIDStr | None = None
    notes: str | None = Field(default=None, max_length=1000)
    collection_name: str | None = Field(default=None, max_length=100)


class DeleteFavoriteParams(CamelModel):
    id: UUIDStr
    session_id: UUIDStr | None = None


class FavoriteResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    remedy_id: str
    remedy_name: str
    session_id: str | None = None
    user_id: str | None = None
    notes: str | None = None
    collection_name: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


# =============================================================================
# Filter Preferences
# =============================================================================


class FilterPreferencesRequest(CamelModel):
    categories: list[str] = Field(default_factory=list, max_length=50)
    nutrients: list[str] = Field(default_factory=list, max_length=50)
    evidence_levels: list[EvidenceLevel] = Field(default_factory=list, max_length=4)
    sort_by: Literal["similarity", "name", "category", "evidenceLevel"] | None = None
    sort_order: Literal["asc", "desc"] | None = None
    session_id: UUIDStr | None = None
    user_id: str | None = None


class FilterPreferencesResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    categories: list[str] = Field(default_factory=list)
    nutrients: list[str] = Field(default_factory=list)
    evidence_levels: list[str] = Field(default_factory=list)
    sort_by: str | None = None
    sort_order: str | None = None


# =============================================================================
# Interactions
# =============================================================================


class SubstanceParams(CamelModel):
    substance: SubstanceName


class PairCheckParams(CamelModel):
    """``check=a,b``: exactly two non-empty names separated by a comma."""

    check: str = Field(min_length=3, max_length=500)

    @field_validator("check")
    @classmethod
    def validate_pair(cls, value: str) -> str:
        if "," not in value:
            raise ValueError("Must contain two substances separated by a comma")
        parts = [part.strip() for part in value.split(",")]
        if len(parts) != 2 or not all(parts):
            raise ValueError("Must contain exactly two substances")
        for part in parts:
            _reject_markup(part)
        return value

    @property
    def substances(self) -> tuple[str, str]:
        a, b = (part.strip() for part in self.check.split(","))
        return a, b


class MultipleInteractionsRequest(CamelModel):
    substances: list[SubstanceName] = Field(min_length=2, max_length=20)


# =============================================================================
# Journal
# =============================================================================


def _coerce_date(value: Any) -> Any:
    """Accept an ISO date or a full ISO datetime."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return value


JournalDate = Annotated[date, BeforeValidator(_coerce_date)]


class JournalEntryCreate(CamelModel):
    remedy_id: UUIDStr
    remedy_name: str = Field(min_length=1, max_length=200)
    date: JournalDate
    rating: Score
    symptoms: list[ShortLabel] = Field(default_factory=list, max_length=20)
    side_effects: list[ShortLabel] = Field(default_factory=list, max_length=20)
    dosage_taken: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=2000)
    mood: Score | None = None
    energy_level: Score | None = None
    sleep_quality: Score | None = None


class JournalEntryUpdate(CamelModel):
    id: UUIDStr
    remedy_id: UUIDStr | None = None
    remedy_name: str | None = Field(default=None, min_length=1, max_length=200)
    date: JournalDate | None = None
    rating: Score | None = None
    symptoms: list[ShortLabel] | None = Field(default=None, max_length=20)
    side_effects: list[ShortLabel] | None = Field(default=None, max_length=20)
    dosage_taken: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=2000)
    mood: Score | None = None
    energy_level: Score | None = None
    sleep_quality: Score | None = None

    @field_validator("remedy_id", "remedy_name", "date", "rating", "symptoms", "side_effects")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        return _not_null(value)


class JournalListParams(CamelModel):
    remedy_id: str | None = None
    start_date: JournalDate | None = None
    end_date: JournalDate | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class JournalEntryResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    remedy_id: str
    remedy_name: str
    date: JournalDate
    rating: int
    symptoms: list[str] = Field(default_factory=list)
    side_effects: list[str] = Field(default_factory=list)
    dosage_taken: str | None = None
    notes: str | None = None
    mood: int | None = None
    energy_level: int | None = None
    sleep_quality: int | None = None
    created_at: datetime
    updated_at: datetime | None = None


# =============================================================================
# Medication Cabinet
# =============================================================================


class MedicationCreate(CamelModel):
    name: Annotated[str, BeforeValidator(_strip), Field(min_length=1, max_length=200)]
    type: MedicationType
    dosage: str | None = Field(default=None, max_length=100)
    frequency: MedicationFrequency | None = None
    start_date: datetime | None = None
    notes: str | None = Field(default=None, max_length=1000)
    is_active: bool = True


class MedicationUpdate(CamelModel):
    id: UUIDStr
    name: Annotated[str, BeforeValidator(_strip), Field(min_length=1, max_length=200)] | None = None
    type: MedicationType | None = None
    dosage: str | None = Field(default=None, max_length=100)
    frequency: MedicationFrequency | None = None
    start_date: datetime | None = None
    notes: str | None = Field(default=None, max_length=1000)
    is_active: bool | None = None

    @field_validator("name", "type", "is_active")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        return _not_null(value)


class MedicationResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    dosage: str | None = None
    frequency: str | None = None
    start_date: datetime | None = None
    notes: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None


# =============================================================================
# Contributions & Moderation
# =============================================================================


class ContributionReference(CamelModel):
    title: str = Field(min_length=1)
    url: str | None = None

    def flatten(self) -> str:
        return f"{self.title} ({self.url})" if self.url else self.title


class ContributionCreate(CamelModel):
    name: str = Field(min_length=2)
    description: str = Field(min_length=20)
    category: str = Field(min_length=1)
    ingredients: list[str] = Field(min_length=1)
    benefits: list[str] = Field(min_length=1)
    usage: str | None = None
    dosage: str | None = None
    precautions: str | None = None
    scientific_info: str | None = None
    references: list[ContributionReference] = Field(default_factory=list)
    image_url: str | None = None


class ContributionListParams(CamelModel):
    status: Literal["pending", "approved", "rejected"] | None = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=50)


class ContributionResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    description: str
    category: str
    ingredients: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)
    usage: str | None = None
    dosage: str | None = None
    precautions: str | None = None
    scientific_info: str | None = None
    references: list[str] = Field(default_factory=list)
    image_url: str | None = None
    status: str
    moderator_note: str | None = None
    moderated_by: str | None = None
    moderated_at: datetime | None = None
    created_at: datetime


class ModerationRequest(CamelModel):
    type: Literal["contribution", "review"]
    action: Literal["approve", "reject"]
    note: str | None = None


# =============================================================================
# Usage
# =============================================================================


class UsageIncrementRequest(CamelModel):
    type: Literal["searches", "aiSearches", "exports", "comparisons"]
    amount: int = Field(default=1, ge=1)


# =============================================================================
# Health Profile
# =============================================================================

ProfileLabel = Annotated[str, Field(min_length=1, max_length=200)]


class HealthProfileRequest(CamelModel):
    """Full replacement: an omitted list is stored empty."""

    categories: list[ShortLabel] = Field(default_factory=list, max_length=20)
    goals: list[ProfileLabel] = Field(default_factory=list, max_length=20)
    allergies: list[ProfileLabel] = Field(default_factory=list, max_length=20)
    conditions: list[ProfileLabel] = Field(default_factory=list, max_length=20)
    dietary_prefs: list[ProfileLabel] = Field(default_factory=list, max_length=20)


class HealthProfileResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    categories: list[str] = Field(default_factory=list)
    goals: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    conditions: list[str] = Field(default_factory=list)
    dietary_prefs: list[str] = Field(default_factory=list)
    updated_at: datetime | None = None


# =============================================================================
# Users & Subscriptions
# =============================================================================


class UserResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str | None = None
    image: str | None = None
    role: str
    has_used_trial: bool = False
    created_at: datetime


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_query(schema: type[ModelT], request: Request) -> ModelT:
    """
    Validate the query string against a params model.

    A ValidationError escapes to the handler that answers 400 INVALID_INPUT.
    """
    return schema.model_validate(dict(request.query_params))


def dump(schema: type[BaseModel], obj: Any) -> dict:
    """ORM row -> camelCase dict."""
    return schema.model_validate(obj).model_dump(by_alias=True, mode="json")


def dump_all(schema: type[BaseModel], rows: list[Any]) -> list[dict]:
    return [dump(schema, row) for row in rows]
