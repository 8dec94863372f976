"""Tour discovery request and response schemas."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .common import CamelModel

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 8
MAX_PAGE_LIMIT = 50
# Keeps (page - 1) * limit within a signed 64-bit OFFSET
MAX_PAGE = (2**63 - 1) // MAX_PAGE_LIMIT
DEFAULT_SORT = "popular"

DEFAULT_FEATURED_LIMIT = 4

DEFAULT_SUGGESTION_LIMIT = 5
MAX_SUGGESTION_LIMIT = 10
MIN_SUGGESTION_QUERY_LENGTH = 2


class DifficultyFilter(str, Enum):
    """Difficulty values accepted from callers."""
    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"


def _drop_blank_strings(data: Any) -> Any:
    # Empty form fields arrive as "" and mean "not supplied"
    if isinstance(data, dict):
        return {
            key: value for key, value in data.items()
            if not (isinstance(value, str) and not value.strip())
        }
    return data


class TourFilterRequest(BaseModel):
    """Normalized filter, sort and pagination parameters for one listing query."""

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }

    page: int = Field(DEFAULT_PAGE, ge=1, le=MAX_PAGE, description="1-based page number")
    limit: int = Field(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT, description="Tours per page")
    search: str | None = Field(None, description="Search by name, location or summary")
    sort: str = Field(
        DEFAULT_SORT,
        description="popular, newest, price_asc, price_desc or rating; anything else sorts by popularity",
    )
    price_min: Decimal | None = Field(None, ge=0, alias="priceMin", description="Minimum adult price")
    price_max: Decimal | None = Field(None, ge=0, alias="priceMax", description="Maximum adult price")
    difficulty: DifficultyFilter | None = Field(None, description="Difficulty level")
    location: str | None = Field(None, description="Location substring")
    duration: str | None = Field(
        None,
        description='Duration bucket in days, e.g. "1-3", "4-7" or "8+"',
    )

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data: Any) -> Any:
        return _drop_blank_strings(data)

    @field_validator("difficulty", mode="before")
    @classmethod
    def lowercase_difficulty(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class SuggestionRequest(BaseModel):
    """Parameters for the search-as-you-type suggestion lookup."""

    q: str = Field(..., min_length=MIN_SUGGESTION_QUERY_LENGTH, max_length=100)
    limit: int = Field(DEFAULT_SUGGESTION_LIMIT, ge=1, le=MAX_SUGGESTION_LIMIT)

    @field_validator("q", mode="before")
    @classmethod
    def strip_query(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @model_validator(mode="before")
    @classmethod
    def drop_blank_limit(cls, data: Any) -> Any:
        if isinstance(data, dict):
            limit = data.get("limit")
            if isinstance(limit, str) and not limit.strip():
                return {key: value for key, value in data.items() if key != "limit"}
        return data


class TourItem(CamelModel):
    """Public projection of a published tour."""

    id: str = Field(..., description="Unique tour ID")
    name: str
    slug: str
    summary: str | None = None
    cover_image: str | None = None
    duration_days: int
    price_adult: float
    price_child: float
    location: str | None = None
    rating_average: float
    review_count: int
    difficulty: str | None = Field(None, description="easy, moderate or challenging")
    featured: bool
    next_available_date: datetime | None = Field(None, description="Earliest open departure")


class PaginationMeta(CamelModel):
    """Page metadata computed from page, limit and the matching total."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class ToursPage(CamelModel):
    tours: list[TourItem]
    pagination: PaginationMeta


class TourSuggestion(CamelModel):
    type: Literal["tour"] = "tour"
    id: str
    name: str
    slug: str


class DestinationSuggestion(CamelModel):
    type: Literal["destination"] = "destination"
    name: str


Suggestion = Annotated[Union[TourSuggestion, DestinationSuggestion], Field(discriminator="type")]


class FeaturedTours(CamelModel):
    tours: list[TourItem]


class Suggestions(CamelModel):
    suggestions: list[Suggestion]


class ToursResponse(BaseModel):
    """Envelope for the paginated listing."""

    success: bool = True
    data: ToursPage


class FeaturedToursResponse(BaseModel):
    success: bool = True
    data: FeaturedTours


class SuggestionsResponse(BaseModel):
    success: bool = True
    data: Suggestions
