"""Public tour discovery endpoints."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from ..core.dependencies import Discovery
from ..core.exceptions import CatalogUnavailableError, ValidationError
from ..schemas.common import Problem
from ..schemas.tour import (
    DEFAULT_FEATURED_LIMIT,
    MAX_PAGE_LIMIT,
    FeaturedTours,
    FeaturedToursResponse,
    SuggestionRequest,
    Suggestions,
    SuggestionsResponse,
    TourFilterRequest,
    ToursResponse,
)
from ..services.discovery_service import DiscoveryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tours", tags=["tours"])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": Problem, "description": "Invalid query parameters"},
    503: {"model": Problem, "description": "Tour catalog unavailable"},
}


def _parse_query(model: type[BaseModel], request: Request):
    """Validate the raw query string into ``model``; unknown parameters are ignored."""
    try:
        return model.model_validate(dict(request.query_params))
    except PydanticValidationError as e:
        raise ValidationError.from_errors(e.errors(), instance=str(request.url)) from e


def _parse_featured_limit(raw: Optional[str]) -> int:
    """Lenient limit for the featured list: non-numeric or non-positive values use the default."""
    try:
        limit = int(raw) if raw is not None else DEFAULT_FEATURED_LIMIT
    except ValueError:
        return DEFAULT_FEATURED_LIMIT
    if limit < 1:
        return DEFAULT_FEATURED_LIMIT
    return min(limit, MAX_PAGE_LIMIT)


def _envelope(response: BaseModel) -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content=response.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


@router.get(
    "",
    response_model=ToursResponse,
    responses=_ERROR_RESPONSES,
    summary="List tours",
    description=(
        "Paginated published tours. Query parameters: page, limit (1-50), search, "
        "sort, priceMin, priceMax, difficulty, location, duration."
    ),
)
async def list_tours(request: Request, service: DiscoveryService = Discovery) -> JSONResponse:
    """
    Get paginated tours list with filters and sorting.

    Example: GET /tours?page=1&limit=8&search=bali&sort=popular&priceMin=500&priceMax=1000
    """
    filters = _parse_query(TourFilterRequest, request)

    try:
        page = await service.get_tours(filters)
    except SQLAlchemyError as e:
        logger.error(
            "Tour catalog read failed while listing tours",
            extra={"query": request.url.query, "error": str(e)},
            exc_info=True
        )
        raise CatalogUnavailableError(instance=str(request.url)) from e

    return _envelope(ToursResponse(data=page))


@router.get(
    "/featured",
    response_model=FeaturedToursResponse,
    responses=_ERROR_RESPONSES,
    summary="Featured tours",
    description="Highest rated featured tours for the homepage highlight.",
)
async def list_featured_tours(
    request: Request,
    limit: Optional[str] = Query(None, description="Number of tours; defaults to 4"),
    service: DiscoveryService = Discovery,
) -> JSONResponse:
    """Get featured tours for the homepage."""
    parsed_limit = _parse_featured_limit(limit)

    try:
        tours = await service.get_featured_tours(parsed_limit)
    except SQLAlchemyError as e:
        logger.error(
            "Tour catalog read failed while listing featured tours",
            extra={"limit": parsed_limit, "error": str(e)},
            exc_info=True
        )
        raise CatalogUnavailableError(instance=str(request.url)) from e

    return _envelope(FeaturedToursResponse(data=FeaturedTours(tours=tours)))


@router.get(
    "/suggestions",
    response_model=SuggestionsResponse,
    responses=_ERROR_RESPONSES,
    summary="Search suggestions",
    description="Tour and destination suggestions; q needs at least 2 characters, limit is 1-10.",
)
async def list_suggestions(request: Request, service: DiscoveryService = Discovery) -> JSONResponse:
    """
    Get search suggestions.

    Example: GET /tours/suggestions?q=ba&limit=5
    """
    params = _parse_query(SuggestionRequest, request)

    try:
        suggestions = await service.get_suggestions(params.q, params.limit)
    except SQLAlchemyError as e:
        logger.error(
            "Tour catalog read failed while building suggestions",
            extra={"q": params.q, "error": str(e)},
            exc_info=True
        )
        raise CatalogUnavailableError(instance=str(request.url)) from e

    return _envelope(SuggestionsResponse(data=Suggestions(suggestions=suggestions)))
