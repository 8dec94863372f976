"""Compile tour listing filters into SQL predicates."""

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement

from ..models.tour import Difficulty, Tour, TourStatus
from ..schemas.tour import TourFilterRequest
from .duration_range import parse_duration_range


def visible_tour_criteria() -> list[ColumnElement[bool]]:
    """Predicates every discovery query carries: published and not soft-deleted."""
    return [
        Tour.status == TourStatus.PUBLISHED.value,
        Tour.deleted_at.is_(None),
    ]


def _contains(column, term: str) -> ColumnElement[bool]:
    return column.icontains(term, autoescape=True)


def compile_tour_filters(request: TourFilterRequest) -> list[ColumnElement[bool]]:
    """
    Translate a filter request into a conjunction of predicates.

    Every supplied filter adds one predicate; absent or blank filters add
    nothing. Malformed duration tokens are ignored rather than rejected.

    Args:
        request: Validated filter request

    Returns:
        Predicates to be AND-ed together in a WHERE clause
    """
    criteria = visible_tour_criteria()

    search = (request.search or "").strip()
    if search:
        criteria.append(or_(
            _contains(Tour.name, search),
            _contains(Tour.location, search),
            _contains(Tour.summary, search),
        ))

    # Only the adult price is filterable
    if request.price_min is not None:
        criteria.append(Tour.price_adult >= request.price_min)
    if request.price_max is not None:
        criteria.append(Tour.price_adult <= request.price_max)

    if request.difficulty is not None:
        criteria.append(Tour.difficulty == Difficulty(request.difficulty.value.upper()).value)

    location = (request.location or "").strip()
    if location:
        criteria.append(_contains(Tour.location, location))

    duration_range = parse_duration_range(request.duration)
    if duration_range is not None:
        criteria.extend(duration_range.criteria(Tour.duration_days))

    return criteria


def suggestion_criteria(query: str) -> list[ColumnElement[bool]]:
    """Visible tours whose name or location contains ``query``."""
    return visible_tour_criteria() + [
        or_(_contains(Tour.name, query), _contains(Tour.location, query)),
    ]


def destination_criteria(query: str) -> list[ColumnElement[bool]]:
    """Visible tours with a known location containing ``query``."""
    return visible_tour_criteria() + [
        Tour.location.is_not(None),
        _contains(Tour.location, query),
    ]
