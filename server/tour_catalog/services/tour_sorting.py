"""Sort mode resolution for tour listings."""

import logging
from enum import Enum
from typing import Optional, Union

from sqlalchemy.sql.elements import UnaryExpression

from ..models.tour import Tour

logger = logging.getLogger(__name__)


class SortOption(str, Enum):
    """Caller-selectable listing orders."""
    POPULAR = "popular"
    NEWEST = "newest"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    RATING = "rating"


# Ties beyond these keys fall back to the database's natural row order
_ORDERINGS: dict[SortOption, tuple[UnaryExpression, ...]] = {
    SortOption.NEWEST: (Tour.created_at.desc(),),
    SortOption.PRICE_ASC: (Tour.price_adult.asc(),),
    SortOption.PRICE_DESC: (Tour.price_adult.desc(),),
    SortOption.RATING: (Tour.rating_average.desc(),),
    SortOption.POPULAR: (Tour.review_count.desc(), Tour.rating_average.desc()),
}

_OPTIONS_BY_VALUE = {option.value: option for option in SortOption}

FEATURED_ORDERING: tuple[UnaryExpression, ...] = (
    Tour.rating_average.desc(),
    Tour.review_count.desc(),
)


def parse_sort_option(mode: Union[SortOption, str, None]) -> SortOption:
    """Map a raw sort token to a SortOption, defaulting to POPULAR."""
    if isinstance(mode, SortOption):
        return mode
    if mode is None:
        return SortOption.POPULAR

    option = _OPTIONS_BY_VALUE.get(mode.strip().lower())
    if option is None:
        logger.debug("Unrecognized sort mode, using popular", extra={"sort": mode})
        return SortOption.POPULAR
    return option


def resolve_sort(mode: Union[SortOption, str, None]) -> list[UnaryExpression]:
    """
    Resolve a sort mode to ORDER BY clauses.

    Args:
        mode: Sort token from the request; unknown values sort by popularity

    Returns:
        List of order-by expressions, most significant first
    """
    return list(_ORDERINGS[parse_sort_option(mode)])
