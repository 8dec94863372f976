"""Discovery service answering public tour listing, featured and suggestion queries."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable

from opentelemetry import trace

from ..core.observability import metrics_collector
from ..models.tour import Tour
from ..schemas.tour import (
    DEFAULT_FEATURED_LIMIT,
    DEFAULT_SUGGESTION_LIMIT,
    DestinationSuggestion,
    Suggestion,
    TourFilterRequest,
    TourItem,
    ToursPage,
    TourSuggestion,
)
from .catalog_store import TourCatalog, TourListing
from .pagination import build_pagination, page_offset
from .tour_filters import (
    compile_tour_filters,
    destination_criteria,
    suggestion_criteria,
    visible_tour_criteria,
)
from .tour_sorting import FEATURED_ORDERING, parse_sort_option, resolve_sort

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

# Destinations are a secondary suggestion source and never exceed this many
DESTINATION_SUGGESTION_LIMIT = 3


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_tour_item(listing: TourListing) -> TourItem:
    """Project a catalog row into its public form (decimals as floats, difficulty lower-case)."""
    tour = listing.tour
    return TourItem(
        id=str(tour.id),
        name=tour.name,
        slug=tour.slug,
        summary=tour.summary,
        cover_image=tour.cover_image,
        duration_days=tour.duration_days,
        price_adult=float(tour.price_adult),
        price_child=float(tour.price_child),
        location=tour.location,
        rating_average=float(tour.rating_average),
        review_count=tour.review_count or 0,
        difficulty=tour.difficulty.lower() if tour.difficulty else None,
        featured=bool(tour.featured),
        next_available_date=listing.next_available_date,
    )


class DiscoveryService:
    """Read-only queries over published tours."""

    def __init__(self, catalog: TourCatalog, clock: Callable[[], datetime] = _utcnow):
        self.catalog = catalog
        self.clock = clock

    async def get_tours(self, request: TourFilterRequest) -> ToursPage:
        """
        Get one page of published tours matching the request's filters.

        The count and the page are read concurrently and independently, so the
        total may be off by rows changed between the two reads.

        Args:
            request: Validated filter, sort and pagination parameters

        Returns:
            Tours for the requested page with pagination metadata
        """
        with tracer.start_as_current_span("tour_discovery.get_tours") as span:
            criteria = compile_tour_filters(request)
            ordering = resolve_sort(request.sort)
            offset = page_offset(request.page, request.limit)

            logger.info(
                "Fetching tours",
                extra={
                    "page": request.page,
                    "limit": request.limit,
                    "sort": parse_sort_option(request.sort).value,
                    "filters": request.model_dump(
                        exclude={"page", "limit", "sort"},
                        exclude_none=True,
                        mode="json",
                    ),
                }
            )

            listings, total = await asyncio.gather(
                self.catalog.fetch_listings(
                    criteria,
                    ordering,
                    offset=offset,
                    limit=request.limit,
                    now=self.clock(),
                ),
                self.catalog.count(criteria),
            )

            pagination = build_pagination(request.page, request.limit, total)
            span.set_attribute("tour_discovery.total", total)

            logger.info(
                "Tours fetched",
                extra={
                    "total": total,
                    "page": pagination.page,
                    "total_pages": pagination.total_pages,
                    "returned": len(listings),
                }
            )
            metrics_collector.record_discovery_query("list", len(listings))

            return ToursPage(
                tours=[to_tour_item(listing) for listing in listings],
                pagination=pagination,
            )

    async def get_featured_tours(self, limit: int = DEFAULT_FEATURED_LIMIT) -> list[TourItem]:
        """
        Get the highest rated featured tours.

        Args:
            limit: Maximum number of tours

        Returns:
            Featured tours ordered by rating, then review count
        """
        with tracer.start_as_current_span("tour_discovery.get_featured_tours"):
            logger.info("Fetching featured tours", extra={"limit": limit})

            listings = await self.catalog.fetch_listings(
                visible_tour_criteria() + [Tour.featured.is_(True)],
                FEATURED_ORDERING,
                limit=limit,
                now=self.clock(),
            )
            metrics_collector.record_discovery_query("featured", len(listings))

            return [to_tour_item(listing) for listing in listings]

    async def get_suggestions(
        self,
        query: str,
        limit: int = DEFAULT_SUGGESTION_LIMIT,
    ) -> list[Suggestion]:
        """
        Get search-as-you-type suggestions.

        Matching tours always come before matching destinations, and the
        combined list is cut to ``limit``; enough tour matches leave no room
        for destinations.

        Args:
            query: Search text, already validated to be at least 2 characters
            limit: Maximum number of suggestions

        Returns:
            Tour suggestions followed by destination suggestions
        """
        with tracer.start_as_current_span("tour_discovery.get_suggestions"):
            logger.info("Fetching suggestions", extra={"query": query, "limit": limit})

            refs, locations = await asyncio.gather(
                self.catalog.fetch_refs(suggestion_criteria(query), limit=limit),
                self.catalog.distinct_locations(
                    destination_criteria(query),
                    limit=DESTINATION_SUGGESTION_LIMIT,
                ),
            )

            suggestions: list[Suggestion] = [
                TourSuggestion(id=str(ref.id), name=ref.name, slug=ref.slug)
                for ref in refs
            ]
            suggestions.extend(DestinationSuggestion(name=location) for location in locations)
            suggestions = suggestions[:limit]

            metrics_collector.record_discovery_query("suggestions", len(suggestions))
            return suggestions
