"""Service layer package."""

from .catalog_store import TourCatalog, TourListing, TourRef
from .discovery_service import DiscoveryService
from .duration_range import DurationRange, parse_duration_range
from .pagination import build_pagination, page_offset, total_pages
from .tour_filters import compile_tour_filters, visible_tour_criteria
from .tour_sorting import SortOption, resolve_sort

__all__ = [
    "DiscoveryService",
    "DurationRange",
    "SortOption",
    "TourCatalog",
    "TourListing",
    "TourRef",
    "build_pagination",
    "compile_tour_filters",
    "page_offset",
    "parse_duration_range",
    "resolve_sort",
    "total_pages",
    "visible_tour_criteria",
]
