"""FastAPI dependencies for database sessions and the discovery service."""

from fastapi import Depends

from ..services.catalog_store import TourCatalog
from ..services.discovery_service import DiscoveryService
from .database import async_session_factory, get_db


def get_tour_catalog() -> TourCatalog:
    """Catalog reading through the application's session factory."""
    return TourCatalog(async_session_factory)


def get_discovery_service(catalog: TourCatalog = Depends(get_tour_catalog)) -> DiscoveryService:
    """
    Discovery service dependency.

    Override ``get_tour_catalog`` to point discovery at another database.
    """
    return DiscoveryService(catalog)


DatabaseSession = Depends(get_db)
Discovery = Depends(get_discovery_service)

__all__ = ["DatabaseSession", "Discovery", "get_db", "get_discovery_service", "get_tour_catalog"]
