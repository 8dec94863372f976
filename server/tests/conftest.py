"""Test configuration and fixtures."""

import itertools
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from tour_catalog.core.database import Base
from tour_catalog.models import *  # noqa: F403 - Import all models
from tour_catalog.models import Difficulty, ScheduleStatus, Tour, TourSchedule, TourStatus
from tour_catalog.services.catalog_store import TourCatalog
from tour_catalog.services.discovery_service import DiscoveryService

CREATED_BASE = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """
    Create a test database engine.

    A file-backed SQLite database lets the concurrent count and page reads
    use separate connections, as they do against PostgreSQL.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(test_engine):
    """Session factory bound to the test database."""
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def test_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture(scope="session")
def tour_factory():
    """Build unsaved Tour rows with sensible published defaults."""
    counter = itertools.count()

    def _make(**overrides) -> Tour:
        n = next(counter)
        data = {
            "name": f"Sample Tour {n}",
            "slug": f"sample-tour-{n}-{uuid4().hex[:6]}",
            "summary": "A relaxed tour through the countryside",
            "cover_image": f"https://images.example.com/tours/{n}.jpg",
            "location": "Hanoi, Vietnam",
            "duration_days": 3,
            "price_adult": Decimal("100.00"),
            "price_child": Decimal("50.00"),
            "difficulty": Difficulty.EASY,
            "status": TourStatus.PUBLISHED,
            "featured": False,
            "rating_average": Decimal("4.00"),
            "review_count": 0,
            "created_at": CREATED_BASE + timedelta(minutes=n),
        }
        data.update(overrides)
        return Tour(**data)

    return _make


@pytest.fixture
def schedule_factory():
    """Build unsaved TourSchedule rows relative to the current time."""

    def _make(days_from_now: int, status: ScheduleStatus = ScheduleStatus.OPEN) -> TourSchedule:
        return TourSchedule(
            start_date=datetime.now(timezone.utc) + timedelta(days=days_from_now),
            max_capacity=20,
            current_capacity=20 if status == ScheduleStatus.SOLD_OUT else 0,
            status=status,
        )

    return _make


@pytest_asyncio.fixture(scope="function")
async def seed_tours(test_session):
    """Persist tours and return them."""

    async def _seed(*tours: Tour) -> list[Tour]:
        test_session.add_all(tours)
        await test_session.commit()
        return list(tours)

    return _seed


@pytest_asyncio.fixture(scope="function")
async def catalog(session_factory):
    return TourCatalog(session_factory)


@pytest_asyncio.fixture(scope="function")
async def discovery_service(catalog):
    return DiscoveryService(catalog)


@pytest_asyncio.fixture(scope="function")
async def test_app(session_factory, test_session):
    """Create the application wired to the test database."""
    from tour_catalog.core.dependencies import get_db, get_tour_catalog
    from tour_catalog.main import create_app

    app = create_app()

    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_tour_catalog] = lambda: TourCatalog(session_factory)

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
