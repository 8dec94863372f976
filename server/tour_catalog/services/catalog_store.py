"""Read access to the tour catalog."""

from datetime import datetime
from typing import NamedTuple, Optional, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql.elements import ColumnElement, UnaryExpression

from ..models.schedule import ScheduleStatus, TourSchedule
from ..models.tour import Tour


class TourListing(NamedTuple):
    """A tour row together with its earliest bookable departure."""

    tour: Tour
    next_available_date: Optional[datetime]


class TourRef(NamedTuple):
    id: UUID
    name: str
    slug: str


def next_available_date_column(now: datetime):
    """Correlated subquery selecting a tour's earliest open departure at or after ``now``."""
    return (
        select(func.min(TourSchedule.start_date))
        .where(
            TourSchedule.tour_id == Tour.id,
            TourSchedule.status == ScheduleStatus.OPEN.value,
            TourSchedule.start_date >= now,
        )
        .correlate(Tour)
        .scalar_subquery()
        .label("next_available_date")
    )


class TourCatalog:
    """
    Queryable collection of tours.

    Each read runs in its own short-lived session, so independent reads can
    be awaited concurrently. Database errors propagate to the caller.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def count(self, criteria: Sequence[ColumnElement[bool]]) -> int:
        """
        Count tours matching all predicates.

        Args:
            criteria: Predicates to AND together

        Returns:
            Number of matching tours
        """
        stmt = select(func.count()).select_from(Tour).where(*criteria)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    async def fetch_listings(
        self,
        criteria: Sequence[ColumnElement[bool]],
        ordering: Sequence[UnaryExpression],
        *,
        offset: int = 0,
        limit: int,
        now: datetime,
    ) -> list[TourListing]:
        """
        Fetch one window of matching tours with their next available date.

        Args:
            criteria: Predicates to AND together
            ordering: ORDER BY clauses
            offset: Rows to skip
            limit: Maximum rows to return
            now: Departures before this instant are not considered available

        Returns:
            Tour listings in the requested order
        """
        stmt = (
            select(Tour, next_available_date_column(now))
            .where(*criteria)
            .order_by(*ordering)
            .offset(offset)
            .limit(limit)
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [TourListing(row[0], row[1]) for row in result.all()]

    async def fetch_refs(
        self,
        criteria: Sequence[ColumnElement[bool]],
        *,
        limit: int,
    ) -> list[TourRef]:
        """Fetch id, name and slug of up to ``limit`` matching tours."""
        stmt = select(Tour.id, Tour.name, Tour.slug).where(*criteria).limit(limit)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [TourRef(*row) for row in result.all()]

    async def distinct_locations(
        self,
        criteria: Sequence[ColumnElement[bool]],
        *,
        limit: int,
    ) -> list[str]:
        """Fetch up to ``limit`` distinct location values among matching tours."""
        stmt = select(Tour.location).where(*criteria).distinct().limit(limit)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [location for location in result.scalars() if location]
