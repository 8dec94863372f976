#!/usr/bin/env python3
"""Setup script for the tour catalog API: run migrations and seed a sample catalog."""

import asyncio
import logging
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

# Add the server directory to the Python path
server_dir = Path(__file__).parent.parent / "server"
sys.path.insert(0, str(server_dir))

from alembic import command
from alembic.config import Config
from sqlalchemy import select

from tour_catalog.core.database import async_session_factory, close_db
from tour_catalog.models import Difficulty, ScheduleStatus, Tour, TourSchedule, TourStatus

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


SAMPLE_TOURS = [
    {
        "name": "Ha Long Bay 2D1N",
        "slug": "ha-long-bay-2d1n",
        "summary": "Cruise on emerald waters, visit caves and floating villages.",
        "location": "Quang Ninh, Vietnam",
        "duration_days": 2,
        "price_adult": Decimal("199.99"),
        "price_child": Decimal("99.99"),
        "difficulty": Difficulty.EASY,
        "status": TourStatus.PUBLISHED,
        "featured": True,
        "rating_average": Decimal("4.5"),
        "review_count": 2,
    },
    {
        "name": "Sapa Trekking 3D2N",
        "slug": "sapa-trekking-3d2n",
        "summary": "Trek through rice terraces and stay with local families.",
        "location": "Lao Cai, Vietnam",
        "duration_days": 3,
        "price_adult": Decimal("149.50"),
        "price_child": Decimal("79.00"),
        "difficulty": Difficulty.MODERATE,
        "status": TourStatus.PUBLISHED,
        "featured": True,
    },
    {
        "name": "Hoi An Cultural Tour",
        "slug": "hoi-an-cultural-tour",
        "summary": "Lantern-lit streets, tailors and a cooking class in the old town.",
        "location": "Quang Nam, Vietnam",
        "duration_days": 1,
        "price_adult": Decimal("49.99"),
        "price_child": Decimal("24.99"),
        "difficulty": Difficulty.EASY,
        "status": TourStatus.PUBLISHED,
        "rating_average": Decimal("5.0"),
        "review_count": 1,
    },
    {
        "name": "Mekong Delta Day Trip",
        "slug": "mekong-delta-day-trip",
        "summary": "Floating markets, coconut candy workshops and river boats.",
        "location": "Tien Giang, Vietnam",
        "duration_days": 1,
        "price_adult": Decimal("39.99"),
        "price_child": Decimal("19.99"),
        "difficulty": Difficulty.EASY,
        "status": TourStatus.PUBLISHED,
    },
    {
        "name": "Nha Trang Diving Experience",
        "slug": "nha-trang-diving-draft",
        "summary": "Reef dives around Hon Mun marine park.",
        "location": "Khanh Hoa, Vietnam",
        "duration_days": 1,
        "price_adult": Decimal("89.00"),
        "price_child": Decimal("45.00"),
        "difficulty": Difficulty.CHALLENGING,
        "status": TourStatus.DRAFT,
    },
    {
        "name": "Swiss Alps Adventure",
        "slug": "swiss-alps-adventure",
        "summary": "Glacier hikes and mountain passes across the Bernese Oberland.",
        "location": "Switzerland",
        "duration_days": 5,
        "price_adult": Decimal("1299.00"),
        "price_child": Decimal("899.00"),
        "difficulty": Difficulty.CHALLENGING,
        "status": TourStatus.PUBLISHED,
        "featured": True,
        "rating_average": Decimal("4.8"),
        "review_count": 15,
    },
    {
        "name": "Bali Island Escape",
        "slug": "bali-island-escape",
        "summary": "Temples, rice fields and beaches across Ubud and Uluwatu.",
        "location": "Bali, Indonesia",
        "duration_days": 7,
        "price_adult": Decimal("899.00"),
        "price_child": Decimal("599.00"),
        "difficulty": Difficulty.EASY,
        "status": TourStatus.PUBLISHED,
        "featured": True,
        "rating_average": Decimal("4.7"),
        "review_count": 32,
    },
    {
        "name": "Patagonia Expedition",
        "slug": "patagonia-expedition",
        "summary": "Ten days of trekking between Torres del Paine and Fitz Roy.",
        "location": "Patagonia, Chile",
        "duration_days": 10,
        "price_adult": Decimal("2499.00"),
        "price_child": Decimal("1999.00"),
        "difficulty": Difficulty.CHALLENGING,
        "status": TourStatus.ARCHIVED,
    },
    {
        "name": "Da Lat Countryside Ride",
        "slug": "da-lat-countryside-ride",
        "summary": "Motorbike loop past flower farms, waterfalls and coffee plantations.",
        "location": "Lam Dong, Vietnam",
        "duration_days": 2,
        "price_adult": Decimal("119.00"),
        "price_child": Decimal("59.00"),
        "difficulty": Difficulty.MODERATE,
        "status": TourStatus.PUBLISHED,
        "deleted_at": datetime(2026, 1, 5, tzinfo=timezone.utc),
    },
]


def run_migrations() -> None:
    """Bring the schema up to date with Alembic."""
    alembic_cfg = Config(str(server_dir / "db" / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(server_dir / "db" / "alembic"))

    logger.info("Running database migrations...")
    command.upgrade(alembic_cfg, "head")
    logger.info("Database migrations completed")


async def create_sample_data() -> None:
    """Insert sample tours that do not exist yet, each with a few departures."""
    logger.info("Creating sample data...")

    now = datetime.now(timezone.utc)
    created = 0

    async with async_session_factory() as db:
        try:
            existing = set((await db.execute(select(Tour.slug))).scalars())

            for data in SAMPLE_TOURS:
                if data["slug"] in existing:
                    continue

                tour = Tour(**data)
                tour.schedules = [
                    TourSchedule(
                        start_date=now + timedelta(days=14 + week * 7),
                        max_capacity=20,
                        current_capacity=20 if week == 0 else 0,
                        status=ScheduleStatus.SOLD_OUT if week == 0 else ScheduleStatus.OPEN,
                    )
                    for week in range(3)
                ]
                db.add(tour)
                created += 1

            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error(f"Failed to create sample data: {e}")
            raise

    logger.info(f"Sample data created: {created} new tours")


async def seed() -> None:
    try:
        await create_sample_data()
    finally:
        await close_db()


def main():
    """Main setup function."""
    logger.info("Starting tour catalog API setup...")

    # Alembic's env.py drives its own event loop, so migrations run before ours starts
    run_migrations()
    asyncio.run(seed())

    logger.info("Setup completed successfully!")
    logger.info("You can now start the API server with: cd server && uvicorn tour_catalog.main:app --reload")


if __name__ == "__main__":
    main()
