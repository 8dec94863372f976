"""Tour model definition."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID as PgUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .schedule import TourSchedule


class TourStatus(str, Enum):
    """Tour lifecycle status."""
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class Difficulty(str, Enum):
    """Tour difficulty classification, stored upper-case."""
    EASY = "EASY"
    MODERATE = "MODERATE"
    CHALLENGING = "CHALLENGING"


class Tour(Base):
    """Tour entity representing a listed tour offering."""

    __tablename__ = "tours"

    # Primary key
    id: Mapped[UUID] = mapped_column(
        PgUUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
        server_default=func.gen_random_uuid()
    )

    # Display fields
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    # Commercial and scheduling fields
    price_adult: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    price_child: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False)
    difficulty: Mapped[Difficulty | None] = mapped_column(String(20), nullable=True)

    # Popularity aggregates
    rating_average: Mapped[Decimal] = mapped_column(Numeric(3, 2), nullable=False, default=Decimal("0"))
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Lifecycle flags
    status: Mapped[TourStatus] = mapped_column(
        String(20),
        nullable=False,
        default=TourStatus.DRAFT,
        index=True
    )
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        server_onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("price_adult >= 0", name="ck_tour_price_adult_non_negative"),
        CheckConstraint("price_child >= 0", name="ck_tour_price_child_non_negative"),
        CheckConstraint("duration_days >= 1", name="ck_tour_duration_days_positive"),
        CheckConstraint("rating_average >= 0 AND rating_average <= 5", name="ck_tour_rating_average_range"),
        CheckConstraint("review_count >= 0", name="ck_tour_review_count_non_negative"),
    )

    # Relationships
    schedules: Mapped[list["TourSchedule"]] = relationship(
        "TourSchedule",
        back_populates="tour",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Tour(id={self.id}, slug='{self.slug}', status={self.status})>"
