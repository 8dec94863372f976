"""Tour schedule model definition."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.dialects.postgresql import UUID as PgUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .tour import Tour


class ScheduleStatus(str, Enum):
    """Departure availability state."""
    OPEN = "OPEN"
    SOLD_OUT = "SOLD_OUT"
    CLOSED = "CLOSED"


class TourSchedule(Base):
    """A dated departure of a tour."""

    __tablename__ = "tour_schedules"

    id: Mapped[UUID] = mapped_column(
        PgUUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
        server_default=func.gen_random_uuid()
    )

    tour_id: Mapped[UUID] = mapped_column(
        PgUUID(as_uuid=True),
        ForeignKey("tours.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    max_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    current_capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[ScheduleStatus] = mapped_column(
        String(20),
        nullable=False,
        default=ScheduleStatus.OPEN,
        index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("max_capacity >= 0", name="ck_schedule_max_capacity_non_negative"),
        CheckConstraint("current_capacity >= 0", name="ck_schedule_current_capacity_non_negative"),
        CheckConstraint("current_capacity <= max_capacity", name="ck_schedule_current_capacity_lte_max"),
    )

    tour: Mapped["Tour"] = relationship("Tour", back_populates="schedules")

    def __repr__(self) -> str:
        return (
            f"<TourSchedule(id={self.id}, tour_id={self.tour_id}, "
            f"start_date={self.start_date}, status={self.status})>"
        )
