"""Models module exporting all database models."""

from .schedule import ScheduleStatus, TourSchedule
from .tour import Difficulty, Tour, TourStatus

__all__ = [
    # Catalog entities
    "Tour",
    "TourStatus",
    "Difficulty",

    # Scheduling
    "TourSchedule",
    "ScheduleStatus",
]
