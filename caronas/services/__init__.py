"""Caronas Services Package"""

from caronas.services.group_repository import GroupRepository
from caronas.services.mutation import FieldPath, Mutation
from caronas.services.ride_manager import RideManager
from caronas.services.schedule_renderer import ScheduleRenderer

__all__ = [
    "GroupRepository",
    "FieldPath",
    "Mutation",
    "RideManager",
    "ScheduleRenderer",
]
