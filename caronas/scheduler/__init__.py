"""
Scheduler Package

Background jobs with monitoring and error handling.
"""

from caronas.scheduler.jobs import RideCleanupJob, ScheduledJob, create_scheduler

__all__ = [
    "RideCleanupJob",
    "ScheduledJob",
    "create_scheduler",
]
