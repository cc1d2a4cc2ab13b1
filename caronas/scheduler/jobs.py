"""
Scheduled Jobs for Caronas

Periodic background work with:
- Error handling and logging per run
- Execution/failure counters
- Escalation on repeated failures
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from caronas.services.group_repository import GroupRepository
from caronas.services.ride_manager import RideManager
from caronas.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)

FAILURE_ALERT_THRESHOLD = 3


class ScheduledJob:
    """Base class for scheduled jobs with error handling and logging."""

    def __init__(self, name: str):
        self.name = name
        self.execution_count = 0
        self.failure_count = 0
        self.last_execution: Optional[datetime] = None
        self.last_error: Optional[str] = None

    async def execute(self):
        """Execute the job with error handling and metrics."""
        self.execution_count += 1
        start_time = utc_now()

        try:
            logger.info(f"[{self.name}] Starting execution #{self.execution_count}")
            await self._run()
            self.last_execution = utc_now()
            duration = (self.last_execution - start_time).total_seconds()
            logger.info(f"[{self.name}] Completed successfully in {duration:.2f}s")

        except Exception as e:
            self.failure_count += 1
            self.last_error = str(e)
            logger.error(f"[{self.name}] Failed: {e}", exc_info=True)

            if self.failure_count >= FAILURE_ALERT_THRESHOLD:
                logger.critical(
                    f"[{self.name}] CRITICAL: Failed {self.failure_count} times. "
                    f"Last error: {e}"
                )

    async def _run(self):
        """Override this method in subclasses."""
        raise NotImplementedError


class RideCleanupJob(ScheduledJob):
    """
    Sweep expired rides from every group.

    Frequency: every CLEANUP_INTERVAL_MINUTES
    Purpose: keep /lista free of rides that already left

    Listing the groups can fail (and counts as a job failure); each group's
    sweep is best effort and never stops the others.
    """

    def __init__(
        self,
        repository: GroupRepository,
        ride_manager: RideManager,
        clock: Callable[[], datetime] = utc_now,
    ):
        super().__init__("RideCleanup")
        self.repository = repository
        self.ride_manager = ride_manager
        self.clock = clock

    async def _run(self):
        now = self.clock()
        chat_ids = await self.repository.list_chat_ids()
        for chat_id in chat_ids:
            await self.ride_manager.clean_rides(chat_id, now)
        logger.debug(f"[{self.name}] Swept {len(chat_ids)} group(s)")


def create_scheduler(cleanup_job: RideCleanupJob, interval_minutes: int) -> AsyncIOScheduler:
    """Build the scheduler with the cleanup sweep registered (not started)."""
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        cleanup_job.execute,
        "interval",
        minutes=interval_minutes,
        id="ride_cleanup",
        name="Ride Cleanup Job",
        max_instances=1,
        coalesce=True,  # Skip if previous run is still executing
    )
    return scheduler
