"""
Ride Manager

Adds, removes, marks full and expires rides inside a group document.
Every change is a targeted field mutation; the only read-then-write is the
expiry sweep, which is best effort.
"""

import asyncio
import logging
from datetime import datetime

from caronas.models.ride import Direction, Ride, RideState, RideUser
from caronas.services.group_repository import GroupRepository
from caronas.services.mutation import Mutation, ride_path
from caronas.utils.timezone_utils import as_utc

logger = logging.getLogger(__name__)


class RideManager:
    """
    Ride lifecycle operations for chat groups.
    """

    def __init__(self, repository: GroupRepository):
        self.repository = repository
        self._background_tasks: set[asyncio.Task] = set()

    async def add_ride(
        self,
        chat_id: int,
        user: RideUser,
        time: datetime,
        description: str,
        direction: Direction,
    ) -> bool:
        """
        Post a ride, replacing any ride the user already has in that direction.

        The group document is created on first use.
        """
        ride = Ride(
            user=user,
            time=time,
            description=description,
            direction=direction,
            full=RideState.OPEN.value,
        )
        mutation = Mutation().set_field(
            ride_path(direction, user.id), ride.model_dump(mode="python")
        )

        modified = await self.repository.apply_mutation(chat_id, mutation, upsert=True)
        logger.info(
            f"Chat {chat_id}: user {user.id} posted {Direction(direction).value} ride "
            f"at {ride.time.isoformat()} (modified={modified})"
        )
        return modified

    async def remove_ride(self, chat_id: int, user_id: int, direction: Direction) -> bool:
        """Remove the user's ride. Returns False if there was nothing to remove."""
        mutation = Mutation().unset_field(ride_path(direction, user_id))
        removed = await self.repository.apply_mutation(chat_id, mutation, upsert=False)
        logger.info(
            f"Chat {chat_id}: remove {Direction(direction).value} ride of user {user_id} "
            f"(removed={removed})"
        )
        return removed

    async def set_ride_full(
        self, chat_id: int, user_id: int, direction: Direction, state: int
    ) -> bool:
        """Set the `full` flag of an existing ride. Missing rides are left alone."""
        state = RideState(state).value
        path = ride_path(direction, user_id)
        mutation = Mutation().set_field(path.child("full"), state)
        return await self.repository.apply_mutation(
            chat_id, mutation, upsert=False, require=path
        )

    async def clean_rides(self, chat_id: int, now: datetime) -> None:
        """
        Remove every ride that departed before `now`.

        Rides at exactly `now` are kept. All expired keys go out in a
        single unset. Failures are logged and swallowed: this runs as a
        background sweep and nobody waits on it.
        """
        try:
            group = await self.repository.fetch_group_rides(chat_id)
            if group is None:
                return

            now = as_utc(now)
            mutation = Mutation()
            for direction, user_key, ride in group.entries():
                if ride.time < now:
                    mutation.unset_field(ride_path(direction, user_key))

            if mutation.is_empty():
                return

            await self.repository.apply_mutation(chat_id, mutation, upsert=False)
            logger.info(f"Chat {chat_id}: swept {len(mutation.unsets)} expired ride(s)")
        except Exception as e:
            logger.error(f"Chat {chat_id}: ride cleanup failed: {e}", exc_info=True)

    def schedule_clean(self, chat_id: int, now: datetime) -> asyncio.Task:
        """Launch clean_rides in the background without waiting for it."""
        task = asyncio.get_running_loop().create_task(self.clean_rides(chat_id, now))
        # Keep a reference until done so the task is not garbage collected
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task
