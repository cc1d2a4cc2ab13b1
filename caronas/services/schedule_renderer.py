"""
Schedule Renderer

Builds the group's ride list as Telegram HTML, grouped by day and then by
direction. The output goes to users verbatim, so line layout matters.

Layout:

    <special><b>DD/MM - Weekday</b> <emoji>
    (blank)
    <b>IDA</b>
    <car> <link> - HH:MM - description
    <s>Name - HH:MM - description</s>        (full rides)
    (blank)
    <b>VOLTA</b>
    ...
    (blank)
    <next day header>
"""

from datetime import date, tzinfo
from html import escape
from typing import Iterable, Optional

from caronas.models.ride import Direction, Ride
from caronas.services.group_repository import GroupRepository
from caronas.utils.formatting import (
    WEEKDAYS_PT_BR,
    add_zero_padding,
    get_special_day_emoji,
    get_user_emoji,
    get_weekday_emoji,
    strike_through,
    user_link,
)
from caronas.utils.timezone_utils import UTC, to_local

# Going rides are listed before coming rides of the same day
DIRECTION_ORDER = {Direction.GOING.value: 0, Direction.COMING.value: 1}


def sort_rides(rides: Iterable[Ride], tz: tzinfo) -> list[Ride]:
    """Order by local day, then direction (IDA first), then departure time."""
    def key(ride: Ride):
        local = to_local(ride.time, tz)
        return (local.date(), DIRECTION_ORDER[ride.direction], ride.time)

    return sorted(rides, key=key)


def format_day_header(day: date) -> str:
    return (
        f"{get_special_day_emoji(day.day, day.month)}"
        f"<b>{add_zero_padding(day.day)}/{add_zero_padding(day.month)}"
        f" - {WEEKDAYS_PT_BR[day.weekday()]}</b> "
        f"{get_weekday_emoji(day.weekday())}\n"
    )


def format_direction_header(direction: str) -> str:
    return f"<b>{Direction(direction).label}</b>\n"


def format_ride_line(ride: Ride, tz: tzinfo) -> str:
    local = to_local(ride.time, tz)
    info = (
        f" - {add_zero_padding(local.hour)}:{add_zero_padding(local.minute)}"
        f" - {escape(ride.description)}"
    )

    if ride.is_full:
        return strike_through(escape(ride.user.display_name) + info) + "\n"

    user = ride.user
    return (
        f"{get_user_emoji(user.id)} "
        f"{user_link(user.id, user.first_name, user.last_name)}{info}\n"
    )


def format_schedule(rides: Iterable[Ride], tz: tzinfo = UTC) -> str:
    """Render rides as the grouped schedule text. No rides gives ''."""
    message = ""
    previous_day: Optional[date] = None
    previous_direction: Optional[str] = None

    for ride in sort_rides(rides, tz):
        day = to_local(ride.time, tz).date()
        changed_day = day != previous_day

        if changed_day:
            if previous_day is not None:
                message += "\n"
            message += format_day_header(day)

        if changed_day or ride.direction != previous_direction:
            message += "\n"
            message += format_direction_header(ride.direction)

        message += format_ride_line(ride, tz)

        previous_day = day
        previous_direction = ride.direction

    return message


class ScheduleRenderer:
    """Renders a group's current rides."""

    def __init__(self, repository: GroupRepository, tz: tzinfo = UTC):
        self.repository = repository
        self.tz = tz

    async def render(self, chat_id: int) -> str:
        group = await self.repository.fetch_group_rides(chat_id)
        if group is None or group.is_empty():
            return ""
        return format_schedule(group.rides(), self.tz)
