"""
Ride Command Parsing

Turns command arguments like `08:30 12/03 saindo do centro` into ride intents.
"""

import re
from datetime import datetime, tzinfo

from caronas.exceptions import RideCommandError
from caronas.models.ride import Direction
from caronas.utils.timezone_utils import resolve_ride_time

TIME_PATTERN = re.compile(r"^(?P<hour>\d{1,2})(?:[:hH](?P<minute>\d{2})?)?$")
DATE_PATTERN = re.compile(r"^(?P<day>\d{1,2})/(?P<month>\d{1,2})$")

DIRECTION_ALIASES = {
    "ida": Direction.GOING,
    "going": Direction.GOING,
    "volta": Direction.COMING,
    "coming": Direction.COMING,
}


def parse_direction(value: str) -> Direction:
    direction = DIRECTION_ALIASES.get(value.strip().lower())
    if direction is None:
        raise RideCommandError(f"Direção inválida: {value}. Use ida ou volta.")
    return direction


def parse_time(value: str) -> tuple[int, int]:
    """Accepts 8, 8h, 08h30, 8:30 and 08:30."""
    match = TIME_PATTERN.match(value.strip())
    if not match:
        raise RideCommandError(f"Horário inválido: {value}")

    hour = int(match.group("hour"))
    minute = int(match.group("minute") or 0)
    if hour > 23 or minute > 59:
        raise RideCommandError(f"Horário inválido: {value}")
    return hour, minute


def parse_ride_args(
    args: list[str], now: datetime, tz: tzinfo
) -> tuple[datetime, str]:
    """
    Parse `HH:MM [DD/MM] description...` into (UTC time, description).

    An explicit date of today with a time that already passed is rejected
    rather than stored as an expired ride. Raises RideCommandError with a
    user-facing message on bad input.
    """
    if not args:
        raise RideCommandError("Informe o horário da carona.")

    hour, minute = parse_time(args[0])
    rest = list(args[1:])

    day = month = None
    if rest:
        date_match = DATE_PATTERN.match(rest[0])
        if date_match:
            day = int(date_match.group("day"))
            month = int(date_match.group("month"))
            rest = rest[1:]

    try:
        ride_time = resolve_ride_time(hour, minute, now, tz, day=day, month=month)
    except ValueError:
        raise RideCommandError(f"Data inválida: {day}/{month}")

    if day is not None and ride_time < now:
        raise RideCommandError(
            f"Esse horário já passou: {hour:02d}:{minute:02d} de {day:02d}/{month:02d}."
        )

    return ride_time, " ".join(rest).strip()
