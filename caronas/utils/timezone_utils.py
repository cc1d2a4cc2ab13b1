"""Centralized Timezone Utilities - All datetime operations should use these functions."""

from datetime import date, datetime, time, timedelta, timezone, tzinfo

UTC = timezone.utc


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(dt: datetime) -> datetime:
    """Normalize to aware UTC. Naive values are taken to already be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_local(dt: datetime, tz: tzinfo) -> datetime:
    """Convert a stored (UTC) datetime to the group's local timezone."""
    return as_utc(dt).astimezone(tz)


def resolve_ride_time(
    hour: int,
    minute: int,
    now: datetime,
    tz: tzinfo,
    day: int = None,
    month: int = None,
) -> datetime:
    """
    Turn a local wall-clock time into an aware UTC instant.

    Without an explicit day the ride is today, rolled over to tomorrow when
    that time has already passed. With day/month and no year, the nearest
    such date not in the past is used; on today itself the result can be
    earlier than `now` and callers decide what to do with it.
    """
    local_now = to_local(now, tz)
    today = local_now.date()

    if day is None:
        candidate = datetime.combine(today, time(hour, minute), tzinfo=tz)
        if candidate < local_now:
            candidate = datetime.combine(
                today + timedelta(days=1), time(hour, minute), tzinfo=tz
            )
        return candidate.astimezone(UTC)

    target = date(today.year, month, day)
    if target < today:
        target = date(today.year + 1, month, day)
    return datetime.combine(target, time(hour, minute), tzinfo=tz).astimezone(UTC)
