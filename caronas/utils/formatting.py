"""
Schedule Formatting Helpers

Telegram HTML presentation primitives used by the schedule renderer:
padding, strikethrough, user links and the emoji tables.
"""

from html import escape
from typing import Optional

# =============================================================================
# Emoji Mappings
# =============================================================================

# Indexed by datetime.weekday() (Monday == 0)
WEEKDAYS_PT_BR = [
    "Segunda-feira",
    "Terça-feira",
    "Quarta-feira",
    "Quinta-feira",
    "Sexta-feira",
    "Sábado",
    "Domingo",
]

WEEKDAY_EMOJI = ["😴", "🥱", "🐪", "🙂", "🍻", "🎉", "😌"]

# (day, month) -> emoji shown before the day header
SPECIAL_DAY_EMOJI = {
    (1, 1): "🎆",
    (12, 6): "❤️",
    (31, 10): "🎃",
    (24, 12): "🎅",
    (25, 12): "🎄",
    (31, 12): "🥂",
}

USER_EMOJI = ["🚗", "🚙", "🚕", "🚘", "🏎️"]


def add_zero_padding(value: int) -> str:
    return f"{value:02d}"


def strike_through(text: str) -> str:
    """Wrap already-escaped HTML in a strikethrough tag."""
    return f"<s>{text}</s>"


def display_name(first_name: str, last_name: Optional[str] = None) -> str:
    if last_name:
        return f"{first_name} {last_name}"
    return first_name


def user_link(user_id: int, first_name: str, last_name: Optional[str] = None) -> str:
    """Clickable mention that works even for users without a username."""
    name = escape(display_name(first_name, last_name))
    return f'<a href="tg://user?id={user_id}">{name}</a>'


def get_special_day_emoji(day: int, month: int) -> str:
    """Emoji plus trailing space for holidays, empty string otherwise."""
    emoji = SPECIAL_DAY_EMOJI.get((day, month))
    return f"{emoji} " if emoji else ""


def get_weekday_emoji(weekday: int) -> str:
    return WEEKDAY_EMOJI[weekday]


def get_user_emoji(user_id: int) -> str:
    """Stable per-user car emoji so people are easy to spot in the list."""
    return USER_EMOJI[user_id % len(USER_EMOJI)]
