"""Telegram Bot Command Handlers - Ride commands for group chats."""

import logging
from datetime import datetime
from html import escape
from typing import Callable

from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import ContextTypes

from caronas.exceptions import RideCommandError, StoreUnavailableError
from caronas.models.ride import Direction, RideState, RideUser
from caronas.services.group_repository import GroupRepository
from caronas.services.ride_manager import RideManager
from caronas.services.schedule_renderer import ScheduleRenderer
from caronas.telegram_bot.constants import (
    HELP_TEXT,
    MSG_NO_RIDE,
    MSG_NO_RIDES,
    MSG_RIDE_MARKED_FULL,
    MSG_RIDE_NOT_SAVED,
    MSG_RIDE_REMOVED,
    MSG_RIDE_REOPENED,
    MSG_STORE_UNAVAILABLE,
    USAGE_ADD_RIDE,
    USAGE_DIRECTION,
)
from caronas.telegram_bot.parsing import parse_direction, parse_ride_args
from caronas.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def get_ride_manager(context: ContextTypes.DEFAULT_TYPE) -> RideManager:
    return context.bot_data["ride_manager"]


def get_repository(context: ContextTypes.DEFAULT_TYPE) -> GroupRepository:
    return context.bot_data["repository"]


def get_renderer(context: ContextTypes.DEFAULT_TYPE) -> ScheduleRenderer:
    return context.bot_data["renderer"]


def get_now(context: ContextTypes.DEFAULT_TYPE) -> datetime:
    clock: Callable[[], datetime] = context.bot_data.get("clock", utc_now)
    return clock()


async def reply_html(update: Update, text: str):
    await update.message.reply_text(
        text, parse_mode=ParseMode.HTML, disable_web_page_preview=True
    )


# =============================================================================
# Basic Commands
# =============================================================================

async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Show usage."""
    await reply_html(update, HELP_TEXT)


async def list_rides(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Show the group's schedule and sweep expired rides in the background."""
    chat_id = update.effective_chat.id
    get_ride_manager(context).schedule_clean(chat_id, get_now(context))

    try:
        schedule = await get_renderer(context).render(chat_id)
    except StoreUnavailableError:
        await reply_html(update, MSG_STORE_UNAVAILABLE)
        return

    await reply_html(update, schedule or MSG_NO_RIDES)


# =============================================================================
# Ride Commands
# =============================================================================

def make_add_ride_handler(direction: Direction, command: str):
    """Build the /ida or /volta handler."""

    async def add_ride(update: Update, context: ContextTypes.DEFAULT_TYPE):
        chat_id = update.effective_chat.id
        tz = context.bot_data["tz"]

        try:
            ride_time, description = parse_ride_args(context.args or [], get_now(context), tz)
        except RideCommandError as e:
            await reply_html(update, f"{escape(str(e))}\n{USAGE_ADD_RIDE.format(command=command)}")
            return

        user = RideUser.from_telegram(update.effective_user)
        try:
            saved = await get_ride_manager(context).add_ride(
                chat_id, user, ride_time, description, direction
            )
            if not saved:
                await reply_html(update, MSG_RIDE_NOT_SAVED)
                return
            schedule = await get_renderer(context).render(chat_id)
        except StoreUnavailableError:
            await reply_html(update, MSG_STORE_UNAVAILABLE)
            return

        await reply_html(update, schedule or MSG_NO_RIDES)

    add_ride.__name__ = f"add_{direction.value}_ride"
    return add_ride


async def _direction_from_args(update: Update, context, command: str):
    if not context.args:
        await reply_html(update, USAGE_DIRECTION.format(command=command))
        return None
    try:
        return parse_direction(context.args[0])
    except RideCommandError as e:
        await reply_html(update, f"{escape(str(e))}\n{USAGE_DIRECTION.format(command=command)}")
        return None


async def remove_ride(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/remover ida|volta"""
    direction = await _direction_from_args(update, context, "remover")
    if direction is None:
        return

    try:
        removed = await get_ride_manager(context).remove_ride(
            update.effective_chat.id, update.effective_user.id, direction
        )
    except StoreUnavailableError:
        await reply_html(update, MSG_STORE_UNAVAILABLE)
        return

    message = MSG_RIDE_REMOVED if removed else MSG_NO_RIDE
    await reply_html(update, message.format(label=direction.label))


def make_set_full_handler(state: RideState, command: str):
    """Build the /lotado (full) or /vagas (reopen) handler."""
    done_message = MSG_RIDE_MARKED_FULL if state is RideState.FULL else MSG_RIDE_REOPENED

    async def set_full(update: Update, context: ContextTypes.DEFAULT_TYPE):
        direction = await _direction_from_args(update, context, command)
        if direction is None:
            return

        try:
            changed = await get_ride_manager(context).set_ride_full(
                update.effective_chat.id, update.effective_user.id, direction, state.value
            )
        except StoreUnavailableError:
            await reply_html(update, MSG_STORE_UNAVAILABLE)
            return

        if changed:
            await reply_html(update, done_message.format(label=direction.label))
            return

        ride_exists = await _user_has_ride(context, update, direction)
        message = done_message if ride_exists else MSG_NO_RIDE
        await reply_html(update, message.format(label=direction.label))

    set_full.__name__ = f"set_ride_{command}"
    return set_full


async def _user_has_ride(context, update: Update, direction: Direction) -> bool:
    """Tell 'already in that state' apart from 'no such ride'."""
    try:
        group = await get_repository(context).fetch_group_rides(update.effective_chat.id)
    except StoreUnavailableError:
        return False
    if group is None:
        return False
    rides = group.going if direction is Direction.GOING else group.coming
    return str(update.effective_user.id) in rides


# =============================================================================
# Error Handler
# =============================================================================

async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    """Log errors raised by handlers."""
    logger.error(f"Exception while handling an update: {context.error}", exc_info=context.error)
