"""
Caronas Telegram Bot

Ride coordination for group chats.

COMMANDS:
- /start, /ajuda - Show usage
- /ida HH:MM [DD/MM] <descrição> - Offer a going ride
- /volta HH:MM [DD/MM] <descrição> - Offer a coming ride
- /lista - Show the group's schedule
- /lotado ida|volta - Mark your ride as full
- /vagas ida|volta - Reopen your ride
- /remover ida|volta - Remove your ride
"""

import logging
from datetime import tzinfo
from typing import Awaitable, Callable, Optional

from telegram import BotCommand
from telegram.ext import Application, CommandHandler
from telegram.request import HTTPXRequest

from caronas.models.ride import Direction, RideState
from caronas.services.group_repository import GroupRepository
from caronas.services.ride_manager import RideManager
from caronas.services.schedule_renderer import ScheduleRenderer
from caronas.telegram_bot.constants import BOT_COMMANDS
from caronas.telegram_bot.handlers import (
    error_handler,
    list_rides,
    make_add_ride_handler,
    make_set_full_handler,
    remove_ride,
    start,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Bot Creation
# =============================================================================

def create_bot(
    token: str,
    repository: GroupRepository,
    ride_manager: RideManager,
    renderer: ScheduleRenderer,
    tz: tzinfo,
    post_init: Optional[Callable[[Application], Awaitable[None]]] = None,
    post_shutdown: Optional[Callable[[Application], Awaitable[None]]] = None,
) -> Application:
    """Create the Telegram application with every ride command registered."""
    if not token:
        raise ValueError(
            "Telegram bot token not configured. "
            "Set TELEGRAM_BOT_TOKEN in .env"
        )

    # Configure request with timeouts to prevent hanging
    request = HTTPXRequest(
        connection_pool_size=8,
        connect_timeout=10.0,
        read_timeout=20.0,
        write_timeout=20.0,
        pool_timeout=10.0,
    )

    builder = (
        Application.builder()
        .token(token)
        .request(request)
        .get_updates_request(HTTPXRequest(read_timeout=30.0, connect_timeout=10.0))
    )
    if post_init is not None:
        builder = builder.post_init(post_init)
    if post_shutdown is not None:
        builder = builder.post_shutdown(post_shutdown)

    application = builder.build()
    register_handlers(application)

    application.bot_data["repository"] = repository
    application.bot_data["ride_manager"] = ride_manager
    application.bot_data["renderer"] = renderer
    application.bot_data["tz"] = tz

    return application


def register_handlers(application: Application) -> None:
    # ===========================================
    # Core Commands
    # ===========================================
    application.add_handler(CommandHandler("start", start))
    application.add_handler(CommandHandler("ajuda", start))
    application.add_handler(CommandHandler("help", start))
    application.add_handler(CommandHandler("lista", list_rides))

    # ===========================================
    # Ride Lifecycle
    # ===========================================
    application.add_handler(CommandHandler("ida", make_add_ride_handler(Direction.GOING, "ida")))
    application.add_handler(CommandHandler("volta", make_add_ride_handler(Direction.COMING, "volta")))
    application.add_handler(CommandHandler("remover", remove_ride))
    application.add_handler(CommandHandler("lotado", make_set_full_handler(RideState.FULL, "lotado")))
    application.add_handler(CommandHandler("vagas", make_set_full_handler(RideState.OPEN, "vagas")))

    application.add_error_handler(error_handler)


async def set_bot_commands(application: Application) -> None:
    """Publish the command menu shown by Telegram clients."""
    await application.bot.set_my_commands(
        [BotCommand(command, description) for command, description in BOT_COMMANDS]
    )
    logger.info("Bot commands registered")
