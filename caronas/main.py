"""
Caronas - Entry Point

Wires settings, MongoDB, services, the cleanup scheduler and the Telegram
bot, then runs long polling until interrupted.
"""

import logging

from telegram.ext import Application

from caronas.config import Settings, get_settings
from caronas.database import MongoDB
from caronas.scheduler import RideCleanupJob, create_scheduler
from caronas.services import GroupRepository, RideManager, ScheduleRenderer
from caronas.telegram_bot.bot import create_bot, set_bot_commands
from caronas.utils.telegram_log_handler import setup_telegram_logging

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=settings.log_level.upper(),
    )
    # httpx logs every Telegram poll at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    if settings.telegram_log_chat_id:
        setup_telegram_logging(settings.telegram_bot_token, settings.telegram_log_chat_id)


def build_application(settings: Settings) -> Application:
    """Create every component and return the ready-to-run bot application."""
    mongo = MongoDB(settings)
    mongo.connect()

    repository = GroupRepository(mongo.rides_collection)
    ride_manager = RideManager(repository)
    renderer = ScheduleRenderer(repository, settings.tzinfo)
    cleanup_job = RideCleanupJob(repository, ride_manager)
    scheduler = create_scheduler(cleanup_job, settings.cleanup_interval_minutes)

    async def on_startup(application: Application) -> None:
        try:
            await mongo.ping()
            logger.info("Connected to db")
        except Exception as e:
            logger.error(f"FAILED to connect to db: {e}")
            raise
        await repository.ensure_indexes()
        await set_bot_commands(application)
        scheduler.start()
        logger.info(
            f"Cleanup job scheduled every {settings.cleanup_interval_minutes} minute(s)"
        )

    async def on_shutdown(application: Application) -> None:
        if scheduler.running:
            scheduler.shutdown(wait=False)
        mongo.close()

    application = create_bot(
        settings.telegram_bot_token,
        repository,
        ride_manager,
        renderer,
        settings.tzinfo,
        post_init=on_startup,
        post_shutdown=on_shutdown,
    )
    return application


def main() -> None:
    settings = get_settings()
    configure_logging(settings)

    application = build_application(settings)
    logger.info("Starting Caronas bot (polling)")
    application.run_polling()


if __name__ == "__main__":
    main()
