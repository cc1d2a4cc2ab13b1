"""
Caronas Database Module

MongoDB connection management.
"""

import logging
from typing import Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)

from caronas.config import Settings

logger = logging.getLogger(__name__)


# =============================================================================
# MongoDB Connection
# =============================================================================

class MongoDB:
    """
    MongoDB connection manager.

    Owned by the entry point and handed to whoever needs a collection;
    there is no module-level client.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    def connect(self) -> AsyncIOMotorDatabase:
        """Create the client. Motor connects lazily on the first operation."""
        if self.client is None:
            # tz_aware so ride times come back as aware UTC datetimes
            self.client = AsyncIOMotorClient(self.settings.mongodb_uri, tz_aware=True)
            self.db = self.client[self.settings.mongodb_database]
            logger.info(
                f"Using database {self.settings.mongodb_database}, "
                f"collection {self.settings.mongodb_collection}"
            )
        return self.db

    async def ping(self) -> None:
        if self.client is None:
            raise RuntimeError("Database not initialized")
        await self.client.admin.command("ping")

    def close(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("Closed the MongoDB connection")

    def get_db(self) -> AsyncIOMotorDatabase:
        """Get database instance."""
        if self.db is None:
            raise RuntimeError("Database not initialized")
        return self.db

    @property
    def rides_collection(self) -> AsyncIOMotorCollection:
        return self.get_db()[self.settings.mongodb_collection]
