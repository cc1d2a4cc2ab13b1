"""
Group Repository

Typed access to the per-group ride documents. Translates Mutations into
MongoDB updates scoped by chatId and maps driver errors onto the
project's exception types.
"""

import logging
from typing import Optional

from pymongo.errors import ConnectionFailure, DuplicateKeyError
from pymongo.results import InsertOneResult

from caronas.exceptions import DuplicateGroupError, StoreUnavailableError
from caronas.models.ride import GroupRides
from caronas.services.mutation import FieldPath, Mutation

logger = logging.getLogger(__name__)

CHAT_ID_FIELD = "chatId"


class GroupRepository:
    """
    Facade over the rides collection.

    The collection is injected (a motor AsyncIOMotorCollection in production)
    so the repository never touches global connection state.
    """

    def __init__(self, collection):
        self.collection = collection

    async def ensure_indexes(self) -> None:
        """Enforce one document per chat at the store level."""
        try:
            await self.collection.create_index(CHAT_ID_FIELD, unique=True)
        except ConnectionFailure as e:
            raise StoreUnavailableError(str(e)) from e

    async def fetch_group_rides(self, chat_id: int) -> Optional[GroupRides]:
        """Return the group's document, or None when the group has none yet."""
        try:
            doc = await self.collection.find_one({CHAT_ID_FIELD: chat_id})
        except ConnectionFailure as e:
            raise StoreUnavailableError(str(e)) from e

        if doc is None:
            return None
        return GroupRides.model_validate(doc)

    async def list_chat_ids(self) -> list[int]:
        """Every chat that has a ride document."""
        chat_ids = []
        try:
            cursor = self.collection.find({}, {CHAT_ID_FIELD: 1})
            async for doc in cursor:
                chat_ids.append(doc[CHAT_ID_FIELD])
        except ConnectionFailure as e:
            raise StoreUnavailableError(str(e)) from e
        return chat_ids

    async def create_group(self, group: GroupRides) -> InsertOneResult:
        try:
            return await self.collection.insert_one(group.to_document())
        except DuplicateKeyError as e:
            raise DuplicateGroupError(group.chat_id) from e
        except ConnectionFailure as e:
            raise StoreUnavailableError(str(e)) from e

    async def apply_mutation(
        self,
        chat_id: int,
        mutation: Mutation,
        upsert: bool,
        require: Optional[FieldPath] = None,
    ) -> bool:
        """
        Apply a field-level mutation to the group's document.

        When `require` is given, the update only matches if that field
        already exists, so partial sub-documents are never created.

        Returns True if a field was changed or a document was created.
        """
        if mutation.is_empty():
            return False

        query = {CHAT_ID_FIELD: chat_id}
        if require is not None:
            query[require.dotted()] = {"$exists": True}

        try:
            result = await self.collection.update_one(
                query, mutation.to_update(), upsert=upsert
            )
        except ConnectionFailure as e:
            logger.error(f"Store unavailable while updating chat {chat_id}: {e}")
            raise StoreUnavailableError(str(e)) from e

        modified = result.modified_count > 0 or result.upserted_id is not None
        logger.debug(
            f"Chat {chat_id}: {result.modified_count} element(s) modified"
            f"{' (document created)' if result.upserted_id is not None else ''}"
        )
        return modified
