"""
Shared fixtures.

FakeRidesCollection is an in-memory stand-in for the motor collection,
covering the calls GroupRepository makes: find_one, find, insert_one,
update_one ($set / $unset on dotted paths, upsert) and create_index.
"""

import copy
import itertools
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from pymongo.errors import DuplicateKeyError

from caronas.models.ride import RideUser
from caronas.services.group_repository import GroupRepository
from caronas.services.ride_manager import RideManager
from caronas.services.schedule_renderer import ScheduleRenderer

_MISSING = object()


def _get_path(doc: dict, dotted: str):
    current = doc
    for segment in dotted.split("."):
        if not isinstance(current, dict) or segment not in current:
            return _MISSING
        current = current[segment]
    return current


def _set_path(doc: dict, dotted: str, value) -> bool:
    *parents, leaf = dotted.split(".")
    current = doc
    for segment in parents:
        current = current.setdefault(segment, {})
    changed = current.get(leaf, _MISSING) != value
    current[leaf] = copy.deepcopy(value)
    return changed


def _unset_path(doc: dict, dotted: str) -> bool:
    *parents, leaf = dotted.split(".")
    current = doc
    for segment in parents:
        current = current.get(segment)
        if not isinstance(current, dict):
            return False
    return current.pop(leaf, _MISSING) is not _MISSING


def _matches(doc: dict, query: dict) -> bool:
    for key, expected in query.items():
        value = _get_path(doc, key)
        if isinstance(expected, dict) and "$exists" in expected:
            if (value is not _MISSING) != expected["$exists"]:
                return False
        elif value is _MISSING or value != expected:
            return False
    return True


class _Cursor:
    def __init__(self, docs):
        self._docs = iter(docs)

    def __aiter__(self):
        return self

    async def __anext__(self):
        try:
            return next(self._docs)
        except StopIteration:
            raise StopAsyncIteration


class FakeRidesCollection:
    """Dict-backed collection enforcing a unique chatId."""

    def __init__(self):
        self.docs: list[dict] = []
        self.indexes: list[tuple] = []
        self.update_calls: list[tuple] = []
        self._ids = itertools.count(1)

    async def create_index(self, key, unique=False):
        self.indexes.append((key, unique))
        return f"{key}_1"

    async def find_one(self, query):
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query, projection=None):
        found = []
        for doc in self.docs:
            if _matches(doc, query):
                if projection:
                    found.append({k: doc[k] for k in projection if k in doc} | {"_id": doc["_id"]})
                else:
                    found.append(copy.deepcopy(doc))
        return _Cursor(found)

    async def insert_one(self, document):
        if any(d.get("chatId") == document.get("chatId") for d in self.docs):
            raise DuplicateKeyError("E11000 duplicate key error collection: rides index: chatId_1")
        doc = copy.deepcopy(document)
        doc["_id"] = next(self._ids)
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"], acknowledged=True)

    async def update_one(self, query, update, upsert=False):
        self.update_calls.append((query, copy.deepcopy(update), upsert))

        target = next((d for d in self.docs if _matches(d, query)), None)
        upserted_id = None
        if target is None:
            if not upsert:
                return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)
            target = {k: v for k, v in query.items() if not isinstance(v, dict)}
            target["_id"] = upserted_id = next(self._ids)
            self.docs.append(target)

        changed = False
        for path, value in update.get("$set", {}).items():
            changed = _set_path(target, path, value) or changed
        for path in update.get("$unset", {}):
            changed = _unset_path(target, path) or changed

        modified = 1 if changed and upserted_id is None else 0
        return SimpleNamespace(matched_count=1, modified_count=modified, upserted_id=upserted_id)


@pytest.fixture
def collection():
    return FakeRidesCollection()


@pytest.fixture
def repository(collection):
    return GroupRepository(collection)


@pytest.fixture
def ride_manager(repository):
    return RideManager(repository)


@pytest.fixture
def renderer(repository):
    return ScheduleRenderer(repository, timezone.utc)


@pytest.fixture
def ana():
    return RideUser(id=1, first_name="Ana", last_name="Silva")


@pytest.fixture
def bruno():
    return RideUser(id=2, first_name="Bruno")


def at(year, month, day, hour=0, minute=0) -> datetime:
    """Aware UTC datetime shorthand."""
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
