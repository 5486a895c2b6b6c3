from __future__ import annotations

import copy
from typing import Any, Iterable, Protocol

from bson import ObjectId
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from .config import DEFAULT_MONGO_CONFIG, MongoConfig

ACTIVE_STATUS = "active"

_client: MongoClient | None = None


class UserStore(Protocol):
    def find_user_by_id(self, user_id: Any) -> dict[str, Any] | None: ...


class TripStore(Protocol):
    def find_active_trips(self) -> list[dict[str, Any]]: ...


def get_database(config: MongoConfig = DEFAULT_MONGO_CONFIG) -> Database:
    """Return the application database, creating the client on first call."""
    global _client
    if _client is None:
        _client = MongoClient(config.url, serverSelectionTimeoutMS=config.timeout_ms)
    return _client[config.database]


def _to_object_id(value: Any) -> Any:
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


def _jsonable(value: Any) -> Any:
    """Recursively replace ObjectIds with their hex strings."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


class MongoUserStore:
    def __init__(self, collection: Collection) -> None:
        self.collection = collection

    def find_user_by_id(self, user_id: Any) -> dict[str, Any] | None:
        doc = self.collection.find_one({"_id": _to_object_id(user_id)})
        return _jsonable(doc) if doc is not None else None


class MongoTripStore:
    def __init__(self, collection: Collection) -> None:
        self.collection = collection

    def find_active_trips(self) -> list[dict[str, Any]]:
        return [_jsonable(doc) for doc in self.collection.find({"status": ACTIVE_STATUS})]


class InMemoryUserStore:
    def __init__(self, users: dict[str, dict[str, Any]] | None = None) -> None:
        self.users = dict(users or {})

    def find_user_by_id(self, user_id: Any) -> dict[str, Any] | None:
        user = self.users.get(str(user_id))
        return copy.deepcopy(user) if user is not None else None


class InMemoryTripStore:
    def __init__(self, trips: Iterable[dict[str, Any]] = ()) -> None:
        self.trips = list(trips)

    def find_active_trips(self) -> list[dict[str, Any]]:
        return [copy.deepcopy(t) for t in self.trips if t.get("status", ACTIVE_STATUS) == ACTIVE_STATUS]
