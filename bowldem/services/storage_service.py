"""
Storage Service

Key-value and sorted-set storage port used by the game, stats and
leaderboard services, with an in-process adapter and a MongoDB adapter.

Values are JSON strings. Every value carries a version so callers can do an
optimistic read-modify-write with compare_and_set.
"""

import threading
from abc import ABC, abstractmethod
from functools import wraps
from typing import Dict, List, Optional, Tuple

from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..errors import StorageError
from ..utils.game_logger import game_logger


class KeySpace:
    """Builds the storage keys for one deployment prefix."""

    def __init__(self, prefix: str = 'bowldem'):
        self.prefix = prefix

    def game(self, username: str, puzzle_date: str) -> str:
        return f"{self.prefix}:game:{username}:{puzzle_date}"

    def stats(self, username: str) -> str:
        return f"{self.prefix}:stats:{username}"

    def leaderboard(self, puzzle_date: str) -> str:
        return f"{self.prefix}:leaderboard:{puzzle_date}"


class KeyValueStore(ABC):
    """
    Storage port.

    Sorted sets order members by (score ascending, first insertion).
    Re-adding an existing member updates its score but keeps its
    first arrival position among equal scores.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        ...

    @abstractmethod
    def get_versioned(self, key: str) -> Tuple[Optional[str], int]:
        """Return (value, version). A missing key has version 0."""

    @abstractmethod
    def compare_and_set(self, key: str, value: str, expected_version: int) -> bool:
        """Write only if the stored version still equals expected_version."""

    @abstractmethod
    def sorted_set_upsert(self, key: str, member: str, score: float) -> None:
        ...

    @abstractmethod
    def sorted_set_range(self, key: str, offset: int = 0, limit: int = 20) -> List[Tuple[str, float]]:
        ...

    @abstractmethod
    def sorted_set_rank(self, key: str, member: str) -> Optional[int]:
        """0-indexed position of member, or None if absent."""

    @abstractmethod
    def sorted_set_score(self, key: str, member: str) -> Optional[float]:
        ...

    def close(self) -> None:
        pass


class MemoryStore(KeyValueStore):
    """Thread-safe in-process store for development and tests."""

    def __init__(self):
        self._lock = threading.RLock()
        self._values: Dict[str, Tuple[str, int]] = {}
        self._sorted_sets: Dict[str, Dict[str, Tuple[float, int]]] = {}
        self._seq = 0

    def get(self, key: str) -> Optional[str]:
        return self.get_versioned(key)[0]

    def set(self, key: str, value: str) -> None:
        with self._lock:
            _, version = self._values.get(key, (None, 0))
            self._values[key] = (value, version + 1)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._values.pop(key, None) is not None

    def get_versioned(self, key: str) -> Tuple[Optional[str], int]:
        with self._lock:
            return self._values.get(key, (None, 0))

    def compare_and_set(self, key: str, value: str, expected_version: int) -> bool:
        with self._lock:
            _, version = self._values.get(key, (None, 0))
            if version != expected_version:
                return False
            self._values[key] = (value, version + 1)
            return True

    def sorted_set_upsert(self, key: str, member: str, score: float) -> None:
        with self._lock:
            members = self._sorted_sets.setdefault(key, {})
            if member in members:
                members[member] = (score, members[member][1])
            else:
                self._seq += 1
                members[member] = (score, self._seq)

    def _ordered(self, key: str) -> List[Tuple[str, float]]:
        members = self._sorted_sets.get(key, {})
        ordered = sorted(members.items(), key=lambda item: item[1])
        return [(member, score) for member, (score, _) in ordered]

    def sorted_set_range(self, key: str, offset: int = 0, limit: int = 20) -> List[Tuple[str, float]]:
        with self._lock:
            return self._ordered(key)[offset:offset + limit]

    def sorted_set_rank(self, key: str, member: str) -> Optional[int]:
        with self._lock:
            for index, (name, _) in enumerate(self._ordered(key)):
                if name == member:
                    return index
            return None

    def sorted_set_score(self, key: str, member: str) -> Optional[float]:
        with self._lock:
            entry = self._sorted_sets.get(key, {}).get(member)
            return entry[0] if entry else None


def _translate_errors(method):
    """Surface driver failures as StorageError."""
    @wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except PyMongoError as e:
            game_logger.logger.error(f"MongoDB operation {method.__name__} failed: {e}")
            raise StorageError() from e

    return wrapper


class MongoStore(KeyValueStore):
    """
    MongoDB-backed store.

    Collections:
    - kv: {_id: key, value, version}
    - sorted_sets: {set, member, score, seq}, unique on (set, member)
    - counters: {_id: set key, seq} arrival counters for tie-breaking
    """

    def __init__(self, mongo_uri: str, db_name: str = 'bowldem', client: Optional[MongoClient] = None):
        """
        Initialize the store with a MongoDB connection.

        Args:
            mongo_uri: MongoDB connection string
            db_name: Database name
            client: Pre-built client (used instead of connecting to mongo_uri)
        """
        self.client = client or MongoClient(mongo_uri, server_api=ServerApi('1'))
        self.db = self.client[db_name]
        self.kv_collection = self.db.kv
        self.sorted_collection = self.db.sorted_sets
        self.counters_collection = self.db.counters

        # Test connection
        try:
            self.client.admin.command('ping')
            game_logger.logger.info("Successfully connected to MongoDB")
        except PyMongoError as e:
            game_logger.logger.error(f"MongoDB connection error: {e}")
            raise StorageError() from e

        self.sorted_collection.create_index([("set", ASCENDING), ("member", ASCENDING)], unique=True)
        self.sorted_collection.create_index([("set", ASCENDING), ("score", ASCENDING), ("seq", ASCENDING)])

    @_translate_errors
    def get(self, key: str) -> Optional[str]:
        doc = self.kv_collection.find_one({"_id": key})
        return doc["value"] if doc else None

    @_translate_errors
    def set(self, key: str, value: str) -> None:
        self.kv_collection.update_one(
            {"_id": key},
            {"$set": {"value": value}, "$inc": {"version": 1}},
            upsert=True
        )

    @_translate_errors
    def delete(self, key: str) -> bool:
        result = self.kv_collection.delete_one({"_id": key})
        return result.deleted_count > 0

    @_translate_errors
    def get_versioned(self, key: str) -> Tuple[Optional[str], int]:
        doc = self.kv_collection.find_one({"_id": key})
        if not doc:
            return None, 0
        return doc["value"], doc.get("version", 0)

    @_translate_errors
    def compare_and_set(self, key: str, value: str, expected_version: int) -> bool:
        if expected_version == 0:
            # _id uniqueness makes insert-if-absent atomic
            try:
                self.kv_collection.insert_one({"_id": key, "value": value, "version": 1})
                return True
            except DuplicateKeyError:
                return False

        result = self.kv_collection.update_one(
            {"_id": key, "version": expected_version},
            {"$set": {"value": value}, "$inc": {"version": 1}}
        )
        return result.matched_count == 1

    def _next_seq(self, key: str) -> int:
        counter = self.counters_collection.find_one_and_update(
            {"_id": key},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
        return counter["seq"]

    @_translate_errors
    def sorted_set_upsert(self, key: str, member: str, score: float) -> None:
        selector = {"set": key, "member": member}
        if self.sorted_collection.update_one(selector, {"$set": {"score": score}}).matched_count:
            return

        try:
            self.sorted_collection.insert_one({**selector, "score": score, "seq": self._next_seq(key)})
        except DuplicateKeyError:
            # Lost an insert race for the same member; the row exists now
            self.sorted_collection.update_one(selector, {"$set": {"score": score}})

    @_translate_errors
    def sorted_set_range(self, key: str, offset: int = 0, limit: int = 20) -> List[Tuple[str, float]]:
        cursor = (
            self.sorted_collection.find({"set": key})
            .sort([("score", ASCENDING), ("seq", ASCENDING)])
            .skip(offset)
            .limit(limit)
        )
        return [(doc["member"], doc["score"]) for doc in cursor]

    @_translate_errors
    def sorted_set_rank(self, key: str, member: str) -> Optional[int]:
        doc = self.sorted_collection.find_one({"set": key, "member": member})
        if not doc:
            return None
        return self.sorted_collection.count_documents({
            "set": key,
            "$or": [
                {"score": {"$lt": doc["score"]}},
                {"score": doc["score"], "seq": {"$lt": doc["seq"]}},
            ]
        })

    @_translate_errors
    def sorted_set_score(self, key: str, member: str) -> Optional[float]:
        doc = self.sorted_collection.find_one({"set": key, "member": member})
        return doc["score"] if doc else None

    def close(self) -> None:
        self.client.close()


# Global store instance
_store = None


def get_storage_service() -> Optional[KeyValueStore]:
    """Get the global store instance."""
    return _store


def initialize_storage_service(backend: str = 'memory',
                               mongo_uri: Optional[str] = None,
                               db_name: str = 'bowldem') -> KeyValueStore:
    """Initialize the global store for the configured backend."""
    global _store
    if backend == 'mongo':
        if not mongo_uri:
            raise ValueError("MONGO_URI is required for the mongo storage backend")
        _store = MongoStore(mongo_uri, db_name)
    elif backend == 'memory':
        _store = MemoryStore()
    else:
        raise ValueError(f"Unknown storage backend '{backend}'")
    return _store
