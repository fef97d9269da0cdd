# in-memory domain record store
# keyed collections with monotonic integer ids, opened at startup and closed at shutdown

import copy
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from mindtrack.config import settings
from mindtrack.errors import StorageError
from mindtrack.seed import MEDITATIONS, THOUGHT_PATTERNS

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Collection:
    """records keyed by id plus a next-id counter. ids are never reused."""

    def __init__(self, name: str):
        self.name = name
        self._records: dict[int, dict] = {}
        self._next_id = 1

    def __len__(self):
        return len(self._records)

    def insert(self, doc: dict) -> dict:
        record = copy.deepcopy(doc)
        record["id"] = self._next_id
        self._next_id += 1
        self._records[record["id"]] = record
        return copy.deepcopy(record)

    def get(self, record_id: int) -> Optional[dict]:
        record = self._records.get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def replace(self, record_id: int, doc: dict) -> Optional[dict]:
        if record_id not in self._records:
            return None
        record = copy.deepcopy(doc)
        record["id"] = record_id
        self._records[record_id] = record
        return copy.deepcopy(record)

    def find(self, predicate: Optional[Callable[[dict], bool]] = None) -> list[dict]:
        return [
            copy.deepcopy(r) for r in self._records.values()
            if predicate is None or predicate(r)
        ]


def _newest_first(records: list[dict], key: str) -> list[dict]:
    return sorted(records, key=lambda r: (r[key], r["id"]), reverse=True)


class MemoryStore:
    """in-memory store for users, moods, journal entries, habits,
    thought patterns and meditations.

    all reads return copies so callers cannot mutate stored records.
    every operation on a closed store raises StorageError.
    """

    COLLECTIONS = (
        "users",
        "moods",
        "journal_entries",
        "habits",
        "habit_completions",
        "thought_patterns",
        "meditations",
        "meditation_completions",
    )

    def __init__(self):
        self._collections: Optional[dict[str, Collection]] = None

    @property
    def is_open(self) -> bool:
        return self._collections is not None

    async def open(self, seed: Optional[bool] = None):
        """create empty collections and load static reference data"""
        if self._collections is not None:
            return

        if seed is None:
            seed = settings.SEED_REFERENCE_DATA

        self._collections = {name: Collection(name) for name in self.COLLECTIONS}
        if seed:
            for pattern in THOUGHT_PATTERNS:
                self._collection("thought_patterns").insert(pattern)
            for meditation in MEDITATIONS:
                self._collection("meditations").insert(meditation)
        logger.info(
            f"Memory store opened ({len(self._collection('thought_patterns'))} thought patterns, "
            f"{len(self._collection('meditations'))} meditations)"
        )

    async def close(self):
        """drop all collections"""
        if self._collections is not None:
            self._collections = None
            logger.info("Memory store closed")

    def _collection(self, name: str) -> Collection:
        if self._collections is None:
            raise StorageError("Store is not open")
        return self._collections[name]

    # users

    async def create_user(self, doc: dict) -> dict:
        return self._collection("users").insert(doc)

    async def get_user(self, user_id: int) -> Optional[dict]:
        return self._collection("users").get(user_id)

    async def get_user_by_username(self, username: str) -> Optional[dict]:
        matches = self._collection("users").find(lambda u: u["username"] == username)
        return matches[0] if matches else None

    # moods

    async def create_mood(self, doc: dict) -> dict:
        return self._collection("moods").insert({**doc, "created_at": utcnow()})

    async def list_moods(self, user_id: int) -> list[dict]:
        moods = self._collection("moods").find(lambda m: m["user_id"] == user_id)
        return _newest_first(moods, "created_at")

    # journal entries

    async def insert_journal_entry(self, doc: dict) -> dict:
        return self._collection("journal_entries").insert({**doc, "created_at": utcnow()})

    async def get_journal_entry(self, entry_id: int) -> Optional[dict]:
        return self._collection("journal_entries").get(entry_id)

    async def list_journal_entries(self, user_id: int) -> list[dict]:
        entries = self._collection("journal_entries").find(lambda e: e["user_id"] == user_id)
        return _newest_first(entries, "created_at")

    async def replace_journal_entry(self, entry_id: int, doc: dict) -> Optional[dict]:
        return self._collection("journal_entries").replace(entry_id, doc)

    # habits

    async def create_habit(self, doc: dict) -> dict:
        return self._collection("habits").insert({**doc, "created_at": utcnow()})

    async def get_habit(self, habit_id: int) -> Optional[dict]:
        return self._collection("habits").get(habit_id)

    async def list_habits(self, user_id: int) -> list[dict]:
        return self._collection("habits").find(lambda h: h["user_id"] == user_id)

    async def complete_habit(self, habit_id: int) -> dict:
        return self._collection("habit_completions").insert({
            "habit_id": habit_id,
            "completed_at": utcnow(),
        })

    async def list_habit_completions(self, habit_id: int) -> list[dict]:
        completions = self._collection("habit_completions").find(lambda c: c["habit_id"] == habit_id)
        return _newest_first(completions, "completed_at")

    # thought patterns

    async def list_thought_patterns(self) -> list[dict]:
        return self._collection("thought_patterns").find()

    async def get_thought_pattern(self, pattern_id: int) -> Optional[dict]:
        return self._collection("thought_patterns").get(pattern_id)

    # meditations

    async def list_meditations(self) -> list[dict]:
        return self._collection("meditations").find()

    async def get_meditation(self, meditation_id: int) -> Optional[dict]:
        return self._collection("meditations").get(meditation_id)

    async def complete_meditation(self, user_id: int, meditation_id: int) -> dict:
        return self._collection("meditation_completions").insert({
            "user_id": user_id,
            "meditation_id": meditation_id,
            "completed_at": utcnow(),
        })

    async def list_meditation_completions(self, user_id: int) -> list[dict]:
        completions = self._collection("meditation_completions").find(lambda c: c["user_id"] == user_id)
        return _newest_first(completions, "completed_at")


# one store per process, opened in the app lifespan
store = MemoryStore()


async def get_store() -> MemoryStore:
    """dependency injection for store access"""
    return store
