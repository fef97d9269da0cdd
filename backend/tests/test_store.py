# tests for the in-memory record store: ids, copies, ordering, lifecycle

import pytest

from mindtrack.errors import StorageError
from mindtrack.services.store import MemoryStore


def _entry(user_id=1, thought="I will never get this right"):
    return {
        "user_id": user_id,
        "situation": "Missed the bus again",
        "emotion": "frustrated",
        "thought": thought,
        "challenge": None,
        "reframe": None,
    }


class TestLifecycle:
    """open / close"""

    async def test_open_seeds_reference_data(self, mem_store):
        patterns = await mem_store.list_thought_patterns()
        meditations = await mem_store.list_meditations()
        assert [p["name"] for p in patterns] == [
            "Catastrophizing",
            "Mind Reading",
            "Black & White Thinking",
            "Emotional Reasoning",
        ]
        assert len(meditations) == 4

    async def test_open_without_seed(self):
        store = MemoryStore()
        await store.open(seed=False)
        assert await store.list_thought_patterns() == []
        await store.close()

    async def test_open_twice_keeps_data(self, mem_store):
        await mem_store.create_user({"username": "sam", "password": "pw"})
        await mem_store.open()
        assert await mem_store.get_user_by_username("sam") is not None

    async def test_closed_store_raises_storage_error(self):
        store = MemoryStore()
        assert store.is_open is False
        with pytest.raises(StorageError):
            await store.insert_journal_entry(_entry())

    async def test_close_drops_records(self, mem_store):
        await mem_store.insert_journal_entry(_entry())
        await mem_store.close()
        with pytest.raises(StorageError):
            await mem_store.list_journal_entries(1)


class TestIds:
    """monotonic integer ids"""

    async def test_ids_are_monotonic_per_collection(self, mem_store):
        first = await mem_store.insert_journal_entry(_entry())
        second = await mem_store.insert_journal_entry(_entry())
        mood = await mem_store.create_mood({"user_id": 1, "emoji": "🙂", "label": "Good", "intensity": 6, "note": None})
        assert first["id"] == 1
        assert second["id"] == 2
        assert mood["id"] == 1

    async def test_created_at_assigned(self, mem_store):
        entry = await mem_store.insert_journal_entry(_entry())
        assert entry["created_at"] is not None
        assert entry["created_at"].tzinfo is not None


class TestCopies:
    """stored records can't be mutated through returned values"""

    async def test_returned_record_is_a_copy(self, mem_store):
        entry = await mem_store.insert_journal_entry(_entry())
        entry["thought"] = "mutated"
        stored = await mem_store.get_journal_entry(entry["id"])
        assert stored["thought"] == "I will never get this right"

    async def test_reference_lists_are_copies(self, mem_store):
        pattern = await mem_store.get_thought_pattern(1)
        pattern["examples"].append("extra")
        again = await mem_store.get_thought_pattern(1)
        assert "extra" not in again["examples"]


class TestQueries:
    """filtering and ordering"""

    async def test_list_journal_entries_newest_first(self, mem_store):
        for i in range(3):
            await mem_store.insert_journal_entry(_entry(thought=f"thought number {i}"))
        entries = await mem_store.list_journal_entries(1)
        assert [e["id"] for e in entries] == [3, 2, 1]
        created = [e["created_at"] for e in entries]
        assert created == sorted(created, reverse=True)

    async def test_list_journal_entries_filters_by_user(self, mem_store):
        await mem_store.insert_journal_entry(_entry(user_id=1))
        await mem_store.insert_journal_entry(_entry(user_id=2))
        entries = await mem_store.list_journal_entries(2)
        assert len(entries) == 1
        assert entries[0]["user_id"] == 2

    async def test_replace_missing_returns_none(self, mem_store):
        assert await mem_store.replace_journal_entry(99, _entry()) is None

    async def test_get_user_by_username(self, mem_store):
        await mem_store.create_user({"username": "alex", "password": "pw"})
        assert (await mem_store.get_user_by_username("alex"))["id"] == 1
        assert await mem_store.get_user_by_username("nobody") is None

    async def test_habit_completions_scoped_to_habit(self, mem_store):
        habit = await mem_store.create_habit({"user_id": 1, "name": "Walk", "description": None, "icon": None})
        other = await mem_store.create_habit({"user_id": 1, "name": "Read", "description": None, "icon": None})
        await mem_store.complete_habit(habit["id"])
        await mem_store.complete_habit(habit["id"])
        await mem_store.complete_habit(other["id"])
        assert len(await mem_store.list_habit_completions(habit["id"])) == 2
        assert len(await mem_store.list_habit_completions(other["id"])) == 1
