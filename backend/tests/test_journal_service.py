# tests for the journal persistence boundary and the patch merge

import pytest

from mindtrack.errors import NotFoundError, StorageError, ValidationError
from mindtrack.models.journal import JournalPatch
from mindtrack.services.journal_service import merge_patch

from tests.conftest import SITUATION, EMOTION, THOUGHT


def _payload(**overrides):
    return {
        "user_id": 1,
        "situation": SITUATION,
        "emotion": EMOTION,
        "thought": THOUGHT,
        **overrides,
    }


class TestMergePatch:
    """explicit merge of the updatable field set"""

    def test_only_present_fields_applied(self):
        entry = {"id": 1, "challenge": "old question", "reframe": "old view"}
        merged = merge_patch(entry, JournalPatch(reframe="new view"))
        assert merged == {"id": 1, "challenge": "old question", "reframe": "new view"}

    def test_explicit_null_is_applied(self):
        entry = {"id": 1, "challenge": "old question", "reframe": "old view"}
        merged = merge_patch(entry, JournalPatch(challenge=None))
        assert merged["challenge"] is None
        assert merged["reframe"] == "old view"

    def test_original_not_mutated(self):
        entry = {"id": 1, "challenge": "old", "reframe": "old"}
        merge_patch(entry, JournalPatch(challenge="new"))
        assert entry["challenge"] == "old"


class TestJournalService:
    """create / update / get / list"""

    async def test_create_from_dict(self, journals):
        entry = await journals.create(_payload(challenge="q", reframe="r"))
        assert entry["id"] == 1
        assert entry["challenge"] == "q"
        assert entry["created_at"] is not None

    async def test_create_strips_whitespace(self, journals):
        entry = await journals.create(_payload(emotion="  sad  "))
        assert entry["emotion"] == "sad"

    async def test_create_invalid_raises_validation_error(self, journals):
        with pytest.raises(ValidationError) as exc:
            await journals.create(_payload(situation="abc"))
        assert exc.value.errors[0]["field"] == "situation"

    async def test_create_on_closed_store(self, journals, mem_store):
        await mem_store.close()
        with pytest.raises(StorageError):
            await journals.create(_payload())

    async def test_update_keeps_created_at(self, journals):
        entry = await journals.create(_payload())
        updated = await journals.update(entry["id"], {"reframe": "balanced view"})
        assert updated["created_at"] == entry["created_at"]
        assert updated["reframe"] == "balanced view"

    async def test_update_rejects_unknown_keys(self, journals):
        entry = await journals.create(_payload())
        with pytest.raises(ValidationError):
            await journals.update(entry["id"], {"situation": "something else entirely"})

    async def test_update_missing(self, journals):
        with pytest.raises(NotFoundError):
            await journals.update(5, JournalPatch(reframe="x"))

    async def test_last_write_wins(self, journals):
        entry = await journals.create(_payload())
        await journals.update(entry["id"], {"reframe": "first"})
        await journals.update(entry["id"], {"reframe": "second"})
        assert (await journals.get(entry["id"]))["reframe"] == "second"

    async def test_get_missing(self, journals):
        with pytest.raises(NotFoundError):
            await journals.get(1)

    async def test_list_by_user(self, journals):
        await journals.create(_payload())
        await journals.create(_payload(user_id=2))
        await journals.create(_payload())
        entries = await journals.list_by_user(1)
        assert [e["id"] for e in entries] == [3, 1]
