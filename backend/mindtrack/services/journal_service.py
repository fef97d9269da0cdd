# journal persistence boundary
# validates finished cbt entries and applies challenge/reframe patches

import logging
from typing import Union

from pydantic import ValidationError as PydanticValidationError

from mindtrack.errors import NotFoundError, ValidationError
from mindtrack.models.journal import JournalCreate, JournalPatch
from mindtrack.services.store import MemoryStore

logger = logging.getLogger(__name__)


def merge_patch(entry: dict, patch: JournalPatch) -> dict:
    """apply only the fields present in the patch payload onto an entry"""
    merged = dict(entry)
    merged.update(patch.model_dump(exclude_unset=True))
    return merged


class JournalService:
    """create / update / read cbt journal entries on top of the store"""

    def __init__(self, store: MemoryStore):
        self.store = store

    async def create(self, entry: Union[JournalCreate, dict]) -> dict:
        """validate and store a finished entry, returns it with id and created_at"""
        if not isinstance(entry, JournalCreate):
            try:
                entry = JournalCreate.model_validate(entry)
            except PydanticValidationError as e:
                raise ValidationError.from_pydantic(e) from e

        doc = entry.model_dump()
        stored = await self.store.insert_journal_entry(doc)
        logger.info(f"Journal entry created: {stored['id']} for user {stored['user_id']}")
        return stored

    async def update(self, entry_id: int, patch: Union[JournalPatch, dict]) -> dict:
        """merge challenge/reframe onto an existing entry, last write wins"""
        if not isinstance(patch, JournalPatch):
            try:
                patch = JournalPatch.model_validate(patch)
            except PydanticValidationError as e:
                raise ValidationError.from_pydantic(e) from e

        existing = await self.store.get_journal_entry(entry_id)
        if existing is None:
            raise NotFoundError("Journal entry not found")

        updated = await self.store.replace_journal_entry(entry_id, merge_patch(existing, patch))
        if updated is None:
            raise NotFoundError("Journal entry not found")

        logger.info(f"Journal entry updated: {entry_id} ({', '.join(sorted(patch.model_fields_set)) or 'no fields'})")
        return updated

    async def get(self, entry_id: int) -> dict:
        entry = await self.store.get_journal_entry(entry_id)
        if entry is None:
            raise NotFoundError("Journal entry not found")
        return entry

    async def list_by_user(self, user_id: int) -> list[dict]:
        return await self.store.list_journal_entries(user_id)
