# journal router: create, list, read and patch cbt journal entries

import logging

from fastapi import APIRouter, Depends, HTTPException, status, Query

from mindtrack.errors import NotFoundError, StorageError
from mindtrack.models.journal import JournalCreate, JournalPatch, JournalEntryResponse
from mindtrack.services.journal_service import JournalService
from mindtrack.dependencies import get_journal_service, parse_id

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/journal", tags=["journal"])


def doc_to_entry(doc: dict) -> JournalEntryResponse:
    return JournalEntryResponse(
        id=doc["id"],
        userId=doc["user_id"],
        situation=doc["situation"],
        emotion=doc["emotion"],
        thought=doc["thought"],
        challenge=doc.get("challenge"),
        reframe=doc.get("reframe"),
        createdAt=doc["created_at"],
    )


@router.get("", response_model=list[JournalEntryResponse])
async def list_entries(
    user_id: str = Query(None, alias="userId", description="owning user id"),
    journals: JournalService = Depends(get_journal_service),
):
    """list a user's journal entries, most recent first"""
    uid = parse_id(user_id, "user")
    try:
        entries = await journals.list_by_user(uid)
    except StorageError as e:
        logger.error(f"Could not list journal entries for user {uid}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch journal entries",
        )
    return [doc_to_entry(doc) for doc in entries]


@router.get("/{entry_id}", response_model=JournalEntryResponse)
async def get_entry(
    entry_id: str,
    journals: JournalService = Depends(get_journal_service),
):
    eid = parse_id(entry_id, "entry")
    try:
        doc = await journals.get(eid)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Journal entry not found",
        )
    except StorageError as e:
        logger.error(f"Could not read journal entry {eid}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch journal entry",
        )
    return doc_to_entry(doc)


@router.post("", response_model=JournalEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(
    body: JournalCreate,
    journals: JournalService = Depends(get_journal_service),
):
    """store a finished cbt entry (situation, emotion, thought, optional challenge/reframe)"""
    try:
        doc = await journals.create(body)
    except StorageError as e:
        logger.error(f"Could not create journal entry: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create journal entry",
        )
    return doc_to_entry(doc)


@router.patch("/{entry_id}", response_model=JournalEntryResponse)
async def update_entry(
    entry_id: str,
    body: JournalPatch,
    journals: JournalService = Depends(get_journal_service),
):
    """update only challenge and/or reframe, other fields stay as they are"""
    eid = parse_id(entry_id, "entry")
    try:
        doc = await journals.update(eid, body)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Journal entry not found",
        )
    except StorageError as e:
        logger.error(f"Could not update journal entry {eid}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update journal entry",
        )
    return doc_to_entry(doc)
