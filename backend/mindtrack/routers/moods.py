# moods router: log and list mood check-ins

import logging

from fastapi import APIRouter, Depends, status, Query

from mindtrack.dependencies import parse_id
from mindtrack.models.wellness import MoodCreate, MoodResponse
from mindtrack.services.store import MemoryStore, get_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/moods", tags=["moods"])


def _doc_to_mood(doc: dict) -> MoodResponse:
    return MoodResponse(
        id=doc["id"],
        userId=doc["user_id"],
        emoji=doc["emoji"],
        label=doc["label"],
        intensity=doc["intensity"],
        note=doc.get("note"),
        createdAt=doc["created_at"],
    )


@router.get("", response_model=list[MoodResponse])
async def list_moods(
    user_id: str = Query(None, alias="userId"),
    store: MemoryStore = Depends(get_store),
):
    """list a user's moods, most recent first"""
    uid = parse_id(user_id, "user")
    return [_doc_to_mood(doc) for doc in await store.list_moods(uid)]


@router.post("", response_model=MoodResponse, status_code=status.HTTP_201_CREATED)
async def create_mood(
    body: MoodCreate,
    store: MemoryStore = Depends(get_store),
):
    doc = await store.create_mood(body.model_dump())
    logger.info(f"Mood logged: {doc['id']} ({doc['label']}) for user {doc['user_id']}")
    return _doc_to_mood(doc)
