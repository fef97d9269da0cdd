# library router: static thought pattern library and guided meditations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from mindtrack.dependencies import parse_id
from mindtrack.models.wellness import (
    MeditationCompleteRequest,
    MeditationCompletionResponse,
    MeditationResponse,
    ThoughtPatternResponse,
)
from mindtrack.services.store import MemoryStore, get_store

logger = logging.getLogger(__name__)
router = APIRouter(tags=["library"])


def _doc_to_pattern(doc: dict) -> ThoughtPatternResponse:
    return ThoughtPatternResponse(
        id=doc["id"],
        name=doc["name"],
        description=doc["description"],
        examples=doc.get("examples", []),
        reframeStrategies=doc.get("reframe_strategies", []),
    )


def _doc_to_meditation(doc: dict) -> MeditationResponse:
    return MeditationResponse(
        id=doc["id"],
        title=doc["title"],
        description=doc["description"],
        duration=doc["duration"],
        category=doc["category"],
        audioUrl=doc.get("audio_url"),
    )


# thought patterns

@router.get("/thought-patterns", response_model=list[ThoughtPatternResponse])
async def list_thought_patterns(store: MemoryStore = Depends(get_store)):
    return [_doc_to_pattern(doc) for doc in await store.list_thought_patterns()]


@router.get("/thought-patterns/{pattern_id}", response_model=ThoughtPatternResponse)
async def get_thought_pattern(
    pattern_id: str,
    store: MemoryStore = Depends(get_store),
):
    pid = parse_id(pattern_id, "pattern")
    doc = await store.get_thought_pattern(pid)
    if not doc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Thought pattern not found",
        )
    return _doc_to_pattern(doc)


# meditations

@router.get("/meditations", response_model=list[MeditationResponse])
async def list_meditations(store: MemoryStore = Depends(get_store)):
    return [_doc_to_meditation(doc) for doc in await store.list_meditations()]


@router.get("/meditations/{meditation_id}", response_model=MeditationResponse)
async def get_meditation(
    meditation_id: str,
    store: MemoryStore = Depends(get_store),
):
    mid = parse_id(meditation_id, "meditation")
    doc = await store.get_meditation(mid)
    if not doc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Meditation not found",
        )
    return _doc_to_meditation(doc)


@router.post(
    "/meditations/{meditation_id}/complete",
    response_model=MeditationCompletionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def complete_meditation(
    meditation_id: str,
    body: MeditationCompleteRequest,
    store: MemoryStore = Depends(get_store),
):
    """record that a user finished a guided meditation"""
    mid = parse_id(meditation_id, "meditation")
    if not await store.get_meditation(mid):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Meditation not found",
        )
    doc = await store.complete_meditation(body.user_id, mid)
    logger.info(f"Meditation {mid} completed by user {body.user_id}")
    return MeditationCompletionResponse(
        id=doc["id"],
        userId=doc["user_id"],
        meditationId=doc["meditation_id"],
        completedAt=doc["completed_at"],
    )
