# habits router: habits with completions and daily streaks

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query

from mindtrack.dependencies import parse_id
from mindtrack.models.wellness import HabitCompletionResponse, HabitCreate, HabitResponse
from mindtrack.services.store import MemoryStore, get_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/habits", tags=["habits"])


def compute_streak(completed_at: list[datetime], today: Optional[date] = None) -> int:
    """consecutive utc days with at least one completion, ending today or yesterday"""
    if not completed_at:
        return 0
    today = today or datetime.now(timezone.utc).date()
    days = {dt.astimezone(timezone.utc).date() for dt in completed_at}

    # an unfinished today doesn't break yesterday's streak
    cursor = today if today in days else today - timedelta(days=1)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def _doc_to_completion(doc: dict) -> HabitCompletionResponse:
    return HabitCompletionResponse(
        id=doc["id"],
        habitId=doc["habit_id"],
        completedAt=doc["completed_at"],
    )


def _doc_to_habit(doc: dict, completions: list[dict]) -> HabitResponse:
    return HabitResponse(
        id=doc["id"],
        userId=doc["user_id"],
        name=doc["name"],
        description=doc.get("description"),
        icon=doc.get("icon"),
        createdAt=doc["created_at"],
        completions=[_doc_to_completion(c) for c in completions],
        streak=compute_streak([c["completed_at"] for c in completions]),
    )


@router.get("", response_model=list[HabitResponse])
async def list_habits(
    user_id: str = Query(None, alias="userId"),
    store: MemoryStore = Depends(get_store),
):
    """list a user's habits with their completions (most recent first)"""
    uid = parse_id(user_id, "user")
    habits = []
    for doc in await store.list_habits(uid):
        completions = await store.list_habit_completions(doc["id"])
        habits.append(_doc_to_habit(doc, completions))
    return habits


@router.post("", response_model=HabitResponse, status_code=status.HTTP_201_CREATED)
async def create_habit(
    body: HabitCreate,
    store: MemoryStore = Depends(get_store),
):
    doc = await store.create_habit(body.model_dump())
    logger.info(f"Habit created: {doc['id']} ({doc['name']}) for user {doc['user_id']}")
    return _doc_to_habit(doc, [])


@router.post("/{habit_id}/complete", response_model=HabitCompletionResponse, status_code=status.HTTP_201_CREATED)
async def complete_habit(
    habit_id: str,
    store: MemoryStore = Depends(get_store),
):
    hid = parse_id(habit_id, "habit")
    habit = await store.get_habit(hid)
    if not habit:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Habit not found",
        )
    doc = await store.complete_habit(hid)
    return _doc_to_completion(doc)
