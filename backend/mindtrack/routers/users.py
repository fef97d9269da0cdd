# users router: create and fetch the local user (no authentication)

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from mindtrack.dependencies import parse_id
from mindtrack.models.user import UserCreate, UserResponse
from mindtrack.services.store import MemoryStore, get_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


def _doc_to_user(doc: dict) -> UserResponse:
    # password is never echoed back
    return UserResponse(
        id=doc["id"],
        username=doc["username"],
        name=doc.get("name"),
        email=doc.get("email"),
    )


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    store: MemoryStore = Depends(get_store),
):
    """create a user, usernames are unique"""
    existing = await store.get_user_by_username(body.username)
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already exists",
        )

    doc = await store.create_user(body.model_dump())
    logger.info(f"User created: {doc['id']} ({doc['username']})")
    return _doc_to_user(doc)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    store: MemoryStore = Depends(get_store),
):
    uid = parse_id(user_id, "user")
    doc = await store.get_user(uid)
    if not doc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return _doc_to_user(doc)
