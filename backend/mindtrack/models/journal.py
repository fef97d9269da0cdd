# journal models: cbt entry creation, challenge/reframe patch and response schemas
# mirrors frontend types/index.ts JournalEntry

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from mindtrack.config import settings


class JournalCreate(BaseModel):
    """payload for a finished cbt journal entry"""
    user_id: int = Field(..., alias="userId", ge=1, description="owning user id")
    situation: str = Field(..., min_length=settings.SITUATION_MIN_LENGTH, description="what happened")
    emotion: str = Field(..., min_length=settings.EMOTION_MIN_LENGTH, description="what the user felt")
    thought: str = Field(..., min_length=settings.THOUGHT_MIN_LENGTH, description="the automatic thought")
    challenge: Optional[str] = Field(None, description="evidence-based question challenging the thought")
    reframe: Optional[str] = Field(None, description="balanced alternative thought")

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}


class JournalPatch(BaseModel):
    """partial update: only challenge and reframe may change after creation"""
    challenge: Optional[str] = None
    reframe: Optional[str] = None

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class JournalEntryResponse(BaseModel):
    """stored journal entry"""
    id: int
    user_id: int = Field(..., alias="userId")
    situation: str
    emotion: str
    thought: str
    challenge: Optional[str] = None
    reframe: Optional[str] = None
    created_at: datetime = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True}
