# wellness models: moods, habits, thought pattern library, meditations
# mirrors frontend types/index.ts Mood, Habit, ThoughtPattern, Meditation

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


# moods

class MoodCreate(BaseModel):
    user_id: int = Field(..., alias="userId", ge=1)
    emoji: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)
    intensity: int = Field(..., ge=1, le=10, description="mood intensity 1-10")
    note: Optional[str] = None

    model_config = {"populate_by_name": True}


class MoodResponse(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId")
    emoji: str
    label: str
    intensity: int
    note: Optional[str] = None
    created_at: datetime = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True}


# habits

class HabitCreate(BaseModel):
    user_id: int = Field(..., alias="userId", ge=1)
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    icon: Optional[str] = None

    model_config = {"populate_by_name": True}


class HabitCompletionResponse(BaseModel):
    id: int
    habit_id: int = Field(..., alias="habitId")
    completed_at: datetime = Field(..., alias="completedAt")

    model_config = {"populate_by_name": True}


class HabitResponse(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId")
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    created_at: datetime = Field(..., alias="createdAt")
    completions: list[HabitCompletionResponse] = Field(default_factory=list)
    streak: int = 0

    model_config = {"populate_by_name": True}


# thought pattern library (static)

class ThoughtPatternResponse(BaseModel):
    id: int
    name: str
    description: str
    examples: list[str] = Field(default_factory=list)
    reframe_strategies: list[str] = Field(default_factory=list, alias="reframeStrategies")

    model_config = {"populate_by_name": True}


# meditations (static) + completions

class MeditationResponse(BaseModel):
    id: int
    title: str
    description: str
    duration: int = Field(..., description="length in seconds")
    category: str
    audio_url: Optional[str] = Field(None, alias="audioUrl")

    model_config = {"populate_by_name": True}


class MeditationCompleteRequest(BaseModel):
    user_id: int = Field(..., alias="userId", ge=1)

    model_config = {"populate_by_name": True}


class MeditationCompletionResponse(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId")
    meditation_id: int = Field(..., alias="meditationId")
    completed_at: datetime = Field(..., alias="completedAt")

    model_config = {"populate_by_name": True}
