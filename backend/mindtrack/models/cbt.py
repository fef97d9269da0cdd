# cbt models: thought analysis request/response and guided session views
# mirrors frontend types/index.ts CBTAnalysisResponse

from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator

from mindtrack.config import settings
from mindtrack.models.journal import JournalEntryResponse


class CBTAnalyzeRequest(BaseModel):
    """situation / emotion / thought triple sent to the classifier"""
    situation: str = Field(..., min_length=settings.SITUATION_MIN_LENGTH)
    emotion: str = Field(..., min_length=settings.EMOTION_MIN_LENGTH)
    thought: str = Field(..., min_length=settings.THOUGHT_MIN_LENGTH)

    model_config = {"str_strip_whitespace": True}


class ThoughtDiagnosis(BaseModel):
    """classifier output: all four fields or nothing"""
    thought_pattern: str = Field(..., alias="thoughtPattern", min_length=1)
    pattern_explanation: str = Field(..., alias="patternExplanation", min_length=1)
    challenge: str = Field(..., min_length=1)
    reframe: str = Field(..., min_length=1)

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}


# guided session

class SessionStart(BaseModel):
    user_id: int = Field(..., alias="userId", ge=1)

    model_config = {"populate_by_name": True}


class SessionFieldsUpdate(BaseModel):
    """any subset of the five session fields, omitted fields are left as they are"""
    situation: Optional[str] = None
    emotion: Optional[str] = None
    thought: Optional[str] = None
    challenge: Optional[str] = None
    reframe: Optional[str] = None

    model_config = {"extra": "forbid"}

    @field_validator("*")
    @classmethod
    def reject_null(cls, value):
        # defaults are not validated, so this only fires on an explicit null
        if value is None:
            raise ValueError("Field may be omitted but not null")
        return value



class SessionFieldsView(BaseModel):
    situation: str = ""
    emotion: str = ""
    thought: str = ""
    challenge: str = ""
    reframe: str = ""


class SessionView(BaseModel):
    session_id: str = Field(..., alias="sessionId")
    user_id: int = Field(..., alias="userId")
    step: Literal["SITUATION", "EMOTION", "THOUGHT", "CHALLENGE_REFRAME"]
    phase: Literal["EDITING", "ANALYZING", "SUBMITTING", "CANCELLED"]
    fields: SessionFieldsView
    diagnosis: Optional[ThoughtDiagnosis] = None
    analysis_attempted: bool = Field(False, alias="analysisAttempted")
    errors: dict[str, str] = Field(default_factory=dict)
    warning: Optional[str] = None

    model_config = {"populate_by_name": True}


class SessionSubmitResponse(BaseModel):
    entry: JournalEntryResponse
    session: SessionView
