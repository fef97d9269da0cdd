# user models: single local user, no authentication
# mirrors frontend types/index.ts User

from typing import Optional
from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=50, description="unique username")
    password: str = Field(..., min_length=1, description="stored as given, auth is out of scope")
    name: Optional[str] = None
    email: Optional[str] = None

    model_config = {"str_strip_whitespace": True}


class UserResponse(BaseModel):
    id: int
    username: str
    name: Optional[str] = None
    email: Optional[str] = None
