from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserProfileResponse(BaseModel):
    id: int
    display_name: Optional[str] = None
    email: str
    photo_url: Optional[str] = None
    role: str
    bio: Optional[str] = None
    rating: float = 0.0
    review_count: int = 0
    xp: int = 0
    sessions_completed: int = 0
    banned: bool = False
    ban_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BanRequest(BaseModel):
    banned: bool = True
    reason: Optional[str] = Field(None, max_length=500)
