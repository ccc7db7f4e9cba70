from datetime import datetime
from typing import Optional, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from skillswap_sessions.models.session import SessionStatus

# ======================
# SESSION REQUEST MODELS
# ======================

class SessionRequest(BaseModel):
    """Learner's request for a session against a skill post"""
    skill_post_id: int
    message: Optional[str] = Field(None, max_length=1000)

    @field_validator("message")
    @classmethod
    def strip_message(cls, v):
        if v is None:
            return None
        return v.strip() or None


# ======================
# SESSION UPDATE MODELS
# ======================

class SessionStatusUpdate(BaseModel):
    status: SessionStatus


RoleFilter = Literal["mentor", "learner", "both"]

# ======================
# SESSION RESPONSE MODELS
# ======================

class SessionBase(BaseModel):
    id: int
    skill_post_id: Optional[int] = None
    skill_post_title: Optional[str] = None
    mentor_id: int
    learner_id: int
    message: Optional[str] = None
    status: SessionStatus
    jitsi_link: Optional[str] = None
    reviewed: bool = False
    scheduled_date: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class SessionResponse(SessionBase):
    model_config = ConfigDict(from_attributes=True)


class Participant(BaseModel):
    """Display data for one side of a session"""
    id: int
    name: str
    avatar: Optional[str] = None
    placeholder: bool = False


class EnrichedSession(SessionBase):
    """Session as shown on a participant's dashboard."""
    my_role: Literal["mentor", "learner"]
    mentor: Participant
    learner: Participant

    model_config = ConfigDict(from_attributes=True)
