"""
Review & Rating Pydantic Schemas
Request/response models with validation
"""

from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ======================
# REVIEW SCHEMAS
# ======================

class ReviewCreate(BaseModel):
    """Schema for submitting a review"""
    session_id: int = Field(..., description="Session identifier")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5 stars")
    comment: Optional[str] = Field(None, max_length=1000, description="Review comment (max 1000 chars)")

    @field_validator("comment")
    @classmethod
    def validate_comment(cls, v):
        """Blank comments are stored as no comment"""
        if v is None:
            return None
        return v.strip() or None


class ReviewResponse(BaseModel):
    """Review response for API"""
    id: int
    session_id: int
    skill_post_id: Optional[int] = None
    mentor_id: int
    learner_id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ======================
# ELIGIBILITY CHECK SCHEMA
# ======================

class ReviewEligibilityResponse(BaseModel):
    """Review eligibility check response"""
    can_review: bool = Field(..., description="Whether learner can review this session")
    reason: str = Field(..., description="Reason (error message or 'Can review')")
    session_id: int = Field(..., description="Session identifier")


# ======================
# ADMIN SCHEMAS
# ======================

class RatingDrift(BaseModel):
    entity: str = Field(..., description="'user' or 'skill_post'")
    entity_id: int
    stored_rating: float
    stored_count: int
    actual_rating: float
    actual_count: int


class RatingRecalculationResponse(BaseModel):
    """Response after recalculating all ratings"""
    users_checked: int
    skill_posts_checked: int
    drifted: List[RatingDrift] = Field(default_factory=list)
    message: str
