# skillswap_sessions/api/review.py
"""
Review & Rating API Router

Endpoints:
- POST /reviews/ - Submit a review
- GET /reviews/eligibility/{session_id} - Check review eligibility
- GET /reviews/mentor/{mentor_id} - Reviews received by a mentor
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from skillswap_sessions.api.deps import get_current_user_id
from skillswap_sessions.database import get_db
from skillswap_sessions.schemas.review import (
    ReviewCreate,
    ReviewEligibilityResponse,
    ReviewResponse,
)
from skillswap_sessions.services import review_service

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("/", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def submit_review(
    review: ReviewCreate,
    current_user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Submit a review for a completed session.

    Requirements:
    - User must be the learner from the session
    - Session must be completed
    - Only one review per session allowed
    """
    return review_service.submit_review(
        db,
        session_id=review.session_id,
        learner_id=current_user_id,
        rating=review.rating,
        comment=review.comment,
    )


@router.get("/eligibility/{session_id}", response_model=ReviewEligibilityResponse)
def check_review_eligibility(
    session_id: int,
    current_user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return review_service.check_review_eligibility(db, session_id, current_user_id)


@router.get("/mentor/{mentor_id}", response_model=List[ReviewResponse])
def get_mentor_reviews(
    mentor_id: int,
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """Public list of reviews a mentor received, newest first."""
    return review_service.get_reviews_for_user(db, mentor_id, limit=limit, offset=offset)
