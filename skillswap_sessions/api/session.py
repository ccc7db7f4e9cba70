# skillswap_sessions/api/session.py
"""
Session API

Endpoints:
- POST /sessions/ - Request a session on a skill post
- GET /sessions/ - List my sessions (role=mentor|learner|both)
- GET /sessions/{session_id} - Session detail
- PATCH /sessions/{session_id}/status - Confirm, complete or cancel
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from skillswap_sessions.api.deps import get_current_user_id, get_profile_provider
from skillswap_sessions.database import get_db
from skillswap_sessions.schemas.session import (
    EnrichedSession,
    RoleFilter,
    SessionRequest,
    SessionResponse,
    SessionStatusUpdate,
)
from skillswap_sessions.services import listing_service, session_service
from skillswap_sessions.services.profile_service import ProfileProvider

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("/", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_session_request(
    request: SessionRequest,
    current_user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return session_service.request_session(
        db,
        skill_post_id=request.skill_post_id,
        learner_id=current_user_id,
        message=request.message,
    )


@router.get("/", response_model=List[EnrichedSession])
async def get_sessions(
    role: RoleFilter = "both",
    current_user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    profile_provider: ProfileProvider = Depends(get_profile_provider),
):
    """Sessions for the current user, newest first, with participant details."""
    return await listing_service.list_sessions_for_user(
        db, current_user_id, role, profile_provider=profile_provider
    )


@router.get("/{session_id}", response_model=SessionResponse)
def get_session(
    session_id: int,
    current_user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return session_service.get_session(db, session_id, current_user_id)


@router.patch("/{session_id}/status", response_model=SessionResponse)
def update_session_status(
    session_id: int,
    update: SessionStatusUpdate,
    current_user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Move a session along its lifecycle.

    - confirmed: mentor only, attaches the meeting link
    - completed: either participant, from confirmed
    - cancelled: either participant, from pending or confirmed
    """
    return session_service.update_session_status(db, session_id, current_user_id, update.status)
