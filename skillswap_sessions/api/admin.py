# skillswap_sessions/api/admin.py
"""
Admin API: user bans and rating reconciliation.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skillswap_sessions.api.deps import get_current_user_id
from skillswap_sessions.database import get_db, store_guard
from skillswap_sessions.errors import PermissionDenied
from skillswap_sessions.models.user import User
from skillswap_sessions.schemas.review import RatingRecalculationResponse
from skillswap_sessions.schemas.user import BanRequest, UserProfileResponse
from skillswap_sessions.services import profile_service, rating_service

router = APIRouter(prefix="/admin", tags=["admin"])


def require_admin(
    current_user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> int:
    with store_guard(db, "require_admin"):
        user = db.query(User).filter(User.id == current_user_id).first()
    if not user or not user.is_admin:
        raise PermissionDenied("Admin access required")
    return current_user_id


@router.patch("/users/{user_id}/ban", response_model=UserProfileResponse)
def ban_user(
    user_id: int,
    request: BanRequest,
    admin_id: int = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return profile_service.set_user_banned(db, admin_id, user_id, request.banned, request.reason)


@router.post("/ratings/recalculate", response_model=RatingRecalculationResponse)
def recalculate_ratings(
    admin_id: int = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Report aggregates that disagree with a full rescan of the reviews."""
    return rating_service.recalculate_ratings(db)
