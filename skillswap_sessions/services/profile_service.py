from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Protocol

from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from skillswap_sessions.database import SessionLocal, store_guard
from skillswap_sessions.errors import (
    InvalidState,
    NotFound,
    PermissionDenied,
    Unavailable,
    ValidationFailed,
)
from skillswap_sessions.models.user import User
from skillswap_sessions.schemas.user import UserProfileResponse

logger = logging.getLogger(__name__)

# Fields owned by the rating aggregator, completion awards, or admin action.
PROTECTED_PROFILE_FIELDS = frozenset(
    {"id", "rating", "review_count", "xp", "sessions_completed", "banned", "ban_reason", "role"}
)
EDITABLE_PROFILE_FIELDS = frozenset({"display_name", "photo_url", "bio"})


class ProfileProvider(Protocol):
    async def get_user_profile(self, user_id: int) -> UserProfileResponse:
        ...

    async def update_user_profile(self, user_id: int, patch: Dict[str, Any]) -> UserProfileResponse:
        ...


def _validate_patch(patch: Dict[str, Any]) -> None:
    protected = PROTECTED_PROFILE_FIELDS.intersection(patch)
    if protected:
        raise PermissionDenied(f"Profile fields are read-only: {', '.join(sorted(protected))}")
    unknown = set(patch) - EDITABLE_PROFILE_FIELDS
    if unknown:
        raise ValidationFailed(f"Unknown profile fields: {', '.join(sorted(unknown))}")


class DatabaseProfileProvider:
    """Profile lookups over the users table, one ORM session per call."""

    def __init__(self, session_factory=SessionLocal):
        self._session_factory = session_factory

    def _load(self, user_id: int) -> UserProfileResponse:
        db = self._session_factory()
        try:
            user = db.query(User).filter(User.id == user_id).first()
            if user is None:
                raise NotFound(f"User {user_id} not found")
            return UserProfileResponse.model_validate(user)
        except (OperationalError, PoolTimeoutError) as exc:
            raise Unavailable("Profile store unavailable") from exc
        finally:
            db.close()

    def _update(self, user_id: int, patch: Dict[str, Any]) -> UserProfileResponse:
        db = self._session_factory()
        try:
            user = db.query(User).filter(User.id == user_id).first()
            if user is None:
                raise NotFound(f"User {user_id} not found")
            for key, value in patch.items():
                setattr(user, key, value)
            db.commit()
            db.refresh(user)
            return UserProfileResponse.model_validate(user)
        except (OperationalError, PoolTimeoutError) as exc:
            db.rollback()
            raise Unavailable("Profile store unavailable") from exc
        finally:
            db.close()

    async def get_user_profile(self, user_id: int) -> UserProfileResponse:
        return await asyncio.to_thread(self._load, user_id)

    async def update_user_profile(self, user_id: int, patch: Dict[str, Any]) -> UserProfileResponse:
        _validate_patch(patch)
        return await asyncio.to_thread(self._update, user_id, patch)


# ======================
# ADMIN OPERATIONS
# ======================

def set_user_banned(db: Session, admin_id: int, user_id: int, banned: bool, reason: str = None) -> User:
    """
    Ban or unban a user. Only admins may do this, and not to themselves.
    """
    with store_guard(db, "set_user_banned"):
        admin = db.query(User).filter(User.id == admin_id).first()
        if not admin or not admin.is_admin:
            raise PermissionDenied("Only admins can ban users")
        if admin_id == user_id:
            raise InvalidState("Admins cannot ban themselves")

        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFound("User not found")

        user.banned = banned
        user.ban_reason = reason if banned else None
        db.commit()
        db.refresh(user)

    logger.info("User %s %s by admin %s", user_id, "banned" if banned else "unbanned", admin_id)
    return user
