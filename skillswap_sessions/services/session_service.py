# skillswap_sessions/services/session_service.py
"""
Session Lifecycle Service

Requests, the status state machine, and completion side effects.

    pending ──mentor──▶ confirmed ──participant──▶ completed
       │                    │
       └──participant──▶ cancelled ◀──participant──┘

completed and cancelled are terminal.
"""

import logging
from datetime import datetime, UTC
from typing import Optional

from sqlalchemy.orm import Session

from skillswap_sessions.config import settings
from skillswap_sessions.database import store_guard
from skillswap_sessions.errors import (
    InvalidState,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    ValidationFailed,
)
from skillswap_sessions.models.session import Session as SessionModel, SessionStatus, TERMINAL_STATUSES
from skillswap_sessions.models.skill_post import SkillPost
from skillswap_sessions.models.user import User
from skillswap_sessions.services.meeting_service import generate_meeting_url

logger = logging.getLogger(__name__)

MENTOR_ONLY = "mentor"
PARTICIPANTS = "participant"

# (from, to) -> who may perform it
TRANSITIONS = {
    (SessionStatus.PENDING, SessionStatus.CONFIRMED): MENTOR_ONLY,
    (SessionStatus.PENDING, SessionStatus.CANCELLED): PARTICIPANTS,
    (SessionStatus.CONFIRMED, SessionStatus.COMPLETED): PARTICIPANTS,
    (SessionStatus.CONFIRMED, SessionStatus.CANCELLED): PARTICIPANTS,
}


# ======================
# HELPER FUNCTIONS
# ======================

def _coerce_status(value) -> SessionStatus:
    try:
        return SessionStatus(value)
    except ValueError:
        raise InvalidTransition(f"Unknown session status: {value!r}")


def _get_session_or_404(db: Session, session_id: int) -> SessionModel:
    session = db.query(SessionModel).filter(SessionModel.id == session_id).first()
    if not session:
        raise NotFound("Session not found")
    return session


def check_transition(session: SessionModel, actor_id: int, new_status) -> SessionStatus:
    """
    Validate a status change without touching the store.

    Raises:
        PermissionDenied: actor is not a participant, or not the mentor for confirm
        InvalidTransition: current status is terminal or the edge does not exist
    """
    target = _coerce_status(new_status)
    current = SessionStatus(session.status)

    if not session.is_participant(actor_id):
        raise PermissionDenied("Not authorized to update this session")

    if current in TERMINAL_STATUSES:
        raise InvalidTransition(f"Session is already {current.value}")

    allowed = TRANSITIONS.get((current, target))
    if allowed is None:
        raise InvalidTransition(f"Cannot move a session from {current.value} to {target.value}")

    if allowed == MENTOR_ONLY and actor_id != session.mentor_id:
        raise PermissionDenied(f"Only the mentor can mark a session {target.value}")

    return target


def _award_completion(db: Session, session: SessionModel) -> None:
    """Progress points for both participants, as atomic increments."""
    awards = (
        (session.mentor_id, settings.XP_PER_SESSION_MENTOR),
        (session.learner_id, settings.XP_PER_SESSION_LEARNER),
    )
    for user_id, xp in awards:
        db.query(User).filter(User.id == user_id).update(
            {
                User.xp: User.xp + xp,
                User.sessions_completed: User.sessions_completed + 1,
            },
            synchronize_session=False,
        )


# ======================
# CREATE SESSION REQUEST
# ======================

def request_session(
    db: Session,
    skill_post_id: int,
    learner_id: int,
    message: Optional[str] = None,
) -> SessionModel:
    """
    Create a pending session for a learner against a skill post.

    Raises:
        NotFound: skill post or learner does not exist
        InvalidState: skill post is not active
        PermissionDenied: learner is banned or owns the skill post
        ValidationFailed: message is too long
    """
    if message is not None and len(message) > settings.MAX_MESSAGE_LENGTH:
        raise ValidationFailed(f"Message must be {settings.MAX_MESSAGE_LENGTH} characters or less")

    with store_guard(db, "request_session"):
        post = db.query(SkillPost).filter(SkillPost.id == skill_post_id).first()
        if not post:
            raise NotFound("Skill post not found")
        if not post.active:
            raise InvalidState("Skill post is not accepting session requests")

        learner = db.query(User).filter(User.id == learner_id).first()
        if not learner:
            raise NotFound("Learner not found")
        if learner.banned:
            raise PermissionDenied("Banned users cannot request sessions")

        # Prevent self-mentoring
        if post.mentor_id == learner_id:
            raise PermissionDenied("Cannot request a session on your own skill post")

        new_session = SessionModel(
            skill_post_id=post.id,
            skill_post_title=post.title,
            mentor_id=post.mentor_id,
            learner_id=learner_id,
            message=message,
            status=SessionStatus.PENDING.value,
            reviewed=False,
        )
        db.add(new_session)
        db.commit()
        db.refresh(new_session)

    logger.info(
        "Session %s requested (skill_post=%s, learner=%s, mentor=%s)",
        new_session.id, skill_post_id, learner_id, new_session.mentor_id,
    )
    return new_session


# ======================
# SESSION DETAIL
# ======================

def get_session(db: Session, session_id: int, actor_id: int) -> SessionModel:
    """Fetch a session visible to one of its participants."""
    with store_guard(db, "get_session"):
        session = _get_session_or_404(db, session_id)
    if not session.is_participant(actor_id):
        raise PermissionDenied("Not authorized to view this session")
    return session


# ======================
# STATUS TRANSITIONS
# ======================

def update_session_status(db: Session, session_id: int, actor_id: int, new_status) -> SessionModel:
    """
    Move a session along the lifecycle.

    The write is conditional on the status that was validated, so of two
    racing transitions only one lands; the other fails with
    InvalidTransition and leaves the store untouched.

    Args:
        db: Database session
        session_id: Session identifier
        actor_id: User performing the change
        new_status: Target status ("confirmed", "completed", "cancelled")

    Returns:
        The updated Session

    Raises:
        NotFound, PermissionDenied, InvalidTransition
    """
    with store_guard(db, "update_session_status"):
        session = _get_session_or_404(db, session_id)
        target = check_transition(session, actor_id, new_status)
        expected = session.status

        values = {
            SessionModel.status: target.value,
            SessionModel.updated_at: datetime.now(UTC),
        }
        if target == SessionStatus.CONFIRMED:
            values[SessionModel.jitsi_link] = session.jitsi_link or generate_meeting_url(session.id)

        updated = (
            db.query(SessionModel)
            .filter(SessionModel.id == session_id, SessionModel.status == expected)
            .update(values, synchronize_session=False)
        )
        if updated != 1:
            db.rollback()
            logger.warning(
                "Session %s changed concurrently; %s -> %s by user %s rejected",
                session_id, expected, target.value, actor_id,
            )
            raise InvalidTransition("Session status changed; reload and try again")

        if target == SessionStatus.COMPLETED:
            _award_completion(db, session)

        db.commit()
        db.refresh(session)

    logger.info("Session %s %s -> %s by user %s", session_id, expected, target.value, actor_id)
    return session


def confirm_session(db: Session, session_id: int, actor_id: int) -> SessionModel:
    return update_session_status(db, session_id, actor_id, SessionStatus.CONFIRMED)


def complete_session(db: Session, session_id: int, actor_id: int) -> SessionModel:
    return update_session_status(db, session_id, actor_id, SessionStatus.COMPLETED)


def cancel_session(db: Session, session_id: int, actor_id: int) -> SessionModel:
    return update_session_status(db, session_id, actor_id, SessionStatus.CANCELLED)
