# skillswap_sessions/services/review_service.py
"""
Review Service Layer
Business logic for review submission and rating aggregation
"""

import logging
from typing import Optional, Dict, Any, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from skillswap_sessions.config import settings
from skillswap_sessions.database import store_guard
from skillswap_sessions.errors import (
    Conflict,
    InvalidState,
    NotFound,
    PermissionDenied,
    SkillSwapError,
    ValidationFailed,
)
from skillswap_sessions.models.review import Review
from skillswap_sessions.models.session import Session as SessionModel, SessionStatus
from skillswap_sessions.models.user import User
from skillswap_sessions.services import rating_service

logger = logging.getLogger(__name__)


# ======================
# VALIDATION HELPERS
# ======================

def _check_review_preconditions(session: Optional[SessionModel], learner_id: int) -> None:
    """Ordered checks; the first failure wins."""
    if not session:
        raise NotFound("Session not found")
    if session.learner_id != learner_id:
        raise PermissionDenied("Only the learner can review")
    if session.status != SessionStatus.COMPLETED.value:
        raise InvalidState("Cannot review a session that isn't completed")
    if session.reviewed:
        raise Conflict("Session already reviewed")


def check_review_eligibility(db: Session, session_id: int, learner_id: int) -> Dict[str, Any]:
    """
    Check if a learner can review a specific session.

    Returns:
        Dictionary with eligibility status and reason
    """
    with store_guard(db, "check_review_eligibility"):
        session = db.query(SessionModel).filter(SessionModel.id == session_id).first()
    try:
        _check_review_preconditions(session, learner_id)
    except SkillSwapError as exc:
        return {"can_review": False, "reason": exc.message, "session_id": session_id}
    return {"can_review": True, "reason": "Can review", "session_id": session_id}


# ======================
# REVIEW SUBMISSION
# ======================

def submit_review(
    db: Session,
    session_id: int,
    learner_id: int,
    rating: int,
    comment: Optional[str] = None,
) -> Review:
    """
    Submit the single review for a completed session.

    The review insert, the session's reviewed flag and both rating
    aggregates commit in one transaction. The unique constraint on
    reviews.session_id decides between racing submissions; the loser
    gets Conflict.

    Args:
        db: Database session
        session_id: Session identifier
        learner_id: Learner user ID
        rating: Rating value (1-5)
        comment: Optional text comment

    Returns:
        The created Review

    Raises:
        ValidationFailed, NotFound, PermissionDenied, InvalidState, Conflict, Unavailable
    """
    rating_service.validate_rating(rating)
    if comment and len(comment) > settings.MAX_COMMENT_LENGTH:
        raise ValidationFailed(f"Comment must be {settings.MAX_COMMENT_LENGTH} characters or less")

    with store_guard(db, "submit_review"):
        session = db.query(SessionModel).filter(SessionModel.id == session_id).first()
        _check_review_preconditions(session, learner_id)

        review = Review(
            session_id=session.id,
            skill_post_id=session.skill_post_id,
            mentor_id=session.mentor_id,
            learner_id=learner_id,
            rating=rating,
            comment=comment,
        )
        db.add(review)
        try:
            db.flush()
        except IntegrityError as exc:
            db.rollback()
            logger.warning("Duplicate review for session %s rejected by constraint", session_id)
            raise Conflict("Session already reviewed") from exc

        # One-way latch; guarded so it flips exactly once.
        latched = (
            db.query(SessionModel)
            .filter(
                SessionModel.id == session.id,
                SessionModel.reviewed.is_(False),
                SessionModel.status == SessionStatus.COMPLETED.value,
            )
            .update(
                {SessionModel.reviewed: True, SessionModel.review_id: review.id},
                synchronize_session=False,
            )
        )
        if latched != 1:
            db.rollback()
            logger.warning("Session %s was reviewed concurrently", session_id)
            raise Conflict("Session already reviewed")

        rating_service.apply_rating_to_skill_post(db, session.skill_post_id, rating)
        rating_service.apply_rating_to_user(db, session.mentor_id, rating)

        db.query(User).filter(User.id == learner_id).update(
            {User.xp: User.xp + settings.XP_PER_REVIEW},
            synchronize_session=False,
        )

        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            logger.warning("Duplicate review for session %s rejected at commit", session_id)
            raise Conflict("Session already reviewed") from exc
        db.refresh(review)

    logger.info(
        "Review %s submitted for session %s (mentor=%s, rating=%s)",
        review.id, session_id, review.mentor_id, rating,
    )
    return review


# ======================
# REVIEW RETRIEVAL
# ======================

def get_reviews_for_user(
    db: Session,
    mentor_id: int,
    limit: int = 10,
    offset: int = 0,
) -> List[Review]:
    """
    Reviews received by a mentor, newest first.

    Args:
        db: Database session
        mentor_id: Mentor user ID
        limit: Maximum reviews to return
        offset: Number of reviews to skip
    """
    if limit < 1 or offset < 0:
        raise ValidationFailed("limit must be positive and offset non-negative")
    with store_guard(db, "get_reviews_for_user"):
        return (
            db.query(Review)
            .filter(Review.mentor_id == mentor_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
