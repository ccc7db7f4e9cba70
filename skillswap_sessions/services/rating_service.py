# skillswap_sessions/services/rating_service.py
"""
Rating aggregation for mentors and skill posts.

Aggregates are maintained incrementally: each new review folds one rating
into the stored (average, count) pair. A full rescan exists only for the
admin reconciliation report.
"""

import logging
from typing import Optional, Tuple, Dict, Any, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from skillswap_sessions.database import store_guard
from skillswap_sessions.errors import ValidationFailed
from skillswap_sessions.models.review import Review
from skillswap_sessions.models.skill_post import SkillPost
from skillswap_sessions.models.user import User

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
DRIFT_TOLERANCE = 1e-9


def validate_rating(rating) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationFailed("Rating must be an integer between 1 and 5")
    if not (MIN_RATING <= rating <= MAX_RATING):
        raise ValidationFailed("Rating must be between 1 and 5")
    return rating


def apply_new_rating(current_average: float, current_count: int, new_rating: int) -> Tuple[float, int]:
    """
    Fold one rating into a running mean.

    Args:
        current_average: Stored average (ignored when current_count is 0)
        current_count: Number of ratings already folded in
        new_rating: Rating value (1-5)

    Returns:
        Tuple of (new_average, new_count)
    """
    validate_rating(new_rating)
    if current_count < 0:
        raise ValidationFailed("Review count cannot be negative")

    new_count = current_count + 1
    if current_count == 0:
        return float(new_rating), new_count

    new_average = (current_average * current_count + new_rating) / new_count
    return new_average, new_count


# ======================
# AGGREGATE WRITERS
# ======================

def _fold_rating(db: Session, model, entity_id: int, rating: int):
    # Row lock keeps concurrent reviews from reading the same (average, count).
    entity = (
        db.query(model)
        .filter(model.id == entity_id)
        .with_for_update()
        .first()
    )
    if entity is None:
        return None

    entity.rating, entity.review_count = apply_new_rating(
        entity.rating or 0.0,
        entity.review_count or 0,
        rating,
    )
    db.flush()
    return entity


def apply_rating_to_skill_post(db: Session, skill_post_id: Optional[int], rating: int) -> Optional[SkillPost]:
    """Fold a rating into a skill post's aggregate. Missing posts are skipped."""
    if skill_post_id is None:
        return None
    post = _fold_rating(db, SkillPost, skill_post_id, rating)
    if post is None:
        logger.warning("Skill post %s missing; rating not aggregated", skill_post_id)
    return post


def apply_rating_to_user(db: Session, user_id: int, rating: int) -> Optional[User]:
    """Fold a rating into a mentor's aggregate. Missing users are skipped."""
    user = _fold_rating(db, User, user_id, rating)
    if user is None:
        logger.warning("Mentor %s missing; rating not aggregated", user_id)
    return user


# ======================
# ADMIN MAINTENANCE
# ======================

def _actual_aggregates(db: Session, column) -> Dict[int, Tuple[float, int]]:
    rows = (
        db.query(column, func.avg(Review.rating), func.count(Review.id))
        .filter(column.isnot(None))
        .group_by(column)
        .all()
    )
    return {entity_id: (float(avg), int(count)) for entity_id, avg, count in rows}


def _collect_drift(entities, actual, label: str) -> List[Dict[str, Any]]:
    drifted = []
    for entity in entities:
        actual_rating, actual_count = actual.get(entity.id, (0.0, 0))
        stored_rating = entity.rating or 0.0
        stored_count = entity.review_count or 0
        if stored_count != actual_count or abs(stored_rating - actual_rating) > DRIFT_TOLERANCE:
            drifted.append({
                "entity": label,
                "entity_id": entity.id,
                "stored_rating": stored_rating,
                "stored_count": stored_count,
                "actual_rating": actual_rating,
                "actual_count": actual_count,
            })
    return drifted


def recalculate_ratings(db: Session) -> Dict[str, Any]:
    """
    Compare every stored aggregate with a full rescan of the reviews table.

    Returns:
        Dictionary with the number of entities checked and the drifted ones
    """
    with store_guard(db, "recalculate_ratings"):
        users = db.query(User).all()
        posts = db.query(SkillPost).all()

        drifted = _collect_drift(users, _actual_aggregates(db, Review.mentor_id), "user")
        drifted += _collect_drift(posts, _actual_aggregates(db, Review.skill_post_id), "skill_post")

    if drifted:
        logger.warning("Rating reconciliation found %d drifted aggregates", len(drifted))

    return {
        "users_checked": len(users),
        "skill_posts_checked": len(posts),
        "drifted": drifted,
        "message": "Rating reconciliation complete",
    }
