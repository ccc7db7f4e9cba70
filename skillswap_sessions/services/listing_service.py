"""
Dashboard listing of a user's sessions, enriched with participant profiles.

Profile lookups fan out concurrently and are individually time-bounded.
A failed lookup never drops a session: the participant is replaced with a
placeholder and the failure is logged.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from skillswap_sessions.config import settings
from skillswap_sessions.database import store_guard
from skillswap_sessions.errors import ValidationFailed
from skillswap_sessions.models.session import Session as SessionModel
from skillswap_sessions.schemas.session import EnrichedSession, Participant, SessionBase
from skillswap_sessions.services.profile_service import DatabaseProfileProvider, ProfileProvider

logger = logging.getLogger(__name__)

ROLE_FILTERS = ("mentor", "learner", "both")


def _query_sessions(db: Session, user_id: int, role_filter: str) -> List[SessionModel]:
    query = db.query(SessionModel)
    if role_filter == "mentor":
        query = query.filter(SessionModel.mentor_id == user_id)
    elif role_filter == "learner":
        query = query.filter(SessionModel.learner_id == user_id)
    else:
        # A single OR query returns each session once even when both roles match.
        query = query.filter(
            or_(SessionModel.mentor_id == user_id, SessionModel.learner_id == user_id)
        )
    return query.order_by(SessionModel.created_at.desc(), SessionModel.id.desc()).all()


async def _lookup(provider: ProfileProvider, user_id: int, timeout: float):
    try:
        return await asyncio.wait_for(provider.get_user_profile(user_id), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Profile lookup for user %s timed out after %ss", user_id, timeout)
    except Exception as exc:
        logger.warning("Profile lookup for user %s failed: %s", user_id, exc)
    return None


async def fetch_profiles(
    provider: ProfileProvider,
    user_ids: Iterable[int],
    timeout: Optional[float] = None,
) -> Dict[int, object]:
    """Look up each distinct user id concurrently; failures map to None."""
    if timeout is None:
        timeout = settings.PROFILE_LOOKUP_TIMEOUT_SECONDS
    unique_ids = list(dict.fromkeys(user_ids))
    results = await asyncio.gather(*(_lookup(provider, uid, timeout) for uid in unique_ids))
    return dict(zip(unique_ids, results))


def _participant(user_id: int, profile, fallback_name: str) -> Participant:
    if profile is None:
        return Participant(id=user_id, name=fallback_name, avatar=None, placeholder=True)
    return Participant(
        id=user_id,
        name=getattr(profile, "display_name", None) or fallback_name,
        avatar=getattr(profile, "photo_url", None),
    )


def enrich_session(session: SessionModel, user_id: int, profiles: Dict[int, object]) -> EnrichedSession:
    base = SessionBase.model_validate(session, from_attributes=True)
    my_role = "mentor" if session.mentor_id == user_id else "learner"
    return EnrichedSession(
        **base.model_dump(),
        my_role=my_role,
        mentor=_participant(session.mentor_id, profiles.get(session.mentor_id), "Mentor"),
        learner=_participant(session.learner_id, profiles.get(session.learner_id), "Learner"),
    )


async def list_sessions_for_user(
    db: Session,
    user_id: int,
    role_filter: str = "both",
    profile_provider: Optional[ProfileProvider] = None,
    lookup_timeout: Optional[float] = None,
) -> List[EnrichedSession]:
    """
    Sessions where the user is mentor and/or learner, newest first.

    Args:
        db: Database session
        user_id: User whose dashboard is being built
        role_filter: "mentor", "learner" or "both"
        profile_provider: Profile collaborator (defaults to the users table)
        lookup_timeout: Per-lookup bound in seconds

    Returns:
        One EnrichedSession per session, including those whose profile
        lookups failed
    """
    if role_filter not in ROLE_FILTERS:
        raise ValidationFailed(f"role_filter must be one of {', '.join(ROLE_FILTERS)}")

    provider = profile_provider or DatabaseProfileProvider()

    with store_guard(db, "list_sessions_for_user"):
        sessions = await asyncio.to_thread(_query_sessions, db, user_id, role_filter)

    participant_ids = []
    for session in sessions:
        participant_ids.extend((session.mentor_id, session.learner_id))
    profiles = await fetch_profiles(provider, participant_ids, lookup_timeout)

    return [enrich_session(session, user_id, profiles) for session in sessions]
