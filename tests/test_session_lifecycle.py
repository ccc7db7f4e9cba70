"""
Session lifecycle tests: requests, the status state machine, its guards,
and the conditional write that settles racing transitions.
"""

import pytest

from skillswap_sessions.errors import (
    InvalidState,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    ValidationFailed,
)
from skillswap_sessions.models.session import Session as SessionModel
from skillswap_sessions.services import session_service
from skillswap_sessions.services.meeting_service import generate_meeting_url


# ======================
# SESSION REQUEST
# ======================

def test_request_session_creates_pending_session(db, skill_post, mentor, learner):
    session = session_service.request_session(db, skill_post.id, learner.id, "teach me X")

    assert session.id is not None
    assert session.status == "pending"
    assert session.mentor_id == mentor.id
    assert session.learner_id == learner.id
    assert session.skill_post_title == "Intro to Rust"
    assert session.message == "teach me X"
    assert session.reviewed is False
    assert session.jitsi_link is None


def test_request_session_unknown_skill_post(db, learner):
    with pytest.raises(NotFound):
        session_service.request_session(db, 999, learner.id, "hello")


def test_request_session_unknown_learner(db, skill_post):
    with pytest.raises(NotFound):
        session_service.request_session(db, skill_post.id, 999, "hello")


def test_request_session_inactive_post(db, skill_post, learner):
    skill_post.active = False
    db.commit()

    with pytest.raises(InvalidState):
        session_service.request_session(db, skill_post.id, learner.id, "hello")


def test_request_session_banned_learner(db, skill_post, learner):
    learner.banned = True
    db.commit()

    with pytest.raises(PermissionDenied):
        session_service.request_session(db, skill_post.id, learner.id, "hello")


def test_mentor_cannot_request_own_post(db, skill_post, mentor):
    with pytest.raises(PermissionDenied):
        session_service.request_session(db, skill_post.id, mentor.id, "hello")


def test_request_session_message_too_long(db, skill_post, learner):
    with pytest.raises(ValidationFailed):
        session_service.request_session(db, skill_post.id, learner.id, "x" * 1001)
    assert db.query(SessionModel).count() == 0


# ======================
# LEGAL TRANSITIONS
# ======================

def test_mentor_confirms_and_link_is_attached(db, make_session, mentor):
    session = make_session("pending")

    updated = session_service.confirm_session(db, session.id, mentor.id)

    assert updated.status == "confirmed"
    assert updated.jitsi_link == generate_meeting_url(session.id)
    assert updated.updated_at is not None


def test_confirm_reuses_existing_link(db, make_session, mentor):
    session = make_session("pending", jitsi_link="https://meet.jit.si/already-here")

    updated = session_service.confirm_session(db, session.id, mentor.id)

    assert updated.jitsi_link == "https://meet.jit.si/already-here"


@pytest.mark.parametrize("actor", ["mentor", "learner"])
def test_participant_cancels_pending(db, make_session, request, actor):
    session = make_session("pending")
    actor_id = request.getfixturevalue(actor).id

    updated = session_service.cancel_session(db, session.id, actor_id)

    assert updated.status == "cancelled"


@pytest.mark.parametrize("actor", ["mentor", "learner"])
def test_participant_completes_confirmed(db, make_session, request, actor):
    session = make_session("confirmed")
    actor_id = request.getfixturevalue(actor).id

    updated = session_service.complete_session(db, session.id, actor_id)

    assert updated.status == "completed"
    assert updated.reviewed is False


@pytest.mark.parametrize("actor", ["mentor", "learner"])
def test_participant_cancels_confirmed(db, make_session, request, actor):
    session = make_session("confirmed")
    actor_id = request.getfixturevalue(actor).id

    updated = session_service.cancel_session(db, session.id, actor_id)

    assert updated.status == "cancelled"


def test_completion_awards_progress_points(db, make_session, mentor, learner):
    session = make_session("confirmed")

    session_service.complete_session(db, session.id, learner.id)
    db.refresh(mentor)
    db.refresh(learner)

    assert mentor.xp == 50
    assert mentor.sessions_completed == 1
    assert learner.xp == 20
    assert learner.sessions_completed == 1


def test_cancellation_awards_nothing(db, make_session, mentor, learner):
    session = make_session("confirmed")

    session_service.cancel_session(db, session.id, mentor.id)
    db.refresh(mentor)

    assert mentor.xp == 0
    assert mentor.sessions_completed == 0


# ======================
# REJECTED TRANSITIONS
# ======================

def _status_of(session_factory, session_id):
    fresh = session_factory()
    try:
        return fresh.query(SessionModel).filter(SessionModel.id == session_id).one().status
    finally:
        fresh.close()


def test_pending_to_completed_is_invalid(db, session_factory, make_session, mentor):
    session = make_session("pending")

    with pytest.raises(InvalidTransition):
        session_service.update_session_status(db, session.id, mentor.id, "completed")
    assert _status_of(session_factory, session.id) == "pending"


def test_learner_cannot_confirm(db, session_factory, make_session, learner):
    session = make_session("pending")

    with pytest.raises(PermissionDenied):
        session_service.confirm_session(db, session.id, learner.id)
    assert _status_of(session_factory, session.id) == "pending"


def test_non_participant_cannot_touch_session(db, session_factory, make_session, stranger):
    session = make_session("pending")

    for status in ("confirmed", "cancelled", "completed"):
        with pytest.raises(PermissionDenied):
            session_service.update_session_status(db, session.id, stranger.id, status)
    assert _status_of(session_factory, session.id) == "pending"


@pytest.mark.parametrize("terminal", ["completed", "cancelled"])
@pytest.mark.parametrize("target", ["pending", "confirmed", "completed", "cancelled"])
def test_terminal_states_are_final(db, session_factory, make_session, mentor, terminal, target):
    session = make_session(terminal)

    with pytest.raises(InvalidTransition):
        session_service.update_session_status(db, session.id, mentor.id, target)
    assert _status_of(session_factory, session.id) == terminal


def test_transition_back_to_pending_is_invalid(db, make_session, mentor):
    session = make_session("confirmed")

    with pytest.raises(InvalidTransition):
        session_service.update_session_status(db, session.id, mentor.id, "pending")


def test_confirming_twice_is_invalid(db, make_session, mentor):
    session = make_session("confirmed", jitsi_link="https://meet.jit.si/skillswap-x")

    with pytest.raises(InvalidTransition):
        session_service.confirm_session(db, session.id, mentor.id)


def test_unknown_status_is_invalid(db, make_session, mentor):
    session = make_session("pending")

    with pytest.raises(InvalidTransition):
        session_service.update_session_status(db, session.id, mentor.id, "rejected")


def test_missing_session(db, mentor):
    with pytest.raises(NotFound):
        session_service.update_session_status(db, 999, mentor.id, "confirmed")


# ======================
# REACHABLE PATHS
# ======================

def test_only_lifecycle_paths_are_reachable(db, make_session, mentor, learner):
    targets = ["confirmed", "completed", "cancelled"]
    observed = set()

    def explore(path):
        observed.add(tuple(path))
        for target in targets:
            session = make_session(path[-1])
            for actor_id in (mentor.id, learner.id):
                try:
                    session_service.update_session_status(db, session.id, actor_id, target)
                except (InvalidTransition, PermissionDenied):
                    continue
                explore(path + [target])
                break

    explore(["pending"])

    assert observed == {
        ("pending",),
        ("pending", "confirmed"),
        ("pending", "cancelled"),
        ("pending", "confirmed", "completed"),
        ("pending", "confirmed", "cancelled"),
    }


# ======================
# CONCURRENCY
# ======================

def test_racing_transitions_one_wins(session_factory, make_session, mentor, learner):
    session = make_session("pending")
    db_mentor = session_factory()
    db_learner = session_factory()
    try:
        # Both requests read the pending session before either writes. The
        # identity map is weak, so the stale reads must stay referenced.
        stale_reads = [
            session_service.get_session(db_mentor, session.id, mentor.id),
            session_service.get_session(db_learner, session.id, learner.id),
        ]
        assert [s.status for s in stale_reads] == ["pending", "pending"]

        session_service.confirm_session(db_mentor, session.id, mentor.id)
        with pytest.raises(InvalidTransition):
            session_service.cancel_session(db_learner, session.id, learner.id)
    finally:
        db_mentor.close()
        db_learner.close()

    assert _status_of(session_factory, session.id) == "confirmed"


# ======================
# SESSION DETAIL
# ======================

def test_get_session_for_participant(db, make_session, learner):
    session = make_session("pending")
    assert session_service.get_session(db, session.id, learner.id).id == session.id


def test_get_session_hidden_from_others(db, make_session, stranger):
    session = make_session("pending")
    with pytest.raises(PermissionDenied):
        session_service.get_session(db, session.id, stranger.id)
