"""Pytest fixtures: a throwaway sqlite store per test, plus seeded users and a skill post."""

from datetime import datetime, UTC, timedelta
from pathlib import Path
import sys

import pytest
from sqlalchemy.orm import sessionmaker

# Ensure project root is on sys.path so `import skillswap_sessions` works
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

from skillswap_sessions import models  # noqa: E402
from skillswap_sessions.database import Base, build_engine  # noqa: E402


# ======================
# TEST DATABASE SETUP
# ======================

@pytest.fixture
def engine(tmp_path):
    """File-backed so separate ORM sessions (and threads) can share it."""
    engine = build_engine(f"sqlite:///{tmp_path / 'skillswap-test.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


# ======================
# SEED DATA
# ======================

def _create_user(db, email, display_name, role, **extra):
    user = models.User(email=email, display_name=display_name, role=role, **extra)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def mentor(db):
    return _create_user(db, "mentor@test.com", "Test Mentor", "mentor", photo_url="https://img.test/mentor.png")


@pytest.fixture
def learner(db):
    return _create_user(db, "learner@test.com", "Test Learner", "learner")


@pytest.fixture
def stranger(db):
    return _create_user(db, "stranger@test.com", "Someone Else", "both")


@pytest.fixture
def admin(db):
    return _create_user(db, "admin@test.com", "Admin", "admin")


@pytest.fixture
def skill_post(db, mentor):
    post = models.SkillPost(
        mentor_id=mentor.id,
        title="Intro to Rust",
        description="Ownership, borrowing and lifetimes",
        tags=["rust", "systems"],
        experience_level="beginner",
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


@pytest.fixture
def make_session(db, skill_post, mentor, learner):
    """Insert a session directly in the given status."""
    created = []

    def _make(status="pending", created_at=None, mentor_id=None, learner_id=None, **extra):
        fields = {
            "skill_post_id": skill_post.id,
            "skill_post_title": skill_post.title,
            "mentor_id": mentor_id or mentor.id,
            "learner_id": learner_id or learner.id,
            "status": status,
            "created_at": created_at or (datetime.now(UTC) + timedelta(seconds=len(created))),
        }
        fields.update(extra)
        session = models.Session(**fields)
        db.add(session)
        db.commit()
        db.refresh(session)
        created.append(session)
        return session

    return _make
