# skillswap_sessions/models/__init__.py
# Import models in dependency order
from .user import User, UserRole
from .skill_post import SkillPost
from .session import Session, SessionStatus, TERMINAL_STATUSES
from .review import Review

__all__ = [
    "User",
    "UserRole",
    "SkillPost",
    "Session",
    "SessionStatus",
    "TERMINAL_STATUSES",
    "Review",
]
