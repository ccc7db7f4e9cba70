import enum
from datetime import datetime, UTC

from sqlalchemy import Column, Integer, String, Boolean, Float, TIMESTAMP, CheckConstraint
from sqlalchemy.orm import relationship

from skillswap_sessions.database import Base


def utcnow():
    return datetime.now(UTC)


class UserRole(str, enum.Enum):
    LEARNER = "learner"
    MENTOR = "mentor"
    BOTH = "both"
    ADMIN = "admin"


# ---------------- USER (PROFILE DOCUMENT) ----------------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    display_name = Column(String(100))
    email = Column(String(255), unique=True, index=True, nullable=False)
    photo_url = Column(String(500))
    role = Column(String(20), nullable=False, default=UserRole.LEARNER.value)
    bio = Column(String(500))

    # Written only by the rating aggregator
    rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)

    # Progress points
    xp = Column(Integer, nullable=False, default=0)
    sessions_completed = Column(Integer, nullable=False, default=0)

    # Written only by admin action
    banned = Column(Boolean, nullable=False, default=False)
    ban_reason = Column(String(500))

    created_at = Column(TIMESTAMP(timezone=True), default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("review_count >= 0", name="check_user_review_count"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="check_user_rating_range"),
    )

    skill_posts = relationship("SkillPost", back_populates="mentor")
    learner_sessions = relationship("Session", foreign_keys="Session.learner_id", back_populates="learner")
    mentor_sessions = relationship("Session", foreign_keys="Session.mentor_id", back_populates="mentor")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
