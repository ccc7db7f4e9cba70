# skillswap_sessions/models/session.py
import enum

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, TIMESTAMP, Index
from sqlalchemy.orm import relationship

from skillswap_sessions.database import Base
from skillswap_sessions.models.user import utcnow


class SessionStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({SessionStatus.COMPLETED, SessionStatus.CANCELLED})


class Session(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    skill_post_id = Column(Integer, ForeignKey("skill_posts.id", ondelete="SET NULL"), nullable=True)
    skill_post_title = Column(String(200))
    mentor_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    learner_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    message = Column(Text)
    status = Column(String(20), nullable=False, default=SessionStatus.PENDING.value)
    scheduled_date = Column(TIMESTAMP(timezone=True))
    jitsi_link = Column(String(500))
    reviewed = Column(Boolean, nullable=False, default=False)
    review_id = Column(
        Integer,
        ForeignKey("reviews.id", ondelete="SET NULL", use_alter=True, name="fk_sessions_review_id"),
        nullable=True,
    )
    created_at = Column(TIMESTAMP(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), onupdate=utcnow)

    __table_args__ = (
        Index("ix_sessions_mentor_created", "mentor_id", "created_at"),
        Index("ix_sessions_learner_created", "learner_id", "created_at"),
    )

    # Relationships
    learner = relationship("User", foreign_keys=[learner_id], back_populates="learner_sessions")
    mentor = relationship("User", foreign_keys=[mentor_id], back_populates="mentor_sessions")
    skill_post = relationship("SkillPost", back_populates="sessions")
    review = relationship("Review", foreign_keys="Review.session_id", back_populates="session", uselist=False)

    def is_participant(self, user_id) -> bool:
        return user_id in (self.mentor_id, self.learner_id)

    def counterparty_id(self, user_id):
        """The other participant from `user_id`'s point of view."""
        return self.learner_id if self.mentor_id == user_id else self.mentor_id
