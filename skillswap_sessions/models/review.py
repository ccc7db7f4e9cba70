# skillswap_sessions/models/review.py
from sqlalchemy import Column, Integer, Text, ForeignKey, TIMESTAMP, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship

from skillswap_sessions.database import Base
from skillswap_sessions.models.user import utcnow


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False)
    skill_post_id = Column(Integer, ForeignKey("skill_posts.id", ondelete="SET NULL"), nullable=True)
    learner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    mentor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), default=utcnow)

    # Constraints
    __table_args__ = (
        UniqueConstraint("session_id", name="uq_reviews_session_id"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_rating_range"),
    )

    # Relationships
    session = relationship("Session", foreign_keys=[session_id], back_populates="review")
    learner = relationship("User", foreign_keys=[learner_id])
    mentor = relationship("User", foreign_keys=[mentor_id])
