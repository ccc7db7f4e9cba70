from sqlalchemy import Column, Integer, String, Text, Boolean, Float, ForeignKey, TIMESTAMP, JSON, CheckConstraint
from sqlalchemy.orm import relationship

from skillswap_sessions.database import Base
from skillswap_sessions.models.user import utcnow


# skillswap_sessions/models/skill_post.py
class SkillPost(Base):
    __tablename__ = "skill_posts"

    id = Column(Integer, primary_key=True, index=True)
    mentor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    tags = Column(JSON, default=list)
    experience_level = Column(String(50))
    session_length = Column(Integer, default=60)  # minutes
    active = Column(Boolean, nullable=False, default=True)

    # Written only by the rating aggregator
    rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)

    created_at = Column(TIMESTAMP(timezone=True), default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("review_count >= 0", name="check_post_review_count"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="check_post_rating_range"),
    )

    mentor = relationship("User", back_populates="skill_posts")
    sessions = relationship("Session", back_populates="skill_post")
