# models/follower.py
from sqlalchemy import Column, DateTime, ForeignKey, String

from .base import Base, utcnow


class Follower(Base):
    __tablename__ = "followers"

    follower_user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    followed_user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Follower {self.follower_user_id}→{self.followed_user_id}>"
