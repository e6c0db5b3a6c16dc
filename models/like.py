# models/like.py
from sqlalchemy import Column, DateTime, ForeignKey, String

from .base import Base, utcnow


class Like(Base):
    __tablename__ = "likes"

    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Like {self.user_id}→{self.post_id}>"
