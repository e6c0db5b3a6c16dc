# models/saved_post.py
from sqlalchemy import Column, DateTime, ForeignKey, String

from .base import Base, utcnow


class SavedPost(Base):
    __tablename__ = "saved_posts"

    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<SavedPost {self.user_id}→{self.post_id}>"
