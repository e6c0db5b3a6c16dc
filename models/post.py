# models/post.py
from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class Post(Base):
    __tablename__ = "posts"

    id = Column(String(36), primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(String(2000), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    # Nothing is loaded implicitly: every query names its eager loads.
    user = relationship("User", lazy="raise")
    images = relationship("PostImage", order_by="PostImage.created_at", lazy="raise")
    comments = relationship("Comment", order_by="Comment.created_at", lazy="raise")
    likes = relationship("Like", lazy="raise")
    saves = relationship("SavedPost", lazy="raise")

    def __repr__(self):
        return f"<Post id={self.id} user_id={self.user_id}>"


class PostImage(Base):
    __tablename__ = "post_images"

    id = Column(String(36), primary_key=True, index=True)
    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = Column(String(256), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<PostImage id={self.id} url={self.image_url}>"
