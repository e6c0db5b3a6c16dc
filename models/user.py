# models/user.py
from sqlalchemy import Column, DateTime, String

from .base import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True)
    username = Column(String(256), unique=True, nullable=False, index=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)

    bio = Column(String(2000), nullable=True)
    profile_picture_url = Column(String(256), nullable=True)
    phone_number = Column(String(8), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<User id={self.id} username={self.username}>"
