"""Importing the package registers every mapped class on ``Base``."""
from .base import Base
from .user import User
from .post import Post, PostImage
from .comment import Comment
from .like import Like
from .saved_post import SavedPost
from .follower import Follower

__all__ = [
    "Base",
    "User",
    "Post",
    "PostImage",
    "Comment",
    "Like",
    "SavedPost",
    "Follower",
]
