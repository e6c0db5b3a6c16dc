from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class CommentRead(BaseModel):
    comment_id: str = Field(..., description="Comment id")
    user_name: str = Field(..., description="Author's username")
    content: str = Field(..., description="Comment text")
    created_at: datetime = Field(..., description="When the comment was written (UTC)")
    time_since_posted: str = Field(..., description='Relative age, e.g. "5m ago"')
    created_by_viewer: bool = Field(False, description="The viewer wrote this comment")

    class Config:
        from_attributes = True


class PostRead(BaseModel):
    post_id: str = Field(..., description="Post id")
    content: str = Field(..., description="Post text")
    user_name: str = Field(..., description="Author's username")
    profile_picture: Optional[str] = Field(None, description="Author's profile picture URL")
    image_urls: List[str] = Field([], description="Image URLs in upload order")
    created_at: datetime = Field(..., description="When the post was created (UTC)")

    liked_by_viewer: bool = False
    saved_by_viewer: bool = False
    owned_by_viewer: bool = False

    like_count: int = 0
    comment_count: int = 0
    comments: List[CommentRead] = Field([], description="Comments, oldest first")

    class Config:
        from_attributes = True


class CommentCreate(BaseModel):
    content: str = Field(..., max_length=500, description="Comment text")


class CommentUpdate(BaseModel):
    content: str = Field(..., max_length=500, description="New comment text")


class MessageResponse(BaseModel):
    message: str
