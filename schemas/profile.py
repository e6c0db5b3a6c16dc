from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.post import PostRead


class ProfileRead(BaseModel):
    username: str = Field(..., description="Username")
    bio: Optional[str] = Field(None, max_length=2000, description="About the user")
    profile_picture_url: str = Field(..., description="Profile picture URL, default avatar when unset")
    followers_count: int = Field(0, description="Users following this profile")
    following_count: int = Field(0, description="Users this profile follows")
    is_current_user_profile: bool = Field(False, description="The viewer owns this profile")
    is_following: bool = Field(False, description="The viewer follows this profile")

    class Config:
        from_attributes = True


class ProfilePage(BaseModel):
    profile: ProfileRead
    posts: List[PostRead] = Field([], description="The profile's posts, newest first")


class FollowRequest(BaseModel):
    username: str = Field(..., min_length=1, description="User to follow or unfollow")
