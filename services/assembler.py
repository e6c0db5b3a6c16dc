"""Builds response-ready views of posts and profiles for a given viewer.

The functions are pure: they read already-loaded entities and never touch
the session. ``viewer_id`` may be None for anonymous callers, in which case
every viewer-relative flag is False.
"""
from datetime import datetime
from typing import Iterable, List, Optional

from core.config import settings
from models.post import Post
from models.user import User
from schemas.post import CommentRead, PostRead
from schemas.profile import ProfileRead
from services.policy import most_recent, order_comments, time_since


def assemble_post(
    post: Post,
    viewer_id: Optional[str],
    comment_limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> PostRead:
    """
    Single post view. `comment_limit` caps the comment thread to the most
    recent N for list views; the detail view passes None.
    """
    viewer_id = viewer_id or None
    comments = most_recent(order_comments(post.comments), comment_limit)

    return PostRead(
        post_id=post.id,
        content=post.content,
        user_name=post.user.username,
        profile_picture=post.user.profile_picture_url,
        image_urls=[image.image_url for image in post.images],
        created_at=post.created_at,
        liked_by_viewer=viewer_id is not None and any(l.user_id == viewer_id for l in post.likes),
        saved_by_viewer=viewer_id is not None and any(s.user_id == viewer_id for s in post.saves),
        owned_by_viewer=viewer_id is not None and post.user_id == viewer_id,
        like_count=len(post.likes),
        comment_count=len(post.comments),
        comments=[
            CommentRead(
                comment_id=c.id,
                user_name=c.user.username,
                content=c.content,
                created_at=c.created_at,
                time_since_posted=time_since(c.created_at, now),
                created_by_viewer=viewer_id is not None and c.user_id == viewer_id,
            )
            for c in comments
        ],
    )


def assemble_feed(posts: Iterable[Post], viewer_id: Optional[str]) -> List[PostRead]:
    """List view: keeps the store's order and caps every comment thread."""
    return [
        assemble_post(post, viewer_id, comment_limit=settings.FEED_COMMENT_LIMIT)
        for post in posts
    ]


def assemble_profile(
    user: User,
    followers_count: int,
    following_count: int,
    viewer_id: Optional[str],
    is_following: bool,
) -> ProfileRead:
    return ProfileRead(
        username=user.username,
        bio=user.bio,
        profile_picture_url=user.profile_picture_url or settings.DEFAULT_AVATAR_URL,
        followers_count=followers_count,
        following_count=following_count,
        is_current_user_profile=bool(viewer_id) and user.id == viewer_id,
        is_following=is_following,
    )
