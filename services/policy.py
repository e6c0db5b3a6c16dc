"""Ownership checks and comment ordering.

Nothing here touches storage: the functions only inspect entities that were
already loaded and the id of the actor making the request.
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from core.errors import ForbiddenError, InputValidationError
from core.security import verify_password
from models.comment import Comment
from models.post import Post
from models.user import User

logger = logging.getLogger(__name__)


def ensure_post_owner(post: Post, actor_id: Optional[str]) -> None:
    if not actor_id or post.user_id != actor_id:
        raise ForbiddenError("You are not authorized to modify this post.")


def ensure_comment_author(comment: Comment, actor_id: Optional[str]) -> None:
    if not actor_id or comment.user_id != actor_id:
        raise ForbiddenError("You are not authorized to modify this comment.")


def ensure_password(user: User, password: str) -> None:
    """Re-verifies the actor's own password before destructive account changes."""
    if not password or not verify_password(password, user.password_hash):
        raise InputValidationError("Incorrect password. Unable to delete account.")


def order_comments(comments: Iterable[Comment]) -> List[Comment]:
    """Oldest first, the reverse of the post feed."""
    return sorted(comments, key=lambda c: as_utc(c.created_at))


def most_recent(comments: Sequence[Comment], limit: Optional[int]) -> List[Comment]:
    """Keeps the newest `limit` comments of an oldest-first list, order unchanged."""
    if limit is None or len(comments) <= limit:
        return list(comments)
    if limit <= 0:
        return []
    return list(comments[-limit:])


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; every stored timestamp is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def time_since(created_at: datetime, now: Optional[datetime] = None) -> str:
    """Humanized age of a timestamp: "5m ago", "3h ago", "2d ago"."""
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    created_at = as_utc(created_at)

    if created_at > now:
        logger.warning("Timestamp is in the future, clamping to now: %s", created_at.isoformat())
        created_at = now

    elapsed = (now - created_at).total_seconds()
    if elapsed < 60 * 60:
        return f"{int(elapsed // 60)}m ago"
    if elapsed < 24 * 60 * 60:
        return f"{int(elapsed // 3600)}h ago"
    return f"{int(elapsed // 86400)}d ago"
