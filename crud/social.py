"""Follow, like and save relations.

Every relation row is an existence marker keyed by a pair of ids. Counts
are always computed from the rows, never stored.
"""
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import storage_call
from models.follower import Follower
from models.like import Like
from models.saved_post import SavedPost


async def _exists(db: AsyncSession, stmt) -> bool:
    result = await db.execute(select(stmt.exists()))
    return bool(result.scalar())


async def _count(db: AsyncSession, stmt) -> int:
    result = await db.execute(stmt)
    return result.scalar_one() or 0


# ---- followers ----

@storage_call("checking a follow relation")
async def is_following(db: AsyncSession, follower_id: Optional[str], followed_id: Optional[str]) -> bool:
    if not follower_id or not followed_id:
        return False
    return await _exists(
        db,
        select(Follower).where(
            Follower.follower_user_id == follower_id,
            Follower.followed_user_id == followed_id,
        ),
    )


@storage_call("adding a follower")
async def add_follower(db: AsyncSession, follower_id: str, followed_id: str) -> None:
    db.add(Follower(follower_user_id=follower_id, followed_user_id=followed_id))
    await db.commit()


@storage_call("removing a follower")
async def remove_follower(db: AsyncSession, follower_id: str, followed_id: str) -> bool:
    result = await db.execute(
        delete(Follower).where(
            Follower.follower_user_id == follower_id,
            Follower.followed_user_id == followed_id,
        )
    )
    await db.commit()
    return result.rowcount > 0


@storage_call("counting followers")
async def follower_count(db: AsyncSession, user_id: str) -> int:
    return await _count(
        db, select(func.count()).select_from(Follower).where(Follower.followed_user_id == user_id)
    )


@storage_call("counting followed users")
async def following_count(db: AsyncSession, user_id: str) -> int:
    return await _count(
        db, select(func.count()).select_from(Follower).where(Follower.follower_user_id == user_id)
    )


# ---- likes ----

@storage_call("checking a like")
async def has_liked(db: AsyncSession, post_id: str, user_id: Optional[str]) -> bool:
    if not post_id or not user_id:
        return False
    return await _exists(db, select(Like).where(Like.post_id == post_id, Like.user_id == user_id))


@storage_call("adding a like")
async def add_like(db: AsyncSession, post_id: str, user_id: str) -> None:
    db.add(Like(post_id=post_id, user_id=user_id))
    await db.commit()


@storage_call("removing a like")
async def remove_like(db: AsyncSession, post_id: str, user_id: str) -> bool:
    result = await db.execute(
        delete(Like).where(Like.post_id == post_id, Like.user_id == user_id)
    )
    await db.commit()
    return result.rowcount > 0


@storage_call("counting likes")
async def like_count(db: AsyncSession, post_id: str) -> int:
    return await _count(db, select(func.count()).select_from(Like).where(Like.post_id == post_id))


# ---- saved posts ----

@storage_call("checking a saved post")
async def has_saved(db: AsyncSession, post_id: str, user_id: Optional[str]) -> bool:
    if not post_id or not user_id:
        return False
    return await _exists(
        db, select(SavedPost).where(SavedPost.post_id == post_id, SavedPost.user_id == user_id)
    )


@storage_call("saving a post")
async def add_saved_post(db: AsyncSession, post_id: str, user_id: str) -> None:
    db.add(SavedPost(post_id=post_id, user_id=user_id))
    await db.commit()


@storage_call("removing a saved post")
async def remove_saved_post(db: AsyncSession, post_id: str, user_id: str) -> bool:
    result = await db.execute(
        delete(SavedPost).where(SavedPost.post_id == post_id, SavedPost.user_id == user_id)
    )
    await db.commit()
    return result.rowcount > 0
