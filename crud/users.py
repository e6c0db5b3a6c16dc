from typing import List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import storage_call
from models.comment import Comment
from models.follower import Follower
from models.like import Like
from models.post import Post, PostImage
from models.saved_post import SavedPost
from models.user import User


@storage_call("retrieving a user")
async def get_user_by_id(db: AsyncSession, user_id: str) -> Optional[User]:
    return await db.get(User, user_id)


@storage_call("retrieving a user by username")
async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


@storage_call("retrieving a user by email")
async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


@storage_call("adding a user")
async def add_user(db: AsyncSession, user: User) -> User:
    db.add(user)
    await db.commit()
    return user


@storage_call("updating a user")
async def update_user(db: AsyncSession, user: User) -> User:
    db.add(user)
    await db.commit()
    return user


@storage_call("deleting a user")
async def delete_user(db: AsyncSession, user_id: str) -> Optional[List[str]]:
    """
    Removes the account and every row that depends on it in one transaction.

    Returns the blob URLs left behind (post images and the profile picture),
    or None when the user does not exist.
    """
    user = await db.get(User, user_id)
    if user is None:
        return None

    result = await db.execute(select(Post.id).where(Post.user_id == user_id))
    post_ids = list(result.scalars().all())
    result = await db.execute(select(PostImage.image_url).where(PostImage.post_id.in_(post_ids)))
    blob_urls = list(result.scalars().all())
    if user.profile_picture_url:
        blob_urls.append(user.profile_picture_url)

    for stmt in (
        delete(PostImage).where(PostImage.post_id.in_(post_ids)),
        delete(Comment).where(or_(Comment.post_id.in_(post_ids), Comment.user_id == user_id)),
        delete(Like).where(or_(Like.post_id.in_(post_ids), Like.user_id == user_id)),
        delete(SavedPost).where(or_(SavedPost.post_id.in_(post_ids), SavedPost.user_id == user_id)),
        delete(Follower).where(
            or_(Follower.follower_user_id == user_id, Follower.followed_user_id == user_id)
        ),
        delete(Post).where(Post.user_id == user_id),
        delete(User).where(User.id == user_id),
    ):
        await db.execute(stmt.execution_options(synchronize_session=False))
    await db.commit()
    db.expunge(user)
    return blob_urls
