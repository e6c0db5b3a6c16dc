"""Profiles, the follow graph and post lists (feed, profile, saved)."""
import logging
from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import AppError, ConflictError, InputValidationError, NotFoundError
from crud import posts as posts_crud
from crud import social as social_crud
from crud import users as users_crud
from models.user import User
from schemas.post import PostRead
from schemas.profile import ProfilePage, ProfileRead
from services.assembler import assemble_feed, assemble_profile
from services.images import delete_blobs, read_uploads, store_blobs
from utils.blob_store import BlobStore

logger = logging.getLogger(__name__)

MAX_BIO_LENGTH = 2000


def _viewer_id(viewer: Optional[User]) -> Optional[str]:
    return viewer.id if viewer is not None else None


async def _load_user(db: AsyncSession, username: str) -> User:
    user = await users_crud.get_user_by_username(db, username)
    if user is None:
        logger.warning("User '%s' not found", username)
        raise NotFoundError("User not found")
    return user


async def build_profile(db: AsyncSession, user: User, viewer: Optional[User]) -> ProfileRead:
    viewer_id = _viewer_id(viewer)
    return assemble_profile(
        user,
        followers_count=await social_crud.follower_count(db, user.id),
        following_count=await social_crud.following_count(db, user.id),
        viewer_id=viewer_id,
        is_following=await social_crud.is_following(db, viewer_id, user.id),
    )


async def get_profile(db: AsyncSession, username: Optional[str], viewer: Optional[User]) -> ProfilePage:
    """
    Profile header plus the user's posts, newest first. Without a username
    the viewer's own profile is returned; the router makes sure one exists.
    """
    user = await _load_user(db, username) if username else viewer
    if user is None:
        raise NotFoundError("User not found")

    posts = await posts_crud.get_posts_by_user(db, user.id)
    return ProfilePage(
        profile=await build_profile(db, user, viewer),
        posts=assemble_feed(posts, _viewer_id(viewer)),
    )


async def follow(db: AsyncSession, actor: User, username: str) -> str:
    actor_id = actor.id
    target = await _load_user(db, username)
    target_id = target.id
    if target_id == actor_id:
        raise InputValidationError("You cannot follow yourself.")

    if await social_crud.is_following(db, actor_id, target_id):
        return "Already following this user"
    try:
        await social_crud.add_follower(db, actor_id, target_id)
    except ConflictError:
        logger.info("User %s already follows %s", actor_id, target_id)
        return "Already following this user"
    return "User followed successfully"


async def unfollow(db: AsyncSession, actor: User, username: str) -> str:
    target = await _load_user(db, username)
    if not await social_crud.remove_follower(db, actor.id, target.id):
        return "You are not following this user"
    return "User unfollowed successfully"


async def get_feed(db: AsyncSession, viewer: Optional[User]) -> List[PostRead]:
    posts = await posts_crud.get_all_posts(db)
    return assemble_feed(posts, _viewer_id(viewer))


async def get_saved_posts(db: AsyncSession, actor: User) -> List[PostRead]:
    posts = await posts_crud.get_saved_posts_by_user(db, actor.id)
    return assemble_feed(posts, actor.id)


async def edit_profile(
    db: AsyncSession,
    blob_store: BlobStore,
    actor: User,
    bio: Optional[str],
    image: Optional[UploadFile],
) -> ProfileRead:
    """Updates the bio and, when a new picture is sent, swaps the picture blob."""
    if bio is not None and len(bio) > MAX_BIO_LENGTH:
        raise InputValidationError(f"Bio cannot exceed {MAX_BIO_LENGTH} characters.")

    uploads = await read_uploads([image] if image is not None else None)
    new_urls = await store_blobs(blob_store, uploads)
    old_url = actor.profile_picture_url

    if bio is not None:
        actor.bio = bio
    if new_urls:
        actor.profile_picture_url = new_urls[0]
    try:
        await users_crud.update_user(db, actor)
    except AppError:
        await delete_blobs(blob_store, new_urls)
        raise

    if new_urls and old_url:
        await delete_blobs(blob_store, [old_url])
    return await build_profile(db, actor, actor)
