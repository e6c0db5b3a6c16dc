"""Post and comment operations as seen from the API boundary.

Each operation runs the ownership policy once, performs a single store
mutation and answers with the freshly re-assembled post view.
"""
import logging
from typing import List, Optional, Sequence

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import AppError, ConflictError, InputValidationError, NotFoundError
from crud import posts as posts_crud
from crud import social as social_crud
from models.comment import Comment
from models.post import Post
from models.user import User
from schemas.post import PostRead
from services.assembler import assemble_post
from services.images import (
    delete_blobs,
    images_to_delete,
    read_uploads,
    store_images,
    validate_uploads,
)
from services.policy import ensure_post_owner
from utils.blob_store import BlobStore

logger = logging.getLogger(__name__)

MAX_POST_LENGTH = 2000
MAX_COMMENT_LENGTH = 500


def _clean_content(content: Optional[str], max_length: int, what: str) -> str:
    if content is None or not content.strip():
        raise InputValidationError(f"{what} content cannot be empty.")
    if len(content) > max_length:
        raise InputValidationError(f"{what} content cannot exceed {max_length} characters.")
    return content


async def _load_post(db: AsyncSession, post_id: str) -> Post:
    post = await posts_crud.get_post_by_id(db, post_id)
    if post is None:
        raise NotFoundError("Post not found.")
    return post


async def get_post_view(db: AsyncSession, post_id: str, viewer_id: Optional[str]) -> PostRead:
    """Detail view: the whole comment thread, uncapped."""
    post = await _load_post(db, post_id)
    return assemble_post(post, viewer_id)


async def create_post(
    db: AsyncSession,
    blob_store: BlobStore,
    actor: User,
    content: Optional[str],
    files: Optional[Sequence[UploadFile]],
) -> PostRead:
    actor_id = actor.id
    content = _clean_content(content, MAX_POST_LENGTH, "Post")
    uploads = await read_uploads(files)
    if not uploads:
        raise InputValidationError("At least one image is required.")

    images = await store_images(blob_store, uploads)
    image_urls = [image.image_url for image in images]
    post = Post(user_id=actor_id, content=content)
    try:
        await posts_crud.add_post(db, post, images)
    except AppError:
        logger.error("Failed to create post for user %s", actor_id)
        await delete_blobs(blob_store, image_urls)
        raise

    return await get_post_view(db, post.id, actor_id)


async def edit_post(
    db: AsyncSession,
    blob_store: BlobStore,
    actor: User,
    post_id: str,
    content: Optional[str],
    keep_image_urls: Optional[List[str]],
    files: Optional[Sequence[UploadFile]],
) -> PostRead:
    """
    Replaces the text and reconciles the images. Images whose URL is not in
    `keep_image_urls` are dropped (all of them when the list is omitted) and
    the new uploads are appended. The post must keep at least one image.
    """
    actor_id = actor.id
    content = _clean_content(content, MAX_POST_LENGTH, "Post")
    post = await _load_post(db, post_id)
    ensure_post_owner(post, actor_id)

    uploads = validate_uploads(await read_uploads(files))
    removed = images_to_delete(post.images, keep_image_urls)
    if len(post.images) - len(removed) + len(uploads) < 1:
        raise InputValidationError("At least one image is required.")

    added = await store_images(blob_store, uploads)
    added_urls = [image.image_url for image in added]
    removed_urls = [image.image_url for image in removed]
    post.content = content
    try:
        await posts_crud.update_post(db, post, removed, added)
    except AppError:
        logger.error("Failed to update post %s for user %s", post_id, actor_id)
        await delete_blobs(blob_store, added_urls)
        raise

    # rows are gone for good only after the commit
    await delete_blobs(blob_store, removed_urls)
    return await get_post_view(db, post_id, actor_id)


async def delete_post(db: AsyncSession, blob_store: BlobStore, actor: User, post_id: str) -> None:
    image_urls = await posts_crud.delete_post(db, post_id, actor.id)
    if image_urls is None:
        raise NotFoundError("Post not found.")
    await delete_blobs(blob_store, image_urls)
    logger.info("Post %s deleted by user %s", post_id, actor.id)


async def toggle_like(db: AsyncSession, actor: User, post_id: str) -> PostRead:
    actor_id = actor.id
    await _load_post(db, post_id)

    if await social_crud.has_liked(db, post_id, actor_id):
        await social_crud.remove_like(db, post_id, actor_id)
    else:
        try:
            await social_crud.add_like(db, post_id, actor_id)
        except ConflictError:
            # a concurrent toggle inserted the same row first
            logger.info("Like on post %s by user %s already present", post_id, actor_id)

    return await get_post_view(db, post_id, actor_id)


async def toggle_save(db: AsyncSession, actor: User, post_id: str) -> PostRead:
    actor_id = actor.id
    await _load_post(db, post_id)

    if await social_crud.has_saved(db, post_id, actor_id):
        await social_crud.remove_saved_post(db, post_id, actor_id)
    else:
        try:
            await social_crud.add_saved_post(db, post_id, actor_id)
        except ConflictError:
            logger.info("Save of post %s by user %s already present", post_id, actor_id)

    return await get_post_view(db, post_id, actor_id)


async def add_comment(db: AsyncSession, actor: User, post_id: str, content: Optional[str]) -> PostRead:
    actor_id = actor.id
    content = _clean_content(content, MAX_COMMENT_LENGTH, "Comment")
    await _load_post(db, post_id)

    await posts_crud.add_comment(db, Comment(post_id=post_id, user_id=actor_id, content=content))
    return await get_post_view(db, post_id, actor_id)


async def _ensure_comment_on_post(db: AsyncSession, post_id: str, comment_id: str) -> None:
    post = await _load_post(db, post_id)
    if not any(comment.id == comment_id for comment in post.comments):
        raise NotFoundError("Comment not found.")


async def edit_comment(
    db: AsyncSession, actor: User, post_id: str, comment_id: str, content: Optional[str]
) -> PostRead:
    actor_id = actor.id
    content = _clean_content(content, MAX_COMMENT_LENGTH, "Comment")
    await _ensure_comment_on_post(db, post_id, comment_id)

    if not await posts_crud.edit_comment(db, comment_id, actor_id, content):
        raise NotFoundError("Comment not found.")
    return await get_post_view(db, post_id, actor_id)


async def delete_comment(db: AsyncSession, actor: User, post_id: str, comment_id: str) -> PostRead:
    actor_id = actor.id
    await _ensure_comment_on_post(db, post_id, comment_id)

    if not await posts_crud.delete_comment(db, comment_id, actor_id):
        raise NotFoundError("Comment not found.")
    return await get_post_view(db, post_id, actor_id)
