"""Posts, their images and comments.

Reads load exactly what the post view needs: author, images, comments with
their authors, likes and saves. ``populate_existing`` makes every read a
fresh one even when the session already holds the post.
"""
from typing import List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from core.database import storage_call
from core.id_generator import generate_id
from models.comment import Comment
from models.like import Like
from models.post import Post, PostImage
from models.saved_post import SavedPost
from services.policy import ensure_comment_author, ensure_post_owner


def _post_view_loads():
    return (
        joinedload(Post.user),
        selectinload(Post.images),
        selectinload(Post.comments).joinedload(Comment.user),
        selectinload(Post.likes),
        selectinload(Post.saves),
    )


def _post_query():
    return (
        select(Post)
        .options(*_post_view_loads())
        .execution_options(populate_existing=True)
    )


@storage_call("retrieving a post")
async def get_post_by_id(db: AsyncSession, post_id: str) -> Optional[Post]:
    result = await db.execute(_post_query().where(Post.id == post_id))
    return result.scalar_one_or_none()


@storage_call("retrieving all posts")
async def get_all_posts(db: AsyncSession) -> List[Post]:
    result = await db.execute(_post_query().order_by(Post.created_at.desc()))
    return list(result.scalars().all())


@storage_call("retrieving posts by user")
async def get_posts_by_user(db: AsyncSession, user_id: str) -> List[Post]:
    result = await db.execute(
        _post_query()
        .where(Post.user_id == user_id)
        .order_by(Post.created_at.desc())
    )
    return list(result.scalars().all())


@storage_call("retrieving saved posts")
async def get_saved_posts_by_user(db: AsyncSession, user_id: str) -> List[Post]:
    # newest save first, not newest post
    result = await db.execute(
        _post_query()
        .join(SavedPost, SavedPost.post_id == Post.id)
        .where(SavedPost.user_id == user_id)
        .order_by(SavedPost.created_at.desc())
    )
    return list(result.scalars().all())


@storage_call("adding a post")
async def add_post(db: AsyncSession, post: Post, images: Sequence[PostImage] = ()) -> Post:
    """Inserts the post and its first images in one commit."""
    if post.id is None:
        post.id = generate_id("posts")
    db.add(post)
    for image in images:
        image.post_id = post.id
        db.add(image)
    await db.commit()
    return post


@storage_call("updating a post")
async def update_post(
    db: AsyncSession,
    post: Post,
    images_to_remove: List[PostImage],
    images_to_add: List[PostImage],
) -> Post:
    """
    Applies the content change, the image removals and the image additions
    in one commit. Trusts the caller to have checked ownership.
    """
    if images_to_remove:
        await db.execute(
            delete(PostImage)
            .where(PostImage.id.in_([image.id for image in images_to_remove]))
            .execution_options(synchronize_session=False)
        )
    for image in images_to_add:
        image.post_id = post.id
        db.add(image)
    await db.commit()
    return post


@storage_call("deleting a post")
async def delete_post(db: AsyncSession, post_id: str, actor_id: str) -> Optional[List[str]]:
    """
    Deletes the post and everything hanging off it in one transaction.

    Returns the image URLs whose blobs the caller must delete, or None when
    the post does not exist. Raises ForbiddenError for a non-owner.
    """
    post = await db.get(Post, post_id)
    if post is None:
        return None
    ensure_post_owner(post, actor_id)

    result = await db.execute(select(PostImage.image_url).where(PostImage.post_id == post_id))
    image_urls = list(result.scalars().all())

    for stmt in (
        delete(PostImage).where(PostImage.post_id == post_id),
        delete(Comment).where(Comment.post_id == post_id),
        delete(Like).where(Like.post_id == post_id),
        delete(SavedPost).where(SavedPost.post_id == post_id),
        delete(Post).where(Post.id == post_id),
    ):
        await db.execute(stmt.execution_options(synchronize_session=False))
    await db.commit()
    db.expunge(post)
    return image_urls


# ---- comments ----

@storage_call("adding a comment")
async def add_comment(db: AsyncSession, comment: Comment) -> Comment:
    db.add(comment)
    await db.commit()
    return comment


@storage_call("editing a comment")
async def edit_comment(db: AsyncSession, comment_id: str, actor_id: str, content: str) -> bool:
    comment = await db.get(Comment, comment_id)
    if comment is None:
        return False
    ensure_comment_author(comment, actor_id)

    comment.content = content
    await db.commit()
    return True


@storage_call("deleting a comment")
async def delete_comment(db: AsyncSession, comment_id: str, actor_id: str) -> bool:
    comment = await db.get(Comment, comment_id)
    if comment is None:
        return False
    ensure_comment_author(comment, actor_id)

    await db.execute(
        delete(Comment)
        .where(Comment.id == comment_id)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return True
