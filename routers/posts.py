from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user, get_optional_user
from models.user import User
from schemas.post import CommentCreate, CommentUpdate, MessageResponse, PostRead
from services import posts as post_service
from utils.blob_store import BlobStore, get_blob_store

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post(
    "",
    response_model=PostRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post with at least one image",
)
async def create_post(
    content: Optional[str] = Form(None, description="Post text, up to 2000 characters"),
    images: Optional[List[UploadFile]] = File(None, description=".jpg, .jpeg or .png files"),
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
) -> PostRead:
    return await post_service.create_post(db, blob_store, current_user, content, images)


@router.get(
    "/{post_id}",
    response_model=PostRead,
    summary="Get one post with its full comment thread",
)
async def get_post(
    post_id: str = Path(..., description="Post id"),
    db: AsyncSession = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
) -> PostRead:
    return await post_service.get_post_view(db, post_id, viewer.id if viewer else None)


@router.put(
    "/{post_id}",
    response_model=PostRead,
    summary="Edit the text and images of your post",
)
async def edit_post(
    post_id: str = Path(..., description="Post id"),
    content: Optional[str] = Form(None, description="New post text"),
    existing_image_urls: Optional[List[str]] = Form(
        None, description="Image URLs to keep; omit to replace every image"
    ),
    images: Optional[List[UploadFile]] = File(None, description="Images to add"),
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
) -> PostRead:
    return await post_service.edit_post(
        db, blob_store, current_user, post_id, content, existing_image_urls, images
    )


@router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    summary="Delete your post, its comments, likes, saves and image files",
)
async def delete_post(
    post_id: str = Path(..., description="Post id"),
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    await post_service.delete_post(db, blob_store, current_user, post_id)
    return MessageResponse(message="Post deleted successfully.")


@router.post(
    "/{post_id}/like",
    response_model=PostRead,
    summary="Like the post, or remove your like",
)
async def toggle_like(
    post_id: str = Path(..., description="Post id"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PostRead:
    return await post_service.toggle_like(db, current_user, post_id)


@router.post(
    "/{post_id}/save",
    response_model=PostRead,
    summary="Save the post, or remove it from your saved posts",
)
async def toggle_save(
    post_id: str = Path(..., description="Post id"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PostRead:
    return await post_service.toggle_save(db, current_user, post_id)


@router.post(
    "/{post_id}/comments",
    response_model=PostRead,
    summary="Comment on a post",
)
async def add_comment(
    payload: CommentCreate,
    post_id: str = Path(..., description="Post id"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PostRead:
    return await post_service.add_comment(db, current_user, post_id, payload.content)


@router.put(
    "/{post_id}/comments/{comment_id}",
    response_model=PostRead,
    summary="Edit your comment",
)
async def edit_comment(
    payload: CommentUpdate,
    post_id: str = Path(..., description="Post id"),
    comment_id: str = Path(..., description="Comment id"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PostRead:
    return await post_service.edit_comment(db, current_user, post_id, comment_id, payload.content)


@router.delete(
    "/{post_id}/comments/{comment_id}",
    response_model=PostRead,
    summary="Delete your comment",
)
async def delete_comment(
    post_id: str = Path(..., description="Post id"),
    comment_id: str = Path(..., description="Comment id"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PostRead:
    return await post_service.delete_comment(db, current_user, post_id, comment_id)
