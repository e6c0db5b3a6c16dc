from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user, get_optional_user
from models.user import User
from schemas.post import MessageResponse
from schemas.profile import FollowRequest, ProfilePage, ProfileRead
from services import profiles as profile_service
from utils.blob_store import BlobStore, get_blob_store

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get(
    "",
    response_model=ProfilePage,
    summary="Your own profile and posts",
)
async def read_my_profile(
    db: AsyncSession = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
) -> ProfilePage:
    if viewer is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Log in or pass a username",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return await profile_service.get_profile(db, None, viewer)


@router.put(
    "",
    response_model=ProfileRead,
    summary="Update your bio and profile picture",
)
async def update_my_profile(
    bio: Optional[str] = Form(None, description="About you, up to 2000 characters"),
    image: Optional[UploadFile] = File(None, description="New profile picture"),
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
) -> ProfileRead:
    return await profile_service.edit_profile(db, blob_store, current_user, bio, image)


@router.post(
    "/follow",
    response_model=MessageResponse,
    summary="Follow a user",
)
async def follow_user(
    payload: FollowRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    message = await profile_service.follow(db, current_user, payload.username)
    return MessageResponse(message=message)


@router.post(
    "/unfollow",
    response_model=MessageResponse,
    summary="Unfollow a user",
)
async def unfollow_user(
    payload: FollowRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    message = await profile_service.unfollow(db, current_user, payload.username)
    return MessageResponse(message=message)


@router.get(
    "/{username}",
    response_model=ProfilePage,
    summary="A user's profile and posts",
)
async def read_profile(
    username: str,
    db: AsyncSession = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
) -> ProfilePage:
    return await profile_service.get_profile(db, username, viewer)
