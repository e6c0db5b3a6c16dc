from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user, get_optional_user
from models.user import User
from schemas.post import PostRead
from services import profiles as profile_service

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get(
    "",
    response_model=List[PostRead],
    summary="Every post, newest first",
)
async def get_feed(
    db: AsyncSession = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
) -> List[PostRead]:
    return await profile_service.get_feed(db, viewer)


@router.get(
    "/saved",
    response_model=List[PostRead],
    summary="Your saved posts, most recently saved first",
)
async def get_saved_posts(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[PostRead]:
    return await profile_service.get_saved_posts(db, current_user)
