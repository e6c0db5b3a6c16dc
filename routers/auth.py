# routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user
from models.user import User
from schemas.auth import (
    ChangeEmailSchema,
    ChangeNumberSchema,
    ChangePasswordSchema,
    DeleteAccountSchema,
    LoginSchema,
    RegisterSchema,
    TokenResponse,
)
from schemas.post import MessageResponse
from services import accounts as account_service
from utils.blob_store import BlobStore, get_blob_store

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account and get a JWT",
)
async def register(
    payload: RegisterSchema,
    db: AsyncSession = Depends(get_db),
) -> TokenResponse:
    return await account_service.register(db, payload)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in with email or username and get a JWT",
)
async def login(
    payload: LoginSchema,
    db: AsyncSession = Depends(get_db),
) -> TokenResponse:
    return await account_service.login(db, payload)


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change your password",
)
async def change_password(
    payload: ChangePasswordSchema,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    await account_service.change_password(db, current_user, payload)
    return MessageResponse(message="Password changed successfully.")


@router.post(
    "/change-email",
    response_model=MessageResponse,
    summary="Change your email",
)
async def change_email(
    payload: ChangeEmailSchema,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    await account_service.change_email(db, current_user, payload)
    return MessageResponse(message="Email changed successfully.")


@router.post(
    "/change-number",
    response_model=MessageResponse,
    summary="Change your phone number",
)
async def change_number(
    payload: ChangeNumberSchema,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    await account_service.change_number(db, current_user, payload)
    return MessageResponse(message="Number changed successfully.")


@router.post(
    "/delete-account",
    response_model=MessageResponse,
    summary="Delete your account and everything you posted",
)
async def delete_account(
    payload: DeleteAccountSchema,
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    await account_service.delete_account(db, blob_store, current_user, payload.password)
    return MessageResponse(message="Your personal data has been deleted successfully.")
