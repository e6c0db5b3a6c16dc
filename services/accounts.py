"""Registration, login and account settings."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import AuthenticationError, InputValidationError, NotFoundError
from core.security import create_access_token, hash_password, verify_password
from crud import users as users_crud
from models.user import User
from schemas.auth import (
    ChangeEmailSchema,
    ChangeNumberSchema,
    ChangePasswordSchema,
    LoginSchema,
    RegisterSchema,
    TokenResponse,
)
from services.images import delete_blobs
from services.policy import ensure_password
from utils.blob_store import BlobStore

logger = logging.getLogger(__name__)


def _token_response(user: User) -> TokenResponse:
    token, expires = create_access_token(user)
    return TokenResponse(
        access_token=token,
        token_type="bearer",
        username=user.username,
        email=user.email,
        expires_at=expires,
    )


async def register(db: AsyncSession, data: RegisterSchema) -> TokenResponse:
    if await users_crud.get_user_by_username(db, data.username) is not None:
        raise InputValidationError("Username is already taken.")
    if await users_crud.get_user_by_email(db, data.email) is not None:
        raise InputValidationError("Email is already taken.")

    user = User(
        username=data.username,
        email=data.email,
        password_hash=hash_password(data.password),
    )
    await users_crud.add_user(db, user)
    logger.info("Registered user %s", user.id)
    return _token_response(user)


async def login(db: AsyncSession, data: LoginSchema) -> TokenResponse:
    if "@" in data.email_or_username:
        user = await users_crud.get_user_by_email(db, data.email_or_username)
    else:
        user = await users_crud.get_user_by_username(db, data.email_or_username)

    if user is None or not verify_password(data.password, user.password_hash):
        logger.warning("Invalid email/username or password")
        raise AuthenticationError("Invalid email/username or password!")
    return _token_response(user)


async def change_password(db: AsyncSession, actor: User, data: ChangePasswordSchema) -> None:
    if not verify_password(data.old_password, actor.password_hash):
        raise InputValidationError("Password change failed.")
    actor.password_hash = hash_password(data.new_password)
    await users_crud.update_user(db, actor)


async def change_email(db: AsyncSession, actor: User, data: ChangeEmailSchema) -> None:
    owner = await users_crud.get_user_by_email(db, data.new_email)
    if owner is not None and owner.id != actor.id:
        raise InputValidationError("Email is already taken.")
    actor.email = data.new_email
    await users_crud.update_user(db, actor)


async def change_number(db: AsyncSession, actor: User, data: ChangeNumberSchema) -> None:
    actor.phone_number = data.number
    await users_crud.update_user(db, actor)


async def delete_account(db: AsyncSession, blob_store: BlobStore, actor: User, password: str) -> None:
    """
    Verifies the password, removes the account with everything it owns and
    then the image files it leaves behind.
    """
    ensure_password(actor, password)

    blob_urls = await users_crud.delete_user(db, actor.id)
    if blob_urls is None:
        raise NotFoundError("User not found.")
    await delete_blobs(blob_store, blob_urls)
    logger.info("Deleted account %s and %d files", actor.id, len(blob_urls))
