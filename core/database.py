import asyncio
import functools
import logging
from typing import AsyncGenerator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from .config import settings
from .errors import ConflictError, StorageFault

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request.
    Used as Depends(get_db) in the routers.
    """
    async with AsyncSessionLocal() as session:
        yield session


# SQLSTATE of unique_violation; primary keys report it too
UNIQUE_VIOLATION = "23505"


def is_duplicate_key(exc: IntegrityError) -> bool:
    """True when the violated constraint is a unique or primary key."""
    code = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if code:
        return code == UNIQUE_VIOLATION
    message = str(exc.orig)
    return "UNIQUE constraint failed" in message or "duplicate key" in message


def storage_call(action: str):
    """
    Wraps a store coroutine whose first argument is the session.

    The call is bounded by STORAGE_TIMEOUT_SECONDS. A duplicate key becomes
    ConflictError; any other database failure (a foreign key or NOT NULL
    violation included) or a timeout becomes StorageFault. In both cases the
    session is rolled back first.
    Domain errors raised by the store itself (ForbiddenError) pass through.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(db: AsyncSession, *args, **kwargs):
            try:
                return await asyncio.wait_for(
                    func(db, *args, **kwargs),
                    timeout=settings.STORAGE_TIMEOUT_SECONDS,
                )
            except IntegrityError as exc:
                await db.rollback()
                if not is_duplicate_key(exc):
                    logger.exception("Integrity violation while %s", action)
                    raise StorageFault(f"An error occurred while {action}.") from exc
                logger.warning("Conflict while %s: %s", action, exc.orig)
                raise ConflictError(f"Conflict while {action}.") from exc
            except (SQLAlchemyError, asyncio.TimeoutError) as exc:
                await db.rollback()
                logger.exception("Storage fault while %s", action)
                raise StorageFault(f"An error occurred while {action}.") from exc

        return wrapper

    return decorator
