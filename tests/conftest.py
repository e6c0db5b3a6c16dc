import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("BLOB_BACKEND", "local")

from io import BytesIO

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.database import get_db
from core.security import create_access_token, hash_password
from main import app
from models import Base, User
from utils.blob_store import LocalBlobStore, get_blob_store


class RecordingBlobStore(LocalBlobStore):
    """LocalBlobStore that remembers every put and delete it was asked for."""

    def __init__(self, root, url_prefix: str = "/uploads"):
        super().__init__(root, url_prefix)
        self.puts = []
        self.deletes = []

    def put(self, data: bytes, ext: str) -> str:
        url = super().put(data, ext)
        self.puts.append(url)
        return url

    def delete(self, url: str) -> bool:
        self.deletes.append(url)
        return super().delete(url)


def make_image_bytes(fmt: str = "PNG", color: str = "red") -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def blob_store(tmp_path):
    return RecordingBlobStore(tmp_path / "uploads")


@pytest_asyncio.fixture
async def client(session_maker, blob_store):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def create_user(session_maker):
    async def _create(username: str, password: str = "secret123", email: str = None) -> User:
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            password_hash=hash_password(password),
        )
        async with session_maker() as session:
            session.add(user)
            await session.commit()
        return user

    return _create


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        token, _ = create_access_token(user)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def png_bytes():
    return make_image_bytes()


@pytest.fixture
def create_post(client, auth_headers, png_bytes):
    async def _create(user: User, content: str = "hello", images: int = 1) -> dict:
        files = [("images", (f"photo{i}.png", png_bytes, "image/png")) for i in range(images)]
        response = await client.post(
            "/posts", data={"content": content}, files=files, headers=auth_headers(user)
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create
