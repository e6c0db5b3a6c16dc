from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    DATABASE_URL: str = "sqlite+aiosqlite:///./pixelgram.db"
    SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # "local" keeps uploads on disk, "s3" sends them to MinIO/S3
    BLOB_BACKEND: str = "local"
    UPLOADS_DIR: str = "uploads"
    UPLOADS_URL_PREFIX: str = "/uploads"

    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    AWS_S3_BUCKET_NAME: Optional[str] = None
    AWS_S3_ENDPOINT_URL: Optional[str] = None
    AWS_S3_REGION: Optional[str] = None

    STORAGE_TIMEOUT_SECONDS: float = 10.0
    FEED_COMMENT_LIMIT: int = 20
    DEFAULT_AVATAR_URL: str = "/images/default-avatar.jpg"

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def s3_base_url(self) -> str:
        return (self.AWS_S3_ENDPOINT_URL or "").rstrip("/") + "/" + (self.AWS_S3_BUCKET_NAME or "")


settings = Settings()
