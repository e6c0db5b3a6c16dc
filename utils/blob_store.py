"""Content-addressable blob storage for uploaded images.

A store only knows two operations: ``put`` bytes under a fresh opaque name
and ``delete`` by the URL that ``put`` returned. Both are blocking; callers
on the event loop go through ``run_in_threadpool``.
"""
import uuid
from functools import lru_cache
from pathlib import Path


class BlobStoreError(Exception):
    pass


class BlobStore:
    def put(self, data: bytes, ext: str) -> str:
        raise NotImplementedError

    def delete(self, url: str) -> bool:
        raise NotImplementedError

    @staticmethod
    def new_name(ext: str) -> str:
        return f"{uuid.uuid4().hex}{ext.lower()}"


class LocalBlobStore(BlobStore):
    """Keeps files in a directory served under `url_prefix`."""

    def __init__(self, root, url_prefix: str = "/uploads"):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def put(self, data: bytes, ext: str) -> str:
        name = self.new_name(ext)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            (self.root / name).write_bytes(data)
        except OSError as e:
            raise BlobStoreError(f"Could not write {name}: {e}") from e
        return f"{self.url_prefix}/{name}"

    def delete(self, url: str) -> bool:
        if not url.startswith(self.url_prefix + "/"):
            raise BlobStoreError(f"Not a local upload: {url}")
        path = self.root / url[len(self.url_prefix) + 1:]
        if not path.is_file():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise BlobStoreError(f"Could not delete {url}: {e}") from e
        return True


@lru_cache
def get_blob_store() -> BlobStore:
    """Process-wide store picked by BLOB_BACKEND. Used as Depends(get_blob_store)."""
    from core.config import settings

    if settings.BLOB_BACKEND == "s3":
        from utils.s3 import build_minio_store

        return build_minio_store()
    return LocalBlobStore(settings.UPLOADS_DIR, settings.UPLOADS_URL_PREFIX)
