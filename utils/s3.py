from io import BytesIO

from minio import Minio
from minio.error import S3Error

from core.config import settings
from utils.blob_store import BlobStore, BlobStoreError

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}


class MinioBlobStore(BlobStore):
    """
    Stores images as objects under `prefix/` in one bucket.
    The returned URL is the public object URL; delete maps it back to the key.
    """

    def __init__(self, client: Minio, bucket_name: str, base_url: str, prefix: str = "posts"):
        self._client = client
        self.bucket_name = bucket_name
        self.base_url = base_url.rstrip("/")
        self.prefix = prefix

    def put(self, data: bytes, ext: str) -> str:
        key = f"{self.prefix}/{self.new_name(ext)}"
        try:
            self._client.put_object(
                self.bucket_name,
                key,
                BytesIO(data),
                length=len(data),
                content_type=CONTENT_TYPES.get(ext.lower(), "application/octet-stream"),
            )
        except S3Error as e:
            raise BlobStoreError(f"S3 upload failed: {e}") from e
        return f"{self.base_url}/{key}"

    def delete(self, url: str) -> bool:
        if not url.startswith(self.base_url + "/"):
            raise BlobStoreError(f"Not an object of this bucket: {url}")
        key = url[len(self.base_url) + 1:]
        try:
            self._client.remove_object(self.bucket_name, key)
        except S3Error as e:
            raise BlobStoreError(f"S3 delete failed: {e}") from e
        return True


def build_minio_store() -> MinioBlobStore:
    endpoint = (settings.AWS_S3_ENDPOINT_URL or "").replace("https://", "").replace("http://", "")
    client = Minio(
        endpoint,
        access_key=settings.AWS_ACCESS_KEY_ID,
        secret_key=settings.AWS_SECRET_ACCESS_KEY,
        region=settings.AWS_S3_REGION,
        secure=(settings.AWS_S3_ENDPOINT_URL or "").startswith("https://"),
    )
    return MinioBlobStore(client, settings.AWS_S3_BUCKET_NAME, settings.s3_base_url)
