"""Keeps uploaded image blobs and PostImage rows in step.

Every upload is validated before the first blob is written. Blob deletions
that fail are logged and swallowed: a dangling file is a lesser failure than
a failed post or account deletion.
"""
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, List, Optional, Sequence

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from core.errors import InputValidationError, StorageFault
from models.base import utcnow
from models.post import PostImage
from utils.blob_store import BlobStore, BlobStoreError
from utils.image_tools import image_extension, verify_image_bytes

logger = logging.getLogger(__name__)


@dataclass
class ImageUpload:
    filename: str
    data: bytes
    ext: str = ""


async def read_uploads(files: Optional[Sequence[UploadFile]]) -> List[ImageUpload]:
    """Reads multipart files into memory; empty parts are skipped."""
    uploads: List[ImageUpload] = []
    for file in files or []:
        data = await file.read()
        if data:
            uploads.append(ImageUpload(filename=file.filename or "", data=data))
    return uploads


def validate_uploads(uploads: Sequence[ImageUpload]) -> List[ImageUpload]:
    for upload in uploads:
        ext = image_extension(upload.filename)
        if ext is None:
            raise InputValidationError("One or more files are not valid images.")
        try:
            verify_image_bytes(upload.data)
        except ValueError:
            raise InputValidationError("One or more files are not valid images.")
        upload.ext = ext
    return list(uploads)


async def store_blobs(blob_store: BlobStore, uploads: Sequence[ImageUpload]) -> List[str]:
    """
    Writes validated uploads to the blob store and returns their URLs in
    upload order. If one write fails the blobs already written are removed
    again.
    """
    validate_uploads(uploads)

    urls: List[str] = []
    try:
        for upload in uploads:
            urls.append(await run_in_threadpool(blob_store.put, upload.data, upload.ext))
    except BlobStoreError as e:
        logger.error("Image upload failed: %s", e)
        await delete_blobs(blob_store, urls)
        raise StorageFault("An error occurred while storing the images.") from e
    return urls


async def store_images(blob_store: BlobStore, uploads: Sequence[ImageUpload]) -> List[PostImage]:
    """Stores the uploads and returns unsaved PostImage rows in upload order."""
    urls = await store_blobs(blob_store, uploads)

    # rows created in one request share a clock tick; spread them so that
    # ordering by created_at keeps the upload order
    base = utcnow()
    return [
        PostImage(image_url=url, created_at=base + timedelta(microseconds=index))
        for index, url in enumerate(urls)
    ]


def images_to_delete(
    current: Iterable[PostImage], keep_urls: Optional[Iterable[str]]
) -> List[PostImage]:
    """Current images whose URL is not kept; all of them when nothing is kept."""
    current = list(current)
    if keep_urls is None:
        return current
    keep = set(keep_urls)
    return [image for image in current if image.image_url not in keep]


async def delete_blobs(blob_store: BlobStore, urls: Iterable[str]) -> int:
    """Deletes each blob, returns how many were removed."""
    removed = 0
    for url in urls:
        try:
            if await run_in_threadpool(blob_store.delete, url):
                removed += 1
            else:
                logger.warning("Blob already gone: %s", url)
        except BlobStoreError as e:
            logger.error("Error deleting image file %s: %s", url, e)
    return removed
