# utils/image_tools.py
import os
from io import BytesIO
from typing import Optional

from PIL import Image, UnidentifiedImageError

ALLOWED_EXTENSIONS = (".jpg", ".jpeg", ".png")


def image_extension(filename: Optional[str]) -> Optional[str]:
    """
    Lower-cased extension of an accepted image file name, None otherwise.
    "Photo.JPG" -> ".jpg", "notes.txt" -> None, "noext" -> None.
    """
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        return None
    return ext


def verify_image_bytes(data: bytes) -> None:
    """
    Checks that the bytes decode as an image without keeping it open.
    Raises ValueError when Pillow cannot recognise or verify the file.
    """
    try:
        with Image.open(BytesIO(data)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ValueError("Unsupported file, not an image") from e
