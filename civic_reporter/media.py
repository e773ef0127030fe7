from pathlib import Path
import logging
import re
import time

from . import config
from .errors import ValidationFailure
from .vision import check_image_type

logger = logging.getLogger(__name__)

BUCKET = "issue-images"
MAX_IMAGE_BYTES = 5 * 1024 * 1024

EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/webp": "webp", "image/gif": "gif"}


def image_extension(content_type: str) -> str:
    """Extension from the checked MIME type; the client filename is ignored."""
    ext = EXTENSIONS.get(check_image_type(content_type))
    if ext is None:
        raise ValidationFailure(f"Unsupported image type: {content_type}")
    return ext


def save_issue_image(user_id: str, data: bytes, filename: str, content_type: str,
                     root: str = None) -> str:
    """Write an uploaded complaint photo to the image bucket; returns its reference.

    The reference is the path relative to the upload root, e.g.
    ``issue-images/<user>/<millis>.jpg``.
    """
    ext = image_extension(content_type)
    if len(data) > MAX_IMAGE_BYTES:
        raise ValidationFailure("Image larger than 5MB")

    owner = re.sub(r"[^A-Za-z0-9_-]", "_", user_id)
    key = f"{BUCKET}/{owner}/{int(time.time() * 1000)}.{ext}"
    path = Path(root or config.UPLOAD_DIR) / key
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.info("Stored image %s from %s (%d bytes)", key, filename, len(data))
    return key


def public_url(key: str | None) -> str | None:
    return f"/media/{key}" if key else None
