import logging
import os
import uuid
from pathlib import Path
from typing import Optional

import cloudinary
import cloudinary.uploader

from ..config import settings

logger = logging.getLogger(__name__)

UPLOAD_DIR = Path(__file__).resolve().parent.parent / "static" / "uploads"


def sniff_image_type(data: bytes) -> str | None:
    """Return a lowercase extension if bytes look like a common image, else None."""
    if not data or len(data) < 12:
        return None
    if data.startswith(b"\xFF\xD8\xFF"):
        return "jpg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "png"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "gif"
    if data.startswith(b"RIFF") and data[8:12] == b"WEBP":
        return "webp"
    return None


def _cloudinary_configured() -> bool:
    url = settings.CLOUDINARY_URL or os.getenv("CLOUDINARY_URL", "")
    if not url:
        return False
    try:
        cloudinary.config(cloudinary_url=url)
        return True
    except Exception as e:
        logger.warning("Invalid CLOUDINARY_URL, using local uploads: %s", e)
        return False


def save_image(file_bytes: bytes, original_filename: str | None = None, folder: str = "hotelbook") -> Optional[str]:
    """Store a hotel or room image on Cloudinary when configured, else under static/uploads.

    Returns the public URL, or None when the payload is empty, too large or not an image.
    """
    if not file_bytes or len(file_bytes) > settings.UPLOAD_IMAGE_MAX_BYTES:
        return None
    kind = sniff_image_type(file_bytes)
    if not kind:
        logger.info("Rejected upload %r: not a supported image", original_filename)
        return None

    if _cloudinary_configured():
        try:
            upload_res = cloudinary.uploader.upload(
                file_bytes,
                folder=folder,
                public_id=uuid.uuid4().hex,
                resource_type="image",
                overwrite=True,
            )
            url = upload_res.get("secure_url") or upload_res.get("url")
            if url:
                return url
        except Exception as e:
            logger.warning("Cloudinary upload failed, falling back to local storage: %s", e)

    target_dir = UPLOAD_DIR / folder.replace("/", "_")
    target_dir.mkdir(parents=True, exist_ok=True)
    fname = f"{uuid.uuid4().hex}.{kind}"
    (target_dir / fname).write_bytes(file_bytes)
    return f"/static/uploads/{target_dir.name}/{fname}"
