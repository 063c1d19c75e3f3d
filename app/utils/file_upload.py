"""
File Upload Utility - Store profile pictures on disk.

Supported formats:
- JPEG (.jpg, .jpeg)
- PNG (.png)
- GIF (.gif)

Max file size: Settings.max_profile_pic_mb (2MB by default)

Files land in <upload_dir>/profile-pics/ and are served by the app at
/uploads/profile-pics/<name>.
"""

import logging
import os
import time
import uuid
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from app.core.config import get_settings
from app.core.errors import ValidationError

logger = logging.getLogger(__name__)

PROFILE_PIC_SUBDIR = "profile-pics"
PUBLIC_PREFIX = "/uploads"
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/gif"}
ALLOWED_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif'}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def profile_pic_dir() -> str:
    """Directory profile pictures are written to; created on first use."""
    path = os.path.join(get_settings().upload_dir, PROFILE_PIC_SUBDIR)
    os.makedirs(path, exist_ok=True)
    return path


def unique_filename(field_name: str, ext: str) -> str:
    """<field>-<millis>-<random><ext>, unique enough to never collide."""
    return f"{field_name}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}{ext}"


def _write_file(filename: str, content: bytes) -> None:
    with open(os.path.join(profile_pic_dir(), filename), "wb") as out:
        out.write(content)


async def save_profile_picture(file: UploadFile, field_name: str = "profilePic") -> str:
    """
    Validate and store an uploaded profile picture.

    Args:
        file: FastAPI UploadFile

    Returns:
        Public path of the stored file, e.g. /uploads/profile-pics/x.png

    Raises:
        ValidationError on a missing, oversized or non-image file
    """
    if not file or not file.filename:
        raise ValidationError("No profile picture file uploaded.")

    ext = get_file_extension(file.filename)
    if file.content_type not in ALLOWED_CONTENT_TYPES or ext not in ALLOWED_EXTENSIONS:
        raise ValidationError("Only JPEG, PNG, and GIF images are allowed")

    content = await file.read()

    max_mb = get_settings().max_profile_pic_mb
    if len(content) > max_mb * 1024 * 1024:
        raise ValidationError(f"File upload error: File too large. Maximum size: {max_mb}MB")
    if not content:
        raise ValidationError("No profile picture file uploaded.")

    filename = unique_filename(field_name, ext)
    await run_in_threadpool(_write_file, filename, content)

    logger.info("Stored profile picture %s (%d bytes)", filename, len(content))
    return f"{PUBLIC_PREFIX}/{PROFILE_PIC_SUBDIR}/{filename}"
