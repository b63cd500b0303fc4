"""
Avatar uploads: type and image checks, unique file names under UPLOAD_DIR,
200x200 / 100x100 thumbnails and the public URL the files are served from
(/uploads/avatars/<name>).
"""
import logging
import os
import random
import time

from flask import current_app
from PIL import Image, ImageOps
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}
MIN_AVATAR_SIZE = (200, 200)
THUMBNAIL_SIZES = ((200, 200), (100, 100))


class UploadError(ValueError):
    pass


def upload_dir() -> str:
    return current_app.config["UPLOAD_DIR"]


def validate_avatar(file: FileStorage) -> None:
    """Reject anything that is not a readable JPEG, PNG or WebP image of at least 200x200."""
    allowed = current_app.config["ALLOWED_AVATAR_MIMETYPES"]
    ext = os.path.splitext(file.filename or "")[1].lower()
    if file.mimetype not in allowed or ext not in ALLOWED_EXTENSIONS:
        raise UploadError("Unsupported file type. Only JPEG, PNG and WebP are allowed")

    try:
        with Image.open(file.stream) as img:
            width, height = img.size
            img.verify()
    except (OSError, SyntaxError, ValueError) as e:
        logger.info("Rejected avatar %r: %s", file.filename, e)
        raise UploadError("Could not process the image") from e
    finally:
        file.stream.seek(0)

    min_width, min_height = MIN_AVATAR_SIZE
    if width < min_width or height < min_height:
        raise UploadError(f"Minimum image size is {min_width}x{min_height}px")


def save_avatar(file: FileStorage) -> str:
    """Store the file and return its name inside UPLOAD_DIR."""
    ext = os.path.splitext(secure_filename(file.filename or ""))[1].lower()
    filename = f"avatar-{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"
    directory = upload_dir()
    os.makedirs(directory, exist_ok=True)
    file.save(os.path.join(directory, filename))
    logger.info("Saved avatar %s", filename)
    return filename


def thumbnail_name(filename: str, size: tuple) -> str:
    base = os.path.splitext(filename)[0]
    return f"{base}-{size[0]}x{size[1]}.jpg"


def create_thumbnails(filename: str) -> list:
    """
    Write cover-cropped JPEG thumbnails next to the avatar.
    Returns the names written; a failure leaves just the original.
    """
    directory = upload_dir()
    written = []
    try:
        with Image.open(os.path.join(directory, filename)) as img:
            img = ImageOps.exif_transpose(img).convert("RGB")
            for size in THUMBNAIL_SIZES:
                name = thumbnail_name(filename, size)
                ImageOps.fit(img, size).save(os.path.join(directory, name), "JPEG", quality=85)
                written.append(name)
    except OSError:
        logger.exception("Failed to create thumbnails for %s", filename)
        for name in written:
            remove_file(name)
        return []
    return written


def remove_file(filename: str) -> None:
    try:
        os.remove(os.path.join(upload_dir(), filename))
    except FileNotFoundError:
        pass


def remove_avatar(filename: str) -> None:
    """Delete the avatar together with its thumbnails."""
    remove_file(filename)
    for size in THUMBNAIL_SIZES:
        remove_file(thumbnail_name(filename, size))


def avatar_url(filename: str) -> str:
    return f"{current_app.config['PUBLIC_URL']}/uploads/avatars/{filename}"
