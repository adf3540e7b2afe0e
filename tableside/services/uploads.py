from __future__ import annotations

import logging
from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile

from tableside.core.config import MAX_UPLOAD_BYTES, UPLOADS_DIR, UPLOADS_URL_PREFIX
from tableside.core.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp", ".svg"}
ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
}
FILENAME_PREFIX = "menu-item-"
UNSUPPORTED_TYPE_MESSAGE = "Only image files (JPEG, PNG, GIF, WebP, SVG) are allowed"


class ImageStore:
    """Menu item images on local disk, served statically under ``url_prefix``."""

    def __init__(
        self,
        directory: Path | str = UPLOADS_DIR,
        url_prefix: str = UPLOADS_URL_PREFIX,
        max_bytes: int = MAX_UPLOAD_BYTES,
    ) -> None:
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes

    def validate(self, filename: str | None, content_type: str | None) -> str:
        if not filename:
            raise ValidationError("Invalid file")

        suffix = Path(filename).suffix.lower()
        mime = (content_type or "").split(";")[0].strip().lower()
        logger.info("upload attempt filename=%s content_type=%s", filename, mime)
        if suffix not in ALLOWED_EXTENSIONS or mime not in ALLOWED_CONTENT_TYPES:
            raise ValidationError(UNSUPPORTED_TYPE_MESSAGE)
        return suffix

    def save(self, upload: UploadFile) -> str:
        suffix = self.validate(upload.filename, upload.content_type)

        payload = upload.file.read(self.max_bytes + 1)
        if len(payload) > self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            raise ValidationError(f"File exceeds the {limit_mb}MB limit")
        if not payload:
            raise ValidationError("Image file is empty")

        filename = f"{FILENAME_PREFIX}{uuid4().hex}{suffix}"
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / filename
        with path.open("wb") as buffer:
            buffer.write(payload)

        logger.info("stored upload %s bytes=%s", filename, len(payload))
        return f"{self.url_prefix}/{filename}"

    def path_for(self, image_url: str | None) -> Path | None:
        if not image_url or not image_url.startswith(f"{self.url_prefix}/"):
            return None
        name = image_url[len(self.url_prefix) + 1 :]
        if not name or "/" in name or name.startswith("."):
            return None
        return self.directory / name

    def remove(self, image_url: str | None) -> bool:
        path = self.path_for(image_url)
        if path is None or not path.exists():
            return False
        try:
            path.unlink()
        except OSError:
            logger.warning("could not remove upload %s", path)
            return False
        logger.info("removed upload %s", path.name)
        return True


def get_image_store() -> ImageStore:
    return ImageStore()
