"""
Local object storage for uploaded images.

Files live under STORAGE_ROOT and are served by the app under /files/.
Images are re-encoded as JPEG after being fitted to the requested bounds.
"""
import io
import logging
import os
from pathlib import Path, PurePosixPath

from PIL import Image, UnidentifiedImageError

from libadmin.db.models import epoch_ms

logger = logging.getLogger("libadmin.storage")

MAX_UPLOAD_BYTES = 2 * 1024 * 1024

LOGO_BOUNDS = (512, 512, 0.9)
FLOOR_MAP_BOUNDS = (2048, 2048, 0.85)
COVER_BOUNDS = (800, 1200, 0.9)


def fit_dimensions(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Landscape images are bounded by width only, others by height only."""
    if width > height:
        if width > max_width:
            height = round(height * max_width / width)
            width = max_width
    elif height > max_height:
        width = round(width * max_height / height)
        height = max_height
    return max(1, width), max(1, height)


class StorageService:
    """Filesystem-backed store addressed by slash-separated relative paths."""

    def __init__(self, root: str, base_url: str = "/files"):
        self.root = Path(root).resolve()
        self.base_url = base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        relative = PurePosixPath(path or "")
        if not path or relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"Invalid storage path: {path!r}")
        target = (self.root / relative).resolve()
        # The root itself is never a valid file path
        if self.root not in target.parents:
            raise ValueError(f"Invalid storage path: {path!r}")
        return target

    def get_download_url(self, path: str) -> str:
        if not self._resolve(path).is_file():
            raise FileNotFoundError(path)
        return f"{self.base_url}/{PurePosixPath(path)}"

    def upload_file(self, content: bytes, path: str) -> str:
        target = self._resolve(path)
        if target.is_dir():
            raise ValueError(f"Invalid storage path: {path!r} is a directory")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        logger.info("Stored %s (%d bytes)", path, len(content))
        return self.get_download_url(path)

    def upload_image(
        self,
        content: bytes,
        path: str,
        max_width: int = 1920,
        max_height: int = 1080,
        quality: float = 0.8,
    ) -> str:
        try:
            image = Image.open(io.BytesIO(content))
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise ValueError(f"Uploaded content is not a readable image: {e}")

        size = fit_dimensions(image.width, image.height, max_width, max_height)
        if size != (image.width, image.height):
            image = image.resize(size, Image.Resampling.LANCZOS)
        if image.mode != "RGB":
            image = image.convert("RGB")

        output = io.BytesIO()
        image.save(output, format="JPEG", quality=int(round(quality * 100)), optimize=True)
        return self.upload_file(output.getvalue(), path)

    def delete_file(self, path: str) -> None:
        target = self._resolve(path)
        if not target.is_file():
            logger.warning("Delete requested for missing file %s", path)
            raise FileNotFoundError(path)
        target.unlink()

    def upload_library_logo(self, content: bytes, library_id: str) -> str:
        max_w, max_h, quality = LOGO_BOUNDS
        return self.upload_image(content, f"libraries/logos/{library_id}_{epoch_ms()}.jpg", max_w, max_h, quality)

    def upload_floor_map(self, content: bytes, library_id: str, floor_id: str) -> str:
        max_w, max_h, quality = FLOOR_MAP_BOUNDS
        return self.upload_image(
            content, f"libraries/{library_id}/floors/{floor_id}_{epoch_ms()}.jpg", max_w, max_h, quality
        )

    def upload_book_cover(self, content: bytes, isbn: str) -> str:
        max_w, max_h, quality = COVER_BOUNDS
        return self.upload_image(content, f"books/covers/{isbn}_{epoch_ms()}.jpg", max_w, max_h, quality)


def storage_root() -> str:
    return os.getenv("STORAGE_ROOT", "./storage")


def get_storage_service() -> StorageService:
    """FastAPI dependency; reads STORAGE_ROOT and STORAGE_BASE_URL per call."""
    return StorageService(storage_root(), os.getenv("STORAGE_BASE_URL", "/files"))
