import re
import secrets
import tempfile
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from io import BytesIO
from pathlib import Path

import structlog
from PIL import Image

from src.config import settings
from src.core.exceptions import ResourceCleanupFailed

logger = structlog.get_logger()

STAGING_DIR = Path(settings.staging_path or tempfile.gettempdir())

# (offset, magic bytes, media type); WEBP also needs the RIFF container header
IMAGE_SIGNATURES: list[tuple[int, bytes, str]] = [
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"\xff\xd8", "image/jpeg"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (8, b"WEBP", "image/webp"),
]

DEFAULT_MEDIA_TYPE = "image/jpeg"

GENERIC_MEDIA_TYPES = {"", "application/octet-stream"}

_UNSAFE_NAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


def sniff_media_type(image_bytes: bytes) -> str:
    for offset, magic, media_type in IMAGE_SIGNATURES:
        if image_bytes[offset : offset + len(magic)] != magic:
            continue
        if media_type == "image/webp" and not image_bytes.startswith(b"RIFF"):
            continue
        return media_type
    return DEFAULT_MEDIA_TYPE


def resolve_media_type(declared: str | None, image_bytes: bytes) -> str:
    if declared and declared.lower() not in GENERIC_MEDIA_TYPES:
        return declared
    return sniff_media_type(image_bytes)


def prepare_image(image_bytes: bytes, media_type: str, max_size: int) -> tuple[bytes, str]:
    """Downscale images whose longest side exceeds ``max_size``.

    Oversized images are re-encoded as JPEG. Anything else, including payloads
    Pillow cannot decode, is returned untouched.
    """
    if max_size <= 0:
        return image_bytes, media_type
    try:
        img: Image.Image = Image.open(BytesIO(image_bytes))
        width, height = img.size
        if width <= max_size and height <= max_size:
            return image_bytes, media_type
        if img.mode != "RGB":
            img = img.convert("RGB")
        img.thumbnail((max_size, max_size), Image.Resampling.LANCZOS)
        buffer = BytesIO()
        img.save(buffer, format="JPEG", quality=85, optimize=True)
    except Exception as e:
        logger.debug("image_prepare_skipped", error=str(e))
        return image_bytes, media_type
    logger.info("image_downscaled", original=f"{width}x{height}", resized=f"{img.width}x{img.height}")
    return buffer.getvalue(), "image/jpeg"


def _safe_filename(filename: str) -> str:
    name = _UNSAFE_NAME_RE.sub("_", Path(filename).name).strip("._")
    return name[:100] or "image"


def generate_staging_name(filename: str) -> str:
    return f"{uuid.uuid4().hex}-{secrets.token_urlsafe(8)}-{_safe_filename(filename)}"


def _remove_staged_file(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise ResourceCleanupFailed(str(e)) from e


@contextmanager
def staged_file(image_bytes: bytes, filename: str) -> Iterator[Path]:
    """Write ``image_bytes`` to a uniquely named file that lives for the block."""
    STAGING_DIR.mkdir(parents=True, exist_ok=True)
    path = STAGING_DIR / generate_staging_name(filename)
    try:
        with open(path, "wb") as f:
            f.write(image_bytes)
        yield path
    finally:
        try:
            _remove_staged_file(path)
        except ResourceCleanupFailed as e:
            logger.warning("staging_cleanup_failed", path=str(path), error=str(e))
