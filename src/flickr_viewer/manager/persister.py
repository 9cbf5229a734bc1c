"""Save downloaded photos and their thumbnails as JPEG files."""

import logging
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from flickr_viewer.config import SAVE_DIR
from flickr_viewer.errors import DecodeError, DegenerateImageError, ImageWriteError

logger = logging.getLogger(__name__)

# Modes the JPEG encoder accepts as-is
_JPEG_MODES = ("RGB", "L", "CMYK")


def open_image(data: bytes) -> Image.Image:
    """Decode image bytes. The returned image is fully loaded."""
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise DecodeError(f"Downloaded data is not a readable image: {exc}") from exc
    return img


def thumbnail_size(width: int, source_size: tuple[int, int]) -> tuple[int, int]:
    """Size of a ``width``-wide thumbnail keeping the source aspect ratio.

    The height is truncated: 250 wide from 1000x667 gives 250x166.
    """
    source_width, source_height = source_size
    if source_width == 0:
        raise DegenerateImageError("Cannot resize an image with zero width")
    height = width * source_height // source_width
    if height < 1:
        raise DegenerateImageError(
            f"Thumbnail of {source_width}x{source_height} at width {width} has no height"
        )
    return width, height


class ImagePersister:
    """Write photos into ``save_dir``, or the working directory when unset."""

    def __init__(self, save_dir: Path | None = SAVE_DIR) -> None:
        self.save_dir = save_dir

    def _target(self, file_name: str) -> Path:
        base = self.save_dir if self.save_dir is not None else Path.cwd()
        return base / file_name

    def save_original(self, data: bytes, file_name: str) -> Path:
        """Re-encode the photo as JPEG under its original file name."""
        img = open_image(data)
        path = self._target(file_name)
        _write_jpeg(img, path)
        logger.info("Saved image %s (%dx%d)", path, img.width, img.height)
        return path

    def save_thumbnail(self, data: bytes, width: int, file_name: str) -> Path:
        """Resize the photo to ``width`` pixels wide and save it as JPEG."""
        img = open_image(data)
        thumb = img.resize(thumbnail_size(width, img.size))
        path = self._target(file_name)
        _write_jpeg(thumb, path)
        logger.info("Saved thumbnail %s (%dx%d)", path, thumb.width, thumb.height)
        return path


def _write_jpeg(img: Image.Image, path: Path) -> None:
    if img.mode not in _JPEG_MODES:
        img = img.convert("RGB")
    buffer = BytesIO()
    try:
        img.save(buffer, format="JPEG")
        path.write_bytes(buffer.getvalue())
    except OSError as exc:
        raise ImageWriteError(f"Could not write {path}: {exc}") from exc
