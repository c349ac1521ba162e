"""
Image preparation utilities for landmark photo uploads.

Photos are orientation-corrected from their EXIF metadata, shrunk to fit a
bounded box, re-encoded as JPEG and staged in a uniquely named temporary file
before being attached to a multipart request.
"""

import asyncio
import io
import logging
import mimetypes
import time
import uuid
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from app.config.settings import ImageSettings, get_settings
from app.core.exceptions import ImagePreparationError
from app.models.landmark import PreparedImage


FORMAT_MIME_TYPES = {
    "JPEG": "image/jpeg",
    "MPO": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "GIF": "image/gif",
    "BMP": "image/bmp",
    "HEIF": "image/heif",
}


class ImageProcessor:
    """
    Resizes and stages images for upload.

    ``prepare_upload`` is the only entry point the repository needs; the
    other methods are exposed for reuse and testing.
    """

    def __init__(self, image_settings: Optional[ImageSettings] = None):
        self.settings = image_settings or get_settings().images
        self.target_size: Tuple[int, int] = (self.settings.target_width, self.settings.target_height)
        self.quality = self.settings.jpeg_quality
        self.temp_dir = Path(self.settings.temp_dir)
        self.logger = logging.getLogger(__name__)

    def fit_within(self, width: int, height: int) -> Tuple[int, int]:
        """
        Dimensions scaled to fit the target box, keeping aspect ratio.

        Images already inside the box are left at their size.
        """
        max_width, max_height = self.target_size
        scale = min(max_width / width, max_height / height, 1.0)
        return max(1, int(width * scale)), max(1, int(height * scale))

    def resize_image(self, image_data: bytes) -> bytes:
        """
        Re-encode an image for upload.

        Args:
            image_data: Raw bytes of any format Pillow can decode

        Returns:
            JPEG bytes, EXIF orientation applied, bounded by the target size

        Raises:
            ImagePreparationError: If the bytes are not a decodable image
        """
        try:
            with Image.open(io.BytesIO(image_data)) as image:
                image = ImageOps.exif_transpose(image)
                new_size = self.fit_within(*image.size)
                if new_size != image.size:
                    self.logger.debug(f"Resizing from {image.size[0]}x{image.size[1]} to {new_size[0]}x{new_size[1]}")
                    image = image.resize(new_size, Image.Resampling.LANCZOS)
                if image.mode != "RGB":
                    image = image.convert("RGB")

                output = io.BytesIO()
                image.save(output, format="JPEG", quality=self.quality, optimize=True)
                return output.getvalue()
        except Image.DecompressionBombError as e:
            raise ImagePreparationError(f"Image too large to decode: {e}") from e
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise ImagePreparationError(f"Cannot decode image: {e}") from e

    def detect_mime_type(self, image_data: bytes, filename: Optional[str] = None) -> str:
        """MIME type from the decoded format, then the file name, then the default."""
        try:
            with Image.open(io.BytesIO(image_data)) as image:
                mime = FORMAT_MIME_TYPES.get(image.format or "")
                if mime:
                    return mime
        except (Image.DecompressionBombError, UnidentifiedImageError, OSError, ValueError):
            pass

        if filename:
            guessed, _ = mimetypes.guess_type(filename)
            if guessed and guessed.startswith("image/"):
                return guessed

        return self.settings.default_mime_type

    def _temp_file_path(self, suffix: str) -> Path:
        # timestamp plus random suffix so concurrent uploads never collide
        name = f"landmark_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}{suffix}"
        return self.temp_dir / name

    def _prepare_sync(self, source: Path) -> PreparedImage:
        try:
            raw = source.read_bytes()
        except OSError as e:
            raise ImagePreparationError(f"Cannot read image file: {e}", path=str(source))

        if not raw:
            raise ImagePreparationError("Image file is empty", path=str(source))

        try:
            content = self.resize_image(raw)
            mime_type = "image/jpeg"
            suffix = ".jpg"
        except ImagePreparationError as e:
            if isinstance(e.__cause__, Image.DecompressionBombError):
                raise ImagePreparationError(e.message, path=str(source)) from e
            # not decodable here, the server may still accept it
            self.logger.warning(f"Sending {source.name} without resizing: {e.message}")
            content = raw
            mime_type = self.detect_mime_type(raw, source.name)
            suffix = mimetypes.guess_extension(mime_type) or ".jpg"

        temp_path = self._temp_file_path(suffix)
        try:
            temp_path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_bytes(content)
        except OSError as e:
            raise ImagePreparationError(f"Cannot stage image for upload: {e}", path=str(temp_path))

        self.logger.info(f"Staged {source.name} as {temp_path.name} ({len(content)} bytes, {mime_type})")
        return PreparedImage(
            filename=temp_path.name,
            content=content,
            mime_type=mime_type,
            temp_path=temp_path,
        )

    async def prepare_upload(self, source: Union[str, Path]) -> PreparedImage:
        """
        Read, resize and stage a local image for a multipart upload.

        Raises:
            ImagePreparationError: If the file cannot be read or staged
        """
        return await asyncio.to_thread(self._prepare_sync, Path(source))

    def cleanup(self, prepared: Optional[PreparedImage]) -> None:
        """Remove the staged temp file, if any."""
        if prepared is None or prepared.temp_path is None:
            return
        try:
            prepared.temp_path.unlink(missing_ok=True)
        except OSError as e:
            self.logger.warning(f"Could not remove staged image {prepared.temp_path}: {e}")
