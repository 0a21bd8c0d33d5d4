"""Pillow implementation of ImageProcessor."""

from io import BytesIO

from PIL import Image, UnidentifiedImageError

from dossier.observability.logging import get_logger
from dossier.providers.image.base import ImageProcessingError, ImageProcessor

logger = get_logger(__name__)


class PillowImageProcessor(ImageProcessor):
    """Rotates and resizes images with Pillow, keeping the source format."""

    def __init__(self, jpeg_quality: int = 85) -> None:
        self._jpeg_quality = jpeg_quality

    def rotate(self, data: bytes, degrees: int) -> bytes:
        image = self._open(data)
        # Pillow rotates counter-clockwise
        rotated = image.rotate(-degrees, expand=True)
        return self._encode(rotated, image.format)

    def resize(self, data: bytes, width: int, height: int | None = None) -> bytes:
        image = self._open(data)
        if height is None:
            height = max(1, int(image.height * (width / image.width)))
        resized = image.copy()
        resized.thumbnail((width, height), Image.LANCZOS)
        return self._encode(resized, image.format)

    def _open(self, data: bytes) -> Image.Image:
        try:
            image = Image.open(BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            logger.warning("image_decode_failed", error=str(e), size=len(data))
            raise ImageProcessingError(f"Cannot decode image: {e}") from e
        return image

    def _encode(self, image: Image.Image, format: str | None) -> bytes:
        format = format or "PNG"
        buffer = BytesIO()
        if format == "JPEG":
            image.convert("RGB").save(buffer, format=format, quality=self._jpeg_quality)
        else:
            image.save(buffer, format=format)
        return buffer.getvalue()
