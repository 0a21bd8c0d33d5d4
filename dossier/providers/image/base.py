"""ImageProcessor abstract interface."""

from abc import ABC, abstractmethod


class ImageProcessingError(Exception):
    """The image bytes could not be decoded or re-encoded."""

    pass


class ImageProcessor(ABC):
    """Pixel operations on encoded image bytes.

    Implementations return re-encoded bytes in the input's format.
    """

    @abstractmethod
    def rotate(self, data: bytes, degrees: int) -> bytes:
        """Rotate an image clockwise by the given degrees."""
        pass

    @abstractmethod
    def resize(self, data: bytes, width: int, height: int | None = None) -> bytes:
        """Resize an image to fit within width x height.

        When height is None the image is scaled to the given width,
        keeping its aspect ratio.
        """
        pass
