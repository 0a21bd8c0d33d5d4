"""Image processing collaborators used for photo rotation and resizing."""

from dossier.providers.image.base import ImageProcessingError, ImageProcessor
from dossier.providers.image.mock import MockImageProcessor
from dossier.providers.image.pillow import PillowImageProcessor

__all__ = [
    "ImageProcessor",
    "ImageProcessingError",
    "PillowImageProcessor",
    "MockImageProcessor",
]
