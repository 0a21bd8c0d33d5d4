"""Test factories for creating test data."""

from tests.factories.uploads import UploadFactory, image_bytes

__all__ = [
    "UploadFactory",
    "image_bytes",
]
