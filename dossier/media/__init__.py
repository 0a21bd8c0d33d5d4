"""Photo and audio management over a record's attachment store."""

from dossier.media.audio import ORIGINAL_VARIANT, AudioManager
from dossier.media.photos import CURRENT_PHOTO_KEY, PendingPhoto, PhotoManager, order_uploads

__all__ = [
    "AudioManager",
    "CURRENT_PHOTO_KEY",
    "ORIGINAL_VARIANT",
    "PendingPhoto",
    "PhotoManager",
    "order_uploads",
]
