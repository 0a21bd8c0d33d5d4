"""Photo management: ordering, primary pointer, rotation and cleanup.

The manager keeps no state of its own. It works on the record document's
``photo_keys``, ``primary_photo_id`` and attachment map, so a fresh
instance can be built for every operation.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from dossier.attachments.models import (
    Attachment,
    UploadedFile,
    content_digest,
    derivative_name,
    timestamped_name,
)
from dossier.attachments.store import AttachmentStore
from dossier.exceptions import InvalidPhotoKeyError
from dossier.observability.logging import get_logger
from dossier.observability.metrics import ATTACHMENTS_REMOVED, ATTACHMENTS_STORED
from dossier.providers.clock import Clock
from dossier.providers.image import ImageProcessor

if TYPE_CHECKING:
    from dossier.records.models import RecordDocument

logger = get_logger(__name__)

PHOTO_PREFIX = "photo"
CURRENT_PHOTO_KEY = "current_photo_key"


@dataclass(frozen=True)
class PendingPhoto:
    """An uploaded photo waiting for the next save."""

    original_filename: str | None
    attachment: Attachment


def _upload_order(key: Any) -> tuple[int, int, str]:
    try:
        return (0, int(key), "")
    except (TypeError, ValueError):
        return (1, 0, str(key))


def order_uploads(value: Any) -> list[UploadedFile]:
    """Flatten a photo assignment into uploads in insertion order.

    Accepts a single upload, a sequence (kept in order) or a mapping keyed
    by form index such as ``{"0": a, "1": b}`` (numeric key order).
    Empty entries are dropped.
    """
    if value is None:
        return []
    if isinstance(value, Mapping):
        uploads = [value[key] for key in sorted(value, key=_upload_order)]
    elif isinstance(value, (list, tuple)):
        uploads = list(value)
    else:
        uploads = [value]
    return [upload for upload in uploads if upload is not None]


class PhotoManager:
    """Photo operations on one record document."""

    def __init__(
        self,
        document: "RecordDocument",
        clock: Clock,
        image_processor: ImageProcessor,
    ) -> None:
        self._document = document
        self._clock = clock
        self._image_processor = image_processor
        self._store = AttachmentStore(document.attachments)

    def prepare(self, value: Any) -> list[PendingPhoto]:
        """Turn uploads into named attachments without storing them."""
        return [
            PendingPhoto(
                original_filename=getattr(upload, "original_filename", None),
                attachment=Attachment.from_upload(
                    upload, PHOTO_PREFIX, self._clock, unique_by_content=True
                ),
            )
            for upload in order_uploads(value)
        ]

    def ingest(
        self,
        pending: Iterable[PendingPhoto],
        current_photo_hint: str | None = None,
    ) -> list[str]:
        """Store pending photos, skipping content already on the record.

        ``current_photo_hint`` is the record's ``current_photo_key`` field.
        When it names one of the uploads by original filename, that photo
        becomes primary, even when the upload was skipped as a duplicate
        of a stored one.

        Returns:
            Keys of the photos added, in order
        """
        known = {photo.digest: photo.name for photo in self._stored_photos()}
        added: list[str] = []
        hinted: str | None = None

        for item in pending:
            attachment = item.attachment
            hit = bool(current_photo_hint) and current_photo_hint == item.original_filename
            if attachment.digest in known:
                logger.info(
                    "duplicate_photo_skipped",
                    record_id=str(self._document.id),
                    attachment_name=attachment.name,
                )
                if hit:
                    hinted = known[attachment.digest]
                continue

            stored = self._store.put(attachment)
            known[attachment.digest] = stored.name
            self._document.photo_keys.append(stored.name)
            added.append(stored.name)
            ATTACHMENTS_STORED.labels(kind="photo").inc()

            if hit:
                hinted = stored.name

        if hinted is not None:
            self.set_primary(hinted)
        elif (
            current_photo_hint in self._document.photo_keys
            and current_photo_hint != self._document.primary_photo_id
        ):
            self.set_primary(current_photo_hint)

        return added

    def photos(self) -> list[Attachment]:
        """Photos in key order with the primary photo first."""
        keys = list(self._document.photo_keys)
        primary = self._document.primary_photo_id
        if primary in keys:
            keys.remove(primary)
            keys.insert(0, primary)
        return [photo for photo in (self._store.get(key) for key in keys) if photo is not None]

    def primary_photo(self) -> Attachment | None:
        photos = self.photos()
        return photos[0] if photos else None

    def set_primary(self, key: str | None) -> None:
        """Point the primary photo at ``key`` (None falls back to the first photo)."""
        if key is not None and key not in self._document.photo_keys:
            raise InvalidPhotoKeyError(f"{key!r} is not a photo of this record")
        self._document.primary_photo_id = key
        self._document.fields[CURRENT_PHOTO_KEY] = key

    def rotate_photo(self, degrees: int) -> Attachment | None:
        """Replace the primary photo with a rotated copy in the same slot.

        The rotated copy gets a new timestamped name; the old attachment
        and its derivatives are removed. Returns the new photo, or None
        when the record has no photos.
        """
        current = self.primary_photo()
        if current is None:
            return None

        data = self._image_processor.rotate(current.data, degrees)
        rotated = Attachment(
            name=timestamped_name(f"{PHOTO_PREFIX}-{content_digest(data)[:8]}", self._clock),
            content_type=current.content_type,
            data=data,
        )

        position = self._document.photo_keys.index(current.name)
        removed = self._store.remove_matching(current.name)
        self._store.put(rotated)
        self._document.photo_keys[position] = rotated.name
        if self._document.primary_photo_id == current.name:
            self.set_primary(rotated.name)

        ATTACHMENTS_REMOVED.labels(kind="photo").inc(len(removed))
        ATTACHMENTS_STORED.labels(kind="photo").inc()
        logger.info(
            "photo_rotated",
            record_id=str(self._document.id),
            previous_name=current.name,
            attachment_name=rotated.name,
            degrees=degrees,
        )
        return rotated

    def delete_photos(self, names: Iterable[str]) -> list[str]:
        """Delete photos and their derivatives. Names that are not photo keys are ignored.

        Returns:
            Every attachment name removed
        """
        removed: list[str] = []
        for name in names:
            if name not in self._document.photo_keys:
                continue
            removed.extend(self._store.remove_matching(name))
            self._document.photo_keys.remove(name)
            if self._document.primary_photo_id == name:
                self.set_primary(None)

        if removed:
            ATTACHMENTS_REMOVED.labels(kind="photo").inc(len(removed))
            logger.info(
                "photos_deleted",
                record_id=str(self._document.id),
                removed=removed,
            )
        return removed

    def derivative(self, key: str, width: int, height: int | None = None) -> Attachment | None:
        """Resized variant of a photo, generated and stored on first use.

        Stored as ``<key>_<width>`` or ``<key>_<width>x<height>``.
        """
        photo = self._store.get(key)
        if photo is None or key not in self._document.photo_keys:
            return None

        suffix = f"{width}x{height}" if height is not None else str(width)
        name = derivative_name(key, suffix)
        existing = self._store.get(name)
        if existing is not None:
            return existing

        resized = Attachment(
            name=name,
            content_type=photo.content_type,
            data=self._image_processor.resize(photo.data, width, height),
            parent_key=key,
        )
        ATTACHMENTS_STORED.labels(kind="derivative").inc()
        return self._store.put(resized)

    def _stored_photos(self) -> list[Attachment]:
        return [
            photo
            for photo in (self._store.get(key) for key in self._document.photo_keys)
            if photo is not None
        ]
