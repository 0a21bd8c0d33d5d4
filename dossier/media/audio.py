"""Audio management: one logical recording stored under named variants."""

from pathlib import Path
from typing import TYPE_CHECKING

from dossier.attachments.models import Attachment, FileReader, UploadedFile
from dossier.attachments.store import AttachmentStore
from dossier.config.models import AttachmentsConfig
from dossier.observability.logging import get_logger
from dossier.observability.metrics import ATTACHMENTS_REMOVED, ATTACHMENTS_STORED
from dossier.providers.clock import Clock
from dossier.providers.mime import content_type_alias

if TYPE_CHECKING:
    from dossier.records.models import RecordDocument

logger = get_logger(__name__)

AUDIO_PREFIX = "audio"
ORIGINAL_VARIANT = "original"


class AudioManager:
    """Audio operations on one record document.

    ``audio_attachments`` maps variant names to attachment names: the
    ``original`` variant plus a short alias of the content type (``mp3``,
    ``amr``), both pointing at the same attachment.
    """

    def __init__(
        self,
        document: "RecordDocument",
        clock: Clock,
        config: AttachmentsConfig,
    ) -> None:
        self._document = document
        self._clock = clock
        self._config = config
        self._store = AttachmentStore(document.attachments)

    def set_audio(self, upload: UploadedFile, purge_previous: bool = False) -> Attachment:
        """Store an uploaded recording as the record's audio."""
        attachment = Attachment.from_upload(upload, AUDIO_PREFIX, self._clock)
        return self.install(attachment, purge_previous=purge_previous)

    def add_audio_file(
        self,
        path: Path | str,
        content_type: str,
        reader: FileReader | None = None,
        purge_previous: bool = False,
    ) -> Attachment:
        """Store a recording read from disk as the record's audio."""
        attachment = Attachment.from_file(
            path, content_type, AUDIO_PREFIX, self._clock, reader=reader
        )
        return self.install(attachment, purge_previous=purge_previous)

    def install(self, attachment: Attachment, purge_previous: bool = False) -> Attachment:
        """Point every audio variant at ``attachment``.

        The superseded recording is deleted only when ``purge_previous``
        is set or the purge policy is enabled.
        """
        previous = self._document.audio_attachments.get(ORIGINAL_VARIANT)
        stored = self._store.put(attachment)
        alias = content_type_alias(stored.content_type, self._config.audio_aliases)
        self._document.audio_attachments = {
            ORIGINAL_VARIANT: stored.name,
            alias: stored.name,
        }
        ATTACHMENTS_STORED.labels(kind="audio").inc()

        purge = purge_previous or self._config.purge_superseded_audio
        if previous and previous != stored.name and purge:
            if self._store.remove(previous) is not None:
                ATTACHMENTS_REMOVED.labels(kind="audio").inc()
                logger.info(
                    "superseded_audio_removed",
                    record_id=str(self._document.id),
                    attachment_name=previous,
                )

        return stored

    def audio(self) -> Attachment | None:
        """The original recording, or None when unsaved, unset or missing."""
        if self._document.is_new:
            return None
        name = self._document.audio_attachments.get(ORIGINAL_VARIANT)
        if not name:
            return None
        return self._store.get(name)
