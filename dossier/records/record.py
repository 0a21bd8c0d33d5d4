"""Record: field data, photos, audio and history behind one save lifecycle."""

import time
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any
from uuid import UUID

from dossier.attachments.models import Attachment, FileReader, UploadedFile
from dossier.attachments.store import AttachmentStore
from dossier.attachments.validation import AttachmentKind, AttachmentValidationError
from dossier.audit.context import OperationContext, get_operation_context
from dossier.audit.models import HistoryEntry
from dossier.exceptions import DocumentNotFoundError, PersistenceError, RecordInvalidError
from dossier.media.audio import AudioManager
from dossier.media.photos import CURRENT_PHOTO_KEY, PendingPhoto, PhotoManager
from dossier.observability.logging import get_logger
from dossier.observability.metrics import RECORD_SAVE_LATENCY, RECORD_SAVES
from dossier.records.models import RecordDocument
from dossier.records.services import RecordServices

logger = get_logger(__name__)

PHOTO_ATTRIBUTES = frozenset({"photo", "photos"})
CREATOR_ATTRIBUTES = frozenset({"created_by", "created_organisation"})


class Record:
    """A record document plus the services that validate, audit and store it.

    Item access (``record["age"]``) reads and writes form fields. Photos
    assigned with ``set_photos`` are held until the next save; audio is
    stored on assignment. Nothing is written to the document store until
    ``save``.
    """

    def __init__(self, document: RecordDocument, services: RecordServices) -> None:
        self._document = document
        self._services = services
        self._pending_photos: list[PendingPhoto] = []
        self._pending_audio: Attachment | None = None

    @classmethod
    def new(
        cls,
        services: RecordServices,
        attrs: Mapping[str, Any] | None = None,
        *,
        form_name: str | None = None,
    ) -> "Record":
        """Build an unsaved record from form attributes."""
        document = RecordDocument(form_name=form_name or services.settings.history.default_form)
        record = cls(document, services)
        if attrs:
            record.assign(attrs)
        return record

    @classmethod
    async def create(
        cls,
        services: RecordServices,
        attrs: Mapping[str, Any] | None = None,
        *,
        form_name: str | None = None,
        context: OperationContext | None = None,
    ) -> "Record":
        """Build and save a record. Check ``is_new`` to see if the save failed."""
        record = cls.new(services, attrs, form_name=form_name)
        await record.save(context=context)
        return record

    # -- field data ---------------------------------------------------------

    def assign(self, attrs: Mapping[str, Any]) -> None:
        """Apply form attributes.

        ``photo``/``photos`` and ``audio`` carry uploads,
        ``primary_photo_id`` moves the primary pointer, ``created_by`` and
        ``created_organisation`` set the creator; every other key is a
        form field.
        """
        for key, value in attrs.items():
            if key in PHOTO_ATTRIBUTES:
                self.set_photos(value)
            elif key == "audio":
                if value is not None:
                    self.set_audio(value)
            elif key == "primary_photo_id":
                self.primary_photo_id = value
            elif key in CREATOR_ATTRIBUTES:
                setattr(self._document, key, value)
            else:
                self._document.fields[key] = value

    def __getitem__(self, key: str) -> Any:
        return self._document.fields.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.assign({key: value})

    def __contains__(self, key: object) -> bool:
        return key in self._document.fields

    def get(self, key: str, default: Any = None) -> Any:
        return self._document.fields.get(key, default)

    @property
    def id(self) -> UUID:
        return self._document.id

    @property
    def document(self) -> RecordDocument:
        return self._document

    @property
    def form_name(self) -> str:
        return self._document.form_name

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self._document.fields)

    @property
    def created_by(self) -> str | None:
        return self._document.created_by

    @property
    def created_organisation(self) -> str | None:
        return self._document.created_organisation

    @property
    def is_new(self) -> bool:
        return self._document.is_new

    @property
    def histories(self) -> list[HistoryEntry]:
        return list(self._document.histories)

    # -- attachments --------------------------------------------------------

    @property
    def attachments(self) -> dict[str, Attachment]:
        return dict(self._document.attachments)

    def attach(self, attachment: Attachment) -> Attachment:
        """Store an attachment as-is (derivative names are linked to their photo)."""
        return AttachmentStore(self._document.attachments).put(attachment)

    def has_attachment(self, name: str) -> bool:
        return name in self._document.attachments

    def read_attachment(self, name: str) -> bytes | None:
        attachment = self._document.attachments.get(name)
        return attachment.data if attachment is not None else None

    # -- photos -------------------------------------------------------------

    def set_photos(self, value: Any) -> None:
        """Stage one or more uploads for the next save, replacing staged ones."""
        self._pending_photos = self._photos().prepare(value)

    set_photo = set_photos

    @property
    def photo_keys(self) -> list[str]:
        return list(self._document.photo_keys)

    @property
    def primary_photo_id(self) -> str | None:
        return self._document.primary_photo_id

    @primary_photo_id.setter
    def primary_photo_id(self, key: str | None) -> None:
        self._photos().set_primary(key)

    def photos(self) -> list[Attachment]:
        return self._photos().photos()

    def primary_photo(self) -> Attachment | None:
        return self._photos().primary_photo()

    def rotate_photo(self, degrees: int) -> Attachment | None:
        return self._photos().rotate_photo(degrees)

    def delete_photos(self, names: Iterable[str]) -> list[str]:
        return self._photos().delete_photos(names)

    def derivative(self, key: str, width: int, height: int | None = None) -> Attachment | None:
        return self._photos().derivative(key, width, height)

    # -- audio --------------------------------------------------------------

    @property
    def audio_attachments(self) -> dict[str, str]:
        return dict(self._document.audio_attachments)

    def set_audio(self, upload: UploadedFile) -> Attachment:
        attachment = self._audio_manager().set_audio(
            upload, purge_previous=self._pending_audio is not None
        )
        self._pending_audio = attachment
        return attachment

    def add_audio_file(
        self,
        path: Path | str,
        content_type: str,
        reader: FileReader | None = None,
    ) -> Attachment:
        attachment = self._audio_manager().add_audio_file(
            path,
            content_type,
            reader=reader,
            purge_previous=self._pending_audio is not None,
        )
        self._pending_audio = attachment
        return attachment

    def audio(self) -> Attachment | None:
        return self._audio_manager().audio()

    def pending_audio(self) -> Attachment | None:
        """Audio assigned since the last save, if any."""
        return self._pending_audio

    # -- validation and persistence ----------------------------------------

    def errors(self) -> list[AttachmentValidationError]:
        """Validation errors of the attachments assigned since the last save."""
        validator = self._services.validator
        errors: list[AttachmentValidationError] = []
        for pending in self._pending_photos:
            errors.extend(validator.validate(pending.attachment, AttachmentKind.PHOTO))
        if self._pending_audio is not None:
            errors.extend(validator.validate(self._pending_audio, AttachmentKind.AUDIO))
        return errors

    def is_valid(self) -> bool:
        return not self.errors()

    async def save(self, context: OperationContext | None = None) -> bool:
        """Validate, audit and persist the record.

        Returns False when attachments are invalid or the document store
        rejects the write; no history entry is kept in either case.
        """
        try:
            await self.save_or_raise(context=context)
        except (RecordInvalidError, PersistenceError):
            return False
        return True

    async def save_or_raise(self, context: OperationContext | None = None) -> bool:
        """Like ``save`` but raises RecordInvalidError or PersistenceError."""
        ctx = context or get_operation_context()
        form = self._document.form_name
        log = logger.bind(record_id=str(self._document.id), form_name=form)
        start_time = time.perf_counter()

        errors = self.errors()
        if errors:
            RECORD_SAVES.labels(form=form, outcome="invalid").inc()
            log.info("record_save_rejected", error_count=len(errors))
            raise RecordInvalidError(errors)

        creating = self._document.is_new
        if creating and self._document.created_at is None:
            self._document.created_at = self._services.clock.now()

        self._photos().ingest(
            self._pending_photos,
            current_photo_hint=self._document.fields.get(CURRENT_PHOTO_KEY),
        )
        self._pending_photos = []

        entry: HistoryEntry | None = None
        committed = False
        try:
            entry = await self._history_entry(creating, ctx)
            if entry is not None:
                self._document.histories.insert(0, entry)

            if creating:
                stored = await self._services.store.create(self._document)
            else:
                stored = await self._services.store.save(self._document)
            if not stored:
                raise PersistenceError(f"Document store did not accept record {self._document.id}")
            committed = True
        except PersistenceError as e:
            RECORD_SAVES.labels(form=form, outcome="failed").inc()
            log.warning("record_save_failed", error=str(e), error_type=type(e).__name__)
            raise
        except Exception as e:
            RECORD_SAVES.labels(form=form, outcome="failed").inc()
            log.warning("record_save_failed", error=str(e), error_type=type(e).__name__)
            raise PersistenceError(f"Document store failed for record {self._document.id}: {e}") from e
        finally:
            if not committed and entry is not None and entry in self._document.histories:
                self._document.histories.remove(entry)

        self._document.rev = stored.rev
        self._pending_audio = None

        RECORD_SAVES.labels(form=form, outcome="created" if creating else "updated").inc()
        RECORD_SAVE_LATENCY.labels(form=form).observe(time.perf_counter() - start_time)
        log.info(
            "record_saved",
            rev=stored.rev,
            history_recorded=entry is not None,
            photo_count=len(self._document.photo_keys),
        )
        return True

    async def update_attributes(
        self,
        attrs: Mapping[str, Any],
        context: OperationContext | None = None,
    ) -> bool:
        """Assign attributes and save."""
        self.assign(attrs)
        return await self.save(context=context)

    async def reload(self) -> "Record":
        """Replace in-memory state with the stored document."""
        self._document = await self._services.store.reload(self._document.id)
        self._pending_photos = []
        self._pending_audio = None
        return self

    async def _history_entry(
        self,
        creating: bool,
        context: OperationContext,
    ) -> HistoryEntry | None:
        auditor = self._services.auditor
        if creating:
            return auditor.creation_entry(self._document, context)

        prior = self._document
        if auditor.should_record(context):
            found = await self._services.store.get(self._document.id)
            if found is None:
                raise DocumentNotFoundError(f"Document {self._document.id} does not exist")
            prior = found
        return auditor.update_entry(prior, self._document, context)

    def _photos(self) -> PhotoManager:
        return PhotoManager(
            self._document,
            self._services.clock,
            self._services.image_processor,
        )

    def _audio_manager(self) -> AudioManager:
        return AudioManager(
            self._document,
            self._services.clock,
            self._services.settings.attachments,
        )

    def __repr__(self) -> str:
        return f"Record(id={self._document.id!s}, form={self._document.form_name!r}, rev={self._document.rev})"
