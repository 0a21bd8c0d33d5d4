"""Attachments: immutable binary payloads, their validation and storage."""

from dossier.attachments.models import (
    Attachment,
    InMemoryUpload,
    UploadedFile,
    derivative_name,
    timestamped_name,
)
from dossier.attachments.store import AttachmentStore
from dossier.attachments.validation import (
    AttachmentKind,
    AttachmentValidationError,
    AttachmentValidator,
    ValidationErrorType,
)

__all__ = [
    "Attachment",
    "AttachmentKind",
    "AttachmentStore",
    "AttachmentValidationError",
    "AttachmentValidator",
    "InMemoryUpload",
    "UploadedFile",
    "ValidationErrorType",
    "derivative_name",
    "timestamped_name",
]
