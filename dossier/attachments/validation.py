"""Format and size validation for record attachments."""

from enum import Enum

from dossier.attachments.models import Attachment
from dossier.config.models import AttachmentsConfig
from dossier.observability.logging import get_logger
from dossier.observability.metrics import VALIDATION_FAILURES
from dossier.providers.mime import normalize_content_type

logger = get_logger(__name__)


class AttachmentKind(str, Enum):
    """Role an attachment plays on a record."""

    PHOTO = "photo"
    AUDIO = "audio"


class ValidationErrorType(str, Enum):
    """Why an attachment was rejected."""

    UNSUPPORTED_FORMAT = "unsupported_format"
    TOO_LARGE = "too_large"


class AttachmentValidationError:
    """A single attachment validation error."""

    def __init__(
        self,
        attachment_name: str,
        kind: AttachmentKind,
        error_type: ValidationErrorType,
        message: str,
    ):
        self.attachment_name = attachment_name
        self.kind = kind
        self.error_type = error_type
        self.message = message

    def __repr__(self) -> str:
        return (
            f"AttachmentValidationError({self.attachment_name!r}, "
            f"{self.kind.value!r}, {self.error_type.value!r})"
        )


class AttachmentValidator:
    """Checks attachments against the configured formats and size ceiling."""

    def __init__(self, config: AttachmentsConfig) -> None:
        self._config = config
        self._allowed = {
            AttachmentKind.PHOTO: {normalize_content_type(t) for t in config.photo_content_types},
            AttachmentKind.AUDIO: {normalize_content_type(t) for t in config.audio_content_types},
        }

    def validate(
        self,
        attachment: Attachment,
        kind: AttachmentKind,
    ) -> list[AttachmentValidationError]:
        """Validate one attachment.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[AttachmentValidationError] = []

        if normalize_content_type(attachment.content_type) not in self._allowed[kind]:
            errors.append(
                AttachmentValidationError(
                    attachment.name,
                    kind,
                    ValidationErrorType.UNSUPPORTED_FORMAT,
                    f"{attachment.content_type or 'unknown'} is not a supported {kind.value} format",
                )
            )

        if attachment.size > self._config.max_size_bytes:
            errors.append(
                AttachmentValidationError(
                    attachment.name,
                    kind,
                    ValidationErrorType.TOO_LARGE,
                    f"{kind.value} is {attachment.size} bytes, "
                    f"limit is {self._config.max_size_bytes}",
                )
            )

        for error in errors:
            VALIDATION_FAILURES.labels(kind=kind.value, error_type=error.error_type.value).inc()

        if errors:
            logger.warning(
                "attachment_validation_failed",
                attachment_name=attachment.name,
                kind=kind.value,
                content_type=attachment.content_type,
                error_types=[e.error_type.value for e in errors],
            )

        return errors
