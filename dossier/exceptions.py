"""Exception hierarchy for record operations.

Validation problems are values (see dossier.attachments.validation) and
only become exceptions when a caller asks for a strict save.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dossier.attachments.validation import AttachmentValidationError


class DossierError(Exception):
    """Base exception for all Dossier errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RecordInvalidError(DossierError):
    """Raised by a strict save when attachments fail validation."""

    def __init__(self, errors: list["AttachmentValidationError"]) -> None:
        self.errors = errors
        summary = ", ".join(f"{e.attachment_name}: {e.error_type.value}" for e in errors)
        super().__init__(f"Record is invalid ({summary})")


class PersistenceError(DossierError):
    """The document store could not commit a record."""


class DocumentConflictError(PersistenceError):
    """The stored document changed since it was loaded."""


class DocumentNotFoundError(PersistenceError):
    """The document does not exist in the store."""


class InvalidPhotoKeyError(DossierError):
    """A primary photo pointer was set to a name that is not a photo."""
