"""Attachment value model and upload abstraction."""

import hashlib
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from dossier.providers.clock import Clock, attachment_timestamp
from dossier.providers.mime import normalize_content_type

FileReader = Callable[[Path], bytes]


@runtime_checkable
class UploadedFile(Protocol):
    """Anything a client uploads: a name, a content type and bytes."""

    original_filename: str
    content_type: str

    def read(self) -> bytes: ...


@dataclass
class InMemoryUpload:
    """Upload backed by bytes already in memory."""

    original_filename: str
    content_type: str
    payload: bytes

    def read(self) -> bytes:
        return self.payload


def timestamped_name(prefix: str, clock: Clock, suffix: str = "") -> str:
    """Attachment name '<prefix>-<YYYY-MM-DDTHHMMSS><suffix>'."""
    return f"{prefix}-{attachment_timestamp(clock)}{suffix}"


def derivative_name(parent: str, suffix: str) -> str:
    """Name of a generated variant of a photo, e.g. 'photo-...-T120424_160x160'."""
    return f"{parent}_{suffix}"


def content_digest(data: bytes) -> str:
    """SHA-256 hex digest of attachment bytes."""
    return hashlib.sha256(data).hexdigest()


class Attachment(BaseModel):
    """Immutable named binary payload held by a record.

    Replacing an attachment means removing it and inserting a new one
    under a different name.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique within the record")
    content_type: str = Field(..., description="MIME type of the payload")
    data: bytes = Field(..., repr=False, description="Raw bytes")
    parent_key: str | None = Field(
        default=None,
        description="Photo this attachment was derived from",
    )

    @property
    def digest(self) -> str:
        return content_digest(self.data)

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_upload(
        cls,
        upload: UploadedFile,
        name_prefix: str,
        clock: Clock,
        name_suffix: str = "",
        unique_by_content: bool = False,
    ) -> "Attachment":
        """Build an attachment from an uploaded file.

        With ``unique_by_content`` the first 8 hex digits of the content
        digest follow the prefix, so distinct uploads made in the same
        second get distinct names.
        """
        if hasattr(upload, "seek"):
            upload.seek(0)
        data = upload.read()
        if isinstance(data, str):
            data = data.encode()
        if unique_by_content:
            name_prefix = f"{name_prefix}-{content_digest(data)[:8]}"
        return cls(
            name=timestamped_name(name_prefix, clock, name_suffix),
            content_type=normalize_content_type(upload.content_type),
            data=data,
        )

    @classmethod
    def from_file(
        cls,
        path: Path | str,
        content_type: str,
        name_prefix: str,
        clock: Clock,
        reader: FileReader | None = None,
    ) -> "Attachment":
        """Build an attachment from a file on disk."""
        read = reader or Path.read_bytes
        return cls(
            name=timestamped_name(name_prefix, clock),
            content_type=normalize_content_type(content_type),
            data=read(Path(path)),
        )
