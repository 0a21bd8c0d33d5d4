"""Record document model: the persisted state of a record."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from dossier.attachments.models import Attachment
from dossier.audit.models import HistoryEntry


class RecordDocument(BaseModel):
    """Everything a record persists in one document.

    ``fields`` holds untyped form data. Attachments, photo ordering, the
    audio variant map and the history log are typed alongside it.
    ``rev`` is 0 until the document store first accepts the document.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    id: UUID = Field(default_factory=uuid4, description="Record identifier")
    form_name: str = Field(default="default", description="Form defining the fields")
    fields: dict[str, Any] = Field(default_factory=dict, description="Form field values")
    photo_keys: list[str] = Field(
        default_factory=list, description="Photo attachment names, in order"
    )
    primary_photo_id: str | None = Field(
        default=None, description="Photo shown first; defaults to photo_keys[0]"
    )
    audio_attachments: dict[str, str] = Field(
        default_factory=dict, description="Audio variant -> attachment name"
    )
    attachments: dict[str, Attachment] = Field(
        default_factory=dict, description="Attachment name -> attachment"
    )
    histories: list[HistoryEntry] = Field(
        default_factory=list, description="Change log, most recent first"
    )
    created_by: str | None = Field(default=None, description="Creating user")
    created_organisation: str | None = Field(
        default=None, description="Creating user's organisation"
    )
    created_at: datetime | None = Field(default=None, description="First save time")
    rev: int = Field(default=0, ge=0, description="Store revision")

    @property
    def is_new(self) -> bool:
        return self.rev == 0
