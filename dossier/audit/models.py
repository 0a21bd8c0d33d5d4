"""History entry model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CREATION_CHANGE_KEY = "basemodel"


class HistoryEntry(BaseModel):
    """Immutable audit record of the changes made by one save.

    ``changes`` maps a field name to ``{"from": ..., "to": ...}``; list
    fields such as ``photo_keys`` use ``{"added": [...], "deleted": [...]}``.
    A creation entry holds ``{"basemodel": {"created": None}}``.
    """

    model_config = ConfigDict(frozen=True)

    changes: dict[str, dict[str, Any]] = Field(..., description="Field -> change")
    datetime: str | None = Field(
        default=None, description="Save time, e.g. '2010-01-14 14:05:00UTC'"
    )
    user_name: str | None = Field(default=None, description="Who saved")
    user_organisation: str | None = Field(default=None, description="Their organisation")

    @property
    def is_creation(self) -> bool:
        return CREATION_CHANGE_KEY in self.changes

    @classmethod
    def creation(
        cls,
        datetime: str | None,
        user_name: str | None,
        user_organisation: str | None,
    ) -> "HistoryEntry":
        return cls(
            changes={CREATION_CHANGE_KEY: {"created": None}},
            datetime=datetime,
            user_name=user_name,
            user_organisation=user_organisation,
        )
