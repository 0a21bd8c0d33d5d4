"""Change history configuration."""

from pydantic import BaseModel, Field


class HistoryConfig(BaseModel):
    """Controls how record changes are audited."""

    enabled: bool = Field(default=True, description="Record history entries on save")
    default_form: str = Field(
        default="default",
        description="Form used to look up trackable fields",
    )
    default_tracked_fields: list[str] = Field(
        default_factory=lambda: [
            "flag",
            "flag_message",
            "reunited",
            "reunited_message",
            "investigated",
            "investigated_message",
            "duplicate",
            "duplicate_of",
        ],
        description="Fields tracked for every form, with or without a schema",
    )
    default_organisation: str | None = Field(
        default=None,
        description="Organisation used when no user can be resolved",
    )
