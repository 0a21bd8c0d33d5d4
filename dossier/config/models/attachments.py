"""Attachment validation and storage policy configuration."""

from pydantic import BaseModel, Field

TEN_MEGABYTES = 10 * 1024 * 1024


class AttachmentsConfig(BaseModel):
    """Limits and accepted formats for record attachments."""

    max_size_bytes: int = Field(
        default=TEN_MEGABYTES,
        gt=0,
        description="Largest accepted attachment payload",
    )
    photo_content_types: list[str] = Field(
        default_factory=lambda: [
            "image/jpeg",
            "image/jpg",
            "image/pjpeg",
            "image/png",
            "image/x-png",
        ],
        description="Content types accepted for photos",
    )
    audio_content_types: list[str] = Field(
        default_factory=lambda: [
            "audio/mpeg",
            "audio/mp3",
            "audio/mpeg3",
            "audio/amr",
        ],
        description="Content types accepted for audio",
    )
    audio_aliases: dict[str, str] = Field(
        default_factory=lambda: {
            "audio/mpeg": "mp3",
            "audio/mp3": "mp3",
            "audio/mpeg3": "mp3",
            "audio/amr": "amr",
        },
        description="Content type -> short variant key in audio_attachments",
    )
    purge_superseded_audio: bool = Field(
        default=False,
        description="Delete persisted audio when a new recording replaces it",
    )
