"""Content-type helpers for audio variant aliases."""

import mimetypes
from collections.abc import Mapping


def content_type_alias(content_type: str, aliases: Mapping[str, str] | None = None) -> str:
    """Short alias for a content type, e.g. 'audio/mpeg' -> 'mp3'.

    The configured alias table wins, then the platform MIME registry, then
    the bare subtype.
    """
    normalized = content_type.split(";", 1)[0].strip().lower()
    if aliases and normalized in aliases:
        return aliases[normalized]

    extension = mimetypes.guess_extension(normalized)
    if extension:
        return extension.lstrip(".")

    return normalized.rsplit("/", 1)[-1]


def normalize_content_type(content_type: str | None) -> str:
    """Lower-case content type without parameters."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()
