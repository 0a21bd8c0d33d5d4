"""Per-record attachment storage keyed by attachment name."""

from collections.abc import Iterable, Iterator, MutableMapping

from dossier.attachments.models import Attachment


class AttachmentStore:
    """Name -> Attachment mapping owned by a single record.

    Operates directly on the record document's attachment dict, so
    changes are persisted with the document. Derivatives are linked to
    their parent through ``parent_key``; names of the form
    ``<parent>_<suffix>`` are also treated as derivatives so attachments
    written by older clients are still cleaned up.
    """

    def __init__(self, attachments: MutableMapping[str, Attachment]) -> None:
        self._attachments = attachments

    def put(self, attachment: Attachment) -> Attachment:
        """Insert or replace an attachment by name.

        Returns the stored attachment, with ``parent_key`` filled in when
        the name marks it as a derivative of a stored attachment.
        """
        if attachment.parent_key is None:
            parent = self._parent_by_name(attachment.name)
            if parent is not None:
                attachment = attachment.model_copy(update={"parent_key": parent})
        self._attachments[attachment.name] = attachment
        return attachment

    def get(self, name: str) -> Attachment | None:
        return self._attachments.get(name)

    def has(self, name: str) -> bool:
        return name in self._attachments

    def remove(self, name: str) -> Attachment | None:
        """Remove a single attachment by exact name."""
        return self._attachments.pop(name, None)

    def remove_matching(self, name: str) -> list[str]:
        """Remove an attachment and every derivative of it.

        Returns:
            Names removed, the exact name first when it existed
        """
        removed = []
        if self._attachments.pop(name, None) is not None:
            removed.append(name)
        for key in self.derivatives_of(name):
            del self._attachments[key]
            removed.append(key)
        return removed

    def derivatives_of(self, name: str) -> list[str]:
        """Names of attachments derived from ``name``."""
        prefix = f"{name}_"
        return sorted(
            key
            for key, attachment in self._attachments.items()
            if key != name and (attachment.parent_key == name or key.startswith(prefix))
        )

    def find_by_digest(self, digest: str, names: Iterable[str] | None = None) -> Attachment | None:
        """First attachment whose bytes hash to ``digest``.

        When ``names`` is given only those attachments are searched.
        """
        candidates = self._attachments.keys() if names is None else names
        for name in candidates:
            attachment = self._attachments.get(name)
            if attachment is not None and attachment.digest == digest:
                return attachment
        return None

    def keys(self) -> set[str]:
        return set(self._attachments.keys())

    def snapshot(self) -> dict[str, Attachment]:
        return dict(self._attachments)

    def __len__(self) -> int:
        return len(self._attachments)

    def __iter__(self) -> Iterator[Attachment]:
        return iter(list(self._attachments.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._attachments

    def _parent_by_name(self, name: str) -> str | None:
        stem, sep, suffix = name.rpartition("_")
        while sep and suffix:
            if stem in self._attachments:
                return stem
            stem, sep, suffix = stem.rpartition("_")
        return None
