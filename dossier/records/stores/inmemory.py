"""In-memory implementation of DocumentStore."""

from uuid import UUID

from dossier.exceptions import DocumentConflictError, DocumentNotFoundError
from dossier.records.models import RecordDocument
from dossier.records.store import DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """In-memory implementation of DocumentStore for testing and development.

    Documents are deep-copied on the way in and out, so callers never
    share state with the store. Saves must carry the current revision.
    """

    def __init__(self) -> None:
        self._documents: dict[UUID, RecordDocument] = {}

    async def create(self, document: RecordDocument) -> RecordDocument:
        if document.id in self._documents:
            raise DocumentConflictError(f"Document {document.id} already exists")
        stored = document.model_copy(deep=True, update={"rev": 1})
        self._documents[stored.id] = stored
        return stored.model_copy(deep=True)

    async def get(self, record_id: UUID) -> RecordDocument | None:
        stored = self._documents.get(record_id)
        return stored.model_copy(deep=True) if stored is not None else None

    async def save(self, document: RecordDocument) -> RecordDocument | None:
        current = self._documents.get(document.id)
        if current is None:
            raise DocumentNotFoundError(f"Document {document.id} does not exist")
        if current.rev != document.rev:
            raise DocumentConflictError(
                f"Document {document.id} is at revision {current.rev}, "
                f"save was based on {document.rev}"
            )
        stored = document.model_copy(deep=True, update={"rev": current.rev + 1})
        self._documents[stored.id] = stored
        return stored.model_copy(deep=True)

    async def reload(self, record_id: UUID) -> RecordDocument:
        document = await self.get(record_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {record_id} does not exist")
        return document

    def __len__(self) -> int:
        return len(self._documents)
