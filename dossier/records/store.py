"""DocumentStore abstract interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from dossier.records.models import RecordDocument


class DocumentStore(ABC):
    """Persistence for record documents.

    Each call commits or reads one whole document. Implementations raise
    PersistenceError subclasses for conflicts and missing documents; a
    falsy return from ``save`` also counts as a failed commit.
    """

    @abstractmethod
    async def create(self, document: RecordDocument) -> RecordDocument:
        """Store a new document and return it with its first revision."""
        pass

    @abstractmethod
    async def get(self, record_id: UUID) -> RecordDocument | None:
        """Get a document by ID."""
        pass

    @abstractmethod
    async def save(self, document: RecordDocument) -> RecordDocument | None:
        """Store a new revision of an existing document."""
        pass

    @abstractmethod
    async def reload(self, record_id: UUID) -> RecordDocument:
        """Get the latest revision, raising when it does not exist."""
        pass
