"""Records: the document model, its save lifecycle and persistence."""

from dossier.records.models import RecordDocument
from dossier.records.record import Record
from dossier.records.repository import RecordRepository
from dossier.records.services import RecordServices
from dossier.records.store import DocumentStore
from dossier.records.stores import InMemoryDocumentStore

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "Record",
    "RecordDocument",
    "RecordRepository",
    "RecordServices",
]
